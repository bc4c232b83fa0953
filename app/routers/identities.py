from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.auth import get_current_user, get_optional_user
from app import crud
from app.crud.friends import FriendsCRUD
from app.errors import RelationshipError, NotFoundError, http_error
from app.models.identity import IdentityContext
from app.schemas.user import CurrentUser
from app.schemas.identity import (
    IdentityCreate, IdentityUpdate, IdentityResponse, IdentityEnvelope, IdentityMessageResponse,
    IdentitiesListResponse, IdentityProfile, IdentityProfileResponse, DeletedIdentity, IdentityDeleteResponse
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/identities", tags=["identities"])

def _identities_list(identities) -> IdentitiesListResponse:
    return IdentitiesListResponse(
        count=len(identities),
        identities=[IdentityResponse.model_validate(identity) for identity in identities]
    )

@router.post("", response_model=IdentityMessageResponse, status_code=201)
async def create_identity(
    body: IdentityCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an identity profile for one of the user's contexts"""
    try:
        context, privacy = crud.validate_identity_fields(
            body.legal_name, body.preferred_name, body.nickname, body.context, body.account_privacy
        )
        identity = crud.create_identity(
            db, current_user.id, body.legal_name, body.preferred_name, context,
            nickname=body.nickname, account_privacy=privacy
        )
        return IdentityMessageResponse(
            message="Identity profile created successfully",
            identity=IdentityResponse.model_validate(identity)
        )

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in create_identity: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("", response_model=IdentitiesListResponse)
async def list_identities(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All identities of the current user, newest first"""
    return _identities_list(crud.list_user_identities(db, current_user.id))

@router.get("/context/{context}", response_model=IdentityEnvelope)
async def get_identity_by_context(
    context: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's identity for a context"""
    try:
        parsed = IdentityContext.parse(context)
        identity = crud.resolve_identity_for_context(db, current_user.id, parsed)
        if not identity:
            raise NotFoundError(f"No identity found for context: {parsed.value}")
        return IdentityEnvelope(identity=IdentityResponse.model_validate(identity))

    except RelationshipError as e:
        raise http_error(e)

@router.get("/public/{context}", response_model=IdentitiesListResponse)
async def list_public_identities(context: str, db: Session = Depends(get_db)):
    """Public identities in a context. No authentication required."""
    try:
        return _identities_list(crud.list_identities_by_context(db, IdentityContext.parse(context), public_only=True))
    except RelationshipError as e:
        raise http_error(e)

@router.get("/all/{context}", response_model=IdentitiesListResponse)
async def list_all_identities(context: str, db: Session = Depends(get_db)):
    """Every identity in a context, public or private, for search"""
    try:
        return _identities_list(crud.list_identities_by_context(db, IdentityContext.parse(context)))
    except RelationshipError as e:
        raise http_error(e)

@router.get("/profile/{identity_id}", response_model=IdentityProfileResponse)
async def get_identity_profile(
    identity_id: str,
    viewer: Optional[CurrentUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Profile page of an identity.

    Public identities are shown in full. Private identities are shown in full
    only to their owner or to a user who follows them in their context;
    everyone else gets the limited view.
    """
    identity = crud.get_identity(db, identity_id)
    if not identity:
        raise HTTPException(status_code=404, detail="Identity not found")

    can_see_details = identity.is_public
    if not can_see_details and viewer is not None:
        can_see_details = viewer.id == identity.user_id or FriendsCRUD.exists(
            db, viewer.id, identity.id, IdentityContext(identity.context)
        )

    if can_see_details:
        profile = IdentityProfile(
            id=identity.id,
            user_id=identity.user_id,
            legal_name=identity.legal_name,
            preferred_name=identity.preferred_name,
            nickname=identity.nickname,
            context=identity.context,
            account_privacy=identity.account_privacy,
            created_at=identity.created_at
        )
    else:
        profile = IdentityProfile(
            id=identity.id,
            preferred_name=identity.preferred_name,
            context=identity.context,
            account_privacy=identity.account_privacy,
            is_limited=True
        )
    return IdentityProfileResponse(identity=profile)

@router.get("/{identity_id}", response_model=IdentityEnvelope)
async def get_identity(
    identity_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """One of the current user's identities"""
    identity = crud.get_user_identity(db, current_user.id, identity_id)
    if not identity:
        raise HTTPException(status_code=404, detail="Identity not found")
    return IdentityEnvelope(identity=IdentityResponse.model_validate(identity))

@router.put("/{identity_id}", response_model=IdentityMessageResponse)
async def update_identity(
    identity_id: str,
    body: IdentityUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update one of the current user's identities"""
    try:
        context, privacy = crud.validate_identity_fields(
            body.legal_name, body.preferred_name, body.nickname, body.context, body.account_privacy
        )
        identity = crud.update_identity(
            db, current_user.id, identity_id, body.legal_name, body.preferred_name, context,
            nickname=body.nickname, account_privacy=privacy
        )
        return IdentityMessageResponse(
            message="Identity updated successfully",
            identity=IdentityResponse.model_validate(identity)
        )

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in update_identity: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{identity_id}", response_model=IdentityDeleteResponse)
async def delete_identity(
    identity_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete one of the current user's identities and the relationships pointing at it"""
    try:
        identity = crud.delete_identity(db, current_user.id, identity_id)
        return IdentityDeleteResponse(
            message="Identity deleted successfully",
            identity=DeletedIdentity(id=identity.id, context=identity.context)
        )

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in delete_identity: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
