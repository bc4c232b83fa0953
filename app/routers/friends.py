from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.auth import get_current_user
from app.crud.friends import FriendsCRUD
from app.errors import RelationshipError, http_error
from app.models.identity import IdentityContext
from app.schemas.user import CurrentUser
from app.schemas.friends import (
    FollowRequest, ConnectRequest, FriendIdentity, FriendsListResponse, FriendEdge, FollowResponse,
    UnfollowResponse, FriendshipSummary, FriendshipCheckResponse, ConnectResponse, FriendRequestResponse
)
from app.services import relationship_service
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])

def _edge_response(edge) -> FriendEdge:
    return FriendEdge(
        id=edge.id,
        friend_identity_id=edge.friend_identity_id,
        context=edge.context,
        created_at=edge.created_at
    )

@router.post("/add", response_model=FollowResponse)
async def add_friend(
    body: FollowRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Follow an identity within a context"""
    if not body.friend_identity_id or not body.context:
        raise HTTPException(status_code=400, detail="Friend identity ID and context are required")
    try:
        context = IdentityContext.parse(body.context)
        edge = relationship_service.follow(db, current_user.id, body.friend_identity_id, context)
        return FollowResponse(message="Friend added successfully", friend=_edge_response(edge))

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in add_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/remove", response_model=UnfollowResponse)
async def remove_friend(
    body: FollowRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Unfollow an identity within a context"""
    if not body.friend_identity_id or not body.context:
        raise HTTPException(status_code=400, detail="Friend identity ID and context are required")
    try:
        context = IdentityContext.parse(body.context)
        relationship_service.unfollow(db, current_user.id, body.friend_identity_id, context)
        return UnfollowResponse(
            message="Friend removed successfully",
            friend_identity_id=body.friend_identity_id,
            context=context.value
        )

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in remove_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/connect", response_model=ConnectResponse)
async def connect(
    body: ConnectRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Follow a public identity, or send a friend request to a private one"""
    if not body.identity_id or not body.context:
        raise HTTPException(status_code=400, detail="Identity ID and context are required")
    try:
        context = IdentityContext.parse(body.context)
        action, record = relationship_service.connect(db, current_user.id, body.identity_id, context)

        if action == relationship_service.ACTION_FOLLOWED:
            return ConnectResponse(message="Friend added successfully", action=action, friend=_edge_response(record))
        return ConnectResponse(
            message="Friend request sent successfully",
            action=action,
            friend_request=FriendRequestResponse.model_validate(record)
        )

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in connect: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/check/{friend_identity_id}/{context}", response_model=FriendshipCheckResponse)
async def check_friendship(
    friend_identity_id: str,
    context: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Check whether the current user follows an identity in a context"""
    try:
        edge = relationship_service.is_following(
            db, current_user.id, friend_identity_id, IdentityContext.parse(context)
        )
        return FriendshipCheckResponse(
            is_friend=edge is not None,
            friendship=FriendshipSummary(id=edge.id, created_at=edge.created_at) if edge else None
        )

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in check_friendship: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{context}", response_model=FriendsListResponse)
async def get_friends(
    context: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the identities the current user follows in a context, newest follow first"""
    try:
        rows = FriendsCRUD.list_for_owner(db, current_user.id, IdentityContext.parse(context))
        friends = [
            FriendIdentity(
                id=identity.id,
                legal_name=identity.legal_name,
                preferred_name=identity.preferred_name,
                nickname=identity.nickname,
                context=identity.context,
                account_privacy=identity.account_privacy,
                created_at=edge.created_at
            ) for edge, identity in rows
        ]
        return FriendsListResponse(count=len(friends), friends=friends)

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in get_friends: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
