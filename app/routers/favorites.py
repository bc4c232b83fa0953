from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.auth import get_current_user
from app import crud
from app.errors import RelationshipError, http_error
from app.models.identity import IdentityContext
from app.schemas.user import CurrentUser
from app.schemas.friends import FriendIdentity
from app.schemas.favorites import (
    FavoriteCreate, FavoriteResponse, AddFavoriteResponse, FavoritesListResponse, RemoveFavoriteResponse
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/favorites", tags=["favorites"])

@router.get("/{context}", response_model=FavoritesListResponse)
async def get_favorites(
    context: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Favorited identities in a context, newest first"""
    try:
        rows = crud.get_favorites(db, current_user.id, IdentityContext.parse(context))
        favorites = [
            FriendIdentity(
                id=identity.id,
                legal_name=identity.legal_name,
                preferred_name=identity.preferred_name,
                nickname=identity.nickname,
                context=identity.context,
                account_privacy=identity.account_privacy,
                created_at=favorite.created_at
            ) for favorite, identity in rows
        ]
        return FavoritesListResponse(count=len(favorites), favorites=favorites)

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in get_favorites: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/{identity_id}", response_model=AddFavoriteResponse)
async def add_favorite(
    identity_id: str,
    body: FavoriteCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an identity to favorites. Adding it again is a no-op success."""
    if not body.context:
        raise HTTPException(status_code=400, detail="Context is required")
    try:
        favorite = crud.add_favorite(db, current_user.id, identity_id, IdentityContext.parse(body.context))
        return AddFavoriteResponse(message="Added to favorites", favorite=FavoriteResponse.model_validate(favorite))

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in add_favorite: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{identity_id}", response_model=RemoveFavoriteResponse)
async def remove_favorite(
    identity_id: str,
    context: Optional[str] = Query(None, description="Restrict removal to one context"),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove an identity from favorites"""
    try:
        parsed = IdentityContext.parse(context) if context else None
        crud.remove_favorite(db, current_user.id, identity_id, parsed)
        return RemoveFavoriteResponse(message="Removed from favorites", identity_id=identity_id)

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in remove_favorite: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
