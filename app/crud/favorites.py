from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from app.crud.identity import get_identity
from app.errors import NotFoundError
from app.models.favorite import Favorite
from app.models.identity import Identity, IdentityContext
from app.utils.logger import get_logger

logger = get_logger(__name__)

def get_favorites(db: Session, user_id: str, context: IdentityContext) -> List[Tuple[Favorite, Identity]]:
    """Favorites of a user in a context joined with the identity, newest first."""
    return db.query(Favorite, Identity).join(
        Identity, Favorite.identity_id == Identity.id
    ).filter(
        Favorite.user_id == user_id,
        Favorite.context == context.value
    ).order_by(Favorite.created_at.desc()).all()

def add_favorite(db: Session, user_id: str, identity_id: str, context: IdentityContext) -> Favorite:
    """Favorite an identity. Adding the same favorite twice returns the stored one."""
    identity = get_identity(db, identity_id)
    if not identity or identity.context != context.value:
        raise NotFoundError("Identity not found")

    query = db.query(Favorite).filter(
        Favorite.user_id == user_id,
        Favorite.identity_id == identity_id,
        Favorite.context == context.value
    )
    favorite = query.first()
    if favorite:
        return favorite

    favorite = Favorite(user_id=user_id, identity_id=identity_id, context=context.value)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        favorite = query.first()
        if favorite is None:
            raise
        return favorite
    db.refresh(favorite)
    return favorite

def remove_favorite(db: Session, user_id: str, identity_id: str, context: Optional[IdentityContext] = None) -> Favorite:
    """
    Remove a favorite.

    Without ``context`` the first favorite of the identity is removed, which
    is the only one since an identity lives in a single context.
    """
    query = db.query(Favorite).filter(
        Favorite.user_id == user_id,
        Favorite.identity_id == identity_id
    )
    if context is not None:
        query = query.filter(Favorite.context == context.value)
    favorite = query.first()
    if not favorite:
        raise NotFoundError("Favorite not found")

    db.delete(favorite)
    db.commit()
    return favorite
