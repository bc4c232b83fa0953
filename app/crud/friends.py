from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from app.errors import NotFoundError
from app.models.friend import Friend
from app.models.identity import Identity, IdentityContext
from app.utils.logger import get_logger

logger = get_logger(__name__)

class FriendsCRUD:
    """Persistence for directed follow edges keyed by (owner user, target identity, context)."""

    @staticmethod
    def _edge_query(db: Session, user_id: str, friend_identity_id: str, context: IdentityContext):
        return db.query(Friend).filter(
            Friend.user_id == user_id,
            Friend.friend_identity_id == friend_identity_id,
            Friend.context == context.value
        )

    @staticmethod
    def get_edge(db: Session, user_id: str, friend_identity_id: str, context: IdentityContext) -> Optional[Friend]:
        """Get the follow edge for the triple, if any."""
        return FriendsCRUD._edge_query(db, user_id, friend_identity_id, context).first()

    @staticmethod
    def exists(db: Session, user_id: str, friend_identity_id: str, context: IdentityContext) -> bool:
        """Check if ``user_id`` follows ``friend_identity_id`` in ``context``."""
        return FriendsCRUD.get_edge(db, user_id, friend_identity_id, context) is not None

    @staticmethod
    def upsert_edge(
        db: Session,
        user_id: str,
        friend_identity_id: str,
        context: IdentityContext,
        commit: bool = True
    ) -> Tuple[Friend, bool]:
        """
        Create the follow edge if it is absent.

        Calling this again for the same triple returns the stored edge
        unchanged. With ``commit=False`` the new edge is only flushed, so the
        caller can make it part of a larger transaction.

        Returns:
            (edge, created) where ``created`` is False when the edge already existed
        """
        existing = FriendsCRUD.get_edge(db, user_id, friend_identity_id, context)
        if existing:
            return existing, False

        edge = Friend(
            user_id=user_id,
            friend_identity_id=friend_identity_id,
            context=context.value
        )
        db.add(edge)
        if not commit:
            db.flush()
            return edge, True

        try:
            db.commit()
        except IntegrityError:
            # A concurrent request inserted the same edge first
            db.rollback()
            existing = FriendsCRUD.get_edge(db, user_id, friend_identity_id, context)
            if existing is None:
                raise
            return existing, False
        db.refresh(edge)
        logger.info(f"User {user_id} now follows identity {friend_identity_id} in {context.value}")
        return edge, True

    @staticmethod
    def delete_edge(
        db: Session,
        user_id: str,
        friend_identity_id: str,
        context: IdentityContext,
        commit: bool = True
    ) -> Friend:
        """
        Remove exactly one follow edge.

        Raises:
            NotFoundError: if the user does not follow the identity in ``context``
        """
        edge = FriendsCRUD.get_edge(db, user_id, friend_identity_id, context)
        if not edge:
            raise NotFoundError("Friend relationship not found")

        try:
            db.delete(edge)
            if not commit:
                db.flush()
                return edge
            db.commit()
        except Exception as e:
            logger.error(f"Error removing friend: {e}")
            db.rollback()
            raise
        logger.info(f"User {user_id} unfollowed identity {friend_identity_id} in {context.value}")
        return edge

    @staticmethod
    def list_for_owner(db: Session, user_id: str, context: IdentityContext) -> List[Tuple[Friend, Identity]]:
        """Edges owned by ``user_id`` in ``context`` joined with the followed identity, newest first."""
        return db.query(Friend, Identity).join(
            Identity, Friend.friend_identity_id == Identity.id
        ).filter(
            Friend.user_id == user_id,
            Friend.context == context.value
        ).order_by(Friend.created_at.desc()).all()
