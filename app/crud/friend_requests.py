from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import and_, or_
from typing import List, Optional, Tuple
from app.crud.identity import resolve_identity_for_context, get_identity
from app.errors import (
    ForbiddenError, NoIdentityInContextError, NotFoundError,
    RecipientNotFoundError, SelfRelationshipError
)
from app.models.friend_request import FriendRequest, FriendRequestStatus
from app.models.identity import Identity, IdentityContext
from app.utils.logger import get_logger
from app.utils.time import utcnow

logger = get_logger(__name__)

class FriendRequestsCRUD:
    """Ledger of friend requests keyed by (sender identity, recipient identity, context)."""

    @staticmethod
    def get_request(db: Session, request_id: str) -> Optional[FriendRequest]:
        return db.query(FriendRequest).filter(FriendRequest.id == request_id).first()

    @staticmethod
    def get_request_for_recipient(db: Session, request_id: str, acting_user_id: str) -> FriendRequest:
        """
        Load a request the acting user is allowed to answer.

        Raises:
            NotFoundError: if the request does not exist
            ForbiddenError: if the acting user is not its recipient
        """
        friend_request = FriendRequestsCRUD.get_request(db, request_id)
        if not friend_request:
            raise NotFoundError("Friend request not found")
        if friend_request.recipient_user_id != acting_user_id:
            raise ForbiddenError("You are not the recipient of this request")
        return friend_request

    @staticmethod
    def send_request(
        db: Session,
        sender_user_id: str,
        context: IdentityContext,
        recipient_identity_id: str
    ) -> FriendRequest:
        """
        Send (or re-send) a friend request as the sender's identity for ``context``.

        An existing record for the same pair and context is overwritten: its
        status goes back to pending and its timestamp and actor ids are
        refreshed, so re-sending after a decline is allowed.

        Raises:
            NoIdentityInContextError: the sender has no identity in ``context``
            RecipientNotFoundError: no identity with that id
            SelfRelationshipError: the sender addressed one of their own identities
        """
        sender_identity = resolve_identity_for_context(db, sender_user_id, context)
        if not sender_identity:
            raise NoIdentityInContextError()

        recipient_identity = get_identity(db, recipient_identity_id)
        if not recipient_identity:
            raise RecipientNotFoundError()

        if recipient_identity.user_id == sender_user_id:
            raise SelfRelationshipError("You cannot send a friend request to yourself")

        for attempt in range(2):
            friend_request = db.query(FriendRequest).filter(
                FriendRequest.sender_identity_id == sender_identity.id,
                FriendRequest.recipient_identity_id == recipient_identity.id,
                FriendRequest.context == context.value
            ).first()

            if friend_request is None:
                friend_request = FriendRequest(
                    sender_identity_id=sender_identity.id,
                    recipient_identity_id=recipient_identity.id,
                    context=context.value
                )
                db.add(friend_request)

            friend_request.sender_user_id = sender_user_id
            friend_request.recipient_user_id = recipient_identity.user_id
            friend_request.status = FriendRequestStatus.PENDING.value
            friend_request.created_at = utcnow()

            try:
                db.commit()
                break
            except IntegrityError:
                # Lost an insert race for the same key; retry as an update
                db.rollback()
                if attempt:
                    raise

        db.refresh(friend_request)
        logger.info(
            f"Friend request {friend_request.id} pending from identity {sender_identity.id} "
            f"to identity {recipient_identity.id} in {context.value}"
        )
        return friend_request

    @staticmethod
    def list_pending_for_recipient_context(
        db: Session, user_id: str, context: IdentityContext
    ) -> List[Tuple[FriendRequest, Identity]]:
        """
        Pending requests addressed to the user's identity in ``context``,
        joined with the sender identity, newest first.

        Returns an empty list when the user has no identity in ``context``.
        """
        recipient_identity = resolve_identity_for_context(db, user_id, context)
        if not recipient_identity:
            return []

        return db.query(FriendRequest, Identity).join(
            Identity, FriendRequest.sender_identity_id == Identity.id
        ).filter(
            FriendRequest.recipient_identity_id == recipient_identity.id,
            FriendRequest.context == context.value,
            FriendRequest.status == FriendRequestStatus.PENDING.value
        ).order_by(FriendRequest.created_at.desc()).all()

    @staticmethod
    def list_sent_for_sender_context(
        db: Session, user_id: str, context: IdentityContext
    ) -> List[Tuple[FriendRequest, Identity]]:
        """Pending requests sent by the user's identity in ``context``, joined with the recipient identity."""
        sender_identity = resolve_identity_for_context(db, user_id, context)
        if not sender_identity:
            return []

        return db.query(FriendRequest, Identity).join(
            Identity, FriendRequest.recipient_identity_id == Identity.id
        ).filter(
            FriendRequest.sender_identity_id == sender_identity.id,
            FriendRequest.context == context.value,
            FriendRequest.status == FriendRequestStatus.PENDING.value
        ).order_by(FriendRequest.created_at.desc()).all()

    @staticmethod
    def list_accepted_for_user(
        db: Session, user_id: str, context: Optional[IdentityContext] = None
    ) -> List[FriendRequest]:
        """Accepted requests the user sent or received, optionally limited to one context."""
        query = db.query(FriendRequest).filter(
            FriendRequest.status == FriendRequestStatus.ACCEPTED.value,
            or_(
                FriendRequest.sender_user_id == user_id,
                FriendRequest.recipient_user_id == user_id
            )
        )
        if context is not None:
            query = query.filter(FriendRequest.context == context.value)
        return query.order_by(FriendRequest.created_at.asc()).all()

    @staticmethod
    def retire_accepted_between(
        db: Session, user_id: str, identity_id: str, context: IdentityContext
    ) -> int:
        """
        Delete accepted requests that linked ``user_id`` and ``identity_id`` in ``context``.

        Called when the user stops following the identity so that the
        friendship is not re-materialized by a later repair. The deletion is
        flushed, not committed.
        """
        deleted = db.query(FriendRequest).filter(
            FriendRequest.status == FriendRequestStatus.ACCEPTED.value,
            FriendRequest.context == context.value,
            or_(
                and_(FriendRequest.sender_user_id == user_id, FriendRequest.recipient_identity_id == identity_id),
                and_(FriendRequest.recipient_user_id == user_id, FriendRequest.sender_identity_id == identity_id)
            )
        ).delete(synchronize_session=False)
        db.flush()
        return deleted

    @staticmethod
    def decline(db: Session, request_id: str, acting_user_id: str) -> str:
        """
        Decline a request by removing it from the ledger.

        Raises:
            NotFoundError, ForbiddenError: see ``get_request_for_recipient``
        """
        friend_request = FriendRequestsCRUD.get_request_for_recipient(db, request_id, acting_user_id)
        try:
            db.delete(friend_request)
            db.commit()
        except Exception as e:
            logger.error(f"Error declining friend request {request_id}: {e}")
            db.rollback()
            raise
        logger.info(f"Friend request {request_id} declined by user {acting_user_id}")
        return request_id

    @staticmethod
    def cancel(db: Session, request_id: str, acting_user_id: str) -> str:
        """Withdraw a pending request. Only its sender may do this."""
        friend_request = FriendRequestsCRUD.get_request(db, request_id)
        if not friend_request or friend_request.status != FriendRequestStatus.PENDING.value:
            raise NotFoundError("Friend request not found")
        if friend_request.sender_user_id != acting_user_id:
            raise ForbiddenError("You are not the sender of this request")
        try:
            db.delete(friend_request)
            db.commit()
        except Exception as e:
            logger.error(f"Error cancelling friend request {request_id}: {e}")
            db.rollback()
            raise
        logger.info(f"Friend request {request_id} cancelled by user {acting_user_id}")
        return request_id
