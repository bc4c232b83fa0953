"""Orchestration of follows, friend requests and their mutual materialization.

Context is always passed explicitly: the same two users can hold independent
follow and request state in each context.
"""
from typing import Optional, Tuple, Union
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.crud.friends import FriendsCRUD
from app.crud.friend_requests import FriendRequestsCRUD
from app.crud.identity import get_identity
from app.errors import ForbiddenError, NotFoundError, SelfRelationshipError
from app.models.friend import Friend
from app.models.friend_request import FriendRequest, FriendRequestStatus
from app.models.identity import Identity, IdentityContext
from app.utils.logger import get_logger

logger = get_logger(__name__)

ACTION_FOLLOWED = "followed"
ACTION_REQUESTED = "requested"


def _target_identity(db: Session, user_id: str, identity_id: str) -> Identity:
    # The edge context is the caller's; the target's own context is not consulted
    identity = get_identity(db, identity_id)
    if not identity:
        raise NotFoundError("Identity not found")
    if identity.user_id == user_id:
        raise SelfRelationshipError("You cannot follow your own identity")
    return identity


def follow(db: Session, user_id: str, friend_identity_id: str, context: IdentityContext) -> Friend:
    """Follow an identity directly. Following it again is a no-op success."""
    _target_identity(db, user_id, friend_identity_id)
    edge, _ = FriendsCRUD.upsert_edge(db, user_id, friend_identity_id, context)
    return edge


def unfollow(db: Session, user_id: str, friend_identity_id: str, context: IdentityContext) -> Friend:
    """
    Stop following an identity.

    Any accepted request that linked the two in this context is retired in
    the same transaction, so ``reconcile_accepted`` will not bring the edge back.

    Raises:
        NotFoundError: if no such follow edge exists
    """
    try:
        edge = FriendsCRUD.delete_edge(db, user_id, friend_identity_id, context, commit=False)
        FriendRequestsCRUD.retire_accepted_between(db, user_id, friend_identity_id, context)
        db.commit()
    except NotFoundError:
        raise
    except Exception as e:
        logger.error(f"Error unfollowing identity {friend_identity_id}: {e}")
        db.rollback()
        raise
    logger.info(f"User {user_id} unfollowed identity {friend_identity_id} in {context.value}")
    return edge


def is_following(db: Session, user_id: str, friend_identity_id: str, context: IdentityContext) -> Optional[Friend]:
    """The follow edge if ``user_id`` follows the identity in ``context``, else None."""
    return FriendsCRUD.get_edge(db, user_id, friend_identity_id, context)


def send_friend_request(db: Session, user_id: str, recipient_identity_id: str, context: IdentityContext) -> FriendRequest:
    return FriendRequestsCRUD.send_request(db, user_id, context, recipient_identity_id)


def connect(
    db: Session, user_id: str, identity_id: str, context: IdentityContext
) -> Tuple[str, Union[Friend, FriendRequest]]:
    """
    Follow a public identity outright, or ask a private one for friendship.

    Returns:
        (action, record): ``("followed", Friend)`` or ``("requested", FriendRequest)``
    """
    identity = _target_identity(db, user_id, identity_id)
    if identity.is_public:
        edge, _ = FriendsCRUD.upsert_edge(db, user_id, identity.id, context)
        return ACTION_FOLLOWED, edge
    return ACTION_REQUESTED, FriendRequestsCRUD.send_request(db, user_id, context, identity.id)


def _materialize_edges(db: Session, friend_request: FriendRequest) -> int:
    """Flush both follow edges of an accepted request; returns how many were missing."""
    context = IdentityContext(friend_request.context)
    _, sender_created = FriendsCRUD.upsert_edge(
        db, friend_request.sender_user_id, friend_request.recipient_identity_id, context, commit=False
    )
    _, recipient_created = FriendsCRUD.upsert_edge(
        db, friend_request.recipient_user_id, friend_request.sender_identity_id, context, commit=False
    )
    return int(sender_created) + int(recipient_created)


def accept_friend_request(
    db: Session, request_id: str, acting_user_id: str, context: Optional[IdentityContext] = None
) -> FriendRequest:
    """
    Accept a request and make the follow mutual.

    The sender follows the recipient identity and the recipient follows the
    sender identity; both edges and the status change are committed together.
    Accepting an already accepted request runs the same steps again, which
    restores an edge that has gone missing.

    Raises:
        NotFoundError: unknown request, or one that lives in another context
        ForbiddenError: the acting user is not the recipient
    """
    for attempt in range(2):
        friend_request = FriendRequestsCRUD.get_request(db, request_id)
        if not friend_request:
            raise NotFoundError("Friend request not found")
        if context is not None and friend_request.context != context.value:
            raise NotFoundError("Friend request not found")
        if friend_request.recipient_user_id != acting_user_id:
            raise ForbiddenError("You are not the recipient of this request")

        try:
            created = _materialize_edges(db, friend_request)
            friend_request.status = FriendRequestStatus.ACCEPTED.value
            db.commit()
            break
        except IntegrityError:
            # A concurrent accept inserted one of the edges first
            db.rollback()
            if attempt:
                raise

    db.refresh(friend_request)
    logger.info(
        f"Friend request {request_id} accepted by user {acting_user_id} "
        f"({created} edge(s) created) in {friend_request.context}"
    )
    return friend_request


def decline_friend_request(db: Session, request_id: str, acting_user_id: str) -> str:
    return FriendRequestsCRUD.decline(db, request_id, acting_user_id)


def cancel_friend_request(db: Session, request_id: str, acting_user_id: str) -> str:
    return FriendRequestsCRUD.cancel(db, request_id, acting_user_id)


def reconcile_accepted(db: Session, user_id: str, context: Optional[IdentityContext] = None) -> int:
    """
    Repair follow edges for every accepted request the user is part of.

    Safe to run any number of times: edges that already exist are left as
    they are. Returns the number of edges that had to be created.
    """
    accepted = FriendRequestsCRUD.list_accepted_for_user(db, user_id, context)
    if not accepted:
        return 0

    try:
        repaired = sum(_materialize_edges(db, friend_request) for friend_request in accepted)
        db.commit()
    except Exception as e:
        logger.error(f"Error reconciling accepted requests for user {user_id}: {e}")
        db.rollback()
        raise

    if repaired:
        logger.warning(f"Reconciliation restored {repaired} follow edge(s) for user {user_id}")
    return repaired
