from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from typing import List, Optional, Tuple
from app.errors import IdentityConflictError, NotFoundError, ValidationFailedError
from app.models.identity import Identity, IdentityContext, AccountPrivacy
from app.models.friend import Friend
from app.models.friend_request import FriendRequest
from app.models.favorite import Favorite
from app.utils.logger import get_logger

logger = get_logger(__name__)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

PREFERRED_NAME_TAKEN = "This preferred name is already taken by another user. Please choose a different one."

def get_identity(db: Session, identity_id: str) -> Optional[Identity]:
    """Get an identity by ID regardless of owner."""
    return db.query(Identity).filter(Identity.id == identity_id).first()

def get_user_identity(db: Session, user_id: str, identity_id: str) -> Optional[Identity]:
    """Get an identity by ID only if it belongs to ``user_id``."""
    return db.query(Identity).filter(
        Identity.id == identity_id,
        Identity.user_id == user_id
    ).first()

def resolve_identity_for_context(db: Session, user_id: str, context: IdentityContext) -> Optional[Identity]:
    """The identity a user acts as within ``context``, or None if they have not created one."""
    return db.query(Identity).filter(
        Identity.user_id == user_id,
        Identity.context == context.value
    ).first()

def list_user_identities(db: Session, user_id: str) -> List[Identity]:
    """All identities owned by a user, newest first."""
    return db.query(Identity).filter(
        Identity.user_id == user_id
    ).order_by(Identity.created_at.desc()).all()

def list_identities_by_context(db: Session, context: IdentityContext, public_only: bool = False) -> List[Identity]:
    """Identities of every user within a context, newest first. Used by search."""
    query = db.query(Identity).filter(Identity.context == context.value)
    if public_only:
        query = query.filter(Identity.account_privacy == AccountPrivacy.PUBLIC.value)
    return query.order_by(Identity.created_at.desc()).all()

def is_preferred_name_available(db: Session, preferred_name: str, user_id: str) -> bool:
    """
    Check whether a preferred name is free for ``user_id``.

    A user may reuse one of their own preferred names across contexts;
    only a name held by a different user is unavailable.
    """
    return db.query(Identity).filter(
        Identity.preferred_name == preferred_name,
        Identity.user_id != user_id
    ).first() is None

def validate_identity_fields(
    legal_name: Optional[str],
    preferred_name: Optional[str],
    nickname: Optional[str],
    context: Optional[str],
    account_privacy: Optional[str]
) -> Tuple[IdentityContext, AccountPrivacy]:
    """
    Validate raw identity input, collecting every problem before failing.

    Returns:
        The parsed context and privacy values

    Raises:
        ValidationFailedError: listing each rule that was broken
    """
    errors = []
    legal_name = (legal_name or "").strip()
    preferred_name = (preferred_name or "").strip()

    if len(legal_name) < NAME_MIN_LENGTH:
        errors.append("Legal name must be at least 2 characters long")
    elif len(legal_name) > NAME_MAX_LENGTH:
        errors.append("Legal name cannot exceed 100 characters")

    if len(preferred_name) < NAME_MIN_LENGTH:
        errors.append("Preferred name must be at least 2 characters long")
    elif len(preferred_name) > NAME_MAX_LENGTH:
        errors.append("Preferred name cannot exceed 100 characters")
    if any(ch.isspace() for ch in preferred_name):
        errors.append("Preferred name cannot contain spaces")

    if nickname and len(nickname.strip()) > NAME_MAX_LENGTH:
        errors.append("Nickname cannot exceed 100 characters")

    parsed_context = None
    try:
        parsed_context = IdentityContext(context)
    except ValueError:
        errors.append("Context must be one of: professional, personal, family, or online")

    parsed_privacy = None
    try:
        parsed_privacy = AccountPrivacy(account_privacy)
    except ValueError:
        errors.append("Account privacy must be either private or public")

    if errors:
        raise ValidationFailedError(errors)
    return parsed_context, parsed_privacy

def create_identity(
    db: Session,
    user_id: str,
    legal_name: str,
    preferred_name: str,
    context: IdentityContext,
    nickname: Optional[str] = None,
    account_privacy: AccountPrivacy = AccountPrivacy.PRIVATE
) -> Identity:
    """
    Create an identity profile for a user.

    Raises:
        ValidationFailedError: if the preferred name belongs to another user
        IdentityConflictError: if the user already has an identity in ``context``
    """
    preferred_name = preferred_name.strip()
    if not is_preferred_name_available(db, preferred_name, user_id):
        raise ValidationFailedError([PREFERRED_NAME_TAKEN])
    if resolve_identity_for_context(db, user_id, context):
        raise IdentityConflictError(f"You already have an identity for context: {context.value}")

    identity = Identity(
        user_id=user_id,
        legal_name=legal_name.strip(),
        preferred_name=preferred_name,
        nickname=nickname.strip() if nickname else "",
        context=context.value,
        account_privacy=account_privacy.value
    )
    db.add(identity)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise IdentityConflictError(f"You already have an identity for context: {context.value}")
    db.refresh(identity)
    logger.info(f"Identity {identity.id} created for user {user_id} in context {context.value}")
    return identity

def _detach_relationships(db: Session, identity_id: str) -> None:
    """Flush the removal of follow edges, friend requests and favorites that reference an identity."""
    db.query(Friend).filter(
        Friend.friend_identity_id == identity_id
    ).delete(synchronize_session=False)
    db.query(FriendRequest).filter(
        or_(
            FriendRequest.sender_identity_id == identity_id,
            FriendRequest.recipient_identity_id == identity_id
        )
    ).delete(synchronize_session=False)
    db.query(Favorite).filter(
        Favorite.identity_id == identity_id
    ).delete(synchronize_session=False)
    db.flush()

def update_identity(
    db: Session,
    user_id: str,
    identity_id: str,
    legal_name: str,
    preferred_name: str,
    context: IdentityContext,
    nickname: Optional[str] = None,
    account_privacy: AccountPrivacy = AccountPrivacy.PRIVATE
) -> Identity:
    """
    Replace the editable fields of an identity owned by ``user_id``.

    Moving the identity to another context drops the follow edges, friend
    requests and favorites that reference it, in the same transaction.
    """
    identity = get_user_identity(db, user_id, identity_id)
    if not identity:
        raise NotFoundError("Identity not found")

    preferred_name = preferred_name.strip()
    if preferred_name != identity.preferred_name and not is_preferred_name_available(db, preferred_name, user_id):
        raise ValidationFailedError([PREFERRED_NAME_TAKEN])

    context_changed = context.value != identity.context
    if context_changed:
        occupant = resolve_identity_for_context(db, user_id, context)
        if occupant and occupant.id != identity.id:
            raise IdentityConflictError(f"You already have an identity for context: {context.value}")

    try:
        if context_changed:
            _detach_relationships(db, identity.id)
        identity.legal_name = legal_name.strip()
        identity.preferred_name = preferred_name
        identity.nickname = nickname.strip() if nickname else ""
        identity.context = context.value
        identity.account_privacy = account_privacy.value
        db.commit()
    except IntegrityError:
        db.rollback()
        raise IdentityConflictError(f"You already have an identity for context: {context.value}")
    db.refresh(identity)
    if context_changed:
        logger.info(f"Identity {identity_id} moved to context {context.value}; its relationships were cleared")
    return identity

def delete_identity(db: Session, user_id: str, identity_id: str) -> Identity:
    """
    Delete an identity owned by ``user_id``.

    Follow edges pointing at the identity, friend requests sent from or to it
    and favorites of it are removed in the same transaction.
    """
    identity = get_user_identity(db, user_id, identity_id)
    if not identity:
        raise NotFoundError("Identity not found")

    try:
        _detach_relationships(db, identity.id)
        db.delete(identity)
        db.commit()
    except Exception as e:
        logger.error(f"Error deleting identity {identity_id}: {e}")
        db.rollback()
        raise

    logger.info(f"Identity {identity_id} deleted by user {user_id}")
    return identity
