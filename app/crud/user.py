from sqlalchemy.orm import Session
from typing import Optional
from app.models import User
from app.utils.time import utcnow

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()

def create_user(db: Session, user_id: str, email: Optional[str], display_name: Optional[str] = None) -> User:
    """
    Create a new user.

    Args:
        db: Database session
        user_id: Auth provider UID
        email: User email
        display_name: User display name

    Returns:
        Created User object
    """
    db_user = User(
        id=user_id,
        email=email,
        display_name=display_name,
        last_login=utcnow()
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def record_login(db: Session, user: User, display_name: Optional[str] = None) -> User:
    """Stamp ``last_login`` and refresh the display name from the token when one is supplied."""
    user.last_login = utcnow()
    if display_name:
        user.display_name = display_name
    db.commit()
    db.refresh(user)
    return user
