from fastapi import Depends, HTTPException, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth
from typing import Optional
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app import crud, schemas
from app.utils.logger import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

def _user_from_token(db: Session, token: str) -> schemas.CurrentUser:
    """Verify a Firebase ID token, creating the local user row on first sight."""
    try:
        decoded_token = auth.verify_id_token(token)
    except Exception as firebase_error:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(firebase_error)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decoded_token.get("uid")
    email = decoded_token.get("email")
    display_name = decoded_token.get("name")

    db_user = crud.get_user(db, user_id)
    if db_user:
        db_user = crud.record_login(db, db_user, display_name)
    else:
        db_user = crud.create_user(db, user_id, email, display_name)
        logger.info(f"Created user {user_id} from Firebase token")

    return schemas.CurrentUser(id=db_user.id, email=db_user.email, display_name=db_user.display_name)

def _user_from_header(db: Session, user_id: str) -> schemas.CurrentUser:
    db_user = crud.get_user(db, user_id)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-ID",
        )
    return schemas.CurrentUser(id=db_user.id, email=db_user.email, display_name=db_user.display_name)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Authenticate the caller and return the session object handlers act on.

    A Firebase ID bearer token is verified first. When the service is
    configured with ALLOW_USER_ID_HEADER, trusted internal callers may
    send X-User-ID instead.

    Raises:
        HTTPException: 401 if no usable credentials were presented
    """
    if credentials is not None:
        return _user_from_token(db, credentials.credentials)

    if x_user_id is not None and settings.ALLOW_USER_ID_HEADER:
        return _user_from_header(db, x_user_id)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Access token required",
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> Optional[schemas.CurrentUser]:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if credentials is None and (x_user_id is None or not settings.ALLOW_USER_ID_HEADER):
        return None
    return await get_current_user(credentials, x_user_id, db)
