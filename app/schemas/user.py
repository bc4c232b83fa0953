from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.schemas.base import CamelModel

class CurrentUser(BaseModel):
    """Authenticated caller, passed explicitly into every protected handler"""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None

class UserResponse(CamelModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None
