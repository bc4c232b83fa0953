from typing import List, Optional
from datetime import datetime
from app.schemas.base import CamelModel
from app.schemas.friends import FriendIdentity

class FavoriteCreate(CamelModel):
    context: Optional[str] = None

class FavoriteResponse(CamelModel):
    id: str
    identity_id: str
    context: str
    created_at: datetime

class AddFavoriteResponse(CamelModel):
    message: str
    favorite: FavoriteResponse

class FavoritesListResponse(CamelModel):
    count: int
    favorites: List[FriendIdentity]

class RemoveFavoriteResponse(CamelModel):
    message: str
    identity_id: str
