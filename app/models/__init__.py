from app.database import Base
from app.models.user import User
from app.models.identity import Identity, IdentityContext, AccountPrivacy
from app.models.friend import Friend
from app.models.friend_request import FriendRequest, FriendRequestStatus
from app.models.favorite import Favorite

__all__ = [
    "Base", "User", "Identity", "IdentityContext", "AccountPrivacy",
    "Friend", "FriendRequest", "FriendRequestStatus", "Favorite"
]
