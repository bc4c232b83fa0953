# API Routers
from app.routers import users, identities, friends, friend_requests, favorites

__all__ = ["users", "identities", "friends", "friend_requests", "favorites"]
