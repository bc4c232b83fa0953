from app.crud.user import (
    get_user,
    create_user,
    record_login,
)
from app.crud.identity import (
    get_identity,
    get_user_identity,
    resolve_identity_for_context,
    list_user_identities,
    list_identities_by_context,
    is_preferred_name_available,
    validate_identity_fields,
    create_identity,
    update_identity,
    delete_identity,
)
from app.crud.favorites import (
    get_favorites,
    add_favorite,
    remove_favorite,
)
from app.crud.friends import FriendsCRUD
from app.crud.friend_requests import FriendRequestsCRUD

__all__ = [
    # User operations
    "get_user",
    "create_user",
    "record_login",

    # Identity directory
    "get_identity",
    "get_user_identity",
    "resolve_identity_for_context",
    "list_user_identities",
    "list_identities_by_context",
    "is_preferred_name_available",
    "validate_identity_fields",
    "create_identity",
    "update_identity",
    "delete_identity",

    # Favorites operations
    "get_favorites",
    "add_favorite",
    "remove_favorite",

    # Relationship store and request ledger
    "FriendsCRUD",
    "FriendRequestsCRUD",
]
