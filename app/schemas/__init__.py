from app.schemas.user import CurrentUser, UserResponse
from app.schemas.identity import (
    IdentityCreate, IdentityUpdate, IdentityResponse, IdentityEnvelope, IdentityMessageResponse,
    IdentitiesListResponse, IdentityProfile, IdentityProfileResponse, DeletedIdentity, IdentityDeleteResponse
)
from app.schemas.friends import (
    FollowRequest, ConnectRequest, FriendRequestCreate, FriendRequestAccept, FriendRequestAction,
    ReconcileRequest, FriendIdentity, FriendsListResponse, FriendEdge, FollowResponse, UnfollowResponse,
    FriendshipSummary, FriendshipCheckResponse, PendingFriendRequest, PendingFriendRequestsResponse,
    SentFriendRequest, SentFriendRequestsResponse, FriendRequestResponse, SendFriendRequestResponse,
    FriendRequestStatusItem, AcceptFriendRequestResponse, FriendRequestIdResponse, ConnectResponse,
    ReconcileResponse
)
from app.schemas.favorites import (
    FavoriteCreate, FavoriteResponse, AddFavoriteResponse, FavoritesListResponse, RemoveFavoriteResponse
)

__all__ = [
    "CurrentUser", "UserResponse",
    "IdentityCreate", "IdentityUpdate", "IdentityResponse", "IdentityEnvelope", "IdentityMessageResponse",
    "IdentitiesListResponse", "IdentityProfile", "IdentityProfileResponse", "DeletedIdentity",
    "IdentityDeleteResponse",
    "FollowRequest", "ConnectRequest", "FriendRequestCreate", "FriendRequestAccept", "FriendRequestAction",
    "ReconcileRequest", "FriendIdentity", "FriendsListResponse", "FriendEdge", "FollowResponse",
    "UnfollowResponse", "FriendshipSummary", "FriendshipCheckResponse", "PendingFriendRequest",
    "PendingFriendRequestsResponse", "SentFriendRequest", "SentFriendRequestsResponse",
    "FriendRequestResponse", "SendFriendRequestResponse", "FriendRequestStatusItem",
    "AcceptFriendRequestResponse", "FriendRequestIdResponse", "ConnectResponse", "ReconcileResponse",
    "FavoriteCreate", "FavoriteResponse", "AddFavoriteResponse", "FavoritesListResponse",
    "RemoveFavoriteResponse"
]
