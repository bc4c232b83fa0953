from typing import List, Optional
from datetime import datetime
from app.schemas.base import CamelModel

# Request bodies keep their fields optional so routers can answer 400 with
# their own "... are required" messages instead of a 422.

class FollowRequest(CamelModel):
    friend_identity_id: Optional[str] = None
    context: Optional[str] = None

class ConnectRequest(CamelModel):
    identity_id: Optional[str] = None
    context: Optional[str] = None

class FriendRequestCreate(CamelModel):
    recipient_identity_id: Optional[str] = None
    context: Optional[str] = None

class FriendRequestAccept(CamelModel):
    request_id: Optional[str] = None
    context: Optional[str] = None

class FriendRequestAction(CamelModel):
    request_id: Optional[str] = None

class ReconcileRequest(CamelModel):
    context: Optional[str] = None

# Responses

class FriendIdentity(CamelModel):
    """A followed identity; ``created_at`` is when the follow happened"""
    id: str
    legal_name: str
    preferred_name: str
    nickname: Optional[str] = None
    context: str
    account_privacy: str
    created_at: datetime

class FriendsListResponse(CamelModel):
    count: int
    friends: List[FriendIdentity]

class FriendEdge(CamelModel):
    id: str
    friend_identity_id: str
    context: str
    created_at: datetime

class FollowResponse(CamelModel):
    message: str
    friend: FriendEdge

class UnfollowResponse(CamelModel):
    message: str
    friend_identity_id: str
    context: str

class FriendshipSummary(CamelModel):
    id: str
    created_at: datetime

class FriendshipCheckResponse(CamelModel):
    is_friend: bool
    friendship: Optional[FriendshipSummary] = None

class PendingFriendRequest(CamelModel):
    id: str
    sender_identity_id: str
    sender_name: str
    created_at: datetime

class PendingFriendRequestsResponse(CamelModel):
    count: int
    requests: List[PendingFriendRequest]

class SentFriendRequest(CamelModel):
    id: str
    recipient_identity_id: str
    recipient_name: str
    created_at: datetime

class SentFriendRequestsResponse(CamelModel):
    count: int
    requests: List[SentFriendRequest]

class FriendRequestResponse(CamelModel):
    id: str
    recipient_identity_id: str
    context: str
    status: str
    created_at: datetime

class SendFriendRequestResponse(CamelModel):
    message: str
    friend_request: FriendRequestResponse

class FriendRequestStatusItem(CamelModel):
    id: str
    status: str

class AcceptFriendRequestResponse(CamelModel):
    message: str
    friend_request: FriendRequestStatusItem

class FriendRequestIdResponse(CamelModel):
    message: str
    request_id: str

class ConnectResponse(CamelModel):
    message: str
    action: str
    friend: Optional[FriendEdge] = None
    friend_request: Optional[FriendRequestResponse] = None

class ReconcileResponse(CamelModel):
    message: str
    repaired_edges: int
