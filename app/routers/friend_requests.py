from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.auth import get_current_user
from app.crud.friend_requests import FriendRequestsCRUD
from app.errors import RelationshipError, http_error
from app.models.identity import IdentityContext
from app.schemas.user import CurrentUser
from app.schemas.friends import (
    FriendRequestCreate, FriendRequestAccept, FriendRequestAction, ReconcileRequest,
    PendingFriendRequest, PendingFriendRequestsResponse, SentFriendRequest, SentFriendRequestsResponse,
    FriendRequestResponse, SendFriendRequestResponse, FriendRequestStatusItem,
    AcceptFriendRequestResponse, FriendRequestIdResponse, ReconcileResponse
)
from app.services import relationship_service
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/friend-requests", tags=["friend-requests"])

@router.post("/send", response_model=SendFriendRequestResponse)
async def send_friend_request(
    body: FriendRequestCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Send a friend request as the current user's identity for the context"""
    if not body.recipient_identity_id or not body.context:
        raise HTTPException(status_code=400, detail="Recipient identity ID and context are required")
    try:
        context = IdentityContext.parse(body.context)
        friend_request = relationship_service.send_friend_request(
            db, current_user.id, body.recipient_identity_id, context
        )
        return SendFriendRequestResponse(
            message="Friend request sent successfully",
            friend_request=FriendRequestResponse.model_validate(friend_request)
        )

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in send_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/accept", response_model=AcceptFriendRequestResponse)
async def accept_friend_request(
    body: FriendRequestAccept,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Accept a friend request; both identities then follow each other"""
    if not body.request_id or not body.context:
        raise HTTPException(status_code=400, detail="Request ID and context are required")
    try:
        context = IdentityContext.parse(body.context)
        friend_request = relationship_service.accept_friend_request(
            db, body.request_id, current_user.id, context
        )
        return AcceptFriendRequestResponse(
            message="Friend request accepted successfully",
            friend_request=FriendRequestStatusItem(id=friend_request.id, status=friend_request.status)
        )

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in accept_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/decline", response_model=FriendRequestIdResponse)
async def decline_friend_request(
    body: FriendRequestAction,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Decline a friend request; the request is removed"""
    if not body.request_id:
        raise HTTPException(status_code=400, detail="Request ID is required")
    try:
        request_id = relationship_service.decline_friend_request(db, body.request_id, current_user.id)
        return FriendRequestIdResponse(message="Friend request declined successfully", request_id=request_id)

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in decline_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/cancel", response_model=FriendRequestIdResponse)
async def cancel_friend_request(
    body: FriendRequestAction,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Withdraw a friend request the current user sent"""
    if not body.request_id:
        raise HTTPException(status_code=400, detail="Request ID is required")
    try:
        request_id = relationship_service.cancel_friend_request(db, body.request_id, current_user.id)
        return FriendRequestIdResponse(message="Friend request cancelled successfully", request_id=request_id)

    except RelationshipError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in cancel_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_friendships(
    body: ReconcileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Restore any follow edge missing from the current user's accepted friend requests"""
    try:
        context = IdentityContext.parse(body.context) if body.context else None
        repaired = relationship_service.reconcile_accepted(db, current_user.id, context)
        return ReconcileResponse(message="Friendships reconciled", repaired_edges=repaired)

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in reconcile_friendships: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{context}", response_model=PendingFriendRequestsResponse)
async def get_friend_requests(
    context: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending friend requests received by the current user's identity in a context"""
    try:
        rows = FriendRequestsCRUD.list_pending_for_recipient_context(
            db, current_user.id, IdentityContext.parse(context)
        )
        requests = [
            PendingFriendRequest(
                id=friend_request.id,
                sender_identity_id=sender.id,
                sender_name=sender.preferred_name,
                created_at=friend_request.created_at
            ) for friend_request, sender in rows
        ]
        return PendingFriendRequestsResponse(count=len(requests), requests=requests)

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in get_friend_requests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{context}/sent", response_model=SentFriendRequestsResponse)
async def get_sent_friend_requests(
    context: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending friend requests sent by the current user's identity in a context"""
    try:
        rows = FriendRequestsCRUD.list_sent_for_sender_context(
            db, current_user.id, IdentityContext.parse(context)
        )
        requests = [
            SentFriendRequest(
                id=friend_request.id,
                recipient_identity_id=recipient.id,
                recipient_name=recipient.preferred_name,
                created_at=friend_request.created_at
            ) for friend_request, recipient in rows
        ]
        return SentFriendRequestsResponse(count=len(requests), requests=requests)

    except RelationshipError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in get_sent_friend_requests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
