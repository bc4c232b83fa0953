from sqlalchemy import Column, String, DateTime, UniqueConstraint, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.time import utcnow
import enum
import uuid

class FriendRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

class FriendRequest(Base):
    """Friend request from one identity to another within a context."""
    __tablename__ = "friend_requests"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    sender_user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_identity_id = Column(String, ForeignKey("identities.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_identity_id = Column(String, ForeignKey("identities.id", ondelete="CASCADE"), nullable=False, index=True)
    context = Column(String, nullable=False)
    status = Column(String, default=FriendRequestStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    sender_identity = relationship("Identity", foreign_keys=[sender_identity_id])
    recipient_identity = relationship("Identity", foreign_keys=[recipient_identity_id])

    # Re-sending overwrites the existing record for the same pair and context
    __table_args__ = (
        UniqueConstraint('sender_identity_id', 'recipient_identity_id', 'context', name='unique_friend_request'),
    )

    def __repr__(self):
        return f"<FriendRequest id={self.id} sender={self.sender_identity_id} recipient={self.recipient_identity_id} context={self.context} status={self.status}>"
