from sqlalchemy import Column, String, DateTime, UniqueConstraint, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.time import utcnow
import uuid

class Friend(Base):
    """Directed follow edge: ``user_id`` follows ``friend_identity_id`` within ``context``."""
    __tablename__ = "friends"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    friend_identity_id = Column(String, ForeignKey("identities.id", ondelete="CASCADE"), nullable=False, index=True)
    context = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", foreign_keys=[user_id], back_populates="following")
    friend_identity = relationship("Identity", foreign_keys=[friend_identity_id])

    # At most one edge per (owner, target, context)
    __table_args__ = (
        UniqueConstraint('user_id', 'friend_identity_id', 'context', name='unique_friend_edge'),
    )

    def __repr__(self):
        return f"<Friend id={self.id} user={self.user_id} friend_identity={self.friend_identity_id} context={self.context}>"
