from sqlalchemy import Column, String, DateTime, UniqueConstraint, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.time import utcnow
import uuid

class Favorite(Base):
    """An identity bookmarked by a user within a context."""
    __tablename__ = "favorites"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    identity_id = Column(String, ForeignKey("identities.id", ondelete="CASCADE"), nullable=False, index=True)
    context = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    identity = relationship("Identity", foreign_keys=[identity_id])

    __table_args__ = (
        UniqueConstraint('user_id', 'identity_id', 'context', name='unique_favorite'),
    )

    def __repr__(self):
        return f"<Favorite id={self.id} user={self.user_id} identity={self.identity_id} context={self.context}>"
