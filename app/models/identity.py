from sqlalchemy import Column, String, DateTime, UniqueConstraint, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.errors import InvalidContextError
from app.utils.time import utcnow
import enum
import uuid

class IdentityContext(str, enum.Enum):
    """The fixed facets a user can present an identity under."""
    PROFESSIONAL = "professional"
    PERSONAL = "personal"
    FAMILY = "family"
    ONLINE = "online"

    @classmethod
    def parse(cls, value) -> "IdentityContext":
        """Convert a raw request value, raising InvalidContextError for anything outside the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidContextError()

class AccountPrivacy(str, enum.Enum):
    PRIVATE = "private"
    PUBLIC = "public"

class Identity(Base):
    """A context-scoped profile owned by a user."""
    __tablename__ = "identities"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    legal_name = Column(String(100), nullable=False)
    preferred_name = Column(String(100), nullable=False, index=True)
    nickname = Column(String(100), nullable=True)
    context = Column(String, nullable=False, index=True)
    account_privacy = Column(String, nullable=False, default=AccountPrivacy.PRIVATE.value)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="identities")

    # One identity per user per context
    __table_args__ = (
        UniqueConstraint('user_id', 'context', name='unique_identity_context'),
    )

    @property
    def is_public(self) -> bool:
        return self.account_privacy == AccountPrivacy.PUBLIC.value

    def __repr__(self):
        return f"<Identity id={self.id} user={self.user_id} context={self.context} preferred_name={self.preferred_name}>"
