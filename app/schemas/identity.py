from typing import List, Optional
from datetime import datetime
from app.schemas.base import CamelModel

class IdentityCreate(CamelModel):
    # Left optional so that missing fields are reported together by validate_identity_fields
    legal_name: Optional[str] = None
    preferred_name: Optional[str] = None
    nickname: Optional[str] = None
    context: Optional[str] = None
    account_privacy: Optional[str] = None

class IdentityUpdate(IdentityCreate):
    pass

class IdentityResponse(CamelModel):
    id: str
    legal_name: str
    preferred_name: str
    nickname: Optional[str] = None
    context: str
    account_privacy: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class IdentityEnvelope(CamelModel):
    identity: IdentityResponse

class IdentityMessageResponse(CamelModel):
    message: str
    identity: IdentityResponse

class IdentitiesListResponse(CamelModel):
    count: int
    identities: List[IdentityResponse]

class IdentityProfile(CamelModel):
    """Profile as seen by another user; details are omitted for private identities they do not follow"""
    id: str
    preferred_name: str
    context: str
    account_privacy: str
    user_id: Optional[str] = None
    legal_name: Optional[str] = None
    nickname: Optional[str] = None
    created_at: Optional[datetime] = None
    is_limited: bool = False

class IdentityProfileResponse(CamelModel):
    identity: IdentityProfile

class DeletedIdentity(CamelModel):
    id: str
    context: str

class IdentityDeleteResponse(CamelModel):
    message: str
    identity: DeletedIdentity
