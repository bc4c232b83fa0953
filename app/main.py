from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import firebase_admin
from firebase_admin import credentials
import os

from app.config import settings
from app.database import Base, engine, get_pool_status
from app.logging_config import configure_logging
from app.middleware.request_id import RequestIDMiddleware
from app.routers import users, identities, friends, friend_requests, favorites
from app.utils.logger import get_logger
from app import models  # noqa: F401  registers tables on Base.metadata

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=engine)

def init_firebase():
    """Initialize the Firebase Admin SDK used to verify bearer tokens."""
    if not settings.FIREBASE_ENABLED:
        logger.warning("Firebase disabled: bearer tokens will be rejected")
        return None
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # not initialized yet
    try:
        firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        if os.path.exists(firebase_json_path):
            firebase_app = firebase_admin.initialize_app(credentials.Certificate(firebase_json_path), options)
            logger.info("Initialized Firebase Admin with provided service account JSON")
        else:
            # Application Default Credentials, e.g. on Cloud Run
            firebase_app = firebase_admin.initialize_app(options=options)
            logger.warning(f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. Initialized Firebase with default credentials.")
        return firebase_app
    except Exception as e:
        logger.exception(f"Failed to initialize Firebase Admin SDK: {e}")
        raise

firebase_app = init_firebase()

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {"docs_url": None, "redoc_url": None, "openapi_url": None}

app = FastAPI(
    title="Identity API",
    description="Multi-context identity profiles with per-context friends, friend requests and favorites",
    version="1.0.0",
    **docs_config
)

# Add Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users.router)
app.include_router(identities.router)
app.include_router(friends.router)
app.include_router(friend_requests.router)
app.include_router(favorites.router)

@app.get("/")
async def root():
    return {"message": "Identity API", "version": "1.0.0"}

@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": settings.SERVICE_NAME, "database": get_pool_status()}
