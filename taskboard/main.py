import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, configure_logging
from .database import create_tables
from .errors import register_exception_handlers
from .routers import auth, tags, tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    configure_logging()
    create_tables()
    logger.info("Task board API ready")
    yield


# Create FastAPI app
app = FastAPI(
    title="Task Board API",
    description="Personal task management with a drag-and-drop board and shared tags",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(tags.router, prefix="/api", tags=["tags"])

@app.get("/")
def read_root():
    return {"message": "Task Board API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
