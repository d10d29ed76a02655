"""FastAPI application entry point."""

import logging
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..domain.entities import ReadingStatus, UserContext
from .config import settings
from .controller import LiteraController, build_controller

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

controller = build_controller(settings)


class CreateProfileRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)


class StartSessionRequest(BaseModel):
    book_id: str
    current_page: int = Field(ge=0)


class EndSessionRequest(BaseModel):
    end_page: int = Field(ge=0)
    notes: Optional[str] = None


class LibraryRequest(BaseModel):
    book_id: str
    status: ReadingStatus


class RatingRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    review: Optional[str] = None


class ImportRequest(BaseModel):
    volume: Dict[str, Any]


def get_controller() -> LiteraController:
    return controller


def get_user_context(
    x_user_id: Optional[str] = Header(None),
    x_timezone: Optional[str] = Header(None),
) -> UserContext:
    """Build the caller's context from request headers.

    Note:
        The user id header is trusted as-is. Put an authenticating proxy
        in front of the service in production.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    try:
        tz = ZoneInfo(x_timezone or settings.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown time zone '{x_timezone}'")

    return UserContext(user_id=x_user_id, tz=tz)


@app.get("/health")
async def health_check(ctl: LiteraController = Depends(get_controller)):
    """Health check endpoint."""
    return ctl.get_health_status()


@app.post("/sessions/start")
async def start_session(
    request: StartSessionRequest,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Start a reading session for the caller."""
    session = await ctl.start_session(context, request.book_id, request.current_page)
    return {"active_session": session.model_dump(mode="json")}


@app.post("/sessions/end")
async def end_session(
    request: EndSessionRequest,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """
    End the caller's reading session.

    Responds 404 when no session is active and 502 when the session could
    not be recorded; the session stays active so the call can be retried.
    """
    if ctl.active_session_for(context) is None:
        raise HTTPException(status_code=404, detail="No active reading session")

    outcome = await ctl.end_session(context, request.end_page, request.notes)
    if outcome is None:
        raise HTTPException(status_code=502, detail="Could not record the session, try again")
    return outcome.model_dump(mode="json")


@app.post("/sessions/cancel")
async def cancel_session(
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Discard the caller's reading session."""
    await ctl.cancel_session(context)
    return {"cancelled": True}


@app.get("/sessions/active")
async def get_active_session(
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Get the caller's session in progress, if any."""
    session = ctl.active_session_for(context)
    return {"active_session": session.model_dump(mode="json") if session else None}


@app.get("/profile")
async def get_profile(
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Get the caller's profile, streak recovery eligibility and level progress."""
    try:
        return await ctl.get_profile_summary(context.user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error getting profile for user {context.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@app.post("/profile", status_code=201)
async def create_profile(
    request: CreateProfileRequest,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Create the caller's profile."""
    profile = await ctl.create_profile(context, request.username, request.display_name)
    if profile is None:
        raise HTTPException(status_code=409, detail="Profile already exists")
    return {"profile": profile.model_dump(mode="json")}


@app.get("/posts")
async def list_posts(
    user_id: Optional[str] = Query(None, description="Whose posts to list; defaults to the caller"),
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """List a user's feed posts, newest first."""
    posts = await ctl.list_posts(user_id or context.user_id)
    return {"posts": [post.model_dump(mode="json") for post in posts]}


@app.post("/streak/recover")
async def recover_streak(
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Restore the caller's last broken streak, once."""
    profile = await ctl.recover_streak(context)
    if profile is None:
        raise HTTPException(status_code=409, detail="Streak recovery is not available")
    return {"profile": profile.model_dump(mode="json")}


@app.get("/books/search")
async def search_books(
    q: str = Query(..., description="Search terms"),
    ctl: LiteraController = Depends(get_controller),
):
    """Search Google Books."""
    return {"items": await ctl.search_books(q)}


@app.post("/books/import")
async def import_book(
    request: ImportRequest,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Add a Google Books volume to the catalog."""
    book = await ctl.import_book(context, request.volume)
    if book is None:
        raise HTTPException(status_code=500, detail="Internal server error")
    return book.model_dump(mode="json")


@app.get("/library")
async def get_library(
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """List the caller's library."""
    books = await ctl.list_library(context.user_id)
    return {"books": [entry.model_dump(mode="json") for entry in books]}


@app.post("/library")
async def add_to_library(
    request: LibraryRequest,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Put a catalog book on one of the caller's shelves."""
    try:
        entry = await ctl.add_to_library(context, request.book_id, request.status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if entry is None:
        raise HTTPException(status_code=500, detail="Internal server error")
    return entry.model_dump(mode="json")


@app.post("/library/{book_id}/rating")
async def rate_book(
    book_id: str,
    request: RatingRequest,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Rate and review a book in the caller's library."""
    if not await ctl.rate_book(context, book_id, request.rating, request.review):
        raise HTTPException(status_code=404, detail=f"Book {book_id} could not be rated")
    return {"rated": True}


@app.delete("/library/{book_id}")
async def remove_book(
    book_id: str,
    context: UserContext = Depends(get_user_context),
    ctl: LiteraController = Depends(get_controller),
):
    """Remove a book from the caller's library."""
    if not await ctl.remove_book(context, book_id):
        raise HTTPException(status_code=404, detail=f"Book {book_id} not found in library")
    return {"removed": True}
