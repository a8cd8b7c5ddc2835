"""
API Routes - All endpoint definitions for the Civic Issue Feed

Endpoints organized by:
- Health Check
- Users
- Feed (ranked posts)
- Reports (posts, comments, upvotes)
- ML (urgency preview, image classification)
- Admin (status updates, issue list)
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response
from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from constants import ScoringMode
from database import get_session_dependency
from database.models import User
from ml import ImageClassificationClient, MLClientError, get_image_client
from processor import FeedRanker, ReportIngestion, predict_urgency
from processor.ranker import serialize_post
from repositories import (
    PostRepository,
    UserRepository,
    ReportingError,
    InvalidIdentifierError,
    PostNotFoundError,
    UserNotFoundError,
)

router = APIRouter()


# ============================================================
# Request Models
# ============================================================
class CreateUserRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)


class ReportRequest(BaseModel):
    issue_name: str = Field(min_length=1)
    issue_desc: Optional[str] = None
    issue_cat: Optional[str] = None
    post_desc: str = ""
    status: Optional[str] = None
    urgency: int = Field(default=1, ge=1, le=3)
    lat: float = 0.0
    lng: float = 0.0
    media_url: str = ""


class CommentRequest(BaseModel):
    post_id: str
    content: str = Field(min_length=1)


class UpvoteRequest(BaseModel):
    post_id: str


class PredictUrgencyRequest(BaseModel):
    text: str = ""


class ClassifyImageRequest(BaseModel):
    image_url: str = ""


class PostStatusRequest(BaseModel):
    post_id: str
    status: str
    notes: Optional[str] = None


# ============================================================
# Dependencies
# ============================================================
def get_scoring_mode() -> ScoringMode:
    """Scoring mode for this request."""
    return ScoringMode(settings.SCORING_MODE)


def get_image_classifier() -> Optional[ImageClassificationClient]:
    """Configured image classifier, or None when disabled."""
    return get_image_client()


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    session: AsyncSession = Depends(get_session_dependency),
) -> User:
    """
    Resolve the acting user from the X-User-Id header.

    Token validation happens upstream; this only maps the id to a user.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    repo = UserRepository(session)
    try:
        user_id = repo.parse_id(x_user_id, "user_id")
    except InvalidIdentifierError as e:
        raise HTTPException(status_code=400, detail=str(e))

    user = await repo.get(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Acting user, who must be an admin."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def _http_error(e: ReportingError) -> HTTPException:
    if isinstance(e, (PostNotFoundError, UserNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check(mode: ScoringMode = Depends(get_scoring_mode)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "scoring_mode": mode.value,
    }


# ============================================================
# Users
# ============================================================
@router.post("/users", status_code=201)
async def create_user(
    request: CreateUserRequest,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Register a user profile."""
    repo = UserRepository(session)
    if await repo.get_by_email(request.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = await repo.create_user(request.name, request.email)
    logger.info(f"User created: {user.id}")
    return user.to_public_dict()


# ============================================================
# Feed
# ============================================================
@router.get("/feed")
async def get_feed(
    response: Response,
    mode: ScoringMode = Depends(get_scoring_mode),
    session: AsyncSession = Depends(get_session_dependency),
):
    """
    Ranked feed of the newest posts.

    Scores are computed per request, so the response must not be cached.
    """
    response.headers["Cache-Control"] = "no-store"

    ranker = FeedRanker()
    result = await ranker.get_feed(PostRepository(session), mode, limit=settings.FEED_LIMIT)
    return result.to_list()


# ============================================================
# Reports
# ============================================================
@router.post("/report", status_code=201)
async def report_issue(
    request: ReportRequest,
    user: User = Depends(get_current_user),
    mode: ScoringMode = Depends(get_scoring_mode),
    image_client: Optional[ImageClassificationClient] = Depends(get_image_classifier),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Create a post for an issue."""
    ingestion = ReportIngestion(session, mode, image_client=image_client)
    try:
        post = await ingestion.report_issue(
            user_id=user.id,
            issue_name=request.issue_name,
            issue_desc=request.issue_desc,
            issue_cat=request.issue_cat,
            post_desc=request.post_desc,
            status=request.status,
            urgency=request.urgency,
            lat=request.lat,
            lng=request.lng,
            media_url=request.media_url,
        )
    except ReportingError as e:
        raise _http_error(e)

    return serialize_post(post)


@router.post("/comment", status_code=201)
async def add_comment(
    request: CommentRequest,
    user: User = Depends(get_current_user),
    mode: ScoringMode = Depends(get_scoring_mode),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Add a comment; the post's urgency is recalculated."""
    ingestion = ReportIngestion(session, mode)
    try:
        comment = await ingestion.add_comment(user.id, request.post_id, request.content)
    except ReportingError as e:
        raise _http_error(e)

    return comment.to_dict()


@router.post("/upvote")
async def toggle_upvote(
    request: UpvoteRequest,
    user: User = Depends(get_current_user),
    mode: ScoringMode = Depends(get_scoring_mode),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Toggle the acting user's upvote."""
    ingestion = ReportIngestion(session, mode)
    try:
        upvoted = await ingestion.toggle_upvote(user.id, request.post_id)
    except ReportingError as e:
        raise _http_error(e)

    return {"upvoted": upvoted}


# ============================================================
# ML
# ============================================================
@router.post("/predict-urgency")
async def predict_urgency_endpoint(request: PredictUrgencyRequest):
    """Urgency preview for a draft description."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="text is required")

    urgency = await predict_urgency(request.text)
    return {"urgency": urgency, "error": ""}


@router.post("/classify-image")
async def classify_image(
    request: ClassifyImageRequest,
    image_client: Optional[ImageClassificationClient] = Depends(get_image_classifier),
):
    """
    Classify an image by URL.

    Service failures are reported in the body, not as an HTTP error.
    """
    if not request.image_url.strip():
        raise HTTPException(status_code=400, detail="image_url is required")
    if image_client is None:
        return {"predicted_class": "", "error": "image classification is not configured"}

    try:
        predicted = await image_client.classify(request.image_url.strip())
    except MLClientError as e:
        logger.warning(f"classify-image failed: {e}")
        return {"predicted_class": "", "error": str(e)}

    if predicted is None:
        return {"predicted_class": "", "error": "no predicted class in response"}
    return {"predicted_class": predicted, "error": ""}


# ============================================================
# Admin
# ============================================================
@router.post("/admin/post-status")
async def update_post_status(
    request: PostStatusRequest,
    admin: User = Depends(require_admin),
    mode: ScoringMode = Depends(get_scoring_mode),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Change a post's status (open / inprogress / closed)."""
    ingestion = ReportIngestion(session, mode)
    try:
        post = await ingestion.update_post_status(request.post_id, request.status, request.notes)
    except ReportingError as e:
        raise _http_error(e)

    logger.info(f"Admin {admin.id} set post {post.id} to {post.status}")
    return serialize_post(post)


@router.get("/admin/issues")
async def list_issues_for_admin(
    status: Optional[str] = Query(default=None, description="open, inprogress or closed"),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_session_dependency),
):
    """All posts, newest first, optionally filtered by status."""
    repo = PostRepository(session)
    try:
        posts = await repo.get_all_posts_for_admin(status=status, limit=settings.ADMIN_FEED_LIMIT)
    except ReportingError as e:
        raise _http_error(e)

    return {"posts": [serialize_post(p) for p in posts], "count": len(posts)}
