"""FastAPI routes for frame-change commentary."""

from fastapi import APIRouter, Request

from controllers.commentary_controller import generate_commentary
from models.commentary_models import CommentaryPayload

router = APIRouter(prefix="/api/commentary", tags=["commentary"])


@router.post("", summary="Comment on the change between two frames")
async def post_commentary(request: Request, payload: CommentaryPayload):
    """Return one line of commentary for the previous/current frame pair.

    Args:
        request: The FastAPI request containing application state.
        payload: Frames, metadata and optional session id.

    Returns:
        The commentary decision. Failures are rendered by the application's
        CommentaryError handler as `{error, detail?, sessionId?}`.
    """
    return await generate_commentary(request, payload)
