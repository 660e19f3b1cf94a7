"""Controller for frame-change commentary requests."""

import logging
from typing import Any, Dict

from fastapi import Request

from models.commentary_models import CommentaryPayload
from services.commentary.decider import CommentaryDecider
from utils.errors import CommentaryError, InternalError

LOGGER = logging.getLogger(__name__)


def _get_decider(request: Request) -> CommentaryDecider:
    """Retrieve the shared commentary decider from the app state."""
    decider = getattr(request.app.state, "commentary_decider", None)
    if decider is None:
        raise InternalError("Commentary service not initialized.")
    return decider


async def generate_commentary(request: Request, payload: CommentaryPayload) -> Dict[str, Any]:
    """Run the commentary pipeline and return the decision as a JSON-ready dict.

    Args:
        request: FastAPI Request (used to access the shared decider).
        payload: Parsed request body.

    Returns:
        `{sessionId, commentary, topic, confidence}` plus `advantage` when one was produced.

    Raises:
        CommentaryError: Any taxonomy error; unexpected failures are wrapped in InternalError.
    """
    decider = _get_decider(request)
    try:
        decision = await decider.decide(payload.to_request())
    except CommentaryError:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        LOGGER.exception("Unexpected failure while generating commentary")
        raise InternalError(str(exc)) from exc
    return decision.to_dict()
