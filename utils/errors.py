"""Error taxonomy for the commentary pipeline and its HTTP translation."""

from __future__ import annotations

from typing import Any, Dict, Optional


class CommentaryError(Exception):
    """Base class for failures reported back to the caller.

    Attributes:
        status_code: HTTP status used when the error reaches the API boundary.
        error: Short, stable error label placed in the response body.
        detail: Optional structured detail (sizes, upstream status, ...).
        session_id: Session the failing request belonged to, when known.
    """

    status_code = 500
    error = "server error"

    def __init__(self, message: str = "", detail: Any = None, session_id: Optional[str] = None) -> None:
        super().__init__(message or self.error)
        self.detail = detail
        self.session_id = session_id

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON body sent to the client."""
        body: Dict[str, Any] = {"error": self.error}
        if self.detail is not None:
            body["detail"] = self.detail
        if self.session_id:
            body["sessionId"] = self.session_id
        return body


class InvalidInput(CommentaryError):
    """A required frame is missing from the request."""

    status_code = 400
    error = "imageBase64 and prevImageBase64 are required"


class PayloadTooLarge(CommentaryError):
    """A frame exceeds the per-image size ceiling."""

    status_code = 413
    error = "image too large"


class UpstreamError(CommentaryError):
    """The model gateway answered with a non-success status or could not be reached."""

    status_code = 502
    error = "upstream model error"

    def __init__(
        self,
        message: str = "",
        status: Optional[int] = None,
        body: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, detail={"status": status, "body": body, "message": message}, session_id=session_id)
        self.status = status
        self.body = body


class UpstreamTimeout(UpstreamError):
    """The model gateway did not answer within the configured timeout."""

    status_code = 504
    error = "upstream model timeout"


class InternalError(CommentaryError):
    """Unexpected failure while orchestrating a request."""

    status_code = 500
    error = "server error"

    def __init__(self, message: str = "", session_id: Optional[str] = None) -> None:
        super().__init__(message, detail=message or None, session_id=session_id)
