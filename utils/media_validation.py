"""Validation helpers for base64 frame payloads."""

from typing import Any, Tuple

from utils.errors import InvalidInput, PayloadTooLarge

DATA_URL_MARKER = "base64,"


def strip_data_url_prefix(value: Any) -> str:
    """Return the bare base64 payload, dropping any `data:...;base64,` header."""
    text = str(value or "")
    if not text:
        return ""
    if DATA_URL_MARKER in text:
        return text.partition(DATA_URL_MARKER)[2]
    return text


def estimate_bytes_from_base64(b64: str) -> int:
    """Estimate the decoded size of a base64 string without decoding it."""
    if not b64:
        return 0
    padding = 2 if b64.endswith("==") else 1 if b64.endswith("=") else 0
    return (len(b64) * 3) // 4 - padding


def ensure_frames_present(prev_b64: str, cur_b64: str, session_id: str) -> None:
    """Raise InvalidInput unless both frames carry a payload."""
    if not cur_b64 or not prev_b64:
        raise InvalidInput(session_id=session_id)


def ensure_frames_within_limit(prev_b64: str, cur_b64: str, max_bytes: int, session_id: str) -> Tuple[int, int]:
    """Return the estimated (prev, cur) sizes, or raise PayloadTooLarge when either exceeds max_bytes."""
    cur_bytes = estimate_bytes_from_base64(cur_b64)
    prev_bytes = estimate_bytes_from_base64(prev_b64)
    if cur_bytes > max_bytes or prev_bytes > max_bytes:
        raise PayloadTooLarge(
            detail={"curBytes": cur_bytes, "prevBytes": prev_bytes, "maxBytesPerImage": max_bytes},
            session_id=session_id,
        )
    return prev_bytes, cur_bytes
