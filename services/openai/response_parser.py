"""Helpers to read text and usage from Responses API outputs."""

from typing import Any, Dict, Optional


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_text(response: Any) -> str:
    """Concatenate every output_text part of the response."""
    parts = []
    for item in _field(response, "output") or []:
        if _field(item, "type") != "message":
            continue
        for content in _field(item, "content") or []:
            if _field(content, "type") == "output_text":
                parts.append(_field(content, "text") or "")
    if parts:
        return "".join(parts).strip()
    return (_field(response, "output_text") or "").strip()


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = _field(response, "usage")
    return {
        "input_tokens": _field(usage, "input_tokens") if usage else None,
        "output_tokens": _field(usage, "output_tokens") if usage else None,
    }
