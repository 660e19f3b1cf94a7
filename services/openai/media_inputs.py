"""Utilities to build the two-frame input payload for the Responses API."""

from typing import Any, Dict, List


def to_image_data_url(image_b64: str, mime_type: str = "image/jpeg") -> str:
    """Wrap a bare base64 payload in a data URL suitable for vision input."""
    if not image_b64:
        raise ValueError("Image payload must be a non-empty base64 string.")
    return f"data:{mime_type};base64,{image_b64}"


def build_frame_content(prev_b64: str, cur_b64: str) -> List[Dict[str, Any]]:
    """Return labeled previous/current frame parts, in that order."""
    return [
        {"type": "input_text", "text": "Previous frame:"},
        {"type": "input_image", "image_url": to_image_data_url(prev_b64)},
        {"type": "input_text", "text": "Current frame:"},
        {"type": "input_image", "image_url": to_image_data_url(cur_b64)},
    ]


def build_inputs(system_prompt: str, user_prompt: str, *, prev_b64: str, cur_b64: str) -> List[Dict[str, Any]]:
    """Build the Responses API input array: system, prompt, then both frames."""
    return [
        {
            "type": "message",
            "role": "system",
            "content": [{"type": "input_text", "text": system_prompt}],
        },
        {
            "type": "message",
            "role": "user",
            "content": [{"type": "input_text", "text": user_prompt}, *build_frame_content(prev_b64, cur_b64)],
        },
    ]
