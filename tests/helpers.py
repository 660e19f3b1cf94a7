"""Test data builders shared across modules."""

import json

FRAME_B64 = "/9j/4AAQSkZJRgABAQAAAQABAAD"


def model_answer(commentary="", topic="Sports", confidence=0.8, **extra) -> str:
    """Render a model answer the way models tend to send it: JSON wrapped in chatter."""
    body = {"commentary": commentary, "topic": topic, "confidence": confidence, **extra}
    return "Sure! " + json.dumps(body, ensure_ascii=False) + " Hope that helps."
