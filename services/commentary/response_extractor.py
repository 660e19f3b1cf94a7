"""Pull a JSON object out of free-form model output."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)


def extract_json_object(raw_text: Optional[str]) -> Optional[Dict[str, Any]]:
	"""Return the object spanning the first `{` to the last `}`, or None.

	Models asked for bare JSON still wrap it in prose or code fences, so only the
	outermost brace span is parsed. A `}` inside a string value after the real
	closing brace is not handled.
	"""
	text = str(raw_text or "")
	start = text.find("{")
	end = text.rfind("}")
	if start == -1 or end == -1 or end <= start:
		return None
	try:
		parsed = json.loads(text[start : end + 1])
	except ValueError:
		LOGGER.warning("Model output is not valid JSON: %.200s", text)
		return None
	return parsed if isinstance(parsed, dict) else None
