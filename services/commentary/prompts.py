"""Prompt helpers for frame-to-frame commentary."""

from __future__ import annotations

import json
from typing import Sequence

from models.commentary_models import UNSPECIFIED_FEATURES, CommentaryMeta

DEFAULT_HISTORY_LIMIT = 6
TOPIC_EXAMPLES = "Sports/News/Game/Meeting/Nature/Other"


def commentary_system_prompt(language: str = "Japanese") -> str:
	"""Return the broadcaster persona prompt."""
	return (
		"You are a calm live-broadcast commentator. "
		f"You always write your commentary in {language}, in a natural spoken register."
	)


def _output_format(meta: CommentaryMeta) -> str:
	fields = [
		f'  "commentary": "Exactly one sentence, at most {meta.max_chars} characters, calm tone. '
		'Describe only what changed. Read legible on-screen text aloud. Empty string when nothing changed."',
		f'  "topic": "Short content category, e.g. {TOPIC_EXAMPLES}"',
		'  "confidence": 0.0-1.0',
	]
	if meta.enable_advantage:
		fields.append(
			'  "advantage": {\n'
			'    "red": 0.0-1.0,\n'
			'    "blue": 0.0-1.0,\n'
			'    "reason": "Short reason"\n'
			"  }"
		)
	return "{\n" + ",\n".join(fields) + "\n}"


def _advantage_rules(meta: CommentaryMeta) -> str:
	return (
		"Advantage bar (fixed RED/BLUE labels):\n"
		"- Treat the two competitors with the fixed labels RED and BLUE.\n"
		f"- RED features: {meta.red_features or UNSPECIFIED_FEATURES}\n"
		f"- BLUE features: {meta.blue_features or UNSPECIFIED_FEATURES}\n"
		"- Never swap RED and BLUE. The labels follow the described features, not left/right position.\n"
		"- If you cannot tell the two apart, omit the advantage field entirely (commentary alone is fine).\n"
		"- When you do include advantage, red + blue must be approximately 1.0."
	)


def build_commentary_prompt(
	meta: CommentaryMeta,
	recent_texts: Sequence[str],
	history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> str:
	"""Render the instruction block for one previous/current frame comparison.

	Args:
		meta: Typed request metadata.
		recent_texts: Previously accepted commentary for the session, oldest first.
		history_limit: How many of the newest texts to quote back to the model.

	Returns:
		The prompt text. Identical inputs always render identical prompts.
	"""
	recent = list(recent_texts)[-history_limit:] if history_limit else []
	previous = " / ".join(recent) if recent else "(none)"
	sections = [
		"You receive two images, the previous frame followed by the current frame, plus auxiliary metadata.\n"
		"Compare the two frames and comment on the change between them.\n"
		"If nothing meaningful changed, do not write filler such as \"nothing has changed\" or "
		"\"no movement\"; return an empty string as commentary instead.",
		"MOST IMPORTANT: respond with a single JSON object only. "
		"No text before or after it and no code fences.",
		"Output format:\n" + _output_format(meta),
		"Rules:\n"
		"- One sentence only (no line breaks)\n"
		"- No hype and no strings of exclamation marks\n"
		"- Do not name people, teams or text that are not clearly legible\n"
		"- Lower confidence when unsure\n"
		"- Do not repeat the same phrasing as recent commentary\n"
		"- If the screen shows no meaningful change, set commentary to the empty string \"\"",
	]
	if meta.enable_advantage:
		sections.append(_advantage_rules(meta))
	sections.append("Recent commentary (do not repeat these phrasings):\n" + previous)
	sections.append("Auxiliary metadata:\n" + json.dumps(meta.raw, ensure_ascii=False, indent=2, default=str))
	sections.append("Respond with JSON only.")
	return "\n\n".join(sections)
