"""Two-frame commentary generation using OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from services.commentary.prompts import commentary_system_prompt
from services.openai.media_inputs import build_inputs
from services.openai.response_parser import extract_text, extract_usage
from utils.errors import UpstreamError, UpstreamTimeout
from utils.settings import AppSettings

LOGGER = logging.getLogger(__name__)


class CommentaryModelGateway:
    """Send a rendered prompt plus previous/current frames to the model and return its raw text."""

    def __init__(self, client: AsyncOpenAI, settings: Optional[AppSettings] = None) -> None:
        """Initialize the gateway with an OpenAI async client."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.settings = settings or AppSettings()
        self.system_prompt = commentary_system_prompt(self.settings.commentary_language)

    async def generate(self, prompt: str, prev_b64: str, cur_b64: str) -> str:
        """Return the model's free-form answer for the two frames.

        Raises:
            UpstreamTimeout: The call exceeded the configured timeout.
            UpstreamError: The API returned a non-success status or was unreachable.
        """
        start_time = time.time()
        inputs = build_inputs(self.system_prompt, prompt, prev_b64=prev_b64, cur_b64=cur_b64)
        response = await self._create_response(inputs)
        text = extract_text(response)
        usage = extract_usage(response)
        LOGGER.info(
            "Commentary model answered in %.3fs (input_tokens=%s, output_tokens=%s)",
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return text

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Call the Responses API, translating SDK failures into upstream errors."""
        try:
            return await self.client.responses.create(
                model=self.settings.openai_model,
                input=inputs,
                temperature=self.settings.openai_temperature,
                max_output_tokens=self.settings.openai_max_output_tokens,
                timeout=self.settings.openai_timeout_sec,
            )
        except openai.APITimeoutError as exc:
            LOGGER.error("OpenAI Responses API call timed out after %ss", self.settings.openai_timeout_sec)
            raise UpstreamTimeout(f"Model call timed out after {self.settings.openai_timeout_sec}s") from exc
        except openai.APIStatusError as exc:
            body = _response_body(exc)
            LOGGER.error("OpenAI Responses API error: %s %s", exc.status_code, body)
            raise UpstreamError(f"Model API error: {exc.status_code}", status=exc.status_code, body=body) from exc
        except openai.OpenAIError as exc:
            LOGGER.error("Error during OpenAI Responses API call: %s", exc)
            raise UpstreamError(f"Model API call failed: {exc}") from exc


def _response_body(exc: "openai.APIStatusError") -> str:
    try:
        return exc.response.text
    except Exception:  # pylint: disable=broad-exception-caught
        return str(exc.body or exc)
