"""Base narrator shared by every LLM provider.

The narration algorithm is one call: system prompt + user prompt in, text out.
Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response, raising
    gitscope errors for upstream and transport failures

Sampling settings and upstream error decoding live here so every provider
behaves the same way from the narration service's point of view.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

from gitscope_core.errors import RateLimitedError, UpstreamError

logger = logging.getLogger(__name__)

_TEMPERATURE = 0.3
_MAX_TOKENS = 350
_DEFAULT_ERROR = "Upstream API error"


class BaseNarrator(ABC):
    NAME: str = ""
    MODEL: str = ""
    TEMPERATURE: float = _TEMPERATURE
    MAX_TOKENS: int = _MAX_TOKENS

    def narrate(self, system_prompt: str, user_prompt: str) -> str:
        """Return the model's narration for one request.

        No retry: a failed call surfaces to the caller immediately.
        """
        logger.debug("%s narration request (model=%s)", self.NAME, self.model)
        return self._call_api(system_prompt, user_prompt)

    @property
    def model(self) -> str:
        return getattr(self, "_model", None) or self.MODEL

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        """Make a single API call and return the raw text response."""

    def _upstream_error(self, status: int, body: str, headers=None) -> UpstreamError:
        """Translate a non-success upstream response into a gitscope error."""
        message = extract_error_message(body)
        logger.error("%s API error %d: %s", self.__class__.__name__, status, message)
        if status == 429:
            retry_after = parse_retry_after((headers or {}).get("retry-after"))
            return RateLimitedError(message, retry_after=retry_after, body=body)
        return UpstreamError(status, message, body=body)


def extract_error_message(body: str, default: str = _DEFAULT_ERROR) -> str:
    """Best-effort message from an upstream error body.

    Structured bodies yield ``error.message`` (or ``error`` when it is a plain
    string); anything that is not JSON is returned verbatim.
    """
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return body or default

    error = parsed.get("error") if isinstance(parsed, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    return default


def parse_retry_after(value) -> int | None:
    """Return a Retry-After header as whole seconds, or None if absent or not numeric."""
    if value is None:
        return None
    try:
        seconds = int(float(value))
    except (TypeError, ValueError):
        return None
    return max(seconds, 0)
