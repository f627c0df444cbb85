from __future__ import annotations

try:
    import openai as _openai
except ImportError:
    _openai = None  # type: ignore[assignment]

from gitscope_core.errors import NetworkError
from gitscope_core.providers.base import BaseNarrator


class OpenAINarrator(BaseNarrator):
    NAME = "openai"
    MODEL = "gpt-4o-mini"

    def __init__(self, api_key: str, model: str | None = None, base_url: str | None = None):
        if _openai is None:
            raise ImportError("The 'openai' package is required for this provider. Install it with: pip install openai")
        self._model = model
        # max_retries=0: the SDK retries 429/5xx by default, narration must not.
        self.client = _openai.OpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )
        except _openai.APIStatusError as e:
            raise self._upstream_error(e.status_code, e.response.text, e.response.headers) from e
        except _openai.APIConnectionError as e:
            raise NetworkError(f"Network error: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
