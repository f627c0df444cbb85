from __future__ import annotations

from gitscope_core.errors import NetworkError
from gitscope_core.providers.base import BaseNarrator


class AnthropicNarrator(BaseNarrator):
    NAME = "anthropic"
    MODEL = "claude-3-5-haiku-latest"

    def __init__(self, api_key: str, model: str | None = None):
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'gitscope[anthropic]'"
            )
        self._model = model
        self.client = Anthropic(api_key=api_key, max_retries=0)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        # anthropic is optional; __init__ has already checked it is installed.
        import anthropic
        from anthropic.types import TextBlock

        try:
            response = self.client.messages.create(
                model=self.model,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )
        except anthropic.APIStatusError as e:
            raise self._upstream_error(e.status_code, e.response.text, e.response.headers) from e
        except anthropic.APIConnectionError as e:
            raise NetworkError(f"Network error: {e}") from e

        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()
