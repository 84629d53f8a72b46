"""
AI Client

Any OpenAI-compatible chat-completions endpoint (DeepSeek by default), called
through the openai library.

- complete(): single prompt -> text
- chat(): prior conversation turns + new message -> text
An empty or filtered completion raises UpstreamEmpty. SDK failures surface
as UpstreamError; there is no retry.
"""
import logging
from typing import List, Optional
from openai import OpenAI, OpenAIError

from careercraft.core.config import get_settings
from careercraft.core.exceptions import UpstreamEmpty, UpstreamError
from careercraft.schemas.schemas import ChatTurn

logger = logging.getLogger(__name__)


class AIClient:
    """
    Wrapper around the OpenAI SDK client.
    """

    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None):
        settings = get_settings()
        # without a key the client stays unset and every request fails
        if client is None and settings.ai_api_key:
            client = OpenAI(api_key=settings.ai_api_key, base_url=settings.ai_base_url)
        self.client = client
        self.model = model or settings.ai_model

    def _call_api(self, messages: List[dict], temperature: float) -> str:
        """
        Internal method to call the chat-completions API.
        Returns the raw text of the first choice.
        """
        if self.client is None:
            raise UpstreamError("AI service is not configured (AI_API_KEY is missing).")
        logger.info("AI request: model=%s turns=%d temperature=%s", self.model, len(messages), temperature)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
            )
        except OpenAIError as e:
            logger.error("AI request failed: %s", e)
            raise UpstreamError(f"AI service request failed: {e}")

        choice = response.choices[0] if response.choices else None
        finish_reason = getattr(choice, "finish_reason", None) if choice else "no choices"
        text = choice.message.content if choice and choice.message else None

        if finish_reason == "content_filter" or not text or not text.strip():
            logger.warning("AI returned no content (finish reason: %s)", finish_reason)
            raise UpstreamEmpty(
                f"AI did not return any content. The response was empty or blocked. Reason: {finish_reason}"
            )
        return text

    def complete(self, prompt: str, temperature: float = 0.7) -> str:
        return self._call_api([{"role": "user", "content": prompt}], temperature)

    def chat(self, history: List[ChatTurn], message: str, temperature: float = 0.7) -> str:
        """History roles "model" and "assistant" both map to the assistant side."""
        messages = [
            {"role": "user" if turn.role == "user" else "assistant", "content": turn.text}
            for turn in history
        ]
        messages.append({"role": "user", "content": message})
        return self._call_api(messages, temperature)

    def test_connection(self) -> bool:
        """Test if the AI endpoint is reachable"""
        try:
            return "OK" in self.complete("Reply with exactly: OK", temperature=0).upper()
        except UpstreamError as e:
            logger.warning("AI connection failed: %s", e.message)
            return False


# Singleton instance
_ai_client: AIClient = None


def get_ai_client() -> AIClient:
    """Get or create the AI client (singleton pattern). Also a FastAPI dependency."""
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
