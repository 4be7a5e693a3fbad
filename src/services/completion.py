"""Language-model recommendations."""

import logging

from openai import OpenAI, OpenAIError

from config import settings
from errors import ExternalServiceError

logger = logging.getLogger(__name__)

# Substituted whenever the completion service fails
CANNED_RECOMMENDATIONS = [
    "Optimize page titles for target keywords",
    "Add meta descriptions to improve CTR",
    "Improve page loading speed",
    "Add structured data markup",
]

EXCERPT_CHARS = 1000
MAX_RECOMMENDATIONS = 5


class CompletionClient:
    """Asks a chat-completion model for SEO recommendations on a page excerpt."""

    def __init__(self, api_key: str | None = None, client: OpenAI | None = None):
        self.api_key = api_key or settings.openai_api_key
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise ExternalServiceError("completion", "OPENAI_API_KEY is not configured")
            self._client = OpenAI(
                api_key=self.api_key,
                timeout=settings.completion_timeout,
                max_retries=0,
            )
        return self._client

    def recommend(self, text: str) -> list[str]:
        """
        Return up to five recommendation lines for a page excerpt.

        Raises:
            ExternalServiceError: when the API call fails or returns nothing
        """
        excerpt = (text or "")[:EXCERPT_CHARS]
        client = self._get_client()

        try:
            response = client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {
                        "role": "user",
                        "content": f"Analyze this website for SEO improvements: {excerpt}",
                    }
                ],
                max_tokens=300,
            )
        except OpenAIError as e:
            raise ExternalServiceError("completion", str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        lines = [line.strip() for line in (content or "").split("\n") if line.strip()]
        if not lines:
            raise ExternalServiceError("completion", "Empty completion")

        return lines[:MAX_RECOMMENDATIONS]
