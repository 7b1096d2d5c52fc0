"""Language-model reference suggestions (OpenAI chat completions)."""

import json
import re
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from booklinks.config import get_settings
from booklinks.constants import API_TIMEOUT_LLM, LLM_TEMPERATURE, UNKNOWN_AUTHOR
from booklinks.models.book import ReferenceSource
from booklinks.services.discovery.candidates import Candidate
from booklinks.utils.logging import get_logger
from booklinks.utils.rate_limiter import rate_limiter

logger = get_logger(__name__)

PROMPT_TEMPLATE = """List 10-15 books that are frequently referenced, cited, or mentioned in "{book}".
Format as JSON array with properties: title, author, context (brief description of how it's referenced).
Only include books that are actually referenced in the text, not just similar topics.
Return only valid JSON array, no markdown or extra text."""

_FENCE_RE = re.compile(r"```(?:json)?\n?")


def build_prompt(title: str, author: str | None = None) -> str:
    book = f"{title} by {author}" if author else title
    return PROMPT_TEMPLATE.format(book=book)


def parse_suggestions(content: str | None) -> list[Candidate]:
    """Parse the model's reply into AI candidates.

    Markdown code fences are stripped first. Raises ValueError when the
    reply is not a JSON array; malformed entries inside it are skipped.
    """
    cleaned = _FENCE_RE.sub("", content or "[]").strip()
    data: Any = json.loads(cleaned)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    candidates = []
    for item in data:
        if not isinstance(item, dict):
            continue
        title = str(item.get("title") or "").strip()
        if not title:
            continue
        context = item.get("context")
        candidates.append(
            Candidate(
                title=title,
                author=str(item.get("author") or "").strip() or UNKNOWN_AUTHOR,
                source=ReferenceSource.AI,
                context=str(context) if context else None,
            )
        )
    return candidates


class ReferenceSuggester:
    """Asks a chat model which books a given book references."""

    def __init__(self, client: AsyncOpenAI | None = None, model: str | None = None) -> None:
        settings = get_settings()
        self.model = model or settings.openai_model
        self._api_key = settings.openai_api_key
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=API_TIMEOUT_LLM)
        return self._client

    async def suggest(self, title: str, author: str | None = None) -> list[Candidate]:
        """Return suggested candidates; any failure yields an empty list."""
        if not self.enabled:
            logger.info("OPENAI_API_KEY not set, skipping AI suggestions")
            return []

        await rate_limiter.acquire("openai")
        try:
            completion = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_prompt(title, author)}],
                temperature=LLM_TEMPERATURE,
            )
            content = completion.choices[0].message.content if completion.choices else None
            return parse_suggestions(content)
        except OpenAIError as e:
            logger.error(f"AI suggestion request failed for {title!r}: {e}")
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Error parsing AI response for {title!r}: {e}")
        return []
