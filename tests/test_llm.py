"""Tests for language-model suggestions."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from booklinks.constants import LLM_TEMPERATURE
from booklinks.models.book import ReferenceSource
from booklinks.services.discovery.llm import ReferenceSuggester, build_prompt, parse_suggestions


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(create: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = create
    return client


class TestParseSuggestions:
    def test_plain_array(self):
        candidates = parse_suggestions(
            '[{"title": "The Odyssey", "author": "Homer", "context": "Structure"}]'
        )

        assert len(candidates) == 1
        assert candidates[0].title == "The Odyssey"
        assert candidates[0].source == ReferenceSource.AI
        assert candidates[0].verified is False
        assert candidates[0].context == "Structure"

    def test_fenced_reply(self):
        reply = '```json\n[{"title": "Hamlet", "author": "Shakespeare"}]\n```'
        assert [c.title for c in parse_suggestions(reply)] == ["Hamlet"]

    def test_bad_entries_skipped(self):
        reply = '[{"title": ""}, "junk", {"author": "Nobody"}, {"title": "Hamlet"}]'
        [candidate] = parse_suggestions(reply)

        assert candidate.title == "Hamlet"
        assert candidate.author == "Unknown"
        assert candidate.context is None

    def test_non_array_raises(self):
        with pytest.raises(ValueError):
            parse_suggestions('{"title": "Hamlet"}')

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_suggestions("Sure! Here are some books:")

    def test_empty_reply(self):
        assert parse_suggestions(None) == []


class TestBuildPrompt:
    def test_includes_author(self):
        assert '"Ulysses by James Joyce"' in build_prompt("Ulysses", "James Joyce")

    def test_title_only(self):
        assert '"Ulysses"' in build_prompt("Ulysses")


class TestReferenceSuggester:
    @pytest.mark.asyncio
    async def test_disabled_without_key(self):
        suggester = ReferenceSuggester()
        assert suggester.enabled is False
        assert await suggester.suggest("Ulysses") == []

    @pytest.mark.asyncio
    async def test_suggest(self):
        create = AsyncMock(return_value=_completion('[{"title": "Hamlet", "author": "Shakespeare"}]'))
        suggester = ReferenceSuggester(client=_client(create), model="test-model")

        candidates = await suggester.suggest("Ulysses", "James Joyce")

        assert [c.title for c in candidates] == ["Hamlet"]
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == LLM_TEMPERATURE
        assert "Ulysses by James Joyce" in kwargs["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_unparseable_reply_is_empty(self):
        create = AsyncMock(return_value=_completion("not json"))
        suggester = ReferenceSuggester(client=_client(create))

        assert await suggester.suggest("Ulysses") == []

    @pytest.mark.asyncio
    async def test_api_error_is_empty(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        create = AsyncMock(side_effect=openai.APIConnectionError(request=request))
        suggester = ReferenceSuggester(client=_client(create))

        assert await suggester.suggest("Ulysses") == []
