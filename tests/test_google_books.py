"""Tests for the Google Books client."""

import httpx
import pytest

from booklinks.services.metadata.google_books import (
    GoogleBooksService,
    clean_snippet,
    parse_volume,
)


def _item(title: str, authors=None, thumbnail=None, snippet=None, volume_id="v1") -> dict:
    info = {"title": title}
    if authors is not None:
        info["authors"] = authors
    if thumbnail:
        info["imageLinks"] = {"thumbnail": thumbnail}
    item = {"id": volume_id, "volumeInfo": info}
    if snippet:
        item["searchInfo"] = {"textSnippet": snippet}
    return item


def _service(handler) -> tuple[GoogleBooksService, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return GoogleBooksService(client=client), seen


class TestParsing:
    def test_parse_volume(self):
        volume = parse_volume(
            _item(
                "Dune",
                authors=["Frank Herbert", "Someone"],
                thumbnail="http://books.google.com/t.jpg",
                snippet="<b>Dune</b> is &quot;great&quot;",
            )
        )

        assert volume["author"] == "Frank Herbert"
        assert volume["cover_url"] == "https://books.google.com/t.jpg"
        assert volume["snippet"] == 'Dune is "great"'
        assert volume["google_id"] == "v1"

    def test_parse_volume_defaults(self):
        volume = parse_volume(_item("Dune"))
        assert volume["author"] == "Unknown"
        assert volume["cover_url"] is None

    def test_volume_without_title_is_dropped(self):
        assert parse_volume({"id": "x", "volumeInfo": {}}) is None

    def test_clean_snippet_empty(self):
        assert clean_snippet(None) == ""


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_books(self):
        service, seen = _service(
            lambda request: httpx.Response(
                200, json={"items": [_item("Dune"), {"volumeInfo": {}}]}
            )
        )

        results = await service.search_books("dune", limit=3)

        assert [r["title"] for r in results] == ["Dune"]
        assert seen[0].url.params["q"] == "dune"
        assert seen[0].url.params["maxResults"] == "3"

    @pytest.mark.asyncio
    async def test_search_books_failure_is_empty(self):
        service, _ = _service(lambda request: httpx.Response(404))
        assert await service.search_books("dune") == []

    @pytest.mark.asyncio
    async def test_blank_query_makes_no_request(self):
        service, seen = _service(lambda request: httpx.Response(200, json={}))
        assert await service.search_books("   ") == []
        assert seen == []

    @pytest.mark.asyncio
    async def test_search_mentions_quotes_title_and_author(self):
        service, seen = _service(
            lambda request: httpx.Response(200, json={"items": [_item("Reading Dune")]})
        )

        results = await service.search_mentions("Dune", "Frank Herbert")

        assert results[0]["title"] == "Reading Dune"
        assert seen[0].url.params["q"] == '"Dune" "Frank Herbert"'
        assert seen[0].url.params["maxResults"] == "20"

    @pytest.mark.asyncio
    async def test_search_mentions_raises(self):
        service, _ = _service(lambda request: httpx.Response(403))
        with pytest.raises(httpx.HTTPStatusError):
            await service.search_mentions("Dune")


class TestMetadata:
    @pytest.mark.asyncio
    async def test_find_metadata_from_volume(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/volumes/abc")
            return httpx.Response(
                200,
                json={
                    "volumeInfo": {
                        "description": "Spice",
                        "imageLinks": {"thumbnail": "http://x/c.jpg"},
                    }
                },
            )

        service, seen = _service(handler)

        assert await service.find_metadata("Dune", "Herbert", "abc") == ("https://x/c.jpg", "Spice")
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_find_metadata_falls_back_to_search(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/volumes/abc"):
                return httpx.Response(404)
            return httpx.Response(
                200,
                json={"items": [{"volumeInfo": {"imageLinks": {"thumbnail": "https://x/s.jpg"}}}]},
            )

        service, seen = _service(handler)

        assert await service.find_metadata("Dune", "Herbert", "abc") == ("https://x/s.jpg", None)
        assert seen[1].url.params["maxResults"] == "1"

    @pytest.mark.asyncio
    async def test_find_cover_prefers_matching_title(self):
        items = [
            _item("Guide to Everything", thumbnail="https://x/guide.jpg", volume_id="a"),
            _item("Dune (Deluxe Edition)", thumbnail="https://x/dune.jpg", volume_id="b"),
        ]
        service, _ = _service(lambda request: httpx.Response(200, json={"items": items}))

        assert await service.find_cover("Dune", "Frank Herbert") == "https://x/dune.jpg"

    @pytest.mark.asyncio
    async def test_find_cover_falls_back_to_first_thumbnail(self):
        items = [
            _item("No Cover"),
            _item("Something Else", thumbnail="https://x/else.jpg"),
        ]
        service, _ = _service(lambda request: httpx.Response(200, json={"items": items}))

        assert await service.find_cover("Dune", "Frank Herbert") == "https://x/else.jpg"
