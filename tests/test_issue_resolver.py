"""Tests for series issue resolution (mocked HTTP)."""

import asyncio

import httpx
import pytest
import respx

from comicvault.config import settings
from comicvault.models.catalog import CatalogIssueRecord, CatalogProvider
from comicvault.models.failure import CatalogFetchFailed, CatalogSeriesNotFound
from comicvault.services import issue_resolver
from comicvault.services.issue_resolver import apply_cover_fallback, resolve_issues

VOLUME_URL = "https://comicvine.gamespot.com/api/volume/4050-1/"
METRON_ISSUES = "https://metron.cloud/api/issue/"


def _issue_url(n: int) -> str:
    return f"https://comicvine.gamespot.com/api/issue/4000-{n}/"


def _volume_payload(count: int, image: dict | None = None) -> dict:
    return {
        "error": "OK",
        "status_code": 1,
        "results": {
            "image": image,
            "issues": [
                {"issue_number": str(n), "name": f"Part {n}", "api_detail_url": _issue_url(n)}
                for n in range(1, count + 1)
            ],
        },
    }


def _issue_payload(cover: str | None) -> dict:
    image = {"medium_url": cover} if cover else None
    return {"error": "OK", "results": {"image": image}}


class TestCoverFallback:
    def test_fills_missing_covers_only(self) -> None:
        records = [
            CatalogIssueRecord("1", None, "https://own.jpg", None),
            CatalogIssueRecord("2", None, None, None),
        ]

        result = apply_cover_fallback(records, "https://series.jpg")

        assert [r.cover_url for r in result] == ["https://own.jpg", "https://series.jpg"]


class TestComicVineDeep:
    @respx.mock
    async def test_resolves_each_issue_cover(self) -> None:
        respx.get(VOLUME_URL).mock(
            return_value=httpx.Response(
                200, json=_volume_payload(3, {"medium_url": "https://vol.jpg"})
            )
        )
        for n in range(1, 4):
            respx.get(_issue_url(n)).mock(
                return_value=httpx.Response(200, json=_issue_payload(f"https://issue{n}.jpg"))
            )

        records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert [r.number for r in records] == ["1", "2", "3"]
        assert [r.cover_url for r in records] == [
            "https://issue1.jpg",
            "https://issue2.jpg",
            "https://issue3.jpg",
        ]

    @respx.mock
    async def test_issue_without_image_uses_volume_cover(self) -> None:
        respx.get(VOLUME_URL).mock(
            return_value=httpx.Response(
                200, json=_volume_payload(2, {"medium_url": "https://vol.jpg"})
            )
        )
        respx.get(_issue_url(1)).mock(
            return_value=httpx.Response(200, json=_issue_payload("https://issue1.jpg"))
        )
        respx.get(_issue_url(2)).mock(return_value=httpx.Response(200, json=_issue_payload(None)))

        records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert records[1].cover_url == "https://vol.jpg"

    @respx.mock
    async def test_failed_issue_lookup_degrades_to_series_cover(self) -> None:
        """One failing detail request does not fail the whole resolution."""
        respx.get(VOLUME_URL).mock(
            return_value=httpx.Response(
                200, json=_volume_payload(3, {"medium_url": "https://vol.jpg"})
            )
        )
        respx.get(_issue_url(1)).mock(
            return_value=httpx.Response(200, json=_issue_payload("https://issue1.jpg"))
        )
        respx.get(_issue_url(2)).mock(return_value=httpx.Response(500))
        respx.get(_issue_url(3)).mock(side_effect=httpx.ConnectTimeout("timeout"))

        records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert [r.cover_url for r in records] == [
            "https://issue1.jpg",
            "https://vol.jpg",
            "https://vol.jpg",
        ]

    @respx.mock
    async def test_fallback_cover_when_volume_has_no_image(self) -> None:
        respx.get(VOLUME_URL).mock(return_value=httpx.Response(200, json=_volume_payload(1)))
        respx.get(_issue_url(1)).mock(return_value=httpx.Response(200, json=_issue_payload(None)))

        records = await resolve_issues(
            CatalogProvider.COMIC_VINE, VOLUME_URL, fallback_cover="https://search.jpg"
        )

        assert records[0].cover_url == "https://search.jpg"

    @respx.mock
    async def test_no_cover_anywhere_is_none(self) -> None:
        respx.get(VOLUME_URL).mock(return_value=httpx.Response(200, json=_volume_payload(1)))
        respx.get(_issue_url(1)).mock(return_value=httpx.Response(200, json=_issue_payload(None)))

        records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert records[0].cover_url is None

    async def test_order_preserved_when_responses_arrive_out_of_order(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        delays = {_issue_url(1): 0.03, _issue_url(2): 0.0, _issue_url(3): 0.01}
        completed: list[str] = []

        async def fake_get_json(client, url, params=None, auth=None):
            if url == VOLUME_URL:
                return _volume_payload(3)
            await asyncio.sleep(delays[url])
            completed.append(url)
            return _issue_payload(f"{url}cover.jpg")

        monkeypatch.setattr(issue_resolver, "get_json", fake_get_json)

        async with httpx.AsyncClient() as client:
            records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL, client=client)

        assert completed[0] == _issue_url(2)
        assert [r.number for r in records] == ["1", "2", "3"]
        assert [r.cover_url for r in records] == [f"{_issue_url(n)}cover.jpg" for n in (1, 2, 3)]

    @respx.mock
    async def test_requests_issue_fields_only(self) -> None:
        respx.get(VOLUME_URL).mock(return_value=httpx.Response(200, json=_volume_payload(1)))
        issue_route = respx.get(_issue_url(1)).mock(
            return_value=httpx.Response(200, json=_issue_payload(None))
        )

        await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        params = issue_route.calls.last.request.url.params
        assert params["field_list"] == "issue_number,name,image"
        assert params["api_key"] == "test-key"


class TestComicVineShallow:
    async def test_skips_issue_lookups(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "comic_vine_fetch_issue_covers", False)
        with respx.mock(assert_all_called=False) as router:
            router.get(VOLUME_URL).mock(
                return_value=httpx.Response(
                    200, json=_volume_payload(2, {"medium_url": "https://vol.jpg"})
                )
            )
            issue_route = router.get(url__startswith="https://comicvine.gamespot.com/api/issue/")

            records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert not issue_route.called
        assert [r.cover_url for r in records] == ["https://vol.jpg", "https://vol.jpg"]


class TestComicVineFailures:
    @respx.mock
    async def test_http_404_is_series_not_found(self) -> None:
        respx.get(VOLUME_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(CatalogSeriesNotFound):
            await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

    @respx.mock
    async def test_object_not_found_is_series_not_found(self) -> None:
        respx.get(VOLUME_URL).mock(
            return_value=httpx.Response(
                200, json={"error": "Object Not Found", "status_code": 101, "results": []}
            )
        )

        with pytest.raises(CatalogSeriesNotFound):
            await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

    @respx.mock
    async def test_server_error_is_fetch_failed(self) -> None:
        respx.get(VOLUME_URL).mock(return_value=httpx.Response(502))

        with pytest.raises(CatalogFetchFailed):
            await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

    @respx.mock
    async def test_network_error_is_fetch_failed(self) -> None:
        respx.get(VOLUME_URL).mock(side_effect=httpx.ConnectError("down"))

        with pytest.raises(CatalogFetchFailed):
            await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

    @respx.mock
    async def test_provider_error_is_fetch_failed(self) -> None:
        respx.get(VOLUME_URL).mock(
            return_value=httpx.Response(200, json={"error": "Rate limit exceeded"})
        )

        with pytest.raises(CatalogFetchFailed):
            await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

    async def test_missing_ref_is_series_not_found(self) -> None:
        with pytest.raises(CatalogSeriesNotFound):
            await resolve_issues(CatalogProvider.COMIC_VINE, None)


class TestMetron:
    @respx.mock
    async def test_list_covers_with_series_fallback(self) -> None:
        route = respx.get(METRON_ISSUES).mock(
            return_value=httpx.Response(
                200,
                json={
                    "results": [
                        {"id": 1, "number": "1", "issue_name": "One", "image": "/media/1.jpg"},
                        {"id": 2, "number": "2", "issue_name": None, "image": None},
                    ]
                },
            )
        )

        records = await resolve_issues(
            CatalogProvider.METRON, "42", fallback_cover="https://metron.cloud/series.jpg"
        )

        assert route.calls.last.request.url.params["series_id"] == "42"
        assert [r.cover_url for r in records] == [
            "https://metron.cloud/media/1.jpg",
            "https://metron.cloud/series.jpg",
        ]

    @respx.mock
    async def test_404_is_series_not_found(self) -> None:
        respx.get(METRON_ISSUES).mock(return_value=httpx.Response(404))

        with pytest.raises(CatalogSeriesNotFound):
            await resolve_issues(CatalogProvider.METRON, "42")


class TestGuia:
    async def test_has_no_issue_list(self) -> None:
        records = await resolve_issues(
            CatalogProvider.GUIA, "http://www.guiadosquadrinhos.com/titulo/tex/1"
        )

        assert records == []


class TestComicVineForeignUrls:
    async def test_series_ref_outside_comic_vine_is_never_fetched(self) -> None:
        with respx.mock(assert_all_called=False) as router:
            foreign = router.get(url__startswith="https://evil.example/")

            with pytest.raises(CatalogSeriesNotFound):
                await resolve_issues(CatalogProvider.COMIC_VINE, "https://evil.example/steal")

        assert not foreign.called

    async def test_lookalike_host_is_rejected(self) -> None:
        with respx.mock(assert_all_called=False) as router:
            foreign = router.get(url__startswith="https://comicvine.gamespot.com.evil.example/")

            with pytest.raises(CatalogSeriesNotFound):
                await resolve_issues(
                    CatalogProvider.COMIC_VINE,
                    "https://comicvine.gamespot.com.evil.example/api/volume/4050-1/",
                )

        assert not foreign.called

    async def test_issue_url_outside_comic_vine_uses_series_cover(self) -> None:
        payload = {
            "error": "OK",
            "results": {
                "image": {"medium_url": "https://vol.jpg"},
                "issues": [
                    {"issue_number": "1", "api_detail_url": "https://evil.example/issue/1"}
                ],
            },
        }
        with respx.mock(assert_all_called=False) as router:
            router.get(VOLUME_URL).mock(return_value=httpx.Response(200, json=payload))
            foreign = router.get(url__startswith="https://evil.example/")

            records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert not foreign.called
        assert records[0].cover_url == "https://vol.jpg"


class TestComicVineEmptyVolume:
    @respx.mock
    async def test_volume_without_issues_resolves_empty(self) -> None:
        respx.get(VOLUME_URL).mock(
            return_value=httpx.Response(
                200,
                json={"error": "OK", "results": {"image": None, "issues": []}},
            )
        )

        records = await resolve_issues(CatalogProvider.COMIC_VINE, VOLUME_URL)

        assert records == []
