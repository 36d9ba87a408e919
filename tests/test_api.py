from contextlib import asynccontextmanager

import httpx
import pytest
import respx

from api.index import app, get_aggregator, get_country_service
from countryscope.config import Settings
from countryscope.services import CountryAggregator, CountryService

COUNTRIES = "https://restcountries.com/v3.1"
SEARCH_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
LATEST_URL = "https://newsdata.io/api/1/latest"

FRANCE = {
    "name": {"common": "France", "official": "French Republic"},
    "capital": ["Paris"],
    "continents": ["Europe"],
    "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
    "languages": {"fra": "French"},
    "flag": "🇫🇷",
    "population": 67391582,
}


@asynccontextmanager
async def api_client(settings: Settings):
    async with httpx.AsyncClient() as upstream:
        app.dependency_overrides[get_country_service] = lambda: CountryService(
            settings=settings, client=upstream
        )
        app.dependency_overrides[get_aggregator] = lambda: CountryAggregator(
            settings=settings, client=upstream
        )
        transport = httpx.ASGITransport(app=app)
        try:
            async with httpx.AsyncClient(
                transport=transport, base_url="http://testserver"
            ) as client:
                yield client
        finally:
            app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health() -> None:
    async with api_client(Settings()) as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_search_endpoint_returns_camel_case_summaries() -> None:
    payload = [
        {
            "cca2": "FR",
            "name": {"common": "France"},
            "capital": ["Paris"],
            "area": 551695,
        },
    ]
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/name/france").respond(200, json=payload)
            response = await client.get("/countries/search", params={"q": "France"})

    assert response.status_code == 200
    body = response.json()
    assert body[0]["code"] == "fr"
    assert body[0]["displayName"].lower().startswith("france")
    assert body[0]["currencyCodes"] == []
    assert body[0]["areaKm2"] == 551695


@pytest.mark.asyncio
async def test_search_endpoint_short_query_is_empty() -> None:
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=False):
            missing = await client.get("/countries/search")
            short = await client.get("/countries/search", params={"q": "f"})

    assert missing.status_code == 200
    assert missing.json() == []
    assert short.json() == []


@pytest.mark.asyncio
async def test_search_endpoint_upstream_failure_is_500() -> None:
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/name/france").respond(502)
            response = await client.get("/countries/search", params={"q": "france"})

    assert response.status_code == 500
    assert response.json()["error"]


@pytest.mark.asyncio
async def test_country_endpoint_returns_detail() -> None:
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/alpha/FR").respond(200, json=FRANCE)
            mock.get(SEARCH_URL).respond(
                200, json={"results": [{"latitude": 48.85, "longitude": 2.35}]}
            )
            mock.get(FORECAST_URL).respond(
                200,
                json={
                    "hourly": {
                        "time": ["2024-05-20T00:00", "2024-05-20T01:00"],
                        "temperature_2m": [10.04, 10.06],
                        "rain": [0, 0],
                        "precipitation": [0, 0],
                    }
                },
            )
            response = await client.get("/country/FR")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == {"common": "France", "official": "French Republic"}
    assert body["currencies"] == {"EUR": {"name": "Euro", "symbol": "€"}}
    assert body["weather"]["latestTemperatureC"] == 10.06
    assert body["weather"]["history"] == {
        "dates": ["2024-05-20"],
        "dailyAverageTemperatures": [10.1],
    }


@pytest.mark.asyncio
async def test_country_endpoint_unknown_code_is_404() -> None:
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/alpha/XX").respond(404, json={"status": 404})
            response = await client.get("/country/xx")

    assert response.status_code == 404
    assert response.json()["error"] == "Country not found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    ["/country/", "/country", "/country/%20", "/country/%20/news", "/country//news"],
)
async def test_country_endpoint_without_id_is_400(path) -> None:
    async with api_client(Settings()) as client:
        response = await client.get(path)

    assert response.status_code == 400
    assert response.json() == {"error": "Country ID is required"}


@pytest.mark.asyncio
async def test_country_endpoint_dependency_failure_is_500() -> None:
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/alpha/FR").respond(200, json=FRANCE)
            mock.get(SEARCH_URL).respond(200, json={"results": []})
            response = await client.get("/country/fr")

    assert response.status_code == 500
    assert response.json()["stage"] == "capital-coordinates"


@pytest.mark.asyncio
async def test_news_endpoint_paginates_with_cursor() -> None:
    first_page = {
        "results": [{"article_id": "1", "title": "One", "link": "https://n.example/1"}],
        "nextPage": "cursor-2",
        "totalResults": 2,
    }
    second_page = {
        "results": [{"article_id": "2", "title": "Two", "link": "https://n.example/2"}],
        "nextPage": None,
        "totalResults": 2,
    }

    def provider(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("page") == "cursor-2":
            return httpx.Response(200, json=second_page)
        return httpx.Response(200, json=first_page)

    async with api_client(Settings(news_api_key="secret-key")) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/alpha/FR").respond(200, json=FRANCE)
            mock.get(LATEST_URL).mock(side_effect=provider)
            first = (await client.get("/country/fr/news")).json()
            second = (
                await client.get("/country/fr/news", params={"page": first["nextCursor"]})
            ).json()

    assert first["nextCursor"] == "cursor-2"
    assert [a["id"] for a in first["articles"]] == ["1"]
    assert [a["id"] for a in second["articles"]] == ["2"]
    assert second["nextCursor"] is None
    assert second["totalResults"] == 2


@pytest.mark.asyncio
async def test_news_endpoint_provider_failure_is_500() -> None:
    async with api_client(Settings(news_api_key="secret-key")) as client:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(f"{COUNTRIES}/alpha/FR").respond(200, json=FRANCE)
            mock.get(LATEST_URL).respond(500)
            response = await client.get("/country/fr/news")

    assert response.status_code == 500
    assert response.json()["provider"] == "newsdata"


@pytest.mark.asyncio
async def test_country_endpoint_provider_outage_is_500() -> None:
    async with api_client(Settings()) as client:
        with respx.mock(assert_all_called=False) as mock:
            mock.get(f"{COUNTRIES}/alpha/FR").respond(503)
            geocode = mock.get(SEARCH_URL)
            response = await client.get("/country/fr")

    assert response.status_code == 500
    assert response.json() == {
        "error": "Upstream provider request failed",
        "provider": "restcountries",
    }
    assert not geocode.called


@pytest.mark.asyncio
async def test_news_endpoint_unknown_code_is_404_without_news_call() -> None:
    async with api_client(Settings(news_api_key="secret-key")) as client:
        with respx.mock(assert_all_called=False) as mock:
            mock.get(f"{COUNTRIES}/alpha/XX").respond(404, json={"status": 404})
            news = mock.get(LATEST_URL)
            response = await client.get("/country/xx/news")

    assert response.status_code == 404
    assert response.json()["error"] == "Country not found"
    assert not news.called
