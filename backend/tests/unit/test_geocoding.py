import asyncio
from typing import Optional
from unittest.mock import AsyncMock

import httpx
from httpx import MockTransport, Response
import pytest

from carecompare.core.config import Settings
from carecompare.core.constants import DEFAULT_FALLBACK_POSTAL_CODES
from carecompare.monitoring.prometheus_metrics import REGISTRY
from carecompare.services.geocoding.base import (
    Coordinates,
    GeocodedAddress,
    GeocodingProvider,
)
from carecompare.services.geocoding.factory import create_geocoding_provider
from carecompare.services.geocoding.geocoder import Geocoder, is_postal_code
from carecompare.services.geocoding.google_provider import GoogleMapsProvider
from carecompare.services.geocoding.mapbox_provider import MapboxProvider
from carecompare.services.geocoding.mock_provider import MockGeocodingProvider


class SlowProvider(GeocodingProvider):
    name = "slow"

    async def geocode(self, address: str) -> Optional[GeocodedAddress]:
        await asyncio.sleep(5)
        return None


def _google_payload(lat: float, lng: float) -> dict:
    return {
        "status": "OK",
        "results": [
            {
                "formatted_address": "Beverly Hills, CA 90210, USA",
                "place_id": "abc",
                "geometry": {"location": {"lat": lat, "lng": lng}},
                "address_components": [
                    {"long_name": "Beverly Hills", "short_name": "Beverly Hills", "types": ["locality"]},
                    {"long_name": "California", "short_name": "CA", "types": ["administrative_area_level_1"]},
                    {"long_name": "90210", "short_name": "90210", "types": ["postal_code"]},
                ],
            }
        ],
    }


@pytest.mark.parametrize(
    "text,expected",
    [
        ("90210", True),
        (" 90210 ", True),
        ("90210-1234", True),
        ("9021", False),
        ("902101", False),
        ("Beverly Hills, CA", False),
    ],
)
def test_is_postal_code(text, expected):
    assert is_postal_code(text) is expected


class TestGeocoder:
    @pytest.mark.asyncio
    async def test_postal_code_gets_country_hint(self):
        provider = MockGeocodingProvider(default=(1.0, 2.0))
        geocoder = Geocoder(provider)

        assert await geocoder.resolve("90210") == Coordinates(1.0, 2.0)
        assert provider.calls == ["90210, USA"]

    @pytest.mark.asyncio
    async def test_free_text_is_sent_unchanged(self):
        provider = MockGeocodingProvider(locations={"Beverly Hills, CA": (34.07, -118.40)})
        geocoder = Geocoder(provider)

        assert await geocoder.resolve("Beverly Hills, CA") == Coordinates(34.07, -118.40)
        assert provider.calls == ["Beverly Hills, CA"]

    @pytest.mark.asyncio
    async def test_blank_input_skips_provider(self):
        provider = MockGeocodingProvider(default=(1.0, 2.0))
        geocoder = Geocoder(provider)

        assert await geocoder.resolve("   ") is None
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_zero_results_falls_back_for_known_zip(self):
        geocoder = Geocoder(MockGeocodingProvider(), DEFAULT_FALLBACK_POSTAL_CODES)

        assert await geocoder.resolve("90210") == Coordinates(34.0736, -118.4004)

    @pytest.mark.asyncio
    async def test_zip_plus_four_uses_five_digit_fallback(self):
        geocoder = Geocoder(MockGeocodingProvider(), DEFAULT_FALLBACK_POSTAL_CODES)

        assert await geocoder.resolve("60601-1234") == Coordinates(41.8842, -87.6212)

    @pytest.mark.asyncio
    async def test_unknown_zip_is_not_found(self):
        geocoder = Geocoder(MockGeocodingProvider(), DEFAULT_FALLBACK_POSTAL_CODES)

        assert await geocoder.resolve("00000") is None

    @pytest.mark.asyncio
    async def test_free_text_never_uses_fallback_table(self):
        geocoder = Geocoder(MockGeocodingProvider(), {"Springfield": (1.0, 1.0)})

        assert await geocoder.resolve("Springfield") is None

    @pytest.mark.asyncio
    async def test_timeout_is_not_fatal(self):
        geocoder = Geocoder(SlowProvider(), DEFAULT_FALLBACK_POSTAL_CODES, timeout_seconds=0.05)

        assert await geocoder.resolve("10001") == Coordinates(40.7501, -73.9996)
        assert await geocoder.resolve("Nowhere") is None

    @pytest.mark.asyncio
    async def test_provider_error_is_not_fatal(self):
        provider = MockGeocodingProvider()
        provider.geocode = AsyncMock(side_effect=httpx.ConnectError("boom"))
        geocoder = Geocoder(provider, DEFAULT_FALLBACK_POSTAL_CODES)

        assert await geocoder.resolve("90210") == Coordinates(34.0736, -118.4004)
        provider.geocode.assert_awaited_once_with("90210, USA")

    @pytest.mark.asyncio
    async def test_missing_credentials_use_fallback_only(self):
        requests = []

        def handler(request):
            requests.append(request)
            return Response(200, json=_google_payload(0.0, 0.0))

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            geocoder = Geocoder(
                GoogleMapsProvider("", client=client), DEFAULT_FALLBACK_POSTAL_CODES
            )
            assert await geocoder.resolve("10001") == Coordinates(40.7501, -73.9996)
            assert await geocoder.resolve("Chicago, IL") is None

        assert requests == []


class FailingProvider(GeocodingProvider):
    name = "failing"

    async def geocode(self, address: str) -> Optional[GeocodedAddress]:
        raise httpx.ConnectError("boom")


OUTCOMES = ("upstream", "fallback", "not_found", "error", "skipped")


def _outcome_counts(provider: str) -> dict:
    counts = {}
    for outcome in OUTCOMES:
        value = REGISTRY.get_sample_value(
            "carecompare_geocode_outcome_total", {"provider": provider, "outcome": outcome}
        )
        counts[outcome] = value or 0.0
    return counts


def _delta(before: dict, after: dict) -> dict:
    return {k: after[k] - before[k] for k in OUTCOMES if after[k] != before[k]}


class TestGeocodeOutcomes:
    @pytest.mark.asyncio
    async def test_failed_call_then_fallback_counts_once(self):
        geocoder = Geocoder(FailingProvider(), DEFAULT_FALLBACK_POSTAL_CODES)
        before = _outcome_counts("failing")

        assert await geocoder.resolve("90210") == Coordinates(34.0736, -118.4004)

        assert _delta(before, _outcome_counts("failing")) == {"fallback": 1.0}

    @pytest.mark.asyncio
    async def test_failed_call_without_fallback_counts_error(self):
        geocoder = Geocoder(FailingProvider(), DEFAULT_FALLBACK_POSTAL_CODES)
        before = _outcome_counts("failing")

        assert await geocoder.resolve("Nowhere") is None

        assert _delta(before, _outcome_counts("failing")) == {"error": 1.0}

    @pytest.mark.asyncio
    async def test_each_resolution_records_one_outcome(self):
        geocoder = Geocoder(
            MockGeocodingProvider(locations={"Austin, TX": (30.27, -97.74)}),
            DEFAULT_FALLBACK_POSTAL_CODES,
        )
        before = _outcome_counts("mock")

        await geocoder.resolve("Austin, TX")
        await geocoder.resolve("10001")
        await geocoder.resolve("00000")

        assert _delta(before, _outcome_counts("mock")) == {
            "upstream": 1.0,
            "fallback": 1.0,
            "not_found": 1.0,
        }

    @pytest.mark.asyncio
    async def test_missing_credentials_count_skipped(self):
        geocoder = Geocoder(GoogleMapsProvider(""), DEFAULT_FALLBACK_POSTAL_CODES)
        before = _outcome_counts("google")

        assert await geocoder.resolve("Chicago, IL") is None

        assert _delta(before, _outcome_counts("google")) == {"skipped": 1.0}


class TestGoogleMapsProvider:
    @pytest.mark.asyncio
    async def test_parses_first_result(self):
        captured = {}

        def handler(request):
            captured["address"] = request.url.params.get("address")
            captured["key"] = request.url.params.get("key")
            return Response(200, json=_google_payload(34.0736, -118.4004))

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            provider = GoogleMapsProvider("test-key", client=client)
            result = await provider.geocode("90210, USA")

        assert captured == {"address": "90210, USA", "key": "test-key"}
        assert result.coordinates == Coordinates(34.0736, -118.4004)
        assert result.city == "Beverly Hills"
        assert result.state == "CA"
        assert result.postal_code == "90210"

    @pytest.mark.asyncio
    async def test_non_ok_status_is_none(self):
        def handler(request):
            return Response(200, json={"status": "ZERO_RESULTS", "results": []})

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            assert await GoogleMapsProvider("k", client=client).geocode("nowhere") is None

    @pytest.mark.asyncio
    async def test_http_error_status_is_none(self):
        def handler(request):
            return Response(503, json={})

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            assert await GoogleMapsProvider("k", client=client).geocode("90210") is None

    @pytest.mark.asyncio
    async def test_non_object_body_is_none(self):
        def handler(request):
            return Response(200, json=["unexpected"])

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            provider = GoogleMapsProvider("k", client=client)
            assert await provider.geocode("Chicago, IL") is None
            assert await Geocoder(provider).resolve("Chicago, IL") is None

    def test_is_configured_reflects_api_key(self):
        assert GoogleMapsProvider("k").is_configured is True
        assert GoogleMapsProvider("").is_configured is False


class TestMapboxProvider:
    @pytest.mark.asyncio
    async def test_center_is_lng_lat(self):
        captured = {}

        def handler(request):
            captured["path"] = request.url.raw_path.split(b"?", 1)[0]
            captured["limit"] = request.url.params.get("limit")
            return Response(
                200,
                json={
                    "features": [
                        {
                            "id": "postcode.1",
                            "center": [-87.6212, 41.8842],
                            "place_name": "Chicago, Illinois 60601, United States",
                            "relevance": 0.9,
                            "context": [{"id": "place.2", "text": "Chicago"}],
                        }
                    ]
                },
            )

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            result = await MapboxProvider("token", client=client).geocode("60601, USA")

        assert captured["path"].endswith(b"/mapbox.places/60601%2C%20USA.json")
        assert captured["limit"] == "1"
        assert result.coordinates == Coordinates(41.8842, -87.6212)
        assert result.city == "Chicago"
        assert result.confidence_score == pytest.approx(0.9)

    @pytest.mark.asyncio
    async def test_no_features_is_none(self):
        def handler(request):
            return Response(200, json={"features": []})

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            assert await MapboxProvider("token", client=client).geocode("nowhere") is None

    @pytest.mark.asyncio
    async def test_non_object_body_is_none(self):
        def handler(request):
            return Response(200, json="unexpected")

        async with httpx.AsyncClient(transport=MockTransport(handler)) as client:
            assert await MapboxProvider("token", client=client).geocode("nowhere") is None


@pytest.mark.parametrize(
    "name,expected",
    [("google", GoogleMapsProvider), ("mapbox", MapboxProvider), ("mock", MockGeocodingProvider)],
)
def test_factory_selects_provider(name, expected):
    provider = create_geocoding_provider(config=Settings(geocoding_provider=name))
    assert isinstance(provider, expected)


def test_factory_override_wins():
    provider = create_geocoding_provider("mock", config=Settings(geocoding_provider="google"))
    assert isinstance(provider, MockGeocodingProvider)
