import httpx

from opr_builder.models.domain import Coordinate
from opr_builder.services.geocoding.client import GeocodingClient, check_health


def _feature(name: str, lng: float, lat: float) -> dict:
    return {"place_name": f"{name}, Iloilo City, Philippines", "text": name, "center": [lng, lat]}


def _client(handler) -> GeocodingClient:
    return GeocodingClient(
        base_url="https://geocode.test/places",
        timeout=1.0,
        limit=5,
        transport=httpx.MockTransport(handler),
    )


def test_search_sends_token_limit_and_proximity():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"features": [_feature("Jaro Plaza", 122.5571, 10.7269)]})

    client = _client(handler)
    results = client.search("pk.test", "Jaro Plaza", Coordinate(latitude=10.7202, longitude=122.5621))

    url = seen["url"]
    assert str(url).startswith("https://geocode.test/places/Jaro%20Plaza.json?")
    assert url.params["access_token"] == "pk.test"
    assert url.params["limit"] == "5"
    assert url.params["proximity"] == "122.5621,10.7202"

    assert len(results) == 1
    result = results[0]
    assert result.display_name == "Jaro Plaza, Iloilo City, Philippines"
    assert result.short_label == "Jaro Plaza"
    assert (result.latitude, result.longitude) == (10.7269, 122.5571)


def test_search_caps_results_and_skips_malformed_features():
    features = [_feature(f"Stop {i}", 122.5 + i / 100, 10.7) for i in range(7)]
    features.insert(1, {"place_name": "Broken", "text": "Broken"})

    client = _client(lambda request: httpx.Response(200, json={"features": features}))
    results = client.search("pk.test", "stop")

    assert [result.short_label for result in results] == [f"Stop {i}" for i in range(5)]


def test_search_without_proximity_omits_param():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"features": []})

    assert _client(handler).search("pk.test", "Molo") == []
    assert "proximity" not in seen["params"]


def test_search_returns_empty_on_http_error():
    client = _client(lambda request: httpx.Response(401, json={"message": "Not Authorized - Invalid Token"}))

    assert client.search("pk.bad", "Molo Church") == []


def test_search_returns_empty_on_invalid_payload():
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    assert client.search("pk.test", "Molo Church") == []


def test_search_returns_empty_on_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert _client(handler).search("pk.test", "Molo Church") == []


def test_blank_key_or_query_makes_no_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"features": []})

    client = _client(handler)

    assert client.search("", "Molo Church") == []
    assert client.search("pk.test", "   ") == []
    assert calls == []


def test_check_health():
    assert check_health("pk.test") is True
    assert check_health("  ") is False
    assert check_health(None) is False
