"""Unit tests for OembedFetcher: request building, failure handling and stamping."""
from __future__ import annotations

import asyncio

import pytest

from embedder.app.domain.endpoint import AutodiscoveredEndpoint, OembedEndpoint
from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.domain.models import Format
from embedder.app.domain.oembed_fetcher import OembedFetcher
from embedder.app.domain.request_providers import AccessTokenOptions, AccessTokenRequestProvider
from embedder.app.infrastructure.parsers.factory import create_parsers
from embedder.app.ports.http_client import HttpClientError, HttpClientTimeoutError, RequestTimeout
from tests.conftest import BIKING, PHOTO_JSON, PHOTOS, RICH_JSON, FakeHttpClient, FakeResponse

TIMEOUT = RequestTimeout(connect_seconds=1.0, read_seconds=2.0)
TRACK = "https://biking.michael-simons.eu/tracks/1"
TRACK_API = "https://biking.michael-simons.eu/oembed?format=json&url=https%3A%2F%2Fbiking.michael-simons.eu%2Ftracks%2F1"


def make_fetcher(client: FakeHttpClient, **kwargs) -> OembedFetcher:
    kwargs.setdefault("user_agent", "Python/3 link-embedder/0.1.0")
    return OembedFetcher(client, create_parsers(), TIMEOUT, **kwargs)


def test_fetch_parses_and_stamps_response():
    client = FakeHttpClient({TRACK_API: FakeResponse(200, RICH_JSON)})
    response = asyncio.run(make_fetcher(client).fetch(BIKING, TRACK))
    assert response.type == "rich"
    assert response.source == "biking"
    assert response.original_url == TRACK
    assert client.urls() == [TRACK_API]
    assert client.calls[0]["timeout"] == TIMEOUT


def test_user_agent_carries_application_name():
    client = FakeHttpClient({TRACK_API: FakeResponse(200, RICH_JSON)})
    asyncio.run(make_fetcher(client, user_agent="ua/1", application_name="my-app").fetch(BIKING, TRACK))
    assert client.calls[0]["headers"] == {"User-Agent": "ua/1; my-app"}


def test_user_agent_without_application_name():
    client = FakeHttpClient({TRACK_API: FakeResponse(200, RICH_JSON)})
    asyncio.run(make_fetcher(client, user_agent="ua/1", application_name="").fetch(BIKING, TRACK))
    assert client.calls[0]["headers"] == {"User-Agent": "ua/1"}


@pytest.mark.parametrize(
    "answer",
    [
        FakeResponse(404, b"not found"),
        FakeResponse(301, b""),
        FakeResponse(200, b"<html>not oembed</html>"),
        FakeResponse(200, b'{"title":"missing type"}'),
        HttpClientError("connection refused"),
        HttpClientTimeoutError("timeout"),
    ],
)
def test_remote_failures_yield_none(answer):
    client = FakeHttpClient({TRACK_API: answer})
    assert asyncio.run(make_fetcher(client).fetch(BIKING, TRACK)) is None


def test_xml_endpoint_uses_xml_parser():
    endpoint = OembedEndpoint(name="flickr", endpoint="https://flickr/services/oembed", format=Format.xml)
    api_url = "https://flickr/services/oembed?format=xml&url=https%3A%2F%2Fflickr%2Fp%2F1"
    client = FakeHttpClient({api_url: FakeResponse(200, b"<oembed><type>photo</type><url>u</url></oembed>")})
    response = asyncio.run(make_fetcher(client).fetch(endpoint, "https://flickr/p/1"))
    assert response.type == "photo"
    assert response.source == "flickr"


def test_placeholder_endpoint():
    api_url = "https://photos.example.com/oembed.json?url=https%3A%2F%2Fphotos.example.com%2Fp%2F1"
    client = FakeHttpClient({api_url: FakeResponse(200, PHOTO_JSON)})
    response = asyncio.run(make_fetcher(client).fetch(PHOTOS, "https://photos.example.com/p/1"))
    assert response.width == 200


def test_autodiscovered_endpoint_is_fetched_verbatim():
    endpoint = AutodiscoveredEndpoint("https://p/oembed?url=https%3A%2F%2Fp%2Fpage", Format.json)
    client = FakeHttpClient({endpoint.api_url: FakeResponse(200, PHOTO_JSON)})
    response = asyncio.run(make_fetcher(client).fetch(endpoint, "https://p/page"))
    assert response.source == endpoint.name
    assert client.urls() == [endpoint.api_url]


def test_broken_template_raises_configuration_error():
    endpoint = OembedEndpoint(name="broken", endpoint=":foobar:/test.de")
    client = FakeHttpClient()
    with pytest.raises(OembedConfigurationError):
        asyncio.run(make_fetcher(client).fetch(endpoint, "https://x/1"))
    assert client.calls == []


def test_endpoint_specific_request_provider():
    provider = AccessTokenRequestProvider(AccessTokenOptions(access_token="app|secret"))
    client = FakeHttpClient({f"{TRACK_API}&access_token=app%7Csecret": FakeResponse(200, RICH_JSON)})
    fetcher = make_fetcher(client, request_providers={"biking": provider})
    assert fetcher.request_provider_for(PHOTOS) is not provider
    assert asyncio.run(fetcher.fetch(BIKING, TRACK)) is not None
    assert client.urls() == [f"{TRACK_API}&access_token=app%7Csecret"]
