"""Unit tests for OembedEndpoint API URL construction and pattern matching."""
from __future__ import annotations

import dataclasses

import pytest

from embedder.app.domain.endpoint import AutodiscoveredEndpoint, OembedEndpoint
from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.domain.models import Format


def test_defaults():
    endpoint = OembedEndpoint(name="name", endpoint="https://e/oembed")
    assert endpoint.format is Format.json
    assert endpoint.max_width is None
    assert endpoint.max_height is None
    assert endpoint.url_schemes == ()
    assert endpoint.request_provider == "default"
    assert endpoint.renderer == "default"
    assert dict(endpoint.request_provider_options) == {}


def test_endpoint_is_immutable():
    endpoint = OembedEndpoint(name="name", endpoint="https://e/oembed", renderer_options={"a": 1})
    with pytest.raises(dataclasses.FrozenInstanceError):
        endpoint.name = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        endpoint.renderer_options["a"] = 2  # type: ignore[index]


def test_api_url_with_format_parameter_and_sizes():
    endpoint = OembedEndpoint(name="e", endpoint="https://e/oembed", format=Format.json, max_width=480, max_height=360)
    assert endpoint.to_api_url("https://x/1") == (
        "https://e/oembed?format=json&url=https%3A%2F%2Fx%2F1&maxwidth=480&maxheight=360"
    )


def test_api_url_with_format_placeholder():
    endpoint = OembedEndpoint(name="e", endpoint="https://e/oembed.%{format}")
    assert endpoint.to_api_url("https://x/1") == "https://e/oembed.json?url=https%3A%2F%2Fx%2F1"


def test_api_url_placeholder_is_case_insensitive():
    endpoint = OembedEndpoint(name="e", endpoint="https://e/oembed.%{FORMAT}", format=Format.xml)
    assert endpoint.to_api_url("https://x/1") == "https://e/oembed.xml?url=https%3A%2F%2Fx%2F1"


def test_api_url_twitter_style_template():
    endpoint = OembedEndpoint(name="twitter", endpoint="https://api.twitter.com/1.1/statuses/oembed.%{format}")
    assert endpoint.to_api_url("https://twitter.com/rotnroll666/status/549898095853838336") == (
        "https://api.twitter.com/1.1/statuses/oembed.json"
        "?url=https%3A%2F%2Ftwitter.com%2Frotnroll666%2Fstatus%2F549898095853838336"
    )


def test_api_url_only_width():
    endpoint = OembedEndpoint(name="e", endpoint="https://e/oembed", max_width=100)
    assert endpoint.to_api_url("https://x/1") == "https://e/oembed?format=json&url=https%3A%2F%2Fx%2F1&maxwidth=100"


def test_api_url_keeps_existing_query():
    endpoint = OembedEndpoint(name="e", endpoint="https://e/oembed?key=abc")
    assert endpoint.to_api_url("https://x/1") == "https://e/oembed?key=abc&format=json&url=https%3A%2F%2Fx%2F1"


@pytest.mark.parametrize("template", [":foobar:/test.de", "endpoint", "ftp://e/oembed", ""])
def test_invalid_template_raises_configuration_error(template):
    endpoint = OembedEndpoint(name="name", endpoint=template, max_width=4711, max_height=23)
    with pytest.raises(OembedConfigurationError):
        endpoint.to_api_url("---")


def test_patterns_are_trimmed_and_full_matched():
    endpoint = OembedEndpoint(
        name="vimeo",
        endpoint="http://vimeo.com/api/oembed.%{format}",
        url_schemes=("  https?://vimeo.com/\\d+  ",),
    )
    assert endpoint.url_schemes == ("https?://vimeo.com/\\d+",)
    assert endpoint.matches("http://vimeo.com/111627831")
    assert not endpoint.matches("http://vimeo.com/111627831/extra")
    assert not endpoint.matches("see http://vimeo.com/111627831")


def test_invalid_pattern_is_configuration_error():
    with pytest.raises(OembedConfigurationError):
        OembedEndpoint(name="broken", endpoint="https://e/oembed", url_schemes=("https://(unclosed",))


def test_autodiscovered_endpoint_has_fixed_api_url_and_format():
    endpoint = AutodiscoveredEndpoint("https://dailyfratze.de/app/oembed.json?url=x", Format.xml)
    assert endpoint.format is Format.xml
    assert endpoint.api_url == "https://dailyfratze.de/app/oembed.json?url=x"
    assert endpoint.to_api_url("https://anything/else") == "https://dailyfratze.de/app/oembed.json?url=x"
    assert endpoint.url_schemes == ()
