"""Request providers: build the outbound request for an endpoint's API URL."""
from __future__ import annotations

from urllib.parse import urlencode, urlsplit

from loguru import logger
from pydantic import BaseModel, ConfigDict

from embedder.app.domain.models import OembedRequest


def user_agent_header(user_agent: str, application_name: str | None) -> str:
    return f"{user_agent}; {application_name}" if application_name else user_agent


class DefaultRequestProvider:
    """Plain GET carrying the service User-Agent."""

    def create_request_for(self, user_agent: str, application_name: str | None, api_url: str) -> OembedRequest:
        logger.debug("Creating request for url '{}'", api_url)
        return OembedRequest(
            url=api_url,
            headers={"User-Agent": user_agent_header(user_agent, application_name)},
        )


class AccessTokenOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    access_token: str
    parameter_name: str = "access_token"


class AccessTokenRequestProvider(DefaultRequestProvider):
    """Adds an app token query parameter, as required by some providers (e.g. Meta)."""

    def __init__(self, options: AccessTokenOptions) -> None:
        self._options = options

    def create_request_for(self, user_agent: str, application_name: str | None, api_url: str) -> OembedRequest:
        request = super().create_request_for(user_agent, application_name, api_url)
        separator = "&" if urlsplit(api_url).query else "?"
        token = urlencode({self._options.parameter_name: self._options.access_token})
        return OembedRequest(url=f"{api_url}{separator}{token}", headers=request.headers)
