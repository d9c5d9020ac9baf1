"""Port: builds the outbound request for an endpoint's API URL."""
from __future__ import annotations

from typing import Protocol

from embedder.app.domain.models import OembedRequest


class RequestProvider(Protocol):
    def create_request_for(self, user_agent: str, application_name: str | None, api_url: str) -> OembedRequest: ...
