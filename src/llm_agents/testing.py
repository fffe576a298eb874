"""Testing utilities for code built on llm_agents.

Provides ``RecordingTransport``, an in-memory ``Transport`` that records
every request and replays queued responses, so providers and agents can be
exercised without network access.
"""

from __future__ import annotations

import json
from collections import deque
from typing import Any

from llm_agents.transport import HttpRequest, HttpResponse


class RecordingTransport:
    """Transport double that records requests and replays queued responses.

    Usage Pattern:
        transport = RecordingTransport()
        transport.queue_json({"choices": [...], "usage": {...}})
        provider = OpenAIProvider(api_key="test-key", transport=transport)
        await provider.complete(messages, "GPT-4o-mini")
        assert transport.json_body()["model"] == "gpt-4o-mini"
    """

    def __init__(self) -> None:
        self.requests: list[HttpRequest] = []
        self._responses: deque[HttpResponse] = deque()

    def queue(self, response: HttpResponse) -> None:
        """Queue a response for the next request."""
        self._responses.append(response)

    def queue_json(self, payload: Any, status_code: int = 200) -> None:
        """Queue a JSON response for the next request."""
        self.queue(
            HttpResponse(
                status_code=status_code,
                headers={"Content-Type": "application/json"},
                body=json.dumps(payload).encode("utf-8"),
            )
        )

    def queue_text(self, text: str, status_code: int = 200) -> None:
        """Queue a plain text response for the next request."""
        self.queue(HttpResponse(status_code=status_code, body=text.encode("utf-8")))

    async def __call__(self, request: HttpRequest) -> HttpResponse:
        """Record ``request`` and return the next queued response.

        Raises:
            AssertionError: If no response is queued.

        """
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._responses.popleft()

    @property
    def last_request(self) -> HttpRequest:
        """Return the most recent request."""
        return self.requests[-1]

    def json_body(self, index: int = -1) -> Any:
        """Decode the JSON body of a recorded request."""
        body = self.requests[index].body
        assert body is not None, "Request has no body"
        return json.loads(body)
