"""Fixtures for driving orchestrators over the HTTP client."""

import pytest

from teraverse.clients import GigaverseClient, GigaverseConfig


class CannedResponse:
    """Successful response with a fixed JSON body."""

    status_code = 200
    ok = True

    def __init__(self, body):
        self._body = body

    def json(self):
        return self._body


class RoutedSession:
    """Answers every request to a path with the same canned body."""

    def __init__(self, routes: dict[str, object]):
        self.headers: dict[str, str] = {}
        self.routes = routes
        self.paths: list[str] = []

    def request(self, method, url, json=None, timeout=None):
        path = url.removeprefix("https://game.test")
        self.paths.append(path)
        return CannedResponse(self.routes[path])


@pytest.fixture
def http_api():
    """Build a GigaverseClient whose session replays canned bodies by path."""
    def _make(routes: dict[str, object]) -> GigaverseClient:
        config = GigaverseConfig(
            bearer_token="jwt-test",
            base_url="https://game.test",
            retry_delay=0,
        )
        return GigaverseClient(config, session=RoutedSession(routes))
    return _make
