from unittest.mock import MagicMock

import requests


def fake_response(text="", status_code=200):
    response = MagicMock()
    response.text = text
    response.content = text.encode("utf-8")
    response.headers = {"Content-Type": "text/plain; charset=utf-8"}
    response.status_code = status_code
    return response


def fake_get(routes):
    """Build a requests.get side effect serving ``routes`` (url -> response or exception)."""
    calls = []

    def _get(url, headers=None, timeout=None):
        calls.append(url)
        outcome = routes.get(url)
        if outcome is None:
            raise requests.exceptions.ConnectionError(f"no route for {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    _get.calls = calls
    return _get
