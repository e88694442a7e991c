import pytest
import requests

from api.centrometeo import FeedError, feed_url, fetch_feed_text


class FakeResponse:
    def __init__(self, status_code=200, text="var coords = [];", encoding="utf-8"):
        self.status_code = status_code
        self.text = text
        self.encoding = encoding


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


def test_feed_url_honours_proxy_prefix():
    assert feed_url("http://localhost:8788/api/") == "http://localhost:8788/api/Moduli/refx.php"


def test_fetch_sends_cache_buster():
    session = FakeSession(FakeResponse())
    text = fetch_feed_text(base_url="http://example.test", session=session)
    assert text == "var coords = [];"
    url, kwargs = session.calls[0]
    assert url == "http://example.test/Moduli/refx.php"
    assert kwargs["params"]["t"] == "all"
    assert kwargs["params"]["r"].isdigit()
    assert kwargs["timeout"] > 0


def test_missing_encoding_defaults_to_latin1():
    response = FakeResponse(encoding=None)
    fetch_feed_text(base_url="http://example.test", session=FakeSession(response))
    assert response.encoding == "ISO-8859-1"


@pytest.mark.parametrize(
    "session, kind, status",
    [
        (FakeSession(exc=requests.Timeout("slow")), "timeout", None),
        (FakeSession(exc=requests.ConnectionError("down")), "network", None),
        (FakeSession(FakeResponse(status_code=503)), "http", 503),
        (FakeSession(FakeResponse(text="   ")), "empty", 200),
    ],
)
def test_transport_failures_raise_feed_error(session, kind, status):
    with pytest.raises(FeedError) as err:
        fetch_feed_text(base_url="http://example.test", session=session)
    assert err.value.kind == kind
    assert err.value.status_code == status
