import httpx
import pytest

from config import OPENLIBRARY_COVERS_URL, PLACEHOLDER_COVER
from services.isbn_service import ExternalLookupFailure, IsbnLookupService, normalize_isbn

ISBN = "9780134190440"


def service_with(handler):
    return IsbnLookupService(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_normalize_isbn():
    assert normalize_isbn(" 978-0-13-419044-0 ") == ISBN
    with pytest.raises(ValueError):
        normalize_isbn("0134190440")
    with pytest.raises(ValueError):
        normalize_isbn("97801341904XX")


def test_known_isbn_resolves_cover():
    requested = []

    def handler(request):
        requested.append(request.url.path)
        return httpx.Response(200, json={"title": "Effective Java"})

    result = service_with(handler).lookup("978-0134190440")

    assert requested == [f"/isbn/{ISBN}.json"]
    assert result.found
    assert result.cover_url == f"{OPENLIBRARY_COVERS_URL}/{ISBN}-L.jpg"


def test_unknown_isbn():
    result = service_with(lambda request: httpx.Response(404)).lookup(ISBN)

    assert not result.found
    assert result.cover_url == PLACEHOLDER_COVER
    assert result.message == "Book not found! Try another ISBN."


def test_server_error_is_a_lookup_failure():
    service = service_with(lambda request: httpx.Response(503))

    with pytest.raises(ExternalLookupFailure, match="HTTP 503"):
        service.book_exists(ISBN)
    result = service.lookup(ISBN)
    assert not result.found
    assert result.cover_url == PLACEHOLDER_COVER


def test_network_errors_degrade_to_placeholder():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    def stall(request):
        raise httpx.ReadTimeout("timed out", request=request)

    assert service_with(refuse).lookup(ISBN).cover_url == PLACEHOLDER_COVER
    with pytest.raises(ExternalLookupFailure) as exc_info:
        service_with(stall).book_exists(ISBN)
    assert exc_info.value.reason == "timed out"


def test_malformed_isbn_is_not_sent():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(ValueError):
        service_with(handler).lookup("123")
