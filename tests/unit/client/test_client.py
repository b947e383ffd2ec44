"""Unit tests for httpapi/client/client.py and httpapi/client/authorizer.py."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import orjson
import pytest

from httpapi.client.authorizer import HttpApiClientAuthorizer, TokenAuthorizer
from httpapi.client.client import ClientRequest, HttpApiClient
from httpapi.common.operation import Operation, PathPattern, RequestBody
from httpapi.common.response import (
    BinaryResponse,
    EmptyResponse,
    JsonResponse,
    TextResponse,
)
from httpapi.core.config import Settings
from httpapi.core.exceptions import (
    NotFound,
    PathParameterError,
    UnexpectedResponseError,
)

type Responder = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Mock transport handler that records requests."""

    def __init__(self, responder: Responder | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder = responder or (lambda _: httpx.Response(204))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def client(
    recorder: Recorder, settings: Settings
) -> AsyncGenerator[HttpApiClient]:
    """Client sending through a mock transport."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    async with HttpApiClient(
        "https://api.example.com/v1/", http_client=http_client, settings=settings
    ) as api_client:
        yield api_client
    await http_client.aclose()


def json_response(status_code: int, data: Any) -> Responder:
    return lambda _: httpx.Response(status_code, json=data)


@pytest.mark.unit
class TestBuildRequest:
    """Wire request construction."""

    async def test_url_with_path_and_query(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that path parameters are substituted and query appended."""
        await client.request(
            item_operation,
            ClientRequest(path={"itemId": "a b"}, query={"expand": True, "skip": None}),
        )

        assert recorder.last.method == "GET"
        assert str(recorder.last.url) == "https://api.example.com/v1/items/a%20b?expand=true"

    async def test_missing_path_parameter(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that an incomplete parameter set fails before sending."""
        with pytest.raises(PathParameterError):
            await client.request(item_operation, ClientRequest())

        assert recorder.requests == []

    async def test_headers_and_cookies(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that caller headers and cookies are normalized and sent."""
        await client.request(
            item_operation,
            ClientRequest(
                path={"itemId": "1"},
                header={"X-Tenant": "acme", "X-Skip": None},
                cookie={"session": "s1", "theme": "dark"},
            ),
        )

        headers = recorder.last.headers
        assert headers["x-tenant"] == "acme"
        assert "x-skip" not in headers
        assert headers["cookie"] == "session=s1; theme=dark"
        assert headers["content-type"] == "application/octet-stream"

    async def test_no_body_sends_no_content(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that an absent body is not sent."""
        await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert recorder.last.content == b""

    async def test_single_declared_media_type_is_used(
        self, client: HttpApiClient, recorder: Recorder
    ) -> None:
        """Test that the only declared media type is the default."""
        operation = Operation(
            method="POST",
            path=PathPattern(pattern="/items"),
            request_body=RequestBody(content={"application/json": None}),
        )

        await client.request(operation, ClientRequest(body={"name": "x"}))

        assert recorder.last.headers["content-type"] == "application/json"
        assert orjson.loads(recorder.last.content) == {"name": "x"}

    async def test_explicit_media_type_wins(
        self, client: HttpApiClient, recorder: Recorder, create_operation: Operation
    ) -> None:
        """Test that an explicit media type selects the form codec."""
        await client.request(
            create_operation,
            ClientRequest(
                media_type="application/x-www-form-urlencoded",
                body={"name": "Zoë", "n": 1},
            ),
        )

        assert recorder.last.headers["content-type"] == "application/x-www-form-urlencoded"
        assert recorder.last.content == b"name=Zo%C3%AB"

    async def test_ambiguous_media_type_defaults_to_binary(
        self, client: HttpApiClient, recorder: Recorder, create_operation: Operation
    ) -> None:
        """Test that several declared media types fall back to binary."""
        await client.request(create_operation, ClientRequest(body=b"\x00\x01"))

        assert recorder.last.headers["content-type"] == "application/octet-stream"
        assert recorder.last.content == b"\x00\x01"

    async def test_caller_content_type_header_overrides(
        self, client: HttpApiClient, recorder: Recorder, create_operation: Operation
    ) -> None:
        """Test that a caller header replaces the derived content-type."""
        await client.request(
            create_operation,
            ClientRequest(
                media_type="application/json",
                header={"Content-Type": "application/json; charset=utf-8"},
                body=[1],
            ),
        )

        assert recorder.last.headers["content-type"] == "application/json; charset=utf-8"

    def test_base_url_is_required(self, settings: Settings) -> None:
        """Test that a client needs a base URL from somewhere."""
        with pytest.raises(ValueError, match="base_url is required"):
            HttpApiClient(settings=settings)

    async def test_base_url_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the configured base URL is the default."""
        monkeypatch.setenv("CLIENT_CONFIG__BASE_URL", "https://configured.example.com")

        async with HttpApiClient() as api_client:
            assert api_client.base_url == "https://configured.example.com"


@pytest.mark.unit
class TestResponses:
    """Response decoding and success classification."""

    async def test_json_success(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that a declared success is decoded by content-type."""
        recorder.responder = json_response(200, {"id": "1"})

        response = await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert isinstance(response, JsonResponse)
        assert response.status_code == 200
        assert response.body == {"id": "1"}

    async def test_empty_success(
        self, client: HttpApiClient, recorder: Recorder
    ) -> None:
        """Test that bodiless responses decode to Empty."""
        operation = Operation(
            method="DELETE",
            path=PathPattern(pattern="/items"),
            success_codes=frozenset({204}),
        )

        response = await client.request(operation)

        assert isinstance(response, EmptyResponse)
        assert response.body is None

    async def test_undeclared_status_with_error_body(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that a 404 against success codes {200} raises the parsed error."""
        recorder.responder = json_response(
            404, {"kind": "ITEM_NOT_FOUND", "message": "no such item"}
        )

        with pytest.raises(NotFound) as exc_info:
            await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert exc_info.value.code == "ITEM_NOT_FOUND"
        assert exc_info.value.message == "no such item"

    async def test_undeclared_status_with_other_json(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that JSON that is not an error body surfaces the raw response."""
        recorder.responder = json_response(404, {"message": "Not Found"})

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert isinstance(exc_info.value.response, JsonResponse)
        assert exc_info.value.response.body == {"message": "Not Found"}

    async def test_undeclared_status_with_text(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that non-JSON bodies surface the raw response."""
        recorder.responder = lambda _: httpx.Response(
            502, text="bad gateway", headers={"content-type": "text/plain"}
        )

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert exc_info.value.response == TextResponse(
            "bad gateway", 502, exc_info.value.response.headers
        )

    async def test_undeclared_status_with_malformed_json(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that an undecodable error body surfaces as raw bytes."""
        recorder.responder = lambda _: httpx.Response(
            500, content=b"{oops", headers={"content-type": "application/json"}
        )

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert isinstance(exc_info.value.response, BinaryResponse)
        assert exc_info.value.response.body == b"{oops"

    async def test_without_success_codes_everything_succeeds(
        self, client: HttpApiClient, recorder: Recorder
    ) -> None:
        """Test that operations without success codes accept any status."""
        recorder.responder = json_response(500, {"kind": "X", "message": "x"})
        operation = Operation(method="GET", path=PathPattern(pattern="/health"))

        response = await client.request(operation)

        assert response.status_code == 500

    async def test_redirects_are_returned(
        self, client: HttpApiClient, recorder: Recorder
    ) -> None:
        """Test that redirects are not followed by default."""
        recorder.responder = lambda _: httpx.Response(
            302, headers={"location": "https://elsewhere.example.com"}
        )
        operation = Operation(
            method="GET",
            path=PathPattern(pattern="/old"),
            success_codes=frozenset({302}),
        )

        response = await client.request(operation)

        assert response.status_code == 302
        assert response.headers is not None
        assert response.headers["location"] == "https://elsewhere.example.com"
        assert len(recorder.requests) == 1

    async def test_transport_errors_propagate(
        self, client: HttpApiClient, recorder: Recorder, item_operation: Operation
    ) -> None:
        """Test that network failures are not wrapped."""

        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        recorder.responder = fail

        with pytest.raises(httpx.ConnectError):
            await client.request(item_operation, ClientRequest(path={"itemId": "1"}))


@pytest.mark.unit
class TestAuthorizers:
    """Request signing."""

    async def test_token_authorizer(
        self, recorder: Recorder, settings: Settings, item_operation: Operation
    ) -> None:
        """Test that the bearer token is fetched per request and injected."""
        tokens = iter(["t1", "t2"])

        async def token() -> str:
            return next(tokens)

        authorizer = TokenAuthorizer(token)
        assert isinstance(authorizer, HttpApiClientAuthorizer)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        client = HttpApiClient(
            "https://api.example.com", authorizer, http_client=http_client, settings=settings
        )

        await client.request(item_operation, ClientRequest(path={"itemId": "1"}))
        await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert [r.headers["authorization"] for r in recorder.requests] == [
            "Bearer t1",
            "Bearer t2",
        ]
        await http_client.aclose()

    async def test_signing_failure_propagates(
        self, recorder: Recorder, settings: Settings, item_operation: Operation
    ) -> None:
        """Test that signer failures reach the caller unchanged."""

        class BrokenSigner:
            async def sign(self, request: httpx.Request) -> httpx.Request:
                raise PermissionError("no credentials")

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        client = HttpApiClient(
            "https://api.example.com",
            BrokenSigner(),
            http_client=http_client,
            settings=settings,
        )

        with pytest.raises(PermissionError, match="no credentials"):
            await client.request(item_operation, ClientRequest(path={"itemId": "1"}))

        assert recorder.requests == []
        await http_client.aclose()
