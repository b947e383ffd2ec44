"""Fixtures wiring operation servers into an in-process FastAPI application."""

from collections.abc import AsyncGenerator, Callable, Iterable
from typing import Any, NotRequired, TypedDict

import httpx
import pytest
from fastapi import FastAPI

from httpapi.api.app import create_app
from httpapi.client.client import HttpApiClient
from httpapi.common.operation import Operation, PathPattern, RequestBody
from httpapi.common.response import EmptyResponse, JsonResponse
from httpapi.core.config import Settings
from httpapi.core.exceptions import Conflict, NotFound
from httpapi.server.authorizer import HttpApiAuthorizerServer
from httpapi.server.pipeline import HttpApiServer
from httpapi.server.request import ServerRequest
from httpapi.server.validators import TypeAdapterValidator, Validators

BASE_URL = "http://testserver"

type AppFactory = Callable[..., FastAPI]


class ItemQuery(TypedDict):
    expand: NotRequired[bool]


class ItemBody(TypedDict):
    media_type: str
    body: dict[str, Any]


class ItemStore:
    """In-memory items shared by the handlers of one test."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}

    async def get_item(self, request: ServerRequest) -> JsonResponse:
        item_id = request.path["itemId"]
        if item_id not in self.items:
            raise NotFound("ITEM_NOT_FOUND", f"item '{item_id}' does not exist")
        item = dict(self.items[item_id])
        if request.query.get("expand") == "true":
            item["owner"] = (request.authorizer or {}).get("lambda", {}).get("user")
        return JsonResponse(item, 200)

    async def create_item(self, request: ServerRequest) -> JsonResponse:
        item = dict(request.body)
        if item["id"] in self.items:
            raise Conflict("ITEM_EXISTS", f"item '{item['id']}' already exists")
        self.items[item["id"]] = item
        return JsonResponse(item, 201, {"location": f"/items/{item['id']}"})

    async def delete_item(self, request: ServerRequest) -> EmptyResponse:
        self.items.pop(request.path["itemId"], None)
        return EmptyResponse(204)


OPERATIONS = {
    "getItem": Operation(
        method="GET",
        path=PathPattern(pattern="/items/{itemId}"),
        operation_id="getItem",
        success_codes=frozenset({200}),
    ),
    "createItem": Operation(
        method="POST",
        path=PathPattern(pattern="/items"),
        operation_id="createItem",
        request_body=RequestBody(required=True, content={"application/json": None}),
        success_codes=frozenset({201}),
    ),
    "deleteItem": Operation(
        method="DELETE",
        path=PathPattern(pattern="/items/{itemId}"),
        operation_id="deleteItem",
        success_codes=frozenset({204}),
    ),
}


@pytest.fixture
def operations() -> dict[str, Operation]:
    """Item operations by operation id."""
    return OPERATIONS


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("APP_NAME", "ItemsApi")
    monkeypatch.setenv("ENVIRONMENT", "development")
    return Settings()


@pytest.fixture
def store() -> ItemStore:
    return ItemStore()


@pytest.fixture
def servers(store: ItemStore, settings: Settings) -> list[HttpApiServer]:
    """One server per item operation."""
    return [
        HttpApiServer(
            OPERATIONS["getItem"],
            store.get_item,
            Validators(query=TypeAdapterValidator(ItemQuery)),
            settings=settings,
        ),
        HttpApiServer(
            OPERATIONS["createItem"],
            store.create_item,
            Validators(body=TypeAdapterValidator(ItemBody)),
            settings=settings,
        ),
        HttpApiServer(OPERATIONS["deleteItem"], store.delete_item, settings=settings),
    ]


@pytest.fixture
def app_factory(servers: list[HttpApiServer], settings: Settings) -> AppFactory:
    """Build the application, optionally behind an authorizer."""

    def factory(
        authorizer: HttpApiAuthorizerServer | None = None,
        extra: Iterable[HttpApiServer] = (),
    ) -> FastAPI:
        return create_app([*servers, *extra], settings, authorizer=authorizer)

    return factory


@pytest.fixture
async def http_client(app_factory: AppFactory) -> AsyncGenerator[httpx.AsyncClient]:
    """Raw httpx client against the application without an authorizer."""
    transport = httpx.ASGITransport(app=app_factory())
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
async def api_client(
    http_client: httpx.AsyncClient, settings: Settings
) -> AsyncGenerator[HttpApiClient]:
    """Operation client sending through the in-process application."""
    async with HttpApiClient(BASE_URL, http_client=http_client, settings=settings) as client:
        yield client
