"""Shared test fixtures for mdsrbac."""

import json

import httpx
import pytest

from mdsrbac.api.gateway import ApiGateway
from mdsrbac.api.session import AuthSession
from mdsrbac.client import MdsApiClient
from mdsrbac.roles.lookup import LookupService
from mdsrbac.roles.resolver import BindingResolver
from mdsrbac.scope.clusters import ClusterRegistry

MDS_URL = "http://mds.example:8090"


class FakeMds:
    """Records requests and answers them with a queued or default response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response | Exception] = []
        self.default = httpx.Response(204)

    def reply(self, status: int = 200, body: object | None = None, text: str | None = None) -> None:
        if body is not None:
            self.responses.append(httpx.Response(status, json=body))
        else:
            self.responses.append(httpx.Response(status, text=text or ""))

    def fail(self, exc: Exception) -> None:
        self.responses.append(exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return self.default
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def fake_mds():
    return FakeMds()


@pytest.fixture
def transport(fake_mds):
    return httpx.MockTransport(fake_mds.handler)


@pytest.fixture
def registry():
    return ClusterRegistry(
        kafka_cluster_id="kafka-1",
        connect_cluster_id="connect-1",
        schema_registry_cluster_id="sr-1",
        ksql_cluster_id="ksql-1",
    )


@pytest.fixture
def session():
    s = AuthSession()
    s.login("admin", "secret")
    return s


@pytest.fixture
def gateway(session, transport):
    return ApiGateway(MDS_URL, session, transport=transport)


@pytest.fixture
def resolver(gateway, registry):
    return BindingResolver(gateway, registry)


@pytest.fixture
def lookups(gateway, registry):
    return LookupService(gateway, registry)


@pytest.fixture
def client(registry, transport):
    c = MdsApiClient(MDS_URL, registry, transport=transport)
    c.login("admin", "secret")
    return c
