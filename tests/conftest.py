"""Pytest configuration and fixtures."""

from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from deployer.config import Settings
from deployer.core.orchestrator import DeployOrchestrator
from deployer.main import create_app
from deployer.services.circle import CircleClient
from deployer.services.credentials import ServiceAccountKeyBroker
from deployer.services.pricing import PricePublisher
from fakes import (
    PROD_PROJECT,
    CircleStub,
    FakeConfigStore,
    FakeIdentity,
    FakeKeyClient,
    FakeStorageClient,
    circle_build,
    circle_project,
)


@pytest.fixture
def settings() -> Settings:
    """Settings with a fast poll loop."""
    return Settings(
        circle_api_token="test-circle-token",
        google_cloud_billing_key="test-billing-key",
        poll_interval_seconds=0,
        poll_max_attempts=5,
        build_search_max_attempts=3,
        gcp_project_id=None,
        production_project_id=PROD_PROJECT,
    )


@pytest.fixture
def circle_stub() -> CircleStub:
    """CircleCI with saturn-api and saturn-ui ready to deploy."""
    stub = CircleStub()
    for repo, num in (("saturn-api", 100), ("saturn-ui", 200)):
        stub.projects.append(circle_project(repo, num))
        stub.add_build(repo, circle_build(num))
        stub.artifacts[(repo, num)] = [
            {"path": "build.tgz", "url": f"https://artifacts.example/{repo}/build.tgz"},
            {"path": "other.tgz", "url": f"https://artifacts.example/{repo}/other.tgz"},
        ]
    stub.add_build("saturn-api", circle_build(42, job_name="deploy-prod", outcome="success"))
    stub.add_build("saturn-ui", circle_build(42, job_name="deploy-prod", outcome="success"))
    return stub


@pytest.fixture
async def circle(settings: Settings, circle_stub: CircleStub) -> CircleClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(circle_stub.handler))
    async with http_client:
        yield CircleClient(settings, http_client=http_client)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def key_client() -> FakeKeyClient:
    return FakeKeyClient()


@pytest.fixture
def broker(identity: FakeIdentity, key_client: FakeKeyClient) -> ServiceAccountKeyBroker:
    return ServiceAccountKeyBroker(identity, key_client_factory=lambda credentials: key_client)


@pytest.fixture
def config_store() -> FakeConfigStore:
    return FakeConfigStore()


@pytest.fixture
def sleeps() -> list[float]:
    """Intervals the orchestrator slept for."""
    return []


@pytest.fixture
def orchestrator(
    settings: Settings,
    circle: CircleClient,
    broker: ServiceAccountKeyBroker,
    config_store: FakeConfigStore,
    identity: FakeIdentity,
    sleeps: list[float],
) -> DeployOrchestrator:
    async def record_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return DeployOrchestrator(
        settings=settings,
        circle=circle,
        broker=broker,
        config_store=config_store,
        identity=identity,
        sleep=record_sleep,
    )


@pytest.fixture
def billing_skus() -> list[dict[str, Any]]:
    return [
        {"skuId": "0000-0000-0000", "pricingInfo": [{"summary": "other"}]},
        {"skuId": "22EB-AAE8-FBCD", "pricingInfo": [{"summary": "download"}]},
    ]


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
async def price_publisher(
    settings: Settings,
    billing_skus: list[dict[str, Any]],
    storage_client: FakeStorageClient,
) -> PricePublisher:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"skus": billing_skus})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        yield PricePublisher(settings, http_client=http_client, storage_client=storage_client)


@pytest.fixture
async def client(
    settings: Settings,
    orchestrator: DeployOrchestrator,
    price_publisher: PricePublisher,
) -> AsyncClient:
    """Async test client against an app wired with the fakes above."""
    app = create_app(settings, orchestrator=orchestrator, price_publisher=price_publisher)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def cron_headers() -> dict[str, str]:
    return {"X-Appengine-Cron": "true"}
