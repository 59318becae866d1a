from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from vitae.app import create_app
from vitae.client.api import ContentApiClient
from vitae.client.cache import LocalCache
from vitae.core.config import Config
from vitae.defaults import default_bundle

ADMIN_KEY = "veritas-test-key"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bundle():
    return default_bundle()


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "db.json"


@pytest.fixture
def config(data_path: Path) -> Config:
    return Config(DATA_PATH=str(data_path), ADMIN_KEY=ADMIN_KEY, ADMIN_TOKEN_TTL_MS=60 * 60 * 1000)


@pytest.fixture
def app(config: Config, clock: FakeClock):
    return create_app(config, clock=clock)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def cache(tmp_path: Path) -> LocalCache:
    return LocalCache(tmp_path / "cache")


@pytest.fixture
def api(client: TestClient) -> ContentApiClient:
    return ContentApiClient(http=client)


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    response = client.post("/api/auth", json={"passkey": ADMIN_KEY})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def admin_key() -> str:
    return ADMIN_KEY
