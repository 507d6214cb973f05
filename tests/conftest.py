"""Shared test fixtures."""

import pytest

from app.container import container
from bgg_client import CatalogUnavailableError, GameDetail, GameSummary


class FakeClock:
    """Injectable clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCatalog:
    """In-memory stand-in for the catalog API, recording every call."""

    def __init__(self, ids: list[str] | None = None):
        self.ids = list(ids or [])
        self.fail_ids: set[str] = set()
        self.summary_error: Exception | None = None
        self.summary_calls = 0
        self.detail_calls: list[list[str]] = []

    def summary(self, game_id: str) -> GameSummary:
        return GameSummary(id=game_id, name=f"Game {game_id}")

    def detail(self, game_id: str) -> GameDetail:
        return GameDetail(id=game_id, name=f"Game {game_id}", weight=2.5, min_players=2, max_players=4)

    def client(self) -> "FakeCatalogClient":
        return FakeCatalogClient(self)


class FakeCatalogClient:
    def __init__(self, catalog: FakeCatalog):
        self._catalog = catalog

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_):
        return None

    async def fetch_summary(self, username: str) -> list[GameSummary]:
        self._catalog.summary_calls += 1
        if self._catalog.summary_error is not None:
            raise self._catalog.summary_error
        return [self._catalog.summary(i) for i in self._catalog.ids]

    async def fetch_details(self, ids) -> list[GameDetail]:
        ids = list(ids)
        self._catalog.detail_calls.append(ids)
        if self._catalog.fail_ids.intersection(ids):
            raise CatalogUnavailableError("batch failed")
        return [self._catalog.detail(i) for i in ids]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return FakeCatalog(["1", "2", "3"])


@pytest.fixture
def app_container(tmp_path, catalog, clock):
    """Global container wired to temp directories and the fake catalog."""
    container.reset()
    container.init(
        cache_dir=tmp_path / "cache",
        events_dir=tmp_path / "events",
        client_factory=catalog.client,
        clock=clock,
    )
    yield container
    container.reset()
