from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from src.adapters.dev_publisher import DevPublisher
from src.adapters.memory_store import InMemoryEntityStore
from src.app_shell.context import ServiceContext
from src.rules.loader import load_rules
from src.rules.models import Rules

ROOT = Path(__file__).resolve().parent.parent


class FixedClock:
    """Settable clock for deterministic tests."""

    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        self._time = self._time + delta


@pytest.fixture
def rules() -> Rules:
    """The real rules file from the project root."""
    return load_rules(ROOT / "rules.yaml")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def publisher() -> DevPublisher:
    return DevPublisher()


@pytest.fixture
def memory_ctx(rules: Rules, clock: FixedClock, publisher: DevPublisher) -> ServiceContext:
    """Full ServiceContext over the in-memory store."""
    return ServiceContext.build(InMemoryEntityStore(), rules, publisher=publisher, clock=clock)


@pytest.fixture
def sqlite_ctx(tmp_path: Path, rules: Rules, clock: FixedClock, publisher: DevPublisher) -> ServiceContext:
    """Full ServiceContext backed by a temporary, migrated SQLite DB."""
    from src.adapters.sqlite.migrator import SQLiteMigrator
    from src.adapters.sqlite.store import SQLiteEntityStore

    db_path = str(tmp_path / "lcm.db")
    SQLiteMigrator(db_path).run_migrations()
    return ServiceContext.build(SQLiteEntityStore(db_path), rules, publisher=publisher, clock=clock)
