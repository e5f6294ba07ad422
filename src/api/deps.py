from functools import lru_cache

from fastapi import Depends

from src.adapters.clock import SystemClock
from src.adapters.dev_publisher import DevPublisher
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.store import SQLiteEntityStore
from src.app_shell.config import Settings

# Components are stateless, so services are built per request from the
# shared store, clock and publisher.
from src.components.projects import ProjectService
from src.components.publish import PostService
from src.components.trash import TrashService
from src.ports.clock import ClockPort
from src.ports.publisher import PublisherPort
from src.ports.store import EntityStorePort
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Adapters ---
@lru_cache
def _sqlite_store(db_path: str) -> SQLiteEntityStore:
    SQLiteMigrator(db_path).run_migrations()
    return SQLiteEntityStore(db_path)


def get_store(settings: Settings = Depends(get_settings)) -> EntityStorePort:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return _sqlite_store(settings.db_path)


def get_clock() -> ClockPort:
    return SystemClock()


@lru_cache
def get_publisher() -> PublisherPort:
    return DevPublisher()


# --- Component Services ---
def get_project_service(
    store: EntityStorePort = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
) -> ProjectService:
    return ProjectService(store=store, clock=clock)


def get_trash_service(
    store: EntityStorePort = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> TrashService:
    return TrashService(store=store, clock=clock, rules=rules.trash)


def get_post_service(
    store: EntityStorePort = Depends(get_store),
    publisher: PublisherPort = Depends(get_publisher),
    clock: ClockPort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> PostService:
    return PostService(store=store, publisher=publisher, clock=clock, rules=rules.publish)
