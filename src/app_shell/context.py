from __future__ import annotations

from dataclasses import dataclass

from src.adapters.clock import SystemClock
from src.adapters.dev_publisher import DevPublisher
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.store import SQLiteEntityStore
from src.components.projects import ProjectService
from src.components.publish import PostService
from src.components.scheduler import LifecycleScheduler
from src.components.trash import TrashService
from src.ports.clock import ClockPort
from src.ports.publisher import PublisherPort
from src.ports.store import EntityStorePort
from src.rules.models import Rules


@dataclass
class ServiceContext:
    store: EntityStorePort
    clock: ClockPort
    publisher: PublisherPort
    projects: ProjectService
    trash: TrashService
    posts: PostService
    scheduler: LifecycleScheduler
    rules: Rules

    @classmethod
    def build(
        cls,
        store: EntityStorePort,
        rules: Rules,
        publisher: PublisherPort | None = None,
        clock: ClockPort | None = None,
    ) -> ServiceContext:
        clock = clock or SystemClock()
        publisher = publisher or DevPublisher()

        trash = TrashService(store, clock, rules.trash)
        posts = PostService(store, publisher, clock, rules.publish)

        return cls(
            store=store,
            clock=clock,
            publisher=publisher,
            projects=ProjectService(store, clock),
            trash=trash,
            posts=posts,
            scheduler=LifecycleScheduler(trash, posts, clock, rules.scheduler),
            rules=rules,
        )

    @classmethod
    def create(cls, db_path: str, rules: Rules) -> ServiceContext:
        """Wire the SQLite store (migrated) with the dev publisher."""
        SQLiteMigrator(db_path).run_migrations()
        return cls.build(SQLiteEntityStore(db_path), rules)
