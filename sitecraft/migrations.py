"""Migration engine for site content.

Content records the schema version it was written at. Moving it to a
newer version happens only through explicitly registered migrations,
each converting one exact version into another.

Lookup rules:
- Migrations are tried in registration order.
- At each step the first migration whose ``source`` equals the current
  version is applied.
- Chains continue until the target version is reached. If a pass finds
  nothing to apply, MigrationPathNotFoundError is raised.

Key classes:
- Migration: A single registered transformation.
- MigrationRegistry: Append-only ordered list of migrations.
- MigrationEngine: Applies chains from a registry, with an injectable clock.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from .errors import MigrationPathNotFoundError
from .models import SemanticVersion, SiteContent

CURRENT_VERSION = SemanticVersion(1, 0, 0)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Migration:
    """A transformation from one exact version to another.

    Attributes:
        source: Version the migration applies to.
        target: Version the migration produces.
        migrate: Function returning the migrated aggregate. It should set
            ``version`` to ``target``.
    """

    source: SemanticVersion
    target: SemanticVersion
    migrate: Callable[[SiteContent], SiteContent]


class MigrationRegistry:
    """Append-only registry of migrations.

    Registration order is significant: ``find`` returns the first
    migration whose source matches.
    """

    def __init__(self, migrations: list[Migration] | None = None):
        self._migrations: list[Migration] = []
        for migration in migrations or []:
            self.register(migration)

    def register(self, migration: Migration) -> None:
        """Append a migration to the registry.

        Args:
            migration: Migration to register.
        """
        self._migrations.append(migration)

    def find(self, version: SemanticVersion) -> Migration | None:
        """Return the first registered migration starting at ``version``."""
        for migration in self._migrations:
            if migration.source == version:
                return migration
        return None

    def __iter__(self) -> Iterator[Migration]:
        return iter(self._migrations)

    def __len__(self) -> int:
        return len(self._migrations)


class MigrationEngine:
    """Applies registered migration chains to site content.

    Attributes:
        registry: Registry the engine looks migrations up in.
        clock: Returns the time stamped into ``updated_at`` after a migration.
    """

    def __init__(
        self,
        registry: MigrationRegistry | None = None,
        clock: Clock | None = None,
    ):
        self.registry = registry if registry is not None else MigrationRegistry()
        self.clock = clock or utc_now

    def migrate(self, content: SiteContent, target: SemanticVersion) -> SiteContent:
        """Migrate ``content`` to ``target``.

        Args:
            content: Validated aggregate.
            target: Version to reach.

        Returns:
            ``content`` itself when it is already at ``target``; otherwise a
            new aggregate stamped with ``target`` and the clock's time.

        Raises:
            MigrationPathNotFoundError: If no chain of registered migrations
                leads to ``target``.
        """
        if content.version == target:
            return content

        current = content
        seen = {current.version}
        while current.version != target:
            migration = self.registry.find(current.version)
            if migration is None:
                raise MigrationPathNotFoundError(current.version, target)
            current = migration.migrate(current)
            if current.version in seen:
                # a cycle can never reach the target
                raise MigrationPathNotFoundError(current.version, target)
            seen.add(current.version)

        return replace(current, version=target, updated_at=self.clock().isoformat())


# Default registry instance
default_migration_registry = MigrationRegistry()


def register_migration(
    source: SemanticVersion,
    target: SemanticVersion,
    migrate: Callable[[SiteContent], SiteContent],
) -> Migration:
    """Register a migration in the default registry.

    Returns:
        The registered Migration.
    """
    migration = Migration(source=source, target=target, migrate=migrate)
    default_migration_registry.register(migration)
    return migration


def migrate_content(
    content: SiteContent,
    target: SemanticVersion,
    clock: Clock | None = None,
) -> SiteContent:
    """Migrate ``content`` to ``target`` using the default registry."""
    return MigrationEngine(default_migration_registry, clock=clock).migrate(content, target)
