"""Exception hierarchy for sitecraft.

Every failure raised by the core derives from SitecraftError, with one
class per error kind:

- ContentValidationError: first schema violation found in raw content.
- InvalidTransitionError: illegal publication state change.
- MigrationPathNotFoundError: no registered migration chain reaches the target.
- LayoutValidationError: every grammar violation found in a page layout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SemanticVersion


class SitecraftError(Exception):
    """Base class for all sitecraft errors."""


class ContentValidationError(SitecraftError):
    """Raised at the first structural or semantic violation in site content."""


class InvalidTransitionError(SitecraftError):
    """Raised when a publication state change is not allowed.

    Attributes:
        source: State the transition started from.
        target: Requested state.
    """

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(f"Invalid content state transition: {source} -> {target}")


class MigrationPathNotFoundError(SitecraftError):
    """Raised when no migration chain leads from the current to the target version.

    Attributes:
        current: Version the chain got stuck at.
        target: Version that was requested.
    """

    def __init__(self, current: SemanticVersion, target: SemanticVersion):
        self.current = current
        self.target = target
        super().__init__(
            f"No migration path from version {current} to target version {target}"
        )


class LayoutValidationError(SitecraftError):
    """Raised when a page layout breaks one or more grammar rules.

    Attributes:
        errors: Every violation found, in validation order.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid page layout:\n" + "\n".join(self.errors))
