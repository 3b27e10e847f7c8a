"""Publication state machine.

Defines the complete set of legal lifecycle transitions for site content.
A transition that is not listed in ALLOWED_TRANSITIONS is forbidden.

    draft -> review
    review -> draft, published
    published -> archived
    archived -> (terminal)

The machine only computes states. Attaching a new state to an aggregate
is the caller's job; ``advance`` does it for the common case.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from .errors import InvalidTransitionError
from .models import ContentState, SiteContent

ALLOWED_TRANSITIONS: dict[ContentState, tuple[ContentState, ...]] = {
    ContentState.DRAFT: (ContentState.REVIEW,),
    ContentState.REVIEW: (ContentState.DRAFT, ContentState.PUBLISHED),
    ContentState.PUBLISHED: (ContentState.ARCHIVED,),
    ContentState.ARCHIVED: (),
}


def _coerce(state: ContentState | str) -> ContentState | None:
    try:
        return ContentState(state)
    except ValueError:
        return None


def get_allowed_transitions(state: ContentState | str) -> list[ContentState]:
    """Return the states reachable from ``state`` in one step.

    Args:
        state: Source state.

    Returns:
        A new list of target states (empty for terminal or unknown states).
    """
    source = _coerce(state)
    if source is None:
        return []
    return list(ALLOWED_TRANSITIONS[source])


def can_transition(source: ContentState | str, target: ContentState | str) -> bool:
    """Return True if moving from ``source`` to ``target`` is allowed."""
    to_state = _coerce(target)
    return to_state is not None and to_state in get_allowed_transitions(source)


def transition_state(
    source: ContentState | str, target: ContentState | str
) -> ContentState:
    """Perform a state transition.

    Args:
        source: Current state.
        target: Requested state.

    Returns:
        The new state.

    Raises:
        InvalidTransitionError: If the transition is not allowed.
    """
    if not can_transition(source, target):
        raise InvalidTransitionError(_label(source), _label(target))
    return ContentState(target)


def advance(
    content: SiteContent,
    target: ContentState | str,
    now: datetime | None = None,
) -> SiteContent:
    """Return a copy of ``content`` moved to ``target`` with a fresh updated_at.

    Args:
        content: Aggregate to transition.
        target: Requested state.
        now: Timestamp to stamp; defaults to the current UTC time.

    Raises:
        InvalidTransitionError: If the transition is not allowed.
    """
    state = transition_state(content.state, target)
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return replace(content, state=state, updated_at=stamp)


def _label(state: ContentState | str) -> str:
    return state.value if isinstance(state, ContentState) else str(state)
