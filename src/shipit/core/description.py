"""Compose the request description from the commits being shipped."""

from typing import Optional

from shipit.models.commit import DeltaSet

TRAILER = "\n\n\n*This request was opened by Shipit* 🚢"
SEPARATOR = ","


def compose_description(delta: DeltaSet) -> Optional[str]:
    """Join ``"{message} {id}"`` entries in walk order.

    Returns None when there is nothing to ship.
    """
    if delta.is_empty:
        return None
    return SEPARATOR.join(commit.entry() for commit in delta.commits)


def add_trailer(description: str) -> str:
    """Append the attribution trailer unless it is already there."""
    if description.endswith(TRAILER):
        return description
    return description + TRAILER
