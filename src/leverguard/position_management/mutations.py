"""Merge a trailing-state delta into a position."""

from __future__ import annotations

from dataclasses import replace

from leverguard.position_management.models import Position, PositionMutations
from leverguard.position_management.validation import ensure_open


def apply_mutations(position: Position, mutations: PositionMutations | None = None) -> Position:
    """Return a copy of ``position`` with ``mutations`` merged in.

    The input position is left untouched. ``None`` or an empty delta returns
    ``position`` itself.

    Raises:
        ValueError: If the position is already closed.
    """
    ensure_open(position, "mutate")
    if not mutations:
        return position
    return replace(position, **mutations.changes())


__all__ = ["apply_mutations"]
