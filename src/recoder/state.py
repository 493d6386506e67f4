#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/state.py
"""Output position state shared by line-sensitive codecs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RecodingTargetState:
    """Position of one logical output stream relative to line boundaries.

    A single instance is threaded through every codec invocation of one
    pipeline application and, for a :class:`~recoder.writer.RecodingWriter`,
    through every write over the writer's lifetime. Only codecs declared
    ``line_sensitive`` read or update it.

    Parameters
    ----------
    at_line_start : bool, default True
        Whether the next emitted character starts a new line

    """

    at_line_start: bool = True

    def track(self, emitted: str) -> None:
        """Record the position after ``emitted`` was written.

        Empty output leaves the state unchanged.

        """
        if emitted:
            self.at_line_start = emitted[-1] == "\n"

    def reset(self) -> None:
        """Return to the start of a fresh output stream."""
        self.at_line_start = True


__all__ = ["RecodingTargetState"]
