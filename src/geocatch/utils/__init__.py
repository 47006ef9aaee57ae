"""Utility functions package."""

from geocatch.utils.formatting import (
    format_catch_summary,
    format_gym_line,
    format_spawn_line,
    format_time_left,
)

__all__ = [
    "format_spawn_line",
    "format_catch_summary",
    "format_gym_line",
    "format_time_left",
]
