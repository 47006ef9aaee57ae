"""Formatting utilities for display."""

from datetime import datetime

from geocatch.core.clock import utcnow
from geocatch.core.constants import RARITY_LABELS
from geocatch.core.geo import format_distance


def rarity_label(rarity: str) -> str:
    return RARITY_LABELS.get(rarity, rarity.title())


def format_time_left(expires_at: datetime, now: datetime | None = None) -> str:
    """Format the time until expiry, e.g. ``12m 05s``.

    Args:
        expires_at: Expiry timestamp (naive UTC)
        now: Reference time, defaults to the current time

    Returns:
        Remaining time, or ``expired`` if it has passed
    """
    remaining = int((expires_at - (now or utcnow())).total_seconds())
    if remaining <= 0:
        return "expired"
    minutes, seconds = divmod(remaining, 60)
    return f"{minutes}m {seconds:02d}s"


def format_spawn_line(
    name: str,
    rarity: str,
    distance_meters: float,
    expires_at: datetime,
    now: datetime | None = None,
) -> str:
    """Format one nearby spawn for a list.

    Args:
        name: Creature name
        rarity: Rarity tier
        distance_meters: Distance from the player
        expires_at: Spawn expiry
        now: Reference time for the countdown

    Returns:
        Formatted line with name, rarity, distance and time left
    """
    return (
        f"<b>{name}</b> {rarity_label(rarity)} - "
        f"{format_distance(distance_meters)} away, "
        f"flees in {format_time_left(expires_at, now)}"
    )


def format_catch_summary(name: str, rarity: str, cp_level: int) -> str:
    return f"<b>{name}</b> {rarity_label(rarity)} CP {cp_level}"


def format_gym_line(name: str, distance_meters: float, players: int, quorum: int) -> str:
    ready = "🔥" if players >= quorum else "⏳"
    return f"{ready} <b>{name}</b> - {format_distance(distance_meters)} away, trainers {players}/{quorum}"
