"""Per-user cooldowns stored in Redis."""

from redis.asyncio import Redis


async def acquire_cooldown(redis: Redis, key: str, seconds: int) -> bool:
    """Start a cooldown unless one is running. Returns True if acquired."""
    if seconds <= 0:
        return True
    return bool(await redis.set(f"geocatch:cooldown:{key}", "1", nx=True, ex=seconds))
