"""Seed database with creature types and gyms."""

import asyncio
import json
import uuid
from pathlib import Path

from geocatch.database import async_session_factory, init_db, insert_for
from geocatch.database.models import CreatureType, Gym
from geocatch.logging import get_logger, setup_logging

logger = get_logger(__name__)

DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"


def load_json(name: str) -> list[dict]:
    path = DATA_DIR / name
    if not path.exists():
        logger.warning("Data file not found", path=str(path))
        return []
    with open(path) as f:
        return json.load(f)


async def seed_creature_types() -> None:
    """Seed creature types from JSON, updating existing rows."""
    creatures = load_json("creature_types.json")

    async with async_session_factory() as session:
        for creature in creatures:
            values = {
                "id": creature["id"],
                "name": creature["name"],
                "rarity": creature["rarity"],
                "region_locked": creature.get("region_locked", False),
                "allowed_countries": creature.get("allowed_countries", []),
                "base_spawn_weight": creature.get("base_spawn_weight", 1.0),
                "description": creature.get("description"),
                "sprite_url": creature.get("sprite_url"),
            }
            stmt = insert_for(session, CreatureType).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=["id"],
                set_={k: v for k, v in values.items() if k != "id"},
            )
            await session.execute(stmt)
        await session.commit()

    logger.info("Seeded creature types", count=len(creatures))


async def seed_gyms() -> None:
    """Seed gyms from JSON, updating existing rows."""
    gyms = load_json("gyms.json")

    async with async_session_factory() as session:
        for gym in gyms:
            stmt = insert_for(session, Gym).values(
                id=uuid.UUID(gym["id"]),
                name=gym["name"],
                latitude=gym["latitude"],
                longitude=gym["longitude"],
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["id"],
                set_={
                    "name": gym["name"],
                    "latitude": gym["latitude"],
                    "longitude": gym["longitude"],
                },
            )
            await session.execute(stmt)
        await session.commit()

    logger.info("Seeded gyms", count=len(gyms))


async def main() -> None:
    setup_logging()
    await init_db()
    await seed_creature_types()
    await seed_gyms()
    logger.info("Database seeding complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
