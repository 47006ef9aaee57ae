"""Centralized game constants for GeoCatch.

Rarity tiers, weight tables and geometry constants live here. Tunables
that operators may want to change per deployment are in ``geocatch.config``.
"""

# ------------------------------------------------------------------ #
# Geometry
# ------------------------------------------------------------------ #
EARTH_RADIUS_METERS: float = 6_371_000.0
METERS_PER_DEGREE_LAT: float = 111_320.0

# ------------------------------------------------------------------ #
# Rarity tiers, in selection order
# ------------------------------------------------------------------ #
RARITY_ORDER: tuple[str, ...] = ("common", "uncommon", "rare", "epic", "legendary")

BASE_RARITY_WEIGHTS: dict[str, float] = {
    "common": 0.60,
    "uncommon": 0.25,
    "rare": 0.10,
    "epic": 0.04,
    "legendary": 0.01,
}

# Park boost shifts weight from common toward rare/epic/legendary
PARK_RARITY_WEIGHTS: dict[str, float] = {
    "common": 0.50,
    "uncommon": 0.25,
    "rare": 0.15,
    "epic": 0.07,
    "legendary": 0.03,
}

# Quorum-gated gym spawns only ever draw from the top two tiers
GYM_RARITY_WEIGHTS: dict[str, float] = {
    "epic": 0.80,
    "legendary": 0.20,
}

GYM_RARITIES: tuple[str, ...] = tuple(GYM_RARITY_WEIGHTS)

# ------------------------------------------------------------------ #
# Catching
# ------------------------------------------------------------------ #
CP_LEVEL_MIN: int = 1
CP_LEVEL_MAX: int = 100

RARITY_LABELS: dict[str, str] = {
    "common": "⚪ Common",
    "uncommon": "🟢 Uncommon",
    "rare": "🔷 <b>Rare</b>",
    "epic": "🟣 <b>EPIC</b>",
    "legendary": "⭐ <b>LEGENDARY</b>",
}
