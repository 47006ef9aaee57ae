"""Error taxonomy for the spawn and catch engine.

Catch failures each map to a different player action (move closer, pick
another target, recruit more players), so every gate has its own type and a
``message`` suitable for showing to the player as-is.
"""


class GeoCatchError(Exception):
    """Base class for all engine errors."""


class InvalidCoordinateError(GeoCatchError, ValueError):
    """Raised when a latitude/longitude pair is not a usable coordinate."""

    def __init__(self, lat: object, lon: object) -> None:
        self.lat = lat
        self.lon = lon
        super().__init__(f"Invalid coordinate: lat={lat!r}, lon={lon!r}")


class AuthRequiredError(GeoCatchError):
    """Raised when a mutating operation is invoked without an authenticated user."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Authentication required for {operation}")


class PersistenceError(GeoCatchError):
    """Raised when the store rejects or fails a write. Nothing was persisted."""


class CatchError(GeoCatchError):
    """Base class for catch attempts that did not produce a Catch."""

    message = "You couldn't catch this creature."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class SpawnNotFoundError(CatchError):
    message = "This creature is no longer here. It was caught or ran away."


class SpawnExpiredError(CatchError):
    message = "This creature has run away!"


class AlreadyCaughtError(CatchError):
    message = "Someone else caught this creature first!"


class OutOfRangeError(CatchError):
    def __init__(self, distance_meters: float, max_distance_meters: float) -> None:
        self.distance_meters = distance_meters
        self.max_distance_meters = max_distance_meters
        super().__init__(
            f"You are too far away! ({distance_meters:.0f}m away, "
            f"need to be within {max_distance_meters:.0f}m)"
        )


class QuorumNotMetError(CatchError):
    def __init__(self, current: int, required: int) -> None:
        self.current = current
        self.required = required
        super().__init__(
            f"Not enough trainers at this gym! ({current}/{required} present)"
        )
