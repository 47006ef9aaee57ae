"""Game engine: geometry, spawning, gyms and catching."""
