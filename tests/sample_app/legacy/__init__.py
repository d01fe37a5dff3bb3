"""Classes whose short names collide with the entity package."""
