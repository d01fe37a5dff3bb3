"""Transfer objects."""
