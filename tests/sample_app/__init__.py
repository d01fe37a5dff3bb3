"""Fixture domain used by the test suite."""
