"""Helpers shared across Meridian sub-packages."""
