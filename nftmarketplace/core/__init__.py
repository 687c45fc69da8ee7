"""Core helpers: revert taxonomy and unit conversion."""
