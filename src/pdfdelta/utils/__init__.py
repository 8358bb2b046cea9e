"""Utility helpers shared across pdfdelta modules."""
