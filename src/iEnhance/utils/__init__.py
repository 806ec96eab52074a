"""Utility helpers shared across iEnhance."""
