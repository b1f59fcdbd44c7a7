"""Shortlink favorites service."""
