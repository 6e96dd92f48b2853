"""Miniflux Reader - a minimal web front-end for Miniflux."""

__version__ = "0.1.0"
