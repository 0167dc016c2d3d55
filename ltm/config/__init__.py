"""Configuration module: exports Settings."""

from ltm.config.settings import Settings

__all__ = ["Settings"]
