"""Utility helpers for plinkbed."""

from plinkbed.utils.logging import setup_logging

__all__ = ["setup_logging"]
