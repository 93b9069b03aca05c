"""Shared service utilities for the routing gateway."""

from .result import Result

__all__ = ["Result"]
