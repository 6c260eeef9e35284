from __future__ import annotations

"""
This module provides core functionality for the application.

It includes utilities for hashing and ID generation.
"""

from creative_pilot.core import hashing, ids

__all__ = [
    "hashing",
    "ids",
]
