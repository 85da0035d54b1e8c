"""
Utility functions and helpers.
"""

from orgscan.utils.logging_config import setup_logging

__all__ = [
    "setup_logging",
]
