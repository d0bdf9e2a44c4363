"""
Utility functions and helpers for the bucket list tracker.

This module contains shared helpers, such as logging setup, used across the
stores and the Lambda handler.
"""

from .logs import setup_logging

__all__ = ["setup_logging"]
