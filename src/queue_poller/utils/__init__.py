"""
Module: utils
Description: Package initialization for utility functions.

This package contains shared helpers used throughout the library.

Current utilities:
- logger: Structured logging configuration and helpers
- batch_helpers: Chunking and size checks for SQS batch calls
"""

__all__ = []
