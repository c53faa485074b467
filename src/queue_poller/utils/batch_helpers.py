"""
Module: batch_helpers.py
Description: Utility functions for SQS batch operations.

SQS batch APIs accept at most ten entries per call. These helpers split
larger lists into service-sized chunks and validate batch sizes before
a request is dispatched.

Key Components:
- chunk_list(): Split lists into smaller chunks
- validate_batch_size(): Validate batch size constraints

Dependencies: typing
"""

from typing import List, TypeVar, Any

T = TypeVar('T')

MAX_BATCH_SIZE = 10


def chunk_list(items: List[T], chunk_size: int = MAX_BATCH_SIZE) -> List[List[T]]:
    """
    Split a list into smaller chunks of specified size.

    Args:
        items: List to split into chunks
        chunk_size: Maximum size of each chunk

    Returns:
        List of chunks, where each chunk is a list of items

    Raises:
        ValueError: If chunk_size is not positive

    Example:
        >>> chunk_list([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if not isinstance(items, list):
        raise ValueError("items must be a list")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]


def validate_batch_size(items: List[Any], max_size: int = MAX_BATCH_SIZE) -> None:
    """
    Validate that a batch is non-empty and doesn't exceed the maximum size.

    Args:
        items: List of items to validate
        max_size: Maximum allowed batch size

    Raises:
        ValueError: If batch is empty or its size exceeds maximum
    """
    if not items:
        raise ValueError("batch must contain at least one entry")
    if len(items) > max_size:
        raise ValueError(
            f"batch size {len(items)} exceeds maximum of {max_size} entries"
        )
