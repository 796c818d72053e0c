"""
Splits a path-sorted run of records into capture sets.

ASIAir numbers the frames of a sequence 1, 2, 3, ... so a sequence index that
drops (or resets) relative to the previous file starts a new set.
"""
from typing import Callable, Iterable, Iterator, List, TypeVar

from ..models import CaptureRecord

T = TypeVar('T')


def slice_when(items: Iterable[T], is_boundary: Callable[[T, T], bool]) -> Iterator[List[T]]:
    """Yields maximal runs of items, cutting between a and b when is_boundary(a, b)."""
    batch: List[T] = []
    for item in items:
        if batch and is_boundary(batch[-1], item):
            yield batch
            batch = []
        batch.append(item)
    if batch:
        yield batch


def group_capture_sets(records: Iterable[CaptureRecord]) -> Iterator[List[CaptureRecord]]:
    return slice_when(records, lambda a, b: a.sequence_number > b.sequence_number)
