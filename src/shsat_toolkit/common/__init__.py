"""
Common helpers shared across the toolkit: topic bucket classification,
shuffling, answer grading, and locked file access.
"""

from .buckets import Bucket, BUCKET_PRIORITY, bucket_of, count_by_bucket
from .shuffle import shuffle, pick_n
from .grading import parse_to_number, is_grid_correct, is_answer_correct

__all__ = [
    "Bucket",
    "BUCKET_PRIORITY",
    "bucket_of",
    "count_by_bucket",
    "shuffle",
    "pick_n",
    "parse_to_number",
    "is_grid_correct",
    "is_answer_correct",
]
