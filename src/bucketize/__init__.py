"""
bucketize

Ordered first-match classification of numeric values into ranges.
"""

from .batch import classify_array, classify_many, classify_series
from .bucketizer import Bucket, Bucketizer
from .config_loader import load_bucket_sets, load_bucketizer
from .logging_config import setup_logging

__all__ = [
    "Bucket",
    "Bucketizer",
    "classify_array",
    "classify_many",
    "classify_series",
    "load_bucket_sets",
    "load_bucketizer",
    "setup_logging",
]

__version__ = "0.1.0"
