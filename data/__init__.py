"""
Data Module
===========

Traffic-stop ingestion and the example records consumed by evaluation.

Provides:
- Example: immutable feature vector + Citation/Warning label
- Stop loading and cleaning (date/time parsing, speed extraction)
- Exploratory summaries of the cleaned table
"""

from .example import Example, examples_to_arrays, labels_of
from .stops_loader import (
    StopDataError,
    load_stops,
    clean_stops,
    build_examples,
    load_examples,
    extract_speed_pair,
)
from .exploration import summarize_stops

__all__ = [
    'Example',
    'examples_to_arrays',
    'labels_of',
    'StopDataError',
    'load_stops',
    'clean_stops',
    'build_examples',
    'load_examples',
    'extract_speed_pair',
    'summarize_stops',
]
