"""
Extraction layer components for worksheet analysis.
"""

from .column_resolver import (
    ColumnResolver,
    ColumnLayout,
    has_data_range,
    DEFAULT_SOURCE_COLUMN,
    DEFAULT_TARGET_COLUMN,
)
from .row_extractor import RowExtractor, ExtractionResult

__all__ = [
    'ColumnResolver',
    'ColumnLayout',
    'has_data_range',
    'DEFAULT_SOURCE_COLUMN',
    'DEFAULT_TARGET_COLUMN',
    'RowExtractor',
    'ExtractionResult'
]
