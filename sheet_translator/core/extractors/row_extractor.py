"""
Row Extractor - Collects the translatable cells of the source column.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from openpyxl.worksheet.worksheet import Worksheet

from ..schemas.job import TranslatableRow
from .column_resolver import header_row, peek_cell

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Rows to translate and their distinct texts in first-seen order."""
    rows: List[TranslatableRow] = field(default_factory=list)
    unique_strings: List[str] = field(default_factory=list)


class RowExtractor:

    def extract(self, sheet: Worksheet, source_column: int,
                target_column: int) -> ExtractionResult:
        """
        Walk every row below the header and keep non-empty text cells.

        Args:
            sheet: Worksheet with a declared data range
            source_column: Zero-based column holding the original text
            target_column: Zero-based column receiving the translation

        Returns:
            ExtractionResult; row indices are zero-based
        """
        result = ExtractionResult()
        seen = set()

        first_row = header_row(sheet) + 1
        for row in range(first_row, sheet.max_row + 1):
            cell = peek_cell(sheet, row, source_column + 1)
            if cell is None:
                continue
            if cell.data_type != "s" or not isinstance(cell.value, str):
                continue
            original = cell.value.strip()
            if not original:
                continue

            result.rows.append(TranslatableRow(
                row=row - 1,
                original=original,
                target_column=target_column
            ))
            if original not in seen:
                seen.add(original)
                result.unique_strings.append(original)

        logger.info(
            f"Found {len(result.rows)} rows to translate "
            f"({len(result.unique_strings)} unique strings)"
        )
        return result
