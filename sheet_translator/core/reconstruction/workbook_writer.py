"""
Workbook Writer - Writes translations back and serializes the workbook.
"""

import io
import logging
from typing import Dict, Iterable

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..schemas.job import TranslatableRow

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def read_workbook(data: bytes) -> Workbook:
    return load_workbook(io.BytesIO(data))


class WorkbookWriter:

    def apply_translations(self, sheet: Worksheet, rows: Iterable[TranslatableRow],
                           cache: Dict[str, str]) -> int:
        """
        Set the target cell of every row to its cached translation.

        Args:
            sheet: Worksheet the rows were extracted from
            rows: Rows with zero-based indices
            cache: Original text to translation; missing entries write ""

        Returns:
            Number of cells written
        """
        written = 0
        for item in rows:
            cell = sheet.cell(row=item.row + 1, column=item.target_column + 1)
            cell.value = cache.get(item.original, "")
            written += 1
        logger.info(f"Wrote {written} translated cells")
        return written

    def serialize(self, workbook: Workbook) -> bytes:
        """Serialize every sheet of the workbook as .xlsx bytes."""
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()
