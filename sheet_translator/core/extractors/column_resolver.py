"""
Column Resolver - Locates the source and target columns of a worksheet.
Matches header-row text against ordered candidate lists.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from openpyxl.cell.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

Candidate = Union[str, re.Pattern[str]]

DEFAULT_SOURCE_COLUMN = 1  # column B
DEFAULT_TARGET_COLUMN = 3  # column D

DEFAULT_SOURCE_CANDIDATES: List[Candidate] = [
    "Field Value",
    "Source",
    "Source text",
    "Original",
    "Original text",
    "English",
    "Text",
    re.compile(r"field\s*value", re.IGNORECASE),
    re.compile(r"source", re.IGNORECASE),
    re.compile(r"original", re.IGNORECASE),
    re.compile(r"english", re.IGNORECASE),
]

DEFAULT_TARGET_CANDIDATES: List[Candidate] = [
    "Translated string (nb)",
    "Translation",
    "Translated",
    "Norwegian",
    "Target",
    "nb",
    re.compile(r"translat", re.IGNORECASE),
    re.compile(r"norw", re.IGNORECASE),
    re.compile(r"\(nb\)", re.IGNORECASE),
    re.compile(r"target", re.IGNORECASE),
]


@dataclass
class ColumnLayout:
    """Zero-based indices of the columns the pipeline reads and writes."""
    source: int
    target: int


def has_data_range(sheet: Worksheet) -> bool:
    """
    Check whether the worksheet declares any cell range at all.

    openpyxl reports "A1:A1" for both an empty sheet and a sheet holding a
    single value in A1, so the A1 value decides between the two.
    """
    if sheet.dimensions != "A1:A1":
        return True
    cell = peek_cell(sheet, 1, 1)
    return cell is not None and cell.value is not None


def peek_cell(sheet: Worksheet, row: int, column: int) -> Optional[Cell]:
    """
    Return the cell at a 1-based position without creating it.

    ``Worksheet.cell`` and ``iter_rows`` add empty cells for every position
    they visit, and those cells would be saved with the workbook.
    """
    return sheet._cells.get((row, column))


def header_row(sheet: Worksheet) -> int:
    """1-based worksheet row holding the column headers."""
    return sheet.min_row


def header_texts(sheet: Worksheet) -> List[Optional[str]]:
    """
    Raw header text per column, indexed from column A.

    Args:
        sheet: Worksheet with a declared data range

    Returns:
        List where position i holds the text of column i, or None when empty
    """
    row = header_row(sheet)
    texts: List[Optional[str]] = []
    for column in range(1, sheet.max_column + 1):
        cell = peek_cell(sheet, row, column)
        texts.append(None if cell is None or cell.value is None else str(cell.value))
    return texts


class ColumnResolver:
    """
    Resolves source and target columns from header text.

    Exact candidates win over patterns; when neither matches, the fixed
    default column is used so resolution never fails.
    """

    def __init__(self,
                 source_candidates: Sequence[Candidate] = DEFAULT_SOURCE_CANDIDATES,
                 target_candidates: Sequence[Candidate] = DEFAULT_TARGET_CANDIDATES,
                 default_source: int = DEFAULT_SOURCE_COLUMN,
                 default_target: int = DEFAULT_TARGET_COLUMN):
        self.source_candidates = list(source_candidates)
        self.target_candidates = list(target_candidates)
        self.default_source = default_source
        self.default_target = default_target

    def resolve_sheet(self, sheet: Worksheet) -> ColumnLayout:
        """Resolve both columns from the header row of a worksheet."""
        return self.resolve(header_texts(sheet))

    def resolve(self, headers: Sequence[Optional[str]]) -> ColumnLayout:
        """
        Resolve both columns from a list of header texts.

        Args:
            headers: Header cell text by zero-based column index

        Returns:
            ColumnLayout with the resolved indices
        """
        source = self._find_column(headers, self.source_candidates)
        if source is None:
            logger.info(f"No source header matched, using column {self.default_source}")
            source = self.default_source

        target = self._find_column(headers, self.target_candidates)
        if target is None:
            logger.info(f"No target header matched, using column {self.default_target}")
            target = self.default_target

        logger.info(f"Resolved columns: source={source}, target={target}")
        return ColumnLayout(source=source, target=target)

    def _find_column(self, headers: Sequence[Optional[str]],
                     candidates: Sequence[Candidate]) -> Optional[int]:
        exact, patterns = _split_candidates(candidates)

        for candidate in exact:
            wanted = candidate.casefold()
            for index, text in enumerate(headers):
                if text is not None and text.strip().casefold() == wanted:
                    return index

        for pattern in patterns:
            for index, text in enumerate(headers):
                if text is not None and pattern.search(text):
                    return index

        return None


def _split_candidates(candidates: Sequence[Candidate]) -> Tuple[List[str], List[re.Pattern[str]]]:
    exact = [c for c in candidates if isinstance(c, str)]
    patterns = [c for c in candidates if not isinstance(c, str)]
    return exact, patterns
