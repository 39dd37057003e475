"""Delimited vote-table loading."""

import csv
from pathlib import Path
from typing import List, Union

from ..algorithms.errors import ShapeError
from .logging_config import get_logger

logger = get_logger(__name__)


def load_vote_table(
    path: Union[str, Path],
    *,
    has_header: bool = True,
    delimiter: str = ",",
) -> List[List[str]]:
    """Read a delimited vote table as rows of raw tokens.

    The first row is treated as a header and skipped unless
    ``has_header=False``. Blank lines are ignored.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ShapeError: If the file has no data rows or rows differ in length
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f, delimiter=delimiter)
        if has_header:
            header = next(reader, None)
            logger.debug("Skipping header with %d columns", len(header or []))
        rows = [row for row in reader if row and any(cell.strip() for cell in row)]

    if not rows:
        raise ShapeError(f"No data rows in {path}")
    width = len(rows[0])
    for i, row in enumerate(rows):
        if len(row) != width:
            raise ShapeError(
                f"{path}: data row {i} has {len(row)} columns; expected {width}"
            )
    logger.info("Loaded %d rows x %d columns from %s", len(rows), width, path)
    return rows
