"""Writing the state of the cell aggregate to text streams."""

from __future__ import annotations

from typing import Sequence, TextIO

import numpy as np

from slugsim.cell import Cell

SUMMARY_HEADER = (
    "a length, b length, c length, type, x centre, y centre, z centre, "
    "a vector, b vector, c vector, ncells"
)


def format_number(value: float) -> str:
    """Format a number the way a default-configured text stream does.

    Integers are written whole; other numbers with six significant digits,
    dropping trailing zeros.
    """
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return str(int(value))
    return f"{float(value):g}"


def _joined(values: Sequence[float], separator: str) -> str:
    return separator.join(format_number(value) for value in values)


def write_summary(stream: TextIO, cells: Sequence[Cell]) -> None:
    """Write a header line, then every cell's fields followed by the cell count.

    Each cell contributes its three lengths, its type, its centre and its
    three axis vectors, every value followed by a comma, all on one line.
    """
    stream.write(SUMMARY_HEADER + "\n")
    for cell in cells:
        values = [cell.a.length, cell.b.length, cell.c.length, int(cell.cell_type)]
        values.extend(float(x) for x in cell.center)
        for vector in (cell.a.vector, cell.b.vector, cell.c.vector):
            values.extend(float(x) for x in vector)
        stream.write("".join(format_number(value) + "," for value in values))
    stream.write(f"{len(cells)}\n")


def write_detail(stream: TextIO, cells: Sequence[Cell]) -> None:
    """Write seven lines per cell.

    The lines hold the centre, axes a, b and c, the three lengths, the
    heading and the cell type.
    """
    for cell in cells:
        stream.write(_joined(cell.center, " ") + "\n")
        stream.write(_joined(cell.a.vector, " ") + "\n")
        stream.write(_joined(cell.b.vector, " ") + "\n")
        stream.write(_joined(cell.c.vector, " ") + "\n")
        stream.write(_joined([cell.a.length, cell.b.length, cell.c.length], " ") + "\n")
        stream.write(_joined(cell.direction, " ") + "\n")
        stream.write(f"{int(cell.cell_type)}\n")