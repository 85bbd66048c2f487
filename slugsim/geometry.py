"""Geometry of cell contacts: overlaps, contact areas and neighbour search."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import numpy as np

from slugsim.cell import Cell

_SEARCH_RADIUS = 100.0


@dataclass
class OverlapResult:
    """How two ellipsoidal cells sit relative to each other.

    ``gap`` is the distance between the membranes along the line of centres
    (negative when the cells overlap), ``reach1`` and ``reach2`` the distances
    from each centre to its membrane along that line, ``direction`` the unit
    vector from cell 1 to cell 2, ``projection`` the centre-to-centre vector
    in the axis frame of cell 1 and ``distance`` the centre separation.
    """

    gap: float
    reach1: float
    reach2: float
    direction: np.ndarray
    projection: np.ndarray
    distance: float

    @property
    def overlapping(self) -> bool:
        return self.gap < 0


@dataclass
class Contact:
    """An overlapping neighbour of a cell."""

    neighbour: int
    distance: float
    projection: np.ndarray
    gap: float
    reach1: float
    reach2: float


def vdot(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of two 3-vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def surface(dist: float, d1: float, d2: float) -> float:
    """Area of the disc where two spheres of radii d1 and d2 intersect.

    ``dist`` is the distance between the membranes.
    """
    r1sq = d1 * d1
    r2sq = d2 * d2
    h = d1 + dist + d2
    hh = h * h
    return (
        math.pi
        * (2.0 * hh * r1sq + 2.0 * hh * r2sq + 2.0 * r1sq * r2sq
           - hh * hh - r1sq * r1sq - r2sq * r2sq)
        / (4.0 * hh)
    )


def overlap(cell1: Cell, cell2: Cell, factor: float) -> OverlapResult:
    """Measure two cells along their line of centres, cells scaled by ``factor``."""
    between = np.asarray(cell2.center, dtype=float) - np.asarray(cell1.center, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        length_sq = float(between @ between)
        length = math.sqrt(length_sq)
        direction = between / np.float64(length)
        re1 = cell1.axes @ between
        re2 = -(cell2.axes @ between)
        len1 = np.sum((re1 / (factor * cell1.lengths)) ** 2) / 0.25
        len2 = np.sum((re2 / (factor * cell2.lengths)) ** 2) / 0.25
        reach1 = float(np.sqrt(np.float64(length_sq) / len1))
        reach2 = float(np.sqrt(np.float64(length_sq) / len2))
    return OverlapResult(
        gap=length - reach1 - reach2,
        reach1=reach1,
        reach2=reach2,
        direction=direction,
        projection=re1,
        distance=length,
    )


def find_nearest_cell(
    index: int,
    target: Sequence[float],
    center: Sequence[float],
    cone_cos: float,
    centers: Sequence[Sequence[float]],
) -> Optional[int]:
    """Index of the nearest other cell within the cone about ``target``.

    ``cone_cos`` is the cosine of the cone's half angle. Only cells closer
    than 100 are considered; ``None`` when no cell qualifies.
    """
    target = np.asarray(target, dtype=float)
    center = np.asarray(center, dtype=float)
    nearest: Optional[int] = None
    min_length = _SEARCH_RADIUS
    with np.errstate(divide="ignore", invalid="ignore"):
        target_unit = target / np.sqrt(target @ target)
        for j, other in enumerate(np.asarray(centers, dtype=float)):
            if j == index:
                continue
            offset = other - center
            offset_length = float(np.sqrt(offset @ offset))
            cosine = float((offset / np.float64(offset_length)) @ target_unit)
            if cone_cos < cosine and offset_length < min_length:
                min_length = offset_length
                nearest = j
    return nearest


def find_contacts(
    cells: Sequence[Cell],
    index: int,
    centers: Optional[Sequence[Sequence[float]]],
    factor: float,
) -> list[Contact]:
    """Overlapping neighbours of ``cells[index]``, in index order.

    ``centers`` overrides the cells' own centres when given.
    """
    if centers is None:
        positions = [cell.center for cell in cells]
    else:
        positions = list(np.asarray(centers, dtype=float))
    placed = [replace(cell, center=np.asarray(pos, dtype=float))
              for cell, pos in zip(cells, positions)]
    me = placed[index]
    contacts = []
    for j, other in enumerate(placed):
        if j == index:
            continue
        result = overlap(me, other, factor)
        if result.overlapping:
            contacts.append(
                Contact(
                    neighbour=j,
                    distance=result.distance,
                    projection=result.projection,
                    gap=result.gap,
                    reach1=result.reach1,
                    reach2=result.reach2,
                )
            )
    return contacts