"""Visco-elastic relaxation and contact-driven reshaping of cell radii."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from scipy.integrate import solve_ivp

from slugsim.cell import Cell
from slugsim.ellipsoid import Deformation, find_new_ellipsoid_size
from slugsim.geometry import find_contacts

logger = logging.getLogger(__name__)

_ABSOLUTE_TOLERANCE = 1e-5
_RELATIVE_TOLERANCE = 1e-9


def _axis_constants(cell: Cell) -> np.ndarray:
    """Rows of (Maxwell spring, parallel spring, viscosity) for axes a, b, c."""
    return np.array(
        [[axis.kmaxwell_spring, axis.kspring, axis.mu] for axis in (cell.a, cell.b, cell.c)],
        dtype=float,
    )


def _spring_constants(cell: Cell) -> np.ndarray:
    """Maxwell and parallel spring constants of axes a, b and c in turn."""
    return np.array(
        [
            value
            for axis in (cell.a, cell.b, cell.c)
            for value in (axis.kmaxwell_spring, axis.kspring)
        ],
        dtype=float,
    )


def radii_rate(
    t: float,
    radii: Sequence[float],
    springs: Sequence[Sequence[float]],
    diameter: float,
) -> np.ndarray:
    """Rate of change of the axis deviations from the rest diameter.

    ``radii`` holds the deviations of axes a, b and c; ``springs`` has one
    row per axis of (Maxwell spring, parallel spring, viscosity). A shared
    internal pressure couples the three axes.
    """
    a, b, c = np.asarray(radii, dtype=float)
    (kma, ka, mua), (kmb, kb, mub), (kmc, kc, muc) = np.asarray(springs, dtype=float)
    d = np.float64(diameter)
    ga = ka / (mua * (kma + ka))
    gb = kb / (mub * (kmb + kb))
    gc = kc / (muc * (kmc + kc))
    weight = ga * (b + d) * (c + d) + gb * (a + d) * (c + d) + gc * (b + d) * (b + d)
    pressure = (
        ga * kma * a * (b + d) * (c + d)
        + gb * kmb * b * (a + d) * (c + d)
        + gc * kmc * c * (b + d) * (a + d)
    ) / weight
    return np.array(
        [ga * (pressure - kma * a), gb * (pressure - kmb * b), gc * (pressure - kmc * c)]
    )


def evolve_cell_radii(cells: Sequence[Cell], dt: float, diameter: float) -> None:
    """Relax each cell's axis lengths over one time step of length ``dt``.

    Cells are updated in order; if an integration fails, the remaining
    cells are left as they are.
    """
    for index, cell in enumerate(cells):
        start = cell.lengths - diameter
        solution = solve_ivp(
            radii_rate,
            (0.0, dt),
            start,
            method="BDF",
            args=(_axis_constants(cell), diameter),
            atol=_ABSOLUTE_TOLERANCE,
            rtol=_RELATIVE_TOLERANCE,
        )
        if not solution.success:
            logger.warning("radius relaxation failed for cell %d: %s", index, solution.message)
            break
        final = solution.y[:, -1] + diameter
        cell.a.length, cell.b.length, cell.c.length = (float(x) for x in final)


def change_cell_radii(
    cells: Sequence[Cell], volume: float, overlap_factor: float = 1.0
) -> list[Deformation]:
    """Reshape every cell to fit the neighbours that overlap it.

    Overlaps are all measured before any cell changes shape. ``volume`` is
    the product of the radii of an undeformed cell.
    """
    contacts = [find_contacts(cells, index, None, overlap_factor) for index in range(len(cells))]
    scaled_volume = overlap_factor ** 3 * volume
    deformations = []
    for cell, found in zip(cells, contacts):
        deformation = find_new_ellipsoid_size(
            cell.axes,
            _spring_constants(cell),
            found,
            overlap_factor * cell.lengths,
            scaled_volume,
        )
        new = deformation.diameters / overlap_factor
        cell.a.length, cell.b.length, cell.c.length = (float(x) for x in new)
        deformations.append(deformation)
    return deformations