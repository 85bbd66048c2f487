"""Choosing cell headings and turning the cells' axes towards them."""

from __future__ import annotations

import math
from typing import Optional, Protocol, Sequence

import numpy as np

from slugsim.cell import PST, Cell
from slugsim.geometry import vdot

_ALIGNED = 1e-5


class _RandomSource(Protocol):
    def random(self) -> float: ...


def set_direction(
    cells: Sequence[Cell],
    cone_angle_psp: float,
    cone_angle_pst: float,
    rng: _RandomSource,
) -> None:
    """Give every cell a random heading within a cone about the y axis.

    The cone's half angle depends on the cell type.
    """
    for cell in cells:
        cone_angle = cone_angle_pst if cell.cell_type == PST else cone_angle_psp
        phi = rng.random() * cone_angle
        theta = rng.random() * 2.0 * math.pi
        cell.direction = np.array(
            [math.cos(theta) * math.sin(phi), math.cos(phi), math.sin(theta) * math.sin(phi)]
        )


def rotation_matrix(axis: Sequence[float], angle: float) -> np.ndarray:
    """Matrix of the rotation by ``angle`` about ``axis``."""
    x, y, z = np.asarray(axis, dtype=float) / np.linalg.norm(axis)
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c
    return np.array(
        [
            [x * x * t + c, x * y * t - z * s, x * z * t + y * s],
            [x * y * t + z * s, y * y * t + c, y * z * t - x * s],
            [x * z * t - y * s, y * z * t + x * s, z * z * t + c],
        ]
    )


def initialize_orient(
    cells: Sequence[Cell], dt: float, turning_time: float
) -> list[Optional[np.ndarray]]:
    """Per-step rotations that turn each cell's long axis to its heading.

    A cell facing its heading needs no rotation; one facing directly away is
    repolarised by flipping axis a. Either gives ``None``. Otherwise the
    rotation turns axis a through ``dt / turning_time`` of the angle.
    """
    rotations: list[Optional[np.ndarray]] = []
    for cell in cells:
        a = np.asarray(cell.a.vector, dtype=float)
        heading = np.asarray(cell.direction, dtype=float)
        cosine = vdot(a, heading)
        if abs(1.0 - cosine) < _ALIGNED:
            rotations.append(None)
        elif abs(1.0 + cosine) < _ALIGNED:
            cell.a.vector = -a
            rotations.append(None)
        else:
            angle = math.acos(max(-1.0, min(1.0, cosine)))
            rotations.append(rotation_matrix(np.cross(a, heading), angle * dt / turning_time))
    return rotations


def orient(cells: Sequence[Cell], rotations: Sequence[Optional[np.ndarray]]) -> None:
    """Rotate the whole axis frame of each cell that has a rotation."""
    for cell, rotation in zip(cells, rotations):
        if rotation is None:
            continue
        cell.a.vector = rotation @ np.asarray(cell.a.vector, dtype=float)
        cell.b.vector = rotation @ np.asarray(cell.b.vector, dtype=float)
        cell.c.vector = rotation @ np.asarray(cell.c.vector, dtype=float)