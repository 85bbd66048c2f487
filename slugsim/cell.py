"""Cells modelled as ellipsoids with three visco-elastic axes."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

NCX = 3
NCZ = 3
NCY = 5  # direction of motion, usually the long direction of the slug
NCELLS = NCX * NCZ * NCY

PSP = 0  # prespore cell
PST = 1  # prestalk cell


def _zeros3() -> np.ndarray:
    return np.zeros(3)


def _zeros_cells() -> np.ndarray:
    return np.zeros(NCELLS)


@dataclass
class Axis:
    """One principal axis of a cell: unit direction, diameter and spring data."""

    vector: np.ndarray = field(default_factory=_zeros3)
    length: float = 0.0
    length_old: float = 0.0
    der_length: float = 0.0
    force: float = 0.0
    force_old: float = 0.0
    der_force: float = 0.0
    kmaxwell_spring: float = 0.0
    mu: float = 0.0
    kspring: float = 0.0


@dataclass(frozen=True)
class AxisMechanics:
    """Mechanical constants used to set up an axis."""

    kspring: float
    mu: float
    kmaxwell_spring: float


@dataclass
class Cell:
    """A cell with a centre, three axes, a heading and contact areas."""

    center: np.ndarray = field(default_factory=_zeros3)
    a: Axis = field(default_factory=Axis)
    b: Axis = field(default_factory=Axis)
    c: Axis = field(default_factory=Axis)
    motive_force: float = 0.0
    boundary_force: float = 0.0
    random_force: float = 0.0
    direction: np.ndarray = field(default_factory=_zeros3)
    area: np.ndarray = field(default_factory=_zeros_cells)
    cell_type: int = PSP

    @classmethod
    def create(
        cls,
        cell_type: int,
        center: Sequence[float],
        mechanics_a: AxisMechanics,
        mechanics_b: AxisMechanics,
        mechanics_c: AxisMechanics,
        motive_force: float,
        boundary_force: float,
        random_force: float,
        diameter: float,
        direction_a: Sequence[float],
        direction_b: Sequence[float],
    ) -> "Cell":
        """Build a spherical cell of the given diameter.

        Axis a takes its viscosity from ``mechanics_b``, as the model does.
        """
        cell = cls(
            center=np.array(center, dtype=float),
            motive_force=float(motive_force),
            boundary_force=float(boundary_force),
            random_force=float(random_force),
            cell_type=int(cell_type),
        )
        cell.a = Axis(
            length=float(diameter),
            kmaxwell_spring=mechanics_a.kmaxwell_spring,
            kspring=mechanics_a.kspring,
            mu=mechanics_b.mu,
        )
        cell.b = Axis(
            vector=np.array(direction_b, dtype=float),
            length=float(diameter),
            kmaxwell_spring=mechanics_b.kmaxwell_spring,
            kspring=mechanics_b.kspring,
            mu=mechanics_b.mu,
        )
        cell.c = Axis(
            length=float(diameter),
            kmaxwell_spring=mechanics_c.kmaxwell_spring,
            kspring=mechanics_c.kspring,
            mu=mechanics_c.mu,
        )
        cell.initialize_axes(*direction_a)
        return cell

    def initialize_axes(self, x: float, y: float, z: float) -> None:
        """Set up the axis frame.

        The frame always ends aligned with the coordinate axes; the
        requested long-axis direction does not survive the reset.
        """
        self.a.vector = np.array([1.0, 0.0, 0.0])
        self.b.vector = np.array([0.0, 1.0, 0.0])
        self.c.vector = np.array([0.0, 0.0, 1.0])

    @property
    def lengths(self) -> np.ndarray:
        """Diameters along axes a, b and c."""
        return np.array([self.a.length, self.b.length, self.c.length])

    @property
    def axes(self) -> np.ndarray:
        """Rows are the unit vectors of axes a, b and c."""
        return np.array([self.a.vector, self.b.vector, self.c.vector], dtype=float)

    def copy(self) -> "Cell":
        """Return an independent deep copy."""
        return _copy.deepcopy(self)