"""Forces between cells and the drag that turns them into velocities."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from slugsim.cell import PST, Cell
from slugsim.ellipsoid import find_new_ellipsoid_size
from slugsim.geometry import find_contacts, find_nearest_cell, overlap, surface
from slugsim.params import Parameters

_MU_FLUID = 0.1  # drag of the surrounding fluid per unit of free surface
_MU_CELL = 20 * _MU_FLUID  # drag between cells per unit of shared surface

_AREA_FACTOR = 1.2  # expansion used when measuring contact areas
_ADHESION_FACTOR = 1.4  # expansion used for normal adhesion

_BOUNDARY_RADIUS = 5.0
_BOUNDARY_FORCE = 10.0
_BOUNDARY_TOP = 55.0

_NUCLEUS_RANGE_SQ = 4.0


def _wall_force(coordinate: float) -> float:
    """Push back from the walls at 0 and at the top along one coordinate."""
    if 0.0 < coordinate < _BOUNDARY_RADIUS:
        bottom = _BOUNDARY_FORCE * (_BOUNDARY_RADIUS - coordinate)
    elif coordinate < 0.0:
        bottom = _BOUNDARY_RADIUS * _BOUNDARY_FORCE
    else:
        bottom = 0.0
    if _BOUNDARY_TOP - _BOUNDARY_RADIUS < coordinate < _BOUNDARY_TOP:
        top = _BOUNDARY_FORCE * (_BOUNDARY_TOP - _BOUNDARY_RADIUS - coordinate)
    elif coordinate > _BOUNDARY_TOP:
        top = -_BOUNDARY_RADIUS * _BOUNDARY_FORCE
    else:
        top = 0.0
    return bottom + top


def boundary_forces(centers: Sequence[Sequence[float]]) -> np.ndarray:
    """Forces keeping the cells between the walls in x and z.

    The slug moves freely along y, so the y components are zero.
    """
    positions = np.asarray(centers, dtype=float).reshape(-1, 3)
    forces = np.zeros_like(positions)
    forces[:, 0] = [_wall_force(float(x)) for x in positions[:, 0]]
    forces[:, 2] = [_wall_force(float(z)) for z in positions[:, 2]]
    return forces


def update_contact_areas(cells: Sequence[Cell], area_cell: float) -> None:
    """Store each cell's contact areas as fractions of ``area_cell``.

    ``cell.area[j]`` is the area shared with cell ``j``; ``cell.area[i]``
    for the cell itself is the remaining fraction exposed to fluid, never
    below zero.
    """
    count = len(cells)
    for i in range(count):
        for j in range(i + 1, count):
            result = overlap(cells[i], cells[j], _AREA_FACTOR)
            shared = (
                surface(result.gap, result.reach1, result.reach2)
                if result.overlapping
                else 0.0
            )
            cells[i].area[j] = shared / area_cell
            cells[j].area[i] = shared / area_cell
        covered = sum(float(cells[i].area[j]) for j in range(count) if j != i)
        free = 1.0 - covered
        cells[i].area[i] = free if free >= 0 else 0.0


def _spring_constants(cell: Cell) -> np.ndarray:
    return np.array(
        [
            value
            for axis in (cell.a, cell.b, cell.c)
            for value in (axis.kmaxwell_spring, axis.kspring)
        ],
        dtype=float,
    )


@dataclass
class ForceModel:
    """Active, adhesive, elastic and boundary forces on a cell aggregate."""

    adhesion_normal: np.ndarray
    adhesion_drag: np.ndarray
    motive_forces: tuple[float, float]
    cone_angle_psp: float
    cone_angle_pst: float
    diameter: float
    volume: float
    overlap_factor: float = 1.0

    @classmethod
    def from_parameters(
        cls, parameters: Parameters, overlap_factor: float = 1.0
    ) -> "ForceModel":
        """Build a model from a parameter set."""
        return cls(
            adhesion_normal=parameters.adhesion_normal,
            adhesion_drag=parameters.adhesion_drag,
            motive_forces=parameters.motive_forces,
            cone_angle_psp=parameters.cone_angle_psp,
            cone_angle_pst=parameters.cone_angle_pst,
            diameter=parameters.dia,
            volume=parameters.cell_volume,
            overlap_factor=overlap_factor,
        )

    def _positions(self, cells: Sequence[Cell], centers) -> np.ndarray:
        return np.asarray(centers, dtype=float).reshape(len(cells), 3)

    def _add_adhesion(self, placed: Sequence[Cell], forces: np.ndarray) -> None:
        for i, first in enumerate(placed):
            for j in range(i + 1, len(placed)):
                second = placed[j]
                alpha = float(self.adhesion_normal[first.cell_type][second.cell_type])
                result = overlap(first, second, _ADHESION_FACTOR)
                if not result.overlapping:
                    continue
                reach = result.reach1 + result.reach2
                if result.gap > -0.1 * reach:
                    magnitude = alpha * surface(result.gap, result.reach1, result.reach2)
                elif result.gap > -0.3 * reach:
                    area = surface(-0.1 * reach, result.reach1, result.reach2)
                    decline = (result.gap + 0.3 * reach) / (0.2 * reach)
                    magnitude = alpha * area * decline * decline
                else:
                    continue
                force = magnitude * np.asarray(result.direction, dtype=float)
                forces[i] += force
                forces[j] -= force

    def _add_motive(
        self, cells: Sequence[Cell], positions: np.ndarray, forces: np.ndarray
    ) -> None:
        reach_out = 3.0 * self.diameter
        for i, cell in enumerate(cells):
            angle = self.cone_angle_pst if cell.cell_type == PST else self.cone_angle_psp
            target = reach_out * np.asarray(cell.a.vector, dtype=float)
            j = find_nearest_cell(i, target, positions[i], math.cos(angle), positions)
            if j is None:
                continue
            offset = positions[j] - positions[i]
            force = self.motive_forces[cell.cell_type] * offset / np.linalg.norm(offset)
            forces[i] += force
            forces[j] -= force

    def _add_rheology(
        self, cells: Sequence[Cell], positions: np.ndarray, forces: np.ndarray
    ) -> None:
        scaled_volume = self.overlap_factor ** 3 * self.volume
        for i, cell in enumerate(cells):
            contacts = find_contacts(cells, i, positions, self.overlap_factor)
            if not contacts:
                continue
            deformation = find_new_ellipsoid_size(
                cell.axes,
                _spring_constants(cell),
                contacts,
                self.overlap_factor * cell.lengths,
                scaled_volume,
            )
            forces[i] += deformation.self_force
            for j, force in zip(deformation.neighbours, deformation.neighbour_forces):
                forces[j] += force
            # the nuclei keep the centres apart
            for j in deformation.neighbours:
                separation = positions[i] - positions[j]
                dist_sq = np.float64(separation @ separation)
                if dist_sq < _NUCLEUS_RANGE_SQ:
                    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
                        magnitude = 10.0 * (np.exp(3.0 * (1.0 / dist_sq - 0.25)) - 1.0)
                        push = separation * magnitude / np.sqrt(dist_sq)
                    forces[i] += push
                    forces[j] -= push

    def rhs(self, cells: Sequence[Cell], centers: Sequence[Sequence[float]]) -> np.ndarray:
        """Total force on each cell with its centre at ``centers``; shape (n, 3)."""
        positions = self._positions(cells, centers)
        placed = [replace(cell, center=pos.copy()) for cell, pos in zip(cells, positions)]
        forces = np.zeros((len(cells), 3))
        self._add_adhesion(placed, forces)
        self._add_motive(cells, positions, forces)
        self._add_rheology(cells, positions, forces)
        forces += boundary_forces(positions)
        return forces

    def mass_matrix(self, cells: Sequence[Cell]) -> np.ndarray:
        """Drag matrix over all coordinates, built from the stored contact areas."""
        count = len(cells)
        drag = np.zeros((count, count))
        for i, cell in enumerate(cells):
            drag[i, i] += float(cell.area[i]) * _MU_FLUID
            for j, other in enumerate(cells):
                if j == i:
                    continue
                coupling = (
                    float(cell.area[j])
                    * _MU_CELL
                    * float(self.adhesion_drag[cell.cell_type][other.cell_type])
                )
                drag[i, j] -= coupling
                drag[i, i] += coupling
        return np.kron(drag, np.eye(3))

    def _velocity(
        self, mass: np.ndarray, cells: Sequence[Cell], positions: np.ndarray
    ) -> np.ndarray:
        forces = self.rhs(cells, positions)
        return np.linalg.solve(mass, forces.ravel()).reshape(len(cells), 3)

    def velocity(self, cells: Sequence[Cell], centers: Sequence[Sequence[float]]) -> np.ndarray:
        """Velocities of the cells: the forces divided through the drag matrix.

        Raises ``numpy.linalg.LinAlgError`` when the drag matrix is singular.
        """
        return self._velocity(self.mass_matrix(cells), cells, self._positions(cells, centers))

    def step(
        self, cells: Sequence[Cell], centers: Sequence[Sequence[float]], dt: float
    ) -> np.ndarray:
        """New centres after one fourth-order Runge-Kutta step of length ``dt``.

        The drag matrix is held fixed over the step.
        """
        mass = self.mass_matrix(cells)
        start = self._positions(cells, centers)
        k1 = self._velocity(mass, cells, start)
        k2 = self._velocity(mass, cells, start + 0.5 * dt * k1)
        k3 = self._velocity(mass, cells, start + 0.5 * dt * k2)
        k4 = self._velocity(mass, cells, start + dt * k3)
        return start + dt / 6.0 * (k1 + 2.0 * k2 + 2.0 * k3 + k4)