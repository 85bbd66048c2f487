"""Reshaping a cell's ellipsoid when neighbouring cells press into it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np
from scipy.optimize import least_squares, minimize

from slugsim.geometry import Contact

logger = logging.getLogger(__name__)

LOWER_BOUND = 4.0  # lower bound on a cell radius
UPPER_BOUND = 6.0  # upper bound on a cell radius

_MAX_LEAST_SQUARES_EVALUATIONS = 25


@dataclass
class Deformation:
    """New diameters of a cell and the forces its reshaping exerts.

    ``neighbour_forces[j]`` is the force on ``neighbours[j]``; ``self_force``
    is the opposite of their sum and acts on the deformed cell itself.
    """

    diameters: np.ndarray
    neighbours: tuple[int, ...]
    neighbour_forces: np.ndarray
    self_force: np.ndarray


def one_neighbour_objective(
    radii: Sequence[float], point: Sequence[float], sum_radii: float
) -> tuple[float, np.ndarray]:
    """Objective and gradient for a cell pressed by a single neighbour.

    Penalises ``point`` lying off the ellipsoid and the radii drifting from
    ``sum_radii`` in total.
    """
    r = np.asarray(radii, dtype=float)
    p = np.asarray(point, dtype=float)
    on_surface = float(np.sum(p * p / (r * r)) - 1.0)
    total = float(np.sum(r) / sum_radii - 1.0)
    gradient = 2.0 * on_surface * (-2.0 * p * p / r**3) + 2.0 * total / sum_radii
    return on_surface * on_surface + total * total, gradient


def two_neighbour_objective(
    radii: Sequence[float], point1: Sequence[float], point2: Sequence[float]
) -> tuple[float, np.ndarray]:
    """Objective and gradient for fitting an ellipsoid through two points."""
    r = np.asarray(radii, dtype=float)
    p1 = np.asarray(point1, dtype=float)
    p2 = np.asarray(point2, dtype=float)
    f1 = float(np.sum(p1 * p1 / (r * r)) - 1.0)
    f2 = float(np.sum(p2 * p2 / (r * r)) - 1.0)
    gradient = 2.0 * f2 * (-2.0 * p2 * p2 / r**3) + 2.0 * f1 * (-2.0 * p1 * p1 / r**3)
    return f1 * f1 + f2 * f2, gradient


def volume_constraint(radii: Sequence[float], volume: float) -> tuple[float, np.ndarray]:
    """Relative deviation of the radii's product from ``volume``, with gradient."""
    a, b, c = (float(x) for x in radii)
    gradient = np.array([b * c, a * c, a * b]) / volume
    return a * b * c / volume - 1.0, gradient


def ellipsoid_residuals(
    radii: Sequence[float], points: Sequence[Sequence[float]], volume: float
) -> np.ndarray:
    """Two residuals per point: distance off the surface and volume mismatch."""
    r = np.asarray(radii, dtype=float)
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    on_surface = np.sum(pts * pts / (r * r), axis=1) - 1.0
    volume_term = np.full(len(pts), np.prod(r) / volume - 1.0)
    return np.column_stack([on_surface, volume_term]).ravel()


def _single_contact_point(contact: Contact) -> np.ndarray:
    if abs(contact.gap) >= contact.distance:
        # the overlap reaches past the centre: deform less
        reach = contact.distance - 0.7 * contact.reach2
    else:
        reach = contact.reach1 - abs(contact.gap * 0.5)
    return reach * np.abs(np.asarray(contact.projection, dtype=float)) / contact.distance


def _contact_point(contact: Contact) -> np.ndarray:
    reach = contact.reach1 - abs(contact.gap * 0.5)
    return reach * np.asarray(contact.projection, dtype=float) / contact.distance


def _start(diameters: np.ndarray) -> np.ndarray:
    return np.clip(0.5 * diameters, LOWER_BOUND, UPPER_BOUND)


def _minimise_with_volume(
    objective: Callable[[np.ndarray], tuple[float, np.ndarray]],
    diameters: np.ndarray,
    volume: float,
) -> Optional[np.ndarray]:
    constraint = {
        "type": "eq",
        "fun": lambda r: volume_constraint(r, volume)[0],
        "jac": lambda r: volume_constraint(r, volume)[1],
    }
    result = minimize(
        objective,
        _start(diameters),
        jac=True,
        method="SLSQP",
        bounds=[(LOWER_BOUND, UPPER_BOUND)] * 3,
        constraints=[constraint],
        options={"ftol": 1e-10, "maxiter": 500},
    )
    if not result.success:
        logger.warning("ellipsoid optimisation failed: %s", result.message)
        return None
    return 2.0 * np.asarray(result.x, dtype=float)


def _fit_many(points: np.ndarray, diameters: np.ndarray, volume: float) -> np.ndarray:
    result = least_squares(
        ellipsoid_residuals,
        _start(diameters),
        bounds=(LOWER_BOUND, UPPER_BOUND),
        args=(points, volume),
        max_nfev=_MAX_LEAST_SQUARES_EVALUATIONS,
    )
    return 2.0 * np.asarray(result.x, dtype=float)


def find_new_ellipsoid_size(
    axes: Sequence[Sequence[float]],
    springs: Sequence[float],
    contacts: Sequence[Contact],
    diameters: Sequence[float],
    volume: float,
) -> Deformation:
    """Deform a cell to fit its overlapping neighbours.

    ``axes`` holds the unit vectors of axes a, b and c as rows, ``springs``
    the Maxwell and parallel spring constants of a, b and c in turn.
    """
    frame = np.asarray(axes, dtype=float)
    k = np.asarray(springs, dtype=float)
    old = np.asarray(diameters, dtype=float).copy()
    contacts = list(contacts)
    neighbours = tuple(contact.neighbour for contact in contacts)

    if not contacts:
        return Deformation(
            diameters=old,
            neighbours=neighbours,
            neighbour_forces=np.zeros((0, 3)),
            self_force=np.zeros(3),
        )

    if len(contacts) == 1:
        point = _single_contact_point(contacts[0])
        sum_radii = float(np.sum(0.5 * old))
        fitted = _minimise_with_volume(
            lambda r: one_neighbour_objective(r, point, sum_radii), old, volume
        )
        new = old.copy() if fitted is None else fitted
    elif len(contacts) == 2:
        point1, point2 = (_contact_point(contact) for contact in contacts)
        fitted = _minimise_with_volume(
            lambda r: two_neighbour_objective(r, point1, point2), old, volume
        )
        new = old.copy() if fitted is None else fitted
    else:
        points = np.array([_contact_point(contact) for contact in contacts])
        new = _fit_many(points, old, volume)

    stiffness = np.array([k[0] + k[1], k[2] + k[3], k[4] + k[5]])
    axis_force = -stiffness * (new - old)
    forces = []
    for contact in contacts:
        signs = np.where(np.asarray(contact.projection, dtype=float) < 0, -1.0, 1.0)
        forces.append((axis_force * signs) @ frame)
    neighbour_forces = np.array(forces)
    return Deformation(
        diameters=new,
        neighbours=neighbours,
        neighbour_forces=neighbour_forces,
        self_force=-neighbour_forces.sum(axis=0),
    )