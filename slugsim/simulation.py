"""Running the slug simulation: placing cells and advancing them in time."""

from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from pathlib import Path
from typing import Optional, Protocol, Sequence, TextIO

import numpy as np

from slugsim.cell import NCELLS, NCX, NCY, NCZ, PSP, PST, AxisMechanics, Cell
from slugsim.forces import ForceModel, update_contact_areas
from slugsim.orientation import initialize_orient, orient, set_direction
from slugsim.output import format_number, write_detail, write_summary
from slugsim.params import ParameterError, Parameters, read_parameters
from slugsim.radii import change_cell_radii, evolve_cell_radii

logger = logging.getLogger(__name__)

GRID_SPACING = (10.0, 10.0, 10.0)  # spacing of the initial grid in x, y and z
_GRID_OFFSET = 5.0
_JITTER = 1.0
_TINY = 1e-7


class _RandomSource(Protocol):
    def random(self) -> float: ...


def _mechanics(parameters: Parameters, prefix: str) -> tuple[AxisMechanics, ...]:
    return tuple(
        AxisMechanics(
            kspring=getattr(parameters, f"{prefix}_k1{axis}"),
            mu=getattr(parameters, f"{prefix}_mu{axis}"),
            kmaxwell_spring=getattr(parameters, f"{prefix}_param1{axis}"),
        )
        for axis in "abc"
    )


def _normalised(vector: np.ndarray) -> np.ndarray:
    magnitude = float(np.sqrt(vector @ vector))
    if magnitude == 0.0:
        magnitude = _TINY
    return vector / magnitude


def place_cells(parameters: Parameters, rng: _RandomSource) -> list[Cell]:
    """Lay the cells out on a jittered grid with one prestalk cell.

    The prestalk cell takes the grid slot at the centre of the slug's
    rear layer; the prespore cell that would sit at that index takes the
    first slot instead.
    """
    cdx, cdy, cdz = GRID_SPACING
    positions = []
    for k in range(NCY):
        for j in range(NCZ):
            for i in range(NCX):
                jx, jy, jz = (rng.random() * _JITTER for _ in range(3))
                positions.append(
                    np.array(
                        [
                            (i + 1) * cdx - _GRID_OFFSET + jx,
                            (k + 1) * cdy - _GRID_OFFSET + jy,
                            (j + 1) * cdz - _GRID_OFFSET + jz,
                        ]
                    )
                )

    anchor = (NCZ // 2) * NCX + NCX // 2
    psp = _mechanics(parameters, "psp")
    pst = _mechanics(parameters, "pst")
    cells = []
    for index in range(NCELLS):
        dir_y = rng.random()
        dir_x = 2.0 * (rng.random() - 0.5)
        dir_z = 2.0 * (rng.random() - 0.5)
        direction_a = _normalised(np.array([dir_x, dir_y, dir_z]))
        direction_b = _normalised(np.array([2.0 * (rng.random() - 0.5) for _ in range(3)]))

        if index == 0:
            cell_type, slot, mechanics = PST, anchor, pst
            forces = (parameters.pst_motive_force, parameters.pst_actb_force,
                      parameters.pst_randforce)
        else:
            cell_type, slot, mechanics = PSP, (0 if index == anchor else index), psp
            forces = (parameters.psp_motive_force, parameters.psp_actb_force,
                      parameters.psp_randforce)
        cells.append(
            Cell.create(
                cell_type,
                positions[slot],
                *mechanics,
                *forces,
                parameters.dia,
                direction_a,
                direction_b,
            )
        )
    return cells


class Simulation:
    """An aggregate of cells advanced step by step."""

    def __init__(
        self,
        parameters: Parameters,
        rng: Optional[_RandomSource] = None,
        overlap_factor: float = 1.0,
    ) -> None:
        self.parameters = parameters
        self.rng = rng if rng is not None else random.Random()
        self.overlap_factor = overlap_factor
        self.cells = place_cells(parameters, self.rng)
        self.force_model = ForceModel.from_parameters(parameters, overlap_factor)
        self.time = 0.0
        self.rotations: list[Optional[np.ndarray]] = [None] * len(self.cells)

    @property
    def centers(self) -> np.ndarray:
        return np.array([cell.center for cell in self.cells], dtype=float)

    def move_cells(self) -> bool:
        """Advance the cell centres by one time step.

        Contact areas are refreshed first. Returns ``False`` and leaves the
        centres unchanged when the step cannot be taken.
        """
        update_contact_areas(self.cells, self.parameters.cell_area)
        try:
            new_centers = self.force_model.step(self.cells, self.centers, self.parameters.dt)
        except np.linalg.LinAlgError as exc:
            logger.warning("cell movement failed at time %g: %s", self.time, exc)
            return False
        for cell, center in zip(self.cells, new_centers):
            cell.center = np.array(center, dtype=float)
        return True

    def _step_counts(self) -> tuple[int, int, int, int]:
        p = self.parameters
        if p.dt <= 0:
            raise ParameterError("time step must be positive")
        print_step = int(p.print_interval / p.dt)
        nsteps = int(p.tfinal / p.dt)
        redirect = int(p.time_to_redirect / p.dt)
        turning = int(p.turning_time / p.dt)
        if print_step < 1:
            raise ParameterError("print interval must be at least one time step")
        if redirect < 1:
            raise ParameterError("time to redirect must be at least one time step")
        return print_step, nsteps, redirect, turning

    def _write(self, detail_stream: TextIO, summary_stream: TextIO, label) -> None:
        detail_stream.write(format_number(label) + "\n")
        write_detail(detail_stream, self.cells)
        write_summary(summary_stream, self.cells)

    def run(self, detail_stream: TextIO, summary_stream: TextIO) -> None:
        """Run to the final time, writing the state at every print interval."""
        p = self.parameters
        dt = p.dt
        print_step, nsteps, redirect, turning = self._step_counts()
        print(f" nstep {nsteps}")

        detail_stream.write(f"{len(self.cells)}\n")
        detail_stream.write(f"{p.npst_cells}\n")
        detail_stream.write(f"{nsteps // print_step}\n")

        turned = 0
        for m in range(1, nsteps + 1):
            redirecting = (m - 1) % redirect == 0
            if redirecting:
                print(f"time {format_number(m * dt)}")
                set_direction(self.cells, p.cone_angle_psp, p.cone_angle_pst, self.rng)
                self.rotations = initialize_orient(self.cells, dt, p.turning_time)
                turned = 0
                if m == 1:
                    self._write(detail_stream, summary_stream, 0)
            if redirecting or turned < turning:
                orient(self.cells, self.rotations)
            turned += 1

            self.move_cells()
            change_cell_radii(self.cells, p.cell_volume, self.overlap_factor)
            evolve_cell_radii(self.cells, dt, p.dia)

            if m % print_step == 0:
                self._write(detail_stream, summary_stream, dt * m)
                print(f"Time = {format_number(self.time + dt)}")
            self.time += dt


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read a parameter file, run the simulation and write its output files."""
    parser = argparse.ArgumentParser(
        prog="slugsim", description="Simulate the motion of a slug of cells."
    )
    parser.add_argument("parameters", nargs="?", default="ifile.dat",
                        help="parameter file (default: ifile.dat)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the random number generator")
    parser.add_argument("--summary-prefix", default="summary_",
                        help="prefix of the summary file's name")
    args = parser.parse_args(argv)

    try:
        parameters = read_parameters(args.parameters)
    except (OSError, ParameterError) as exc:
        print(f"error reading parameter file: {exc}", file=sys.stderr)
        return 1

    detail_path = Path(parameters.filename)
    summary_path = detail_path.with_name(args.summary_prefix + detail_path.name)
    simulation = Simulation(parameters, random.Random(args.seed))
    try:
        with open(detail_path, "w") as detail, open(summary_path, "w") as summary:
            simulation.run(detail, summary)
    except ParameterError as exc:
        print(f"invalid parameters: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())