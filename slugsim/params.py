"""Reading the simulation's parameter file."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Union

import numpy as np


class ParameterError(ValueError):
    """Raised when a parameter file is incomplete or malformed."""


@dataclass
class Parameters:
    """Simulation parameters, in the order they appear in the file.

    Cone angles are held in radians.
    """

    npst_cells: int
    tfinal: float
    print_interval: float
    dt: float
    cellvisc_spsp: float
    cellvisc_spst: float
    cellvisc_stst: float
    cell_adhesion_normal_spsp: float
    cell_adhesion_normal_spst: float
    cell_adhesion_normal_stst: float
    visc: float
    viscfactor: float
    psp_param1a: float
    psp_k2a: float
    psp_k1a: float
    psp_mua: float
    psp_param1b: float
    psp_k2b: float
    psp_k1b: float
    psp_mub: float
    psp_param1c: float
    psp_k2c: float
    psp_k1c: float
    psp_muc: float
    mindist: float
    dia: float
    psp_motive_force: float
    psp_actb_force: float
    psp_randforce: float
    pst_param1a: float
    pst_k2a: float
    pst_k1a: float
    pst_mua: float
    pst_param1b: float
    pst_k2b: float
    pst_k1b: float
    pst_mub: float
    pst_param1c: float
    pst_k2c: float
    pst_k1c: float
    pst_muc: float
    pst_motive_force: float
    pst_actb_force: float
    pst_randforce: float
    skipx: float
    skipy: float
    skipz: float
    plate_height: float
    turning_time: float
    time_to_redirect: float
    cone_angle_psp: float
    cone_angle_pst: float
    filename: str

    @property
    def adhesion_drag(self) -> np.ndarray:
        """Tangential drag between cell types, indexed by type."""
        return np.array(
            [
                [self.cellvisc_spsp, self.cellvisc_spst],
                [self.cellvisc_spst, self.cellvisc_stst],
            ]
        )

    @property
    def adhesion_normal(self) -> np.ndarray:
        """Normal adhesion between cell types, indexed by type."""
        return np.array(
            [
                [self.cell_adhesion_normal_spsp, self.cell_adhesion_normal_spst],
                [self.cell_adhesion_normal_spst, self.cell_adhesion_normal_stst],
            ]
        )

    @property
    def motive_forces(self) -> tuple[float, float]:
        """Motive force indexed by cell type."""
        return (self.psp_motive_force, self.pst_motive_force)

    @property
    def cell_volume(self) -> float:
        """Product of the three radii of an undeformed cell."""
        return self.dia * self.dia * self.dia * 0.125

    @property
    def cell_area(self) -> float:
        """Surface area of an undeformed spherical cell."""
        return math.pi * 4.0 * self.dia * self.dia * 0.25


# A label is everything up to '='; the value is the rest of that line.
_ENTRY = re.compile(r"([^=]*)=([^\n]*)")


def parse_parameters(text: str) -> Parameters:
    """Parse ``label=value`` entries; values are taken by position, not label."""
    entries = [match.group(2).split() for match in _ENTRY.finditer(text)]
    specs = fields(Parameters)
    if len(entries) < len(specs):
        raise ParameterError(
            f"expected {len(specs)} parameter entries, found {len(entries)}"
        )
    values = {}
    for spec, tokens in zip(specs, entries):
        if not tokens:
            raise ParameterError(f"no value given for {spec.name}")
        token = tokens[0]
        try:
            values[spec.name] = spec.type(token)
        except ValueError as exc:
            raise ParameterError(
                f"invalid value {token!r} for {spec.name}"
            ) from exc
    values["cone_angle_psp"] *= math.pi / 180.0
    values["cone_angle_pst"] *= math.pi / 180.0
    return Parameters(**values)


def read_parameters(path: Union[str, os.PathLike]) -> Parameters:
    """Read and parse a parameter file."""
    return parse_parameters(Path(path).read_text())