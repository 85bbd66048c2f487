# slugsim

`slugsim` simulates the motion of a small aggregate of cells (a Dictyostelium
slug) in three dimensions. Each cell is an ellipsoid with three
visco-elastic axes. The forces on a cell are:

- viscous drag from neighbouring cells and from the surrounding fluid,
  weighted by the contact area between cells;
- normal adhesion between overlapping cells;
- an active motive force that pulls a cell towards the nearest neighbour
  inside a cone around its leading axis, with the opposite traction force
  on that neighbour;
- passive forces from cells deforming where they are pressed by their
  neighbours, with the product of a cell's radii held fixed;
- a short-range push that keeps the centres of overlapping cells apart;
- soft walls at 0 and 55 that keep the cells between two planes in x and
  in z.

The slug moves freely along the y axis. Lengths are in microns and time is
in seconds.

The cells are laid out on a 3 × 5 × 3 grid (x, y, z) with small random
offsets. There are two cell types, prespore (type 0) and prestalk (type 1);
the starting slug has a single prestalk cell, at the centre of its rear
layer. Every cell starts as a sphere with its axes along the coordinate
axes. Every so often each cell picks a new preferred direction inside a
cone about the y axis and turns its axes towards it over a set turning
time.

Each time step moves the cell centres with one fourth-order Runge-Kutta
step (the drag matrix held fixed over the step), then reshapes every cell
to fit the neighbours that overlap it, then lets each cell's axes relax
visco-elastically.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running a simulation

```
slugsim PARAMETER_FILE
```

Options:

- `PARAMETER_FILE` — the parameter file; `ifile.dat` when left out.
- `--seed N` — seed for the random number generator, for repeatable runs.
- `--summary-prefix PREFIX` — prefix of the summary file's name
  (default `summary_`).

Progress is printed to standard output. The command exits with status 1
when the parameter file cannot be read or is malformed, or when the time
step, print interval or redirection time do not give whole steps.

### The parameter file

The file holds `name=value` entries, one per line, in a fixed order. The
names are only labels; the values are taken by position:

```
npst_cells, tfinal, print_interval, dt,
cellvisc_spsp, cellvisc_spst, cellvisc_stst,
cell_adhesion_normal_spsp, cell_adhesion_normal_spst, cell_adhesion_normal_stst,
visc, viscfactor,
psp_param1a, psp_k2a, psp_k1a, psp_mua,
psp_param1b, psp_k2b, psp_k1b, psp_mub,
psp_param1c, psp_k2c, psp_k1c, psp_muc,
mindist, dia, psp_motive_force, psp_actb_force, psp_randforce,
pst_param1a, pst_k2a, pst_k1a, pst_mua,
pst_param1b, pst_k2b, pst_k1b, pst_mub,
pst_param1c, pst_k2c, pst_k1c, pst_muc,
pst_motive_force, pst_actb_force, pst_randforce,
skipx, skipy, skipz, plate_height,
turning_time, time_to_redirect, cone_angle_psp, cone_angle_pst,
filename
```

Cone angles are given in degrees. The last entry names the detail output
file. `npst_cells` is written to the detail file's header; the starting
slug always has one prestalk cell.

### Output files

A run writes two files:

- the detail file named in the parameter file. It starts with the number
  of cells, `npst_cells` and the number of print intervals, followed by a
  frame at time 0 and one frame per print interval. A frame is a line with
  the time, then seven lines per cell: its centre, its axis vectors a, b
  and c, its three axis lengths, its preferred direction and its type.
- a summary file in the same directory, named by the summary prefix
  followed by the detail file's name. Each frame adds a header line and one
  comma-separated line listing, for every cell, its three axis lengths,
  its type, its centre and its three axis vectors, ending with the number
  of cells.

## Using the package from Python

The pieces of the model can be used on their own:

- `slugsim.params` — `read_parameters` and `parse_parameters` turn a
  parameter file into a `Parameters` object (cone angles in radians),
  raising `ParameterError` on bad input.
- `slugsim.cell` — `Cell`, `Axis` and `AxisMechanics`; `Cell.create`
  builds a spherical cell from its type, centre, axis mechanics and forces.
- `slugsim.geometry` — `overlap` measures how two ellipsoidal cells sit
  along their line of centres, `surface` gives the contact area of two
  overlapping spheres, `find_nearest_cell` and `find_contacts` look up
  neighbours.
- `slugsim.ellipsoid` — `find_new_ellipsoid_size` reshapes a pressed cell
  at fixed volume (radii kept between 4 and 6) and returns a `Deformation`
  with the forces it exerts.
- `slugsim.radii` — `change_cell_radii` and `evolve_cell_radii` update the
  cell axes from overlaps and from their visco-elastic relaxation.
- `slugsim.orientation` — `set_direction`, `initialize_orient`,
  `rotation_matrix` and `orient` steer the cells towards new directions.
- `slugsim.forces` — `ForceModel` assembles the forces and the drag
  matrix and advances the cell centres one step; `boundary_forces` and
  `update_contact_areas` are available on their own.
- `slugsim.output` — `write_detail` and `write_summary` write the two
  output formats.
- `slugsim.simulation` — `Simulation` ties everything together;
  `place_cells` builds the starting slug.

```python
import random

from slugsim.params import read_parameters
from slugsim.simulation import Simulation

parameters = read_parameters("ifile.dat")
simulation = Simulation(parameters, rng=random.Random(1))
with open("frames.txt", "w") as detail, open("summary.csv", "w") as summary:
    simulation.run(detail, summary)
```

## What it does not do

The package writes plain text frames only: it has no viewer or plotting of
the slug. The grid size of the starting slug is fixed at 3 × 5 × 3 cells,
and the placement of prestalk cells is not configurable.