import numpy as np
import pytest

from slugsim.cell import NCELLS, PST, AxisMechanics, Cell


def _make_cell(diameter=10.0, direction_a=(0.0, 1.0, 0.0)):
    return Cell.create(
        PST,
        (1.0, 2.0, 3.0),
        AxisMechanics(kspring=11.0, mu=12.0, kmaxwell_spring=13.0),
        AxisMechanics(kspring=21.0, mu=22.0, kmaxwell_spring=23.0),
        AxisMechanics(kspring=31.0, mu=32.0, kmaxwell_spring=33.0),
        motive_force=4.0,
        boundary_force=5.0,
        random_force=6.0,
        diameter=diameter,
        direction_a=direction_a,
        direction_b=(1.0, 0.0, 0.0),
    )


def test_create_sets_centre_and_forces():
    cell = _make_cell()
    assert np.allclose(cell.center, [1.0, 2.0, 3.0])
    assert cell.cell_type == PST
    assert cell.motive_force == 4.0
    assert cell.boundary_force == 5.0
    assert cell.random_force == 6.0


def test_create_sets_lengths_to_diameter():
    cell = _make_cell(diameter=7.5)
    assert np.allclose(cell.lengths, [7.5, 7.5, 7.5])
    assert cell.a.force == 0.0
    assert cell.c.force == 0.0


def test_create_spring_constants():
    cell = _make_cell()
    assert cell.a.kspring == 11.0
    assert cell.a.kmaxwell_spring == 13.0
    assert cell.b.kspring == 21.0
    assert cell.c.kmaxwell_spring == 33.0
    assert cell.c.mu == 32.0


def test_axis_a_uses_b_viscosity():
    cell = _make_cell()
    assert cell.a.mu == 22.0
    assert cell.b.mu == 22.0


def test_axes_form_identity_frame():
    cell = _make_cell(direction_a=(0.6, 0.8, 0.0))
    assert np.allclose(cell.axes, np.eye(3))


def test_initialize_axes_resets_frame():
    cell = _make_cell()
    cell.a.vector = np.array([0.0, 0.0, 1.0])
    cell.initialize_axes(0.0, 0.0, 1.0)
    assert np.allclose(cell.a.vector, [1.0, 0.0, 0.0])
    assert np.allclose(cell.b.vector, [0.0, 1.0, 0.0])
    assert np.allclose(cell.c.vector, [0.0, 0.0, 1.0])


def test_area_starts_empty():
    cell = _make_cell()
    assert cell.area.shape == (NCELLS,)
    assert not cell.area.any()


def test_copy_is_independent():
    cell = _make_cell()
    clone = cell.copy()
    clone.center[0] = 100.0
    clone.a.length = 1.0
    clone.a.vector[1] = 9.0
    assert cell.center[0] == 1.0
    assert cell.a.length == pytest.approx(10.0)
    assert cell.a.vector[1] == 0.0


def test_axes_are_orthonormal():
    cell = _make_cell()
    axes = cell.axes
    assert np.allclose(axes @ axes.T, np.eye(3))