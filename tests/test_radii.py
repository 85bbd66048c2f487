import numpy as np
import pytest

from slugsim.cell import AxisMechanics, Cell
from slugsim.radii import change_cell_radii, evolve_cell_radii, radii_rate

DIAMETER = 10.0
VOLUME = DIAMETER ** 3 * 0.125


def make_cell(center, lengths=(DIAMETER, DIAMETER, DIAMETER)):
    mechanics = [
        AxisMechanics(kspring=k, mu=mu, kmaxwell_spring=km)
        for k, mu, km in zip((2.0, 3.0, 4.0), (1.0, 1.0, 1.0), (5.0, 5.0, 5.0))
    ]
    cell = Cell.create(0, center, *mechanics, 1.0, 0.0, 0.0, DIAMETER, (0, 1, 0), (1, 0, 0))
    cell.a.length, cell.b.length, cell.c.length = lengths
    return cell


SPRINGS = [[5.0, 2.0, 1.0], [5.0, 3.0, 1.0], [5.0, 4.0, 1.0]]


def test_rate_is_zero_at_rest():
    np.testing.assert_allclose(radii_rate(0.0, [0.0, 0.0, 0.0], SPRINGS, DIAMETER), 0.0)


def test_uniform_deviation_with_equal_constants_is_equilibrium():
    springs = [[5.0, 2.0, 1.5]] * 3
    rate = radii_rate(0.0, [1.3, 1.3, 1.3], springs, DIAMETER)
    np.testing.assert_allclose(rate, 0.0, atol=1e-12)


@pytest.mark.parametrize("u_ab, u_c", [(0.5, -1.0), (-2.0, 1.5), (1.0, 0.0)])
def test_rate_preserves_first_order_volume_when_a_equals_b(u_ab, u_c):
    a, b, c = u_ab, u_ab, u_c
    rate = radii_rate(0.0, [a, b, c], SPRINGS, DIAMETER)
    d = DIAMETER
    areas = np.array([(b + d) * (c + d), (a + d) * (c + d), (b + d) * (a + d)])
    assert areas @ rate == pytest.approx(0.0, abs=1e-9)


def test_evolve_leaves_sphere_unchanged():
    cell = make_cell((0, 0, 0))
    evolve_cell_radii([cell], 0.1, DIAMETER)
    np.testing.assert_allclose(cell.lengths, [DIAMETER] * 3, atol=1e-6)


def test_evolve_reduces_spread_of_deformed_cell():
    cell = make_cell((0, 0, 0), lengths=(12.0, 8.0, 10.0))
    before = np.ptp(cell.lengths)
    evolve_cell_radii([cell], 0.5, DIAMETER)
    after = np.ptp(cell.lengths)
    assert after < before


def test_change_radii_isolated_cells_unchanged():
    cells = [make_cell((0, 0, 0)), make_cell((50, 0, 0))]
    deformations = change_cell_radii(cells, VOLUME, 1.0)
    assert [d.neighbours for d in deformations] == [(), ()]
    for cell in cells:
        np.testing.assert_allclose(cell.lengths, [DIAMETER] * 3)


def test_change_radii_overlapping_pair_keeps_volume_and_symmetry():
    cells = [make_cell((0, 0, 0)), make_cell((8, 0, 0))]
    deformations = change_cell_radii(cells, VOLUME, 1.0)
    assert deformations[0].neighbours == (1,)
    assert deformations[1].neighbours == (0,)
    for cell in cells:
        assert np.prod(cell.lengths / 2.0) == pytest.approx(VOLUME, rel=1e-4)
        assert cell.a.length <= DIAMETER + 1e-9
    np.testing.assert_allclose(cells[0].lengths, cells[1].lengths, rtol=1e-6)