import dataclasses
import math

import numpy as np
import pytest

from slugsim.params import ParameterError, Parameters, parse_parameters, read_parameters

LABELS = [
    "npst_cells", "tfinal", "print_interval", "dt",
    "cellvisc_spsp", "cellvisc_spst", "cellvisc_stst",
    "cell_adhesion_normal_spsp", "cell_adhesion_normal_spst", "cell_adhesion_normal_stst",
    "visc", "viscfactor",
    "psp_param1a", "psp_k2a", "psp_k1a", "psp_mua",
    "psp_param1b", "psp_k2b", "psp_k1b", "psp_mub",
    "psp_param1c", "psp_k2c", "psp_k1c", "psp_muc",
    "mindist", "dia", "psp_motive_force", "psp_actb_force", "psp_randforce",
    "pst_param1a", "pst_k2a", "pst_k1a", "pst_mua",
    "pst_param1b", "pst_k2b", "pst_k1b", "pst_mub",
    "pst_param1c", "pst_k2c", "pst_k1c", "pst_muc",
    "pst_motive_force", "pst_actb_force", "pst_randforce",
    "skipx", "skipy", "skipz", "plate_height",
    "turning_time", "time_to_redirect", "cone_angle_psp", "cone_angle_pst",
    "filename",
]

SPECIAL = {"npst_cells", "cone_angle_psp", "cone_angle_pst", "filename"}


def _values():
    values = {}
    for position, label in enumerate(LABELS):
        values[label] = str(position + 0.5)
    values["npst_cells"] = "3"
    values["cone_angle_psp"] = "180"
    values["cone_angle_pst"] = "0"
    values["filename"] = "run.dat"
    return values


def _text(values=None, drop_last=False):
    values = values or _values()
    labels = LABELS[:-1] if drop_last else LABELS
    return "".join(f"{label} ={values[label]}\n" for label in labels)


def test_parses_values_in_order():
    params = parse_parameters(_text())
    assert params.npst_cells == 3
    assert params.tfinal == 1.5
    assert params.dia == 25.5
    assert params.pst_randforce == 43.5
    assert params.filename == "run.dat"


def test_cone_angles_become_radians():
    params = parse_parameters(_text())
    assert params.cone_angle_psp == pytest.approx(math.pi)
    assert params.cone_angle_pst == 0.0


def test_labels_are_ignored():
    text = "".join(f"x{i}={_values()[label]}\n" for i, label in enumerate(LABELS))
    assert parse_parameters(text) == parse_parameters(_text())


def test_lines_without_equals_are_skipped():
    text = "comment line\n\n" + _text()
    assert parse_parameters(text).dt == 3.5


def test_missing_entry_raises():
    with pytest.raises(ParameterError):
        parse_parameters(_text(drop_last=True))


def test_bad_number_raises():
    values = _values()
    values["dt"] = "abc"
    with pytest.raises(ParameterError):
        parse_parameters(_text(values))


def test_integer_count_rejects_fraction():
    values = _values()
    values["npst_cells"] = "2.5"
    with pytest.raises(ParameterError):
        parse_parameters(_text(values))


def test_empty_value_raises():
    values = _values()
    values["visc"] = "   "
    with pytest.raises(ParameterError):
        parse_parameters(_text(values))


def test_read_parameters_from_file(tmp_path):
    path = tmp_path / "ifile.dat"
    path.write_text(_text())
    assert read_parameters(path) == parse_parameters(_text())


def test_read_parameters_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_parameters(tmp_path / "absent.dat")


def test_interaction_tables_are_symmetric():
    params = parse_parameters(_text())
    assert np.array_equal(params.adhesion_drag, params.adhesion_drag.T)
    assert np.array_equal(params.adhesion_normal, params.adhesion_normal.T)
    assert params.adhesion_drag[0, 1] == params.cellvisc_spst
    assert params.adhesion_normal[1, 1] == params.cell_adhesion_normal_stst
    assert params.motive_forces == (params.psp_motive_force, params.pst_motive_force)


def test_cell_size_derived_from_diameter():
    params = parse_parameters(_text())
    assert params.cell_volume == pytest.approx((params.dia / 2) ** 3)
    assert params.cell_area == pytest.approx(math.pi * params.dia ** 2)


def test_fields_match_file_order():
    params = parse_parameters(_text())
    assert isinstance(params, Parameters)
    assert [field.name for field in dataclasses.fields(params)] == LABELS
    values = _values()
    for label in LABELS:
        if label in SPECIAL:
            continue
        assert getattr(params, label) == float(values[label])