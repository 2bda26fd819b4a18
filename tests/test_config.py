import numpy as np
import pytest

from pyscsupport.config import (
    build_model_from_config,
    load_config,
    parse_config,
    register_from_config,
)
from pyscsupport.exceptions import InvalidArgument
from pyscsupport.model import SupportType

CONFIG = """
lattice:
  elements:
    - {name: GS1, L: 0.0}
    - {name: Q1, L: 0.25, elem_type: KQUAD}
    - {name: D1, L: 1.0}
    - {name: GE1, L: 0.0}
    - {name: GS2, L: 0.0}
    - {name: S1, L: 0.2, elem_type: KSEXT}
    - {name: GE2, L: 0.0}
supports:
  - type: Section
    ords: [[1], [7]]
    Offset: [[1e-4, 1e-4, 0.0], [2e-4, 2e-4, 0.0]]
  - type: Girder
    ords: [[1, 5], [4, 7]]
    Offset: [30e-6, 30e-6, 0.0]
    Roll: {sigma: [1e-4, 0.0, 0.0], cutoff: 3}
"""


def test_build_model_from_config():
    conf = parse_config(CONFIG)
    model = build_model_from_config(conf)

    assert len(model.lattice) == 7
    assert model.lattice[2]["elem_type"] == "KQUAD"
    assert model.lattice.C == pytest.approx(1.45)

    np.testing.assert_array_equal(model.ords[SupportType.Girder], [[1, 5], [4, 7]])
    np.testing.assert_array_equal(model.ords[SupportType.Section], [[1], [7]])

    spec = model.get_sigma(1, "GirderOffset")
    np.testing.assert_allclose(spec.sigma, [30e-6, 30e-6, 0.0])
    assert spec.cutoff == 2
    assert model.get_sigma(4, "GirderOffset") is None

    assert model.get_sigma(5, "GirderRoll").cutoff == 3

    np.testing.assert_allclose(model.get_sigma(7, "SectionOffset").sigma, [2e-4, 2e-4, 0.0])


def test_load_config_from_file(tmp_path):
    filepath = tmp_path / "supports.yaml"
    filepath.write_text(CONFIG)

    conf = load_config(filepath)
    assert conf["supports"][1]["type"] == "Girder"
    assert isinstance(conf["supports"][1]["Offset"][0], float)


def test_missing_keys(model):
    with pytest.raises(InvalidArgument, match='"ords"'):
        register_from_config(model, {"supports": [{"type": "Girder"}]})

    with pytest.raises(InvalidArgument, match='"lattice"'):
        build_model_from_config({"supports": []})

    with pytest.raises(InvalidArgument, match="sigma"):
        register_from_config(
            model,
            {"supports": [{"type": "Girder", "ords": [[1], [2]], "Offset": {"cutoff": 3}}]},
        )


def test_non_scalar_cutoff_in_config(model):
    conf = parse_config(
        """
supports:
  - type: Plinth
    ords: [[1], [2]]
    Offset: {sigma: [1e-6, 1e-6, 1e-6], cutoff: [2, 3]}
"""
    )
    with pytest.raises(InvalidArgument, match="single value"):
        register_from_config(model, conf)


def test_verbose_output(model, capsys):
    conf = {"supports": [{"type": "Plinth", "ords": [[1, 3], [2, 4]]}]}
    register_from_config(model, conf, verbose=1)

    assert "Registered 2 'Plinth'" in capsys.readouterr().out


def test_empty_config(model):
    assert parse_config("") == {}
    assert register_from_config(model, {}) is model
