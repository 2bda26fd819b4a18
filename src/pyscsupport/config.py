"""
YAML configuration of support structure registrations.

Example:

    lattice:
      elements:
        - {name: GS1, L: 0.0}
        - {name: Q1, L: 0.25, elem_type: KQUAD}
        - {name: GE1, L: 0.0}
    supports:
      - type: Girder
        ords: [[1], [3]]
        Offset: [1e-6, 1e-6, 1e-6]
        Roll: {sigma: [1e-4, 0.0, 0.0], cutoff: 3}
"""

import json
from pathlib import Path
from typing import Dict, Union

import numpy as np
from ruamel import yaml

# ^ ruamel's "yaml" does NOT suffer from the PyYAML(v5.3, YAML v1.1) problem
#   of parsing "1e-6" as a string.
from .exceptions import InvalidArgument
from .lattice import Lattice
from .model import SCModel
from .support import SigmaCutoff, register_support


def parse_config(contents: str) -> Dict:
    yml = yaml.YAML(typ="safe")
    d = yml.load(contents)

    if d is None:
        return {}

    # Strip away YAML stuff
    return json.loads(json.dumps(d))


def load_config(config_filepath: Union[Path, str]) -> Dict:
    return parse_config(Path(config_filepath).read_text())


def _to_uncertainty_value(value):
    if isinstance(value, dict):
        if "sigma" not in value:
            raise InvalidArgument(
                'Uncertainty given as a mapping must contain the key "sigma"'
            )
        cutoff = value.get("cutoff", None)
        if cutoff is None:
            return np.array(value["sigma"])
        else:
            return SigmaCutoff(np.array(value["sigma"]), cutoff)
    else:
        return np.array(value)


def register_from_config(model: SCModel, conf: Dict, verbose: int = 0) -> SCModel:
    for i, entry in enumerate(conf.get("supports", [])):
        entry = dict(entry)

        for k in ["type", "ords"]:
            if k not in entry:
                raise InvalidArgument(f'Support entry #{i} is missing the key "{k}"')

        support_type = entry.pop("type")
        args = [support_type, np.array(entry.pop("ords"))]
        for name, value in entry.items():
            args.extend([name, _to_uncertainty_value(value)])

        register_support(model, *args)

        if verbose >= 1:
            n = args[1].shape[-1]
            print(f"* Registered {n:d} '{support_type}' support structure(s)")

    return model


def build_model_from_config(conf: Dict, verbose: int = 0) -> SCModel:
    if "lattice" not in conf:
        raise InvalidArgument('"lattice" section is missing')

    lattice = Lattice.from_element_list(conf["lattice"]["elements"])
    model = SCModel(lattice)

    return register_from_config(model, conf, verbose=verbose)
