from pathlib import Path
from typing import Union

import h5py
import numpy as np

from . import __version__
from .lattice import Lattice
from .model import SCModel, SupportField, SupportType, UncertaintySpec, key_name


def _to_field_key(name: str):
    if name in SupportField.__members__:
        return SupportField(name)
    else:
        return name


def save_model_hdf5(model: SCModel, output_filepath: Union[Path, str]) -> None:
    """Save the ordinate index, the sigma store and the current offset/roll
    fields of all support end points."""

    h5_kwargs = dict(compression="gzip")

    with h5py.File(output_filepath, "w") as f:
        f["_version_pyscsupport"] = __version__["pyscsupport"]

        g1 = f.create_group("ords")
        for _type, ords in model.ords.items():
            g1.create_dataset(_type.name, data=ords, **h5_kwargs)

        g1 = f.create_group("sigmas")
        for ei, d in model.sigmas.items():
            g2 = g1.create_group(str(ei))
            for key, spec in d.items():
                ds = g2.create_dataset(key_name(key), data=np.asarray(spec.sigma))
                ds.attrs["cutoff"] = spec.cutoff

        g1 = f.create_group("fields")
        for _type in model.ords:
            fields = [SupportField.of(_type, q) for q in ["Offset", "Roll"]]
            for ei in model.get_endpoint_inds(_type):
                elem = model.lattice[ei]
                g2 = g1.require_group(str(ei))
                for field in fields:
                    if field in elem:
                        g2[field.value] = np.asarray(elem[field])


def load_model_hdf5(filepath: Union[Path, str], lattice: Lattice) -> SCModel:
    """Rebuild an `SCModel` on `lattice` from a file written by
    `save_model_hdf5()`."""

    model = SCModel(lattice)

    with h5py.File(filepath, "r") as f:
        for type_name, ds in f["ords"].items():
            model.ords[SupportType[type_name]] = ds[()].astype(int)

        for ei_str, g2 in f["sigmas"].items():
            d = model.sigmas.setdefault(int(ei_str), {})
            for name, ds in g2.items():
                key = _to_field_key(name)
                d[key] = UncertaintySpec(key, ds[()], float(ds.attrs["cutoff"]))

        for ei_str, g2 in f["fields"].items():
            elem = lattice[int(ei_str)]
            for name, ds in g2.items():
                elem[SupportField(name)] = np.array(ds[()])

    return model
