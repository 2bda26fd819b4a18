"""
Based on SC (https://github.com/ThorstenHellert/SC)
"""

from typing import Union
import warnings

import numpy as np
from scipy.stats import truncnorm

from .model import SCModel, SupportField, SupportType, UncertaintySpec

_DISTS = {}


def get_dist(cutoff: float = 2.0):
    """Unit-sigma, zero-mean Gaussian truncated at +/-`cutoff`"""

    if cutoff not in _DISTS:
        _DISTS[cutoff] = truncnorm(-cutoff, +cutoff, loc=0.0, scale=1.0)

    return _DISTS[cutoff]


def get_rng(rng: Union[int, None, np.random.Generator] = None) -> np.random.Generator:
    if rng is None:
        return np.random.default_rng()
    elif isinstance(rng, (int, np.integer)):
        return np.random.default_rng(seed=rng)
    elif isinstance(rng, np.random.Generator):
        return rng
    else:
        raise TypeError("`rng` must be an integer or np.random.Generator")


def draw_error(spec: UncertaintySpec, rng: np.random.Generator) -> np.ndarray:
    if not spec.cutoff > 0.0:
        raise ValueError(f"`cutoff` must be > 0 (got {spec.cutoff})")

    sigma = np.asarray(spec.sigma, dtype=float)

    if not np.any(sigma):
        return np.zeros_like(sigma)

    dist = get_dist(spec.cutoff)
    return sigma * dist.rvs(size=sigma.shape, random_state=rng)


def apply_support_errors(
    model: SCModel, rng: Union[int, None, np.random.Generator] = None
) -> SCModel:
    """Based on applySupportAlignmentError() in SCapplyErrors.m

    Draws random offsets/rolls for all registered support end points from the
    sigma store and writes them into the element records. If only the start
    point of a support structure has an offset uncertainty, its end point
    receives a copy of the start-point offset (paraxial translation).
    """

    rng = get_rng(rng)
    lattice = model.lattice

    for _type in [SupportType.Section, SupportType.Plinth, SupportType.Girder]:
        if _type not in model.ords:
            continue

        offset_field = SupportField.of(_type, "Offset")
        roll_field = SupportField.of(_type, "Roll")

        # Start from the nominal (zero) state
        for ei in model.get_endpoint_inds(_type):
            lattice[ei][offset_field] = np.zeros(3)
            lattice[ei][roll_field] = np.zeros(3)

        for us_ei, ds_ei in model.iter_pairs(_type):
            for field in [offset_field, roll_field]:
                for ei in [us_ei, ds_ei]:
                    spec = model.get_sigma(ei, field)
                    if spec is not None:
                        lattice[ei][field] = draw_error(spec, rng)

            if (model.get_sigma(us_ei, offset_field) is not None) and (
                model.get_sigma(ds_ei, offset_field) is None
            ):
                lattice[ds_ei][offset_field] = np.array(lattice[us_ei][offset_field])

            struct_len = lattice.distance(us_ei, ds_ei)
            if struct_len == 0.0:
                us_elem_name, ds_elem_name = lattice.get_names_from_elem_inds(
                    [us_ei, ds_ei]
                )
                warnings.warn(
                    f"Zero-length support structure detected ({_type.name}, "
                    f"{us_ei} [{us_elem_name}] - {ds_ei} [{ds_elem_name}])"
                )
                continue

            _couple_tilt_and_offsets(
                lattice[us_ei], lattice[ds_ei], offset_field, roll_field, struct_len
            )

    return model


def _couple_tilt_and_offsets(
    us_elem: dict,
    ds_elem: dict,
    offset_field: SupportField,
    roll_field: SupportField,
    struct_len: float,
):
    us_off = us_elem[offset_field]
    ds_off = ds_elem[offset_field]
    us_rot = us_elem[roll_field]  # [az, ax, ay]

    if not (np.size(us_off) == np.size(ds_off) == np.size(us_rot) == 3):
        return  # malformed specs are consumed as drawn

    # (offset index, rotation index): y <-> pitch, x <-> yaw
    for i_off, i_rot in [(1, 1), (0, 2)]:
        if us_rot[i_rot] != 0.0:
            d = us_rot[i_rot] * struct_len / 2
            # Tilt around the support-structure center
            us_off[i_off] -= d
            ds_off[i_off] += d
        else:
            us_rot[i_rot] = (ds_off[i_off] - us_off[i_off]) / struct_len
