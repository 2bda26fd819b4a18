"""
Based on SCregisterSupport.m of SC (https://github.com/ThorstenHellert/SC)
"""

from collections import namedtuple
from typing import List, Tuple
import warnings

import numpy as np

from .exceptions import InvalidArgument, LayoutNotice, ShapeWarning
from .model import (
    DEFAULT_CUTOFF,
    SCModel,
    SupportField,
    SupportType,
    UncertaintySpec,
    key_name,
    make_field_key,
)

# Explicit-cutoff form of an uncertainty value, e.g. SigmaCutoff([dX, dY, dZ], 3)
SigmaCutoff = namedtuple("SigmaCutoff", ["sigma", "cutoff"])


def _resolve_support_type(support_type) -> SupportType:
    if isinstance(support_type, SupportType):
        return support_type
    elif isinstance(support_type, str) and (support_type in SupportType.__members__):
        return SupportType[support_type]
    else:
        raise InvalidArgument(
            "Unsupported structure type. Allowed are 'Girder', 'Plinth' and 'Section'."
        )


def _check_ords(ords) -> np.ndarray:
    try:
        ords = np.asarray(ords)
    except ValueError:  # ragged rows
        raise InvalidArgument("Ordinates must be a 2xn array of ordinates.")

    if (ords.size == 0) or (ords.ndim != 2) or (ords.shape[0] != 2):
        raise InvalidArgument("Ordinates must be a 2xn array of ordinates.")

    if not np.issubdtype(ords.dtype, np.integer):
        if (not np.issubdtype(ords.dtype, np.floating)) or np.any(
            ords != np.round(ords)
        ):
            raise InvalidArgument("Ordinates must be a 2xn array of ordinates.")

    return ords.astype(int)


def has_cutoff(value) -> bool:
    """True if `value` is given in the (sigma_array, cutoff) form."""

    if isinstance(value, SigmaCutoff):
        return True
    if not (isinstance(value, tuple) and (len(value) == 2)):
        return False

    try:
        if np.ndim(value[0]) == 0:
            return False
        # Two rows of equal length, e.g. ((dX1, dY1, dZ1), (dX2, dY2, dZ2)), are
        # a [2x3] sigma array
        return np.shape(value[0]) != np.shape(value[1])
    except ValueError:
        return True


def _split_value(value):
    if has_cutoff(value):
        sigma, cutoff = value
    else:
        sigma, cutoff = value, DEFAULT_CUTOFF

    return np.asarray(sigma), cutoff


def _check_cutoff(cutoff):
    if np.size(cutoff) != 1:
        raise InvalidArgument("Sigma cutoff must be a single value.")

    try:
        return float(np.asarray(cutoff).item())
    except (TypeError, ValueError):
        raise InvalidArgument("Sigma cutoff must be a single value.")


def _check_offset_shape(sigma: np.ndarray, type_name: str):
    if (sigma.ndim == 1) and (sigma.size == 3):
        return
    if (sigma.ndim == 2) and (sigma.shape[1] == 3) and (sigma.shape[0] in (1, 2)):
        return

    warnings.warn(
        f"Support structure offset uncertainty of '{type_name}' must be given as "
        "[1x3] (start end endpoints get same offset errors) or [2x3] (start end "
        "endpoints get independent offset errors) array.",
        ShapeWarning,
    )


def _check_roll_shape(sigma: np.ndarray, type_name: str):
    if sigma.size != 3:
        warnings.warn(
            f"'{type_name}' roll uncertainty must be [1x3] array [az,ax,ay] of roll "
            "(around z-axis), pitch (roll around x-axis) and yaw (roll around "
            "y-axis) angle.",
            ShapeWarning,
        )


def _check_uncertainties(
    support_type: SupportType, name_value_pairs: List
) -> List[Tuple]:
    """Returns a list of (field key, sigma rows, cutoff)."""

    type_name = support_type.name

    checked = []
    for name, value in name_value_pairs:
        sigma, cutoff = _split_value(value)

        if name == "Offset":
            cutoff = _check_cutoff(cutoff)
            _check_offset_shape(sigma, type_name)
        elif name == "Roll":
            cutoff = _check_cutoff(cutoff)
            _check_roll_shape(sigma, type_name)
        elif np.size(cutoff) == 1:
            try:
                cutoff = float(np.asarray(cutoff).item())
            except (TypeError, ValueError):
                pass  # stored verbatim

        sigma_rows = np.atleast_2d(sigma)

        checked.append((make_field_key(support_type, name), sigma_rows, cutoff))

    return checked


def _clear_sigmas(model: SCModel, support_type: SupportType):
    """Remove all sigma-store entries of `support_type`."""

    prefix = support_type.name

    for ei in list(model.sigmas):
        d = model.sigmas[ei]
        for key in [k for k in d if key_name(k).startswith(prefix)]:
            del d[key]
        if not d:
            del model.sigmas[ei]


def register_support(model: SCModel, *args) -> SCModel:
    """Register support structures (sections, plinths or girders).

    Usage:
        register_support(model, support_type, ords [, name1, value1, ...])

    `support_type` is one of "Section", "Plinth" and "Girder" (or the
    corresponding `SupportType`). `ords` is a [2xN] array of (1-based) Element
    Indexes defining the start (1st row) and end (2nd row) points of N
    support structures.

    The optional name/value pairs define the uncertainties:

    "Offset":
        [1x3] array [dX, dY, dZ] for the start points only. The end points
        get no entry of their own, i.e., when errors are applied, the end
        points receive the same offset as the start points, resulting in a
        paraxial translation of the structure.
        [2x3] array [[dX1, dY1, dZ1], [dX2, dY2, dZ2]] for the start and end
        points, respectively. Independent errors at both ends effectively
        tilt the structure.
    "Roll":
        [1x3] array [az, ax, ay] of roll (around z-axis), pitch (around
        x-axis) and yaw (around y-axis) angle uncertainties, for the start
        points.

    By default a 2-sigma cutoff is used. A different cutoff can be given as
    `(array, cutoff)` (or `SigmaCutoff(array, cutoff)`). A tuple of two
    equal-length rows is read as a [2x3] sigma array, not as (array, cutoff).

    Shape problems are reported as `ShapeWarning` and end points upstream of
    start points as `LayoutNotice`. Under the default warning filter, an
    identical message is shown only once per call site, so repeated
    registrations producing the same text stay silent. Use
    `warnings.simplefilter("always", LayoutNotice)` to see every one.

    With fewer than 2 arguments, `model` is returned unchanged.
    """

    if len(args) < 2:
        return model

    support_type = _resolve_support_type(args[0])
    raw_ords = _check_ords(args[1])
    if len(args) % 2:
        raise InvalidArgument("Optional input must be given as name-value pairs.")

    name_value_pairs = [(args[i], args[i + 1]) for i in range(2, len(args), 2)]
    uncertainties = _check_uncertainties(support_type, name_value_pairs)

    n_upstream = int(np.sum(np.diff(raw_ords, axis=0) < 0))
    if n_upstream != 0:
        warnings.warn(
            f"{n_upstream:d} '{support_type.name}' endpoint(s) might be upstream "
            "of startpoint(s).",
            LayoutNotice,
        )

    # Make sure that ordinates are within the ring
    n_elems = len(model.lattice)
    ords = ((raw_ords - 1) % n_elems) + 1

    model.ords[support_type] = ords
    _clear_sigmas(model, support_type)

    offset_field = SupportField.of(support_type, "Offset")
    roll_field = SupportField.of(support_type, "Roll")

    for us_ei, ds_ei in model.iter_pairs(support_type):
        for ei in (us_ei, ds_ei):
            model.lattice[ei][offset_field] = np.zeros(3)  # [x, y, z]
            model.lattice[ei][roll_field] = np.zeros(3)  # [az, ax, ay]

        for key, sigma_rows, cutoff in uncertainties:
            model.sigmas.setdefault(us_ei, {})[key] = UncertaintySpec(
                key, sigma_rows[0], cutoff
            )
            if sigma_rows.shape[0] == 2:
                model.sigmas.setdefault(ds_ei, {})[key] = UncertaintySpec(
                    key, sigma_rows[1], cutoff
                )

    return model
