"""
Based on SCupdateSupport.m, SCgetSupportOffset.m and SCgetSupportRoll.m of SC
(https://github.com/ThorstenHellert/SC)

Note that the coordinate system change due to bending magnets is ignored
here. The accuracy of the interpolated offsets is therefore limited for
support structures containing dipoles, particularly for long sections and/or
longitudinal offsets.
"""

import numpy as np

from .model import SCModel, SupportField, SupportType

OFFSET_COORDS = ["x", "y", "z"]
ROT_COORDS = ["roll", "pitch", "yaw"]


def _get_vec3(model: SCModel, elem_ind: int, field: SupportField) -> np.ndarray:
    """Malformed (non-3-element) fields are consumed as zeros."""

    v = np.ravel(model.get_field(elem_ind, field))
    if v.size != 3:
        return np.zeros(3)
    return v


def update_support(model: SCModel):
    """Update the combined support offsets/rotations at all elements"""

    offsets = calc_support_offsets(model)
    rots = calc_support_rotations(model, offsets)

    model.support_offsets = offsets
    model.support_rots = rots

    return offsets, rots


def calc_support_offsets(model: SCModel):
    """Calculates the combined support structure offset at every element by
    linear interpolation between support start and end points.

    Offsets of all support types are stacked in the order of sections,
    plinths and girders.
    """

    lattice = model.lattice
    s_ends = lattice.s_ends
    C = lattice.C

    support_offsets = {coord: np.zeros(lattice.n_elems) for coord in OFFSET_COORDS}

    for _type in [SupportType.Section, SupportType.Plinth, SupportType.Girder]:
        if _type not in model.ords:
            continue

        offset_field = SupportField.of(_type, "Offset")

        pairs = list(model.iter_pairs(_type))

        # Edge offsets = underlying support offsets + own offsets
        edge_offsets = []
        for us_ei, ds_ei in pairs:
            edge_offsets.append(
                {
                    side: {
                        coord: support_offsets[coord][ei]
                        + _get_vec3(model, ei, offset_field)[i]
                        for i, coord in enumerate(OFFSET_COORDS)
                    }
                    for side, ei in [("us", us_ei), ("ds", ds_ei)]
                }
            )

        # Interpolate between US/DS support edges
        for (us_ei, ds_ei), edges in zip(pairs, edge_offsets):
            if us_ei < ds_ei:
                xp = np.array([s_ends[us_ei], s_ends[ds_ei]])
                if not np.all(np.diff(xp) > 0.0):
                    continue  # zero-length
                roi = np.s_[us_ei : ds_ei + 1]  # (ROI) Region of Interpolation
                x = s_ends[roi]
                for coord in OFFSET_COORDS:
                    fp = np.array([edges["us"][coord], edges["ds"][coord]])
                    support_offsets[coord][roi] = np.interp(x, xp, fp)
            elif us_ei > ds_ei:
                xp = np.array([s_ends[us_ei], C + s_ends[ds_ei]])
                if not np.all(np.diff(xp) > 0.0):
                    continue
                roi_1 = np.s_[us_ei:]
                roi_2 = np.s_[: ds_ei + 1]
                x = np.append(s_ends[roi_1], C + s_ends[roi_2])
                n_wrap = len(s_ends[roi_1])
                for coord in OFFSET_COORDS:
                    fp = np.array([edges["us"][coord], edges["ds"][coord]])
                    f_interp = np.interp(x, xp, fp)
                    support_offsets[coord][roi_1] = f_interp[:n_wrap]
                    support_offsets[coord][roi_2] = f_interp[n_wrap:]
            else:
                pass  # There is nothing to update.

    return support_offsets


def calc_support_rotations(model: SCModel, support_offsets: dict):
    """Calculates the combined support structure rotation (roll, pitch & yaw)

    The roll angle is a sum of the roll angles of all underlying support
    structures. The pitch and yaw angles are overwritten by the slope of the
    combined offsets between the edges of each support structure.
    """

    lattice = model.lattice

    support_rots = {coord: np.zeros(lattice.n_elems) for coord in ROT_COORDS}

    for _type in [SupportType.Section, SupportType.Plinth, SupportType.Girder]:
        if _type not in model.ords:
            continue

        roll_field = SupportField.of(_type, "Roll")

        for us_ei, ds_ei in model.iter_pairs(_type):
            distance = lattice.distance(us_ei, ds_ei)
            if distance == 0.0:
                continue

            roll = _get_vec3(model, us_ei, roll_field)[0]
            dx = support_offsets["x"][ds_ei] - support_offsets["x"][us_ei]
            dy = support_offsets["y"][ds_ei] - support_offsets["y"][us_ei]

            if us_ei < ds_ei:
                slices = [np.s_[us_ei : ds_ei + 1]]
            else:
                # US support edge to the ring end, then ring beginning to DS edge
                slices = [np.s_[us_ei:], np.s_[: ds_ei + 1]]

            for s_ in slices:
                support_rots["roll"][s_] += roll
                support_rots["pitch"][s_] = dy / distance
                support_rots["yaw"][s_] = dx / distance

    return support_rots
