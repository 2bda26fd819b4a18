from typing import Dict, List, Union

import numpy as np


class Lattice:
    """Flat sequence of lattice-element records.

    Index 0 holds a zero-length "__BEG__" marker so that Element Index 1 to N
    refer to the N actual elements. `len()` returns N, the lattice length used
    for ordinate wrapping.

    Each record is a plain dict. Besides "name", "elem_type" and "L", any
    named field can be attached to it (e.g., support offsets/rolls).
    """

    def __init__(
        self,
        elem_names: List[str],
        lengths: Union[List, np.ndarray, None] = None,
        elem_types: Union[List[str], None] = None,
    ) -> None:

        n = len(elem_names)
        if n == 0:
            raise ValueError("Lattice must contain at least one element")

        if lengths is None:
            lengths = np.zeros(n)
        if elem_types is None:
            elem_types = [""] * n
        assert len(lengths) == n
        assert len(elem_types) == n

        self.elements = [dict(name="__BEG__", elem_type="MARK", L=0.0)]
        for name, elem_type, L in zip(elem_names, elem_types, lengths):
            self.elements.append(dict(name=name, elem_type=elem_type, L=float(L)))

        self.lengths, self.s_ends, self.C = self.calc_spos()

    @classmethod
    def from_element_list(cls, elem_list: List[Dict]):
        """`elem_list` is a list of dicts with keys "name", and optionally "L"
        and "elem_type"."""

        return cls(
            [d["name"] for d in elem_list],
            lengths=[d.get("L", 0.0) for d in elem_list],
            elem_types=[d.get("elem_type", "") for d in elem_list],
        )

    def __len__(self):
        return len(self.elements) - 1  # exclude __BEG__

    def __getitem__(self, elem_ind):
        return self.elements[elem_ind]

    @property
    def n_elems(self):
        return len(self.elements)

    def calc_spos(self):
        Ls = np.array([d["L"] for d in self.elements])

        s_ends = np.cumsum(Ls)
        circumference = s_ends[-1]

        return Ls, s_ends, circumference

    def get_names_from_elem_inds(self, elem_inds):
        if np.ndim(elem_inds) == 0:
            return self.elements[elem_inds]["name"]
        else:
            return [self.elements[ei]["name"] for ei in elem_inds]

    def distance(self, us_ei: int, ds_ei: int) -> float:
        """Path length from Element Index `us_ei` to `ds_ei`, going around the
        ring end if `ds_ei` is upstream of `us_ei`."""

        if us_ei < ds_ei:
            return self.s_ends[ds_ei] - self.s_ends[us_ei]
        elif us_ei > ds_ei:
            return (self.C - self.s_ends[us_ei]) + self.s_ends[ds_ei]
        else:
            return 0.0
