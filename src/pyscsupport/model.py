from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Union

import numpy as np

from .lattice import Lattice

# IMPORTANT: The name of the variable to which IntEnum() is assigned must be the
# same as the first string argument given to IntEnum(), if this enum needs to
# be pickled!
SupportType = IntEnum("SupportType", ["Section", "Plinth", "Girder"], start=0)

SUPPORT_QUANTITIES = ("Offset", "Roll")

# Truncation (in units of sigma) used when none is specified
DEFAULT_CUTOFF = 2.0


class SupportField(str, Enum):
    """Element-record / sigma-store key for a support structure quantity.

    Each member compares (and hashes) equal to its plain string name, e.g.
    `SupportField.GirderOffset == "GirderOffset"`.
    """

    SectionOffset = "SectionOffset"
    SectionRoll = "SectionRoll"
    PlinthOffset = "PlinthOffset"
    PlinthRoll = "PlinthRoll"
    GirderOffset = "GirderOffset"
    GirderRoll = "GirderRoll"

    @classmethod
    def of(cls, support_type: SupportType, quantity: str):
        return cls(support_type.name + quantity)

    @property
    def support_type(self) -> SupportType:
        for _type in SupportType:
            if self.value.startswith(_type.name):
                return _type
        raise ValueError(self.value)

    @property
    def quantity(self) -> str:
        return self.value[len(self.support_type.name) :]


def key_name(key: Union[SupportField, str]) -> str:
    return key.value if isinstance(key, SupportField) else key


def make_field_key(support_type: SupportType, name: str) -> Union[SupportField, str]:
    """Prefixed sigma-store key. Unrecognized quantity names are kept as plain
    strings (e.g., "GirderFoo")."""

    if name in SUPPORT_QUANTITIES:
        return SupportField.of(support_type, name)
    else:
        return support_type.name + name


@dataclass
class UncertaintySpec:
    """Mean-zero truncated Gaussian error spec for one support end point.

    `sigma` is the standard deviation vector ([x, y, z] for offsets,
    [az, ax, ay] for rolls) and `cutoff` is the truncation in units of sigma.
    """

    field: Union[SupportField, str]
    sigma: np.ndarray
    cutoff: float = DEFAULT_CUTOFF

    def __post_init__(self):
        # Never share the array with the caller or with the other end point
        self.sigma = np.array(self.sigma, copy=True)

    @property
    def mean(self):
        return 0.0


class SCModel:
    """Simulation model stores for support structures.

    - `ords`: OrdinateIndex. SupportType -> (2, N) int array of
      [start; end] Element Indexes (1-based).
    - `sigmas`: SigmaStore. Element Index -> {field key -> UncertaintySpec}
    - The nominal/actual offsets and rolls live in the element records of
      `lattice` under `SupportField` keys.
    """

    def __init__(self, lattice: Lattice) -> None:

        assert isinstance(lattice, Lattice)
        self.lattice = lattice

        self.ords: Dict[SupportType, np.ndarray] = {}
        self.sigmas: Dict[int, Dict[Union[SupportField, str], UncertaintySpec]] = {}

        self.support_offsets = {}
        self.support_rots = {}

    def register_support(self, *args):
        from .support import register_support

        return register_support(self, *args)

    def get_sigma(
        self, elem_ind: int, key: Union[SupportField, str]
    ) -> Union[UncertaintySpec, None]:
        return self.sigmas.get(int(elem_ind), {}).get(key, None)

    def get_field(self, elem_ind: int, field: SupportField) -> np.ndarray:
        return self.lattice[elem_ind].get(field, np.zeros(3))

    def iter_pairs(self, support_type: SupportType):
        if support_type not in self.ords:
            return
        for us_ei, ds_ei in self.ords[support_type].T:
            yield int(us_ei), int(ds_ei)

    def get_endpoint_inds(self, support_type: Union[SupportType, None] = None):
        if support_type is None:
            types = list(self.ords)
        else:
            types = [support_type]

        eis = set()
        for _type in types:
            eis.update(int(ei) for ei in np.ravel(self.ords[_type]))

        return sorted(eis)
