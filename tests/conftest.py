import numpy as np
import pytest

from pyscsupport.lattice import Lattice
from pyscsupport.model import SCModel


def make_lattice(n_elems=100, L=0.5):
    names = [f"E{i:03d}" for i in range(1, n_elems + 1)]
    return Lattice(names, lengths=np.full(n_elems, L))


@pytest.fixture
def model():
    return SCModel(make_lattice())
