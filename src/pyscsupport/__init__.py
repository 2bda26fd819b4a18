import importlib.metadata

__version__ = {"pyscsupport": importlib.metadata.version(__name__)}

from . import config, errors, exceptions, lattice, model, support, update, util
from .config import build_model_from_config, load_config, register_from_config
from .errors import apply_support_errors
from .exceptions import InvalidArgument, LayoutNotice, ShapeWarning
from .lattice import Lattice
from .model import (
    DEFAULT_CUTOFF,
    SCModel,
    SupportField,
    SupportType,
    UncertaintySpec,
)
from .support import SigmaCutoff, register_support
from .update import update_support
from .util import load_model_hdf5, save_model_hdf5
