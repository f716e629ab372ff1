"""openFDA label retrieval."""

from .client import LabelPartition, OpenFDAClient, OpenFDARequestError
from .config import OpenFDASettings

__all__ = ["LabelPartition", "OpenFDAClient", "OpenFDARequestError", "OpenFDASettings"]
