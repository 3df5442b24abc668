"""repograph: indentation-based repository structure graphs."""

from .config_manager import ScanSettings
from .models import Edge, GraphSnapshot, Node, NodeType
from .walker import RepositoryWalker, WalkResult, scan_repository

__version__ = "0.1.0"

__all__ = [
    "Edge",
    "GraphSnapshot",
    "Node",
    "NodeType",
    "RepositoryWalker",
    "ScanSettings",
    "WalkResult",
    "scan_repository",
]
