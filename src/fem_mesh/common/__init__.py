from .logging_config import setup_logging
from .options import IndexingBase, NodalOrdering, PartitionOptions

__all__ = [
    "setup_logging",
    "IndexingBase",
    "NodalOrdering",
    "PartitionOptions",
]
