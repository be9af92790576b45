# -*- coding: utf-8 -*-
"""
Options controlling how a distributed mesh is numbered and written.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NodalOrdering(Enum):
    """Numbering of the nodal connectivity of each partition."""

    LOCAL = "local"  # renumbered to positions in the local-to-global map
    GLOBAL = "global"  # node ids of the input mesh


class IndexingBase(Enum):
    """Whether written node and element numbers start at zero or one."""

    ZERO = 0
    ONE = 1


@dataclass
class PartitionOptions:
    """
    Settings for building and writing partition meshes.

    Attributes:
        ordering: Local or global nodal connectivity.
        indexing_base: Zero or one based numbering in the output.
        print_indices: Whether node and element index arrays are written.
        max_workers: Number of partitions processed in parallel. 1 processes
            the partitions one after another.
        output_dir: Directory for the written files. None writes next to the
            input mesh.
    """

    ordering: NodalOrdering = NodalOrdering.LOCAL
    indexing_base: IndexingBase = IndexingBase.ONE
    print_indices: bool = True
    max_workers: int = 1
    output_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.ordering, NodalOrdering):
            self.ordering = NodalOrdering(self.ordering)
        if not isinstance(self.indexing_base, IndexingBase):
            self.indexing_base = IndexingBase(self.indexing_base)
        if self.max_workers < 1:
            raise ValueError("max_workers must be a positive integer.")

    @property
    def local_numbering(self) -> bool:
        return self.ordering is NodalOrdering.LOCAL

    @property
    def zero_based(self) -> bool:
        return self.indexing_base is IndexingBase.ZERO
