# -*- coding: utf-8 -*-
"""
Tools for creating the mesh of a single partition.

This module provides the `LocalMesh` class, the portion of a decoded global
mesh owned by one partition. A `LocalMesh` holds the owned elements grouped
by (physical name, element type), the local-to-global node map and the
coordinates of the nodes used by the partition.

Key Features:
- Selection of the elements owned by a partition.
- A sorted, duplicate free local-to-global node map.
- Optional renumbering of the connectivity to local node ids.
- Zero or one based numbering of the written ids.

Classes:
    ElementBlock: Owned elements of one (physical name, element type) group.
    LocalMesh: The mesh of a single partition in a distributed setup.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union

import numpy as np
import numpy.typing as npt

from ..common.options import IndexingBase, NodalOrdering
from ..gmshreader.element_types import ElementType
from ..gmshreader.mesh_data import GmshMesh
from .interface import InterfaceGroup, interface_local_indices


@dataclass
class ElementBlock:
    """
    Elements of one physical group and element type.

    Attributes:
        name: Physical group name.
        element_type: Gmsh element type.
        element_ids: Element ids. Shape `(n_elements,)`.
        connectivity: Node numbers of each element.
            Shape `(n_elements, nodes_per_element)`.
    """

    name: str
    element_type: ElementType
    element_ids: npt.NDArray[np.int_]
    connectivity: npt.NDArray[np.int_]

    @property
    def key(self) -> Tuple[str, ElementType]:
        return (self.name, self.element_type)

    def __len__(self) -> int:
        return int(self.element_ids.shape[0])


def _collect_owned_blocks(global_mesh: GmshMesh, partition: int) -> List[ElementBlock]:
    """
    Gathers the elements owned by `partition`, in global node ids.

    Groups are visited in sorted (name, type) order and the file order of the
    elements is kept within each group.
    """
    blocks: List[ElementBlock] = []
    for name, etype in sorted(global_mesh.elements):
        owned = [e for e in global_mesh.elements[(name, etype)] if e.owner == partition]
        if not owned:
            continue
        element_ids = np.array([e.id for e in owned], dtype=int)
        connectivity = np.array([e.connectivity for e in owned], dtype=int).reshape(
            len(owned), etype.num_nodes
        )
        blocks.append(ElementBlock(name, etype, element_ids, connectivity))
    return blocks


def _initialize_node_map(blocks: List[ElementBlock]) -> npt.NDArray[np.int_]:
    """Returns the sorted unique global node ids referenced by the blocks."""
    if not blocks:
        return np.array([], dtype=int)
    return np.unique(np.concatenate([b.connectivity.ravel() for b in blocks]))


def _remap_connectivity(
    connectivity: npt.NDArray[np.int_], l2g_nodes: npt.NDArray[np.int_]
) -> npt.NDArray[np.int_]:
    """
    Replaces global node ids by their one based position in `l2g_nodes`.

    `l2g_nodes` is sorted and duplicate free, so the binary search gives a
    unique position for every id.
    """
    return np.searchsorted(l2g_nodes, connectivity) + 1


class LocalMesh:
    """
    The mesh of a single partition in a distributed setup.

    Attributes:
        partition (int): The partition this mesh belongs to.
        blocks (List[ElementBlock]): Owned elements per (name, type) group.
        local_to_global (npt.NDArray[np.int_]): Global node id of every local
            node, in the configured indexing base.
        node_coords (np.ndarray): Coordinates of the local nodes.
            Shape `(n_nodes, 3)`.
        ordering (NodalOrdering): Numbering used in the block connectivity.
        indexing_base (IndexingBase): Base of every written number.
    """

    def __init__(
        self,
        partition: int,
        blocks: List[ElementBlock],
        global_node_ids: npt.NDArray[np.int_],
        node_coords: np.ndarray,
        ordering: NodalOrdering,
        indexing_base: IndexingBase,
    ):
        if partition < 1:
            raise ValueError("Partition ids must be positive integers.")

        self.partition = partition
        self.blocks = blocks
        self.node_coords = node_coords
        self.ordering = ordering
        self.indexing_base = indexing_base
        self._global_node_ids = global_node_ids

        self.local_to_global = global_node_ids - self._offset

    @property
    def _offset(self) -> int:
        return 1 if self.indexing_base is IndexingBase.ZERO else 0

    @property
    def n_nodes(self) -> int:
        return int(self._global_node_ids.shape[0])

    @property
    def n_elements(self) -> int:
        return sum(len(b) for b in self.blocks)

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @classmethod
    def from_global_mesh(
        cls,
        global_mesh: GmshMesh,
        partition: int,
        ordering: Union[NodalOrdering, str] = NodalOrdering.LOCAL,
        indexing_base: Union[IndexingBase, int] = IndexingBase.ONE,
    ) -> "LocalMesh":
        """
        Factory method to construct the LocalMesh of a specific partition.

        Args:
            global_mesh: The decoded, unpartitioned view of the whole mesh.
            partition: The id of the partition (1 based).
            ordering: Renumber the connectivity to local node ids (LOCAL) or
                keep the global node ids (GLOBAL).
            indexing_base: Write numbers starting at zero or at one.

        Returns:
            A new LocalMesh. A partition without owned elements gives an
            empty mesh.
        """
        ordering = NodalOrdering(ordering)
        indexing_base = IndexingBase(indexing_base)
        if partition < 1:
            raise ValueError("Partition ids must be positive integers.")

        global_blocks = _collect_owned_blocks(global_mesh, partition)
        l2g_nodes = _initialize_node_map(global_blocks)
        node_coords = global_mesh.coordinates_of(l2g_nodes)

        offset = 1 if indexing_base is IndexingBase.ZERO else 0
        blocks = []
        for block in global_blocks:
            connectivity = block.connectivity
            if ordering is NodalOrdering.LOCAL:
                connectivity = _remap_connectivity(connectivity, l2g_nodes)
            blocks.append(
                ElementBlock(
                    block.name,
                    block.element_type,
                    block.element_ids - offset,
                    connectivity - offset,
                )
            )

        return cls(partition, blocks, l2g_nodes, node_coords, ordering, indexing_base)

    def interface_indices(self, group: InterfaceGroup) -> npt.NDArray[np.int_]:
        """
        Returns the interface nodes of a group in the numbering of this mesh.

        Local ordering gives positions in the local-to-global map, global
        ordering the global node ids, both in the configured base.
        """
        if self.ordering is NodalOrdering.LOCAL:
            positions = interface_local_indices(group, self._global_node_ids)
            return positions + 1 - self._offset
        return np.asarray(group.nodes, dtype=int) - self._offset


def build_local_mesh(
    global_mesh: GmshMesh,
    partition: int,
    zero_based: bool = False,
    local_numbering: bool = True,
) -> Tuple[LocalMesh, npt.NDArray[np.int_]]:
    """Builds the mesh of one partition and returns it with its local-to-global map."""
    local_mesh = LocalMesh.from_global_mesh(
        global_mesh,
        partition,
        NodalOrdering.LOCAL if local_numbering else NodalOrdering.GLOBAL,
        IndexingBase.ZERO if zero_based else IndexingBase.ONE,
    )
    return local_mesh, local_mesh.local_to_global
