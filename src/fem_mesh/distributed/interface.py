# -*- coding: utf-8 -*-
"""
Interface resolution between mesh partitions.

Domain decomposition solvers (FETI and its variants) couple the unknowns of
neighbouring partitions on the nodes they share. While a partitioned mesh is
read, every shared element adds its nodes to the `InterfaceAccumulator`, once
for the owning side of each partition pair. This module turns that
accumulator into interface groups:

- the interface nodes of a pair (master < slave) are the nodes observed from
  both sides of the pair,
- every group gets a start offset into one global numbering of interface
  nodes, assigned in ascending (master, slave) order.

The offsets must be the same for every partition. They are therefore
computed once per decomposition in an `InterfaceTable`, which is then shared
read-only by the export of every partition.

Classes:
    InterfaceGroup: The interface between two partitions.
    InterfaceTable: All interface groups of a decomposition with offsets.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..gmshreader.mesh_data import InterfaceAccumulator


@dataclass(frozen=True)
class InterfaceGroup:
    """
    Interface nodes between a master and a slave partition.

    Attributes:
        master: The partition with the smaller id.
        slave: The partition with the larger id.
        nodes: Sorted global node ids on the interface.
        global_start: Offset of the first node in the global interface
            numbering.
        sign: +1 when seen from the master partition, -1 from the slave.
    """

    master: int
    slave: int
    nodes: Tuple[int, ...]
    global_start: int
    sign: int = 1

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    def seen_from(self, partition: int) -> "InterfaceGroup":
        """Returns the group with the sign of the given partition."""
        if partition not in (self.master, self.slave):
            raise ValueError(
                f"Partition {partition} is not part of interface "
                f"({self.master}, {self.slave})."
            )
        sign = 1 if partition == self.master else -1
        return InterfaceGroup(
            self.master, self.slave, self.nodes, self.global_start, sign
        )


class InterfaceTable:
    """
    The interface groups of a whole decomposition.

    Attributes:
        groups (List[InterfaceGroup]): Groups in ascending (master, slave)
            order, with the master sign.
        number_of_interface_nodes (int): Total count of interface nodes over
            all groups.
    """

    def __init__(self, groups: List[InterfaceGroup]):
        self.groups = groups
        self.number_of_interface_nodes = sum(g.num_nodes for g in groups)

    @classmethod
    def from_accumulator(cls, accumulator: InterfaceAccumulator) -> "InterfaceTable":
        """
        Intersects both sides of every partition pair and assigns offsets.

        A pair observed from one side only has an empty intersection; it is
        kept as a group with no nodes.
        """
        groups: List[InterfaceGroup] = []
        global_start = 0
        for edge in accumulator.edges():
            nodes = tuple(sorted(edge.intersection()))
            groups.append(InterfaceGroup(edge.master, edge.slave, nodes, global_start))
            global_start += len(nodes)
        return cls(groups)

    def for_partition(self, partition: int) -> List[InterfaceGroup]:
        """Returns the groups touching `partition`, signed for that partition."""
        return [
            g.seen_from(partition)
            for g in self.groups
            if partition in (g.master, g.slave)
        ]

    def neighbours(self, partition: int) -> List[int]:
        """Returns the partitions sharing at least one interface node."""
        result = []
        for g in self.for_partition(partition):
            if g.num_nodes > 0:
                result.append(g.slave if g.master == partition else g.master)
        return result

    def __len__(self) -> int:
        return len(self.groups)


def resolve_interfaces(
    accumulator: InterfaceAccumulator, partition: int
) -> List[InterfaceGroup]:
    """Resolves the interface groups of a single partition."""
    return InterfaceTable.from_accumulator(accumulator).for_partition(partition)


def interface_local_indices(
    group: InterfaceGroup, local_to_global: np.ndarray
) -> np.ndarray:
    """
    Converts the interface nodes of a group to positions in a sorted
    local-to-global map.

    Raises:
        KeyError: If an interface node is not part of the map.
    """
    nodes = np.asarray(group.nodes, dtype=int)
    if nodes.size == 0:
        return nodes
    positions = np.searchsorted(local_to_global, nodes)
    valid = positions < local_to_global.size
    found = np.zeros(nodes.size, dtype=bool)
    found[valid] = local_to_global[positions[valid]] == nodes[valid]
    if not np.all(found):
        missing = int(nodes[~found][0])
        raise KeyError(
            f"Interface node {missing} not found in the local-to-global map."
        )
    return positions
