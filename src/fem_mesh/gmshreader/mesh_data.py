# -*- coding: utf-8 -*-
"""
In-memory representation of a decoded Gmsh mesh.

This module defines the containers filled by the reader:

- `Owned` / `Shared`: the partition ownership of an element, decoded from the
  partition tags of the element record.
- `Element`: a single typed element with its tags and nodal connectivity.
- `InterfaceAccumulator`: the nodes of shared elements, collected per pair of
  partitions while the elements are read.
- `GmshMesh`: nodes, physical names and elements grouped by
  (physical name, element type).

Everything here is filled once by the reader and treated as read-only by the
partitioning stages.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, Dict, Iterable, Iterator, List, Set, Tuple, Union

import numpy as np

from .element_types import ElementType

MeshKey = Tuple[str, ElementType]

# Partition that owns every element of a mesh written without partition tags
DEFAULT_PARTITION = 1


@dataclass(frozen=True)
class Owned:
    """Element that belongs to a single partition."""

    partition: int = DEFAULT_PARTITION

    @property
    def owner(self) -> int:
        return self.partition

    @property
    def sharers(self) -> Tuple[int, ...]:
        return ()


@dataclass(frozen=True)
class Shared:
    """Element owned by `owner` and shared with the partitions in `sharers`."""

    owner: int
    sharers: Tuple[int, ...]


Ownership = Union[Owned, Shared]


def decode_ownership(tags: Tuple[int, ...]) -> Ownership:
    """
    Decodes the partition tags of an element record.

    The MSH 2 layout is ``physical, elementary, n_partitions, owner,
    -sharer_1, ..., -sharer_(n_partitions - 1)``. Records without partition
    tags belong to the default partition.

    Args:
        tags: All integer tags of the element record.

    Returns:
        `Owned` if the element has no sharing partitions, `Shared` otherwise.
    """
    if len(tags) < 4 or tags[2] <= 0:
        return Owned()

    owner = tags[3]
    sharers = tuple(abs(t) for t in tags[4 : 3 + tags[2]])
    if not sharers:
        return Owned(owner)
    return Shared(owner, sharers)


@dataclass(frozen=True)
class Element:
    """A typed element with its raw tags and nodal connectivity (node ids)."""

    id: int
    element_type: ElementType
    tags: Tuple[int, ...]
    connectivity: Tuple[int, ...]
    ownership: Ownership = field(default_factory=Owned)

    @property
    def physical_id(self) -> int:
        return self.tags[0] if self.tags else 0

    @property
    def owner(self) -> int:
        return self.ownership.owner

    @property
    def is_shared(self) -> bool:
        return isinstance(self.ownership, Shared)


class _InterfaceEdge:
    """Nodes shared across one partition pair, as observed from each side."""

    __slots__ = ("master", "slave", "master_nodes", "slave_nodes")

    def __init__(self, master: int, slave: int):
        self.master = master
        self.slave = slave
        self.master_nodes: Set[int] = set()
        self.slave_nodes: Set[int] = set()

    def observed_from(self, partition: int) -> Set[int]:
        return self.master_nodes if partition == self.master else self.slave_nodes

    def intersection(self) -> Set[int]:
        return self.master_nodes & self.slave_nodes


class InterfaceAccumulator:
    """
    Collects the nodes of shared elements for every pair of partitions.

    An element owned by partition `a` and shared with `b` contributes its
    nodes to the (a, b) direction of the undirected edge {a, b}. Both
    directions of a pair always live on the same edge, so the interface
    nodes of a pair are simply the intersection of its two node sets.
    """

    def __init__(self) -> None:
        self._edges: Dict[Tuple[int, int], _InterfaceEdge] = {}

    def add(self, owner: int, sharer: int, node_ids: Iterable[int]) -> None:
        """Records the nodes of an element owned by `owner` shared with `sharer`."""
        if owner == sharer:
            return
        key = (min(owner, sharer), max(owner, sharer))
        edge = self._edges.get(key)
        if edge is None:
            edge = self._edges[key] = _InterfaceEdge(*key)
        edge.observed_from(owner).update(node_ids)

    def nodes(self, owner: int, sharer: int) -> Set[int]:
        """Returns a copy of the nodes observed from `owner` towards `sharer`."""
        edge = self._edges.get((min(owner, sharer), max(owner, sharer)))
        if edge is None or owner == sharer:
            return set()
        return set(edge.observed_from(owner))

    def pairs(self) -> List[Tuple[int, int]]:
        """Returns the (master, slave) pairs in ascending order."""
        return sorted(self._edges)

    def edges(self) -> Iterator[_InterfaceEdge]:
        for key in self.pairs():
            yield self._edges[key]

    def __len__(self) -> int:
        return len(self._edges)


class GmshMesh:
    """
    A decoded Gmsh mesh.

    Attributes:
        version (float): MSH format version read from the header.
        file_type (int): Storage discriminator of the header (0 for ASCII).
        data_size (int): Size of floating point values declared in the header.
        physical_names (Dict[int, str]): Physical group id to name.
        physical_dimensions (Dict[int, int]): Physical group id to dimension.
        node_ids (np.ndarray): Node ids in file order. Shape `(n_nodes,)`.
        node_coords (np.ndarray): Node coordinates. Shape `(n_nodes, 3)`.
        elements (Dict[Tuple[str, ElementType], List[Element]]): Elements
            grouped by physical name and type, in file order within a group.
        interfaces (InterfaceAccumulator): Nodes shared between partitions.
        number_of_partitions (int): Largest partition id seen, at least 1.
    """

    def __init__(self) -> None:
        self.version: float = 0.0
        self.file_type: int = 0
        self.data_size: int = 0

        self.physical_names: Dict[int, str] = {}
        self.physical_dimensions: Dict[int, int] = {}

        self.node_ids: np.ndarray = np.array([], dtype=int)
        self.node_coords: np.ndarray = np.empty((0, 3), dtype=float)
        self._id_to_index: Dict[int, int] = {}

        self.elements: DefaultDict[MeshKey, List[Element]] = defaultdict(list)
        self.interfaces = InterfaceAccumulator()
        self.number_of_partitions: int = DEFAULT_PARTITION

    @property
    def num_nodes(self) -> int:
        return int(self.node_ids.shape[0])

    @property
    def num_elements(self) -> int:
        return sum(len(group) for group in self.elements.values())

    @property
    def is_distributed(self) -> bool:
        return self.number_of_partitions > 1

    def set_nodes(self, node_ids: np.ndarray, node_coords: np.ndarray) -> None:
        """Stores the node table and builds the id -> row lookup."""
        self.node_ids = np.asarray(node_ids, dtype=int)
        self.node_coords = np.asarray(node_coords, dtype=float).reshape(-1, 3)
        self._id_to_index = {int(t): i for i, t in enumerate(self.node_ids)}

    def node_index(self, node_id: int) -> int:
        """Returns the row of `node_id` in `node_coords`."""
        try:
            return self._id_to_index[int(node_id)]
        except KeyError as e:
            raise KeyError(f"Node id {e} not found in the node list.") from e

    def coordinates_of(self, node_ids: Iterable[int]) -> np.ndarray:
        """Gathers the coordinates of the given node ids, in the given order."""
        rows = [self.node_index(g) for g in node_ids]
        if not rows:
            return np.empty((0, 3), dtype=float)
        return self.node_coords[rows]

    def add_element(self, name: str, element: Element) -> None:
        self.elements[(name, element.element_type)].append(element)

    def iter_elements(self) -> Iterator[Tuple[MeshKey, Element]]:
        for key in sorted(self.elements):
            for element in self.elements[key]:
                yield key, element

    def referenced_nodes(self) -> np.ndarray:
        """Returns the sorted unique node ids used by at least one element."""
        conns = [
            np.asarray(e.connectivity, dtype=int) for _, e in self.iter_elements()
        ]
        if not conns:
            return np.array([], dtype=int)
        return np.unique(np.concatenate(conns))
