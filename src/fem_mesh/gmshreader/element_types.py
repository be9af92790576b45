# -*- coding: utf-8 -*-
"""
Gmsh element topology table.

The MSH format identifies every element by an integer type id. The id fixes
the shape and the number of nodes listed in the element record, so the reader
must know the node count of each id before it can consume the record. The
numbering below is the one used by the MSH file format and must not change.

Functions
---------
:py:func:`element_type`:
    Converts a raw type id into an `ElementType`.
:py:func:`node_count`:
    Returns the number of nodes of an element type id.
"""

from enum import IntEnum
from typing import Dict

from .exceptions import UnknownElementTypeError


class ElementType(IntEnum):
    """Gmsh element numbering scheme."""

    # Linear elements
    LINE2 = 1
    TRIANGLE3 = 2
    QUADRILATERAL4 = 3
    TETRAHEDRON4 = 4
    HEXAHEDRON8 = 5
    PRISM6 = 6
    PYRAMID5 = 7
    # Quadratic elements
    LINE3 = 8
    TRIANGLE6 = 9
    QUADRILATERAL9 = 10  # 4 vertex, 4 edge and 1 face node
    TETRAHEDRON10 = 11
    HEXAHEDRON27 = 12
    PRISM18 = 13
    PYRAMID14 = 14
    POINT = 15
    QUADRILATERAL8 = 16
    HEXAHEDRON20 = 17
    PRISM15 = 18
    PYRAMID13 = 19
    # Higher order elements
    TRIANGLE9 = 20
    TRIANGLE10 = 21
    TRIANGLE12 = 22
    TRIANGLE15 = 23
    TRIANGLE15_IC = 24  # incomplete 15 node triangle
    TRIANGLE21 = 25
    EDGE4 = 26
    EDGE5 = 27
    EDGE6 = 28
    TETRAHEDRON20 = 29
    TETRAHEDRON35 = 30
    TETRAHEDRON56 = 31
    HEXAHEDRON64 = 92
    HEXAHEDRON125 = 93

    @property
    def num_nodes(self) -> int:
        return NODES_PER_ELEMENT[self]


NODES_PER_ELEMENT: Dict[ElementType, int] = {
    ElementType.LINE2: 2,
    ElementType.TRIANGLE3: 3,
    ElementType.QUADRILATERAL4: 4,
    ElementType.TETRAHEDRON4: 4,
    ElementType.HEXAHEDRON8: 8,
    ElementType.PRISM6: 6,
    ElementType.PYRAMID5: 5,
    ElementType.LINE3: 3,
    ElementType.TRIANGLE6: 6,
    ElementType.QUADRILATERAL9: 9,
    ElementType.TETRAHEDRON10: 10,
    ElementType.HEXAHEDRON27: 27,
    ElementType.PRISM18: 18,
    ElementType.PYRAMID14: 14,
    ElementType.POINT: 1,
    ElementType.QUADRILATERAL8: 8,
    ElementType.HEXAHEDRON20: 20,
    ElementType.PRISM15: 15,
    ElementType.PYRAMID13: 13,
    ElementType.TRIANGLE9: 9,
    ElementType.TRIANGLE10: 10,
    ElementType.TRIANGLE12: 12,
    ElementType.TRIANGLE15: 15,
    ElementType.TRIANGLE15_IC: 15,
    ElementType.TRIANGLE21: 21,
    ElementType.EDGE4: 4,
    ElementType.EDGE5: 5,
    ElementType.EDGE6: 6,
    ElementType.TETRAHEDRON20: 20,
    ElementType.TETRAHEDRON35: 35,
    ElementType.TETRAHEDRON56: 56,
    ElementType.HEXAHEDRON64: 64,
    ElementType.HEXAHEDRON125: 125,
}


def element_type(type_id: int) -> ElementType:
    """
    Converts a raw Gmsh type id into an `ElementType`.

    Raises:
        UnknownElementTypeError: If the id is not in the topology table.
    """
    try:
        return ElementType(type_id)
    except ValueError as e:
        raise UnknownElementTypeError(type_id) from e


def node_count(type_id: int) -> int:
    """Returns the number of nodes of the element with the given type id."""
    return NODES_PER_ELEMENT[element_type(type_id)]
