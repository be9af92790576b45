# -*- coding: utf-8 -*-
"""
This package splits a decoded Gmsh mesh into partition meshes for distributed
finite element assembly.

Key modules:
- local_mesh:             The elements, nodes and local numbering of one partition.
- interface:              Interface nodes shared between partitions and their
                          global numbering.
- mesh_partition_manager: Builds and writes every partition of a mesh.
- writer:                 JSON export of a partition.
- reporting:              Text summary of a decomposition.
"""

from .interface import InterfaceGroup, InterfaceTable, resolve_interfaces
from .local_mesh import ElementBlock, LocalMesh, build_local_mesh
from .mesh_partition_manager import MeshPartitionManager, PartitionExport
from .reporting import format_partition_summary, print_partition_summary
from .writer import output_path, partition_document, write_document

__all__ = [
    "InterfaceGroup",
    "InterfaceTable",
    "resolve_interfaces",
    "ElementBlock",
    "LocalMesh",
    "build_local_mesh",
    "MeshPartitionManager",
    "PartitionExport",
    "format_partition_summary",
    "print_partition_summary",
    "output_path",
    "partition_document",
    "write_document",
]
