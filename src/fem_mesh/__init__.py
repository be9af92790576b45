"""
FEM-Mesh

A Python package for reading Gmsh meshes and splitting partitioned meshes into
locally numbered sub-meshes for distributed finite element assembly.
"""

from . import common
from . import distributed
from . import gmshreader
from . import meshgen

__all__ = [
    "common",
    "distributed",
    "gmshreader",
    "meshgen",
]
