# -*- coding: utf-8 -*-
"""
JSON export of partition meshes.

Each partition is written as one JSON document with a node block, one
element block per (physical name, element type) and, for distributed meshes,
the local-to-global map and the interface block used by FETI style solvers.
"""

import json
import os
from typing import Any, Dict, List, Optional, Sequence, Union

from .interface import InterfaceGroup
from .local_mesh import LocalMesh

MESH_SUFFIX = ".mesh"


def _node_block(local_mesh: LocalMesh, print_indices: bool) -> Dict[str, Any]:
    block: Dict[str, Any] = {"Coordinates": local_mesh.node_coords.tolist()}
    if print_indices:
        block["Indices"] = local_mesh.local_to_global.tolist()
    return block


def _element_blocks(local_mesh: LocalMesh, print_indices: bool) -> List[Dict[str, Any]]:
    blocks = []
    for block in local_mesh.blocks:
        data: Dict[str, Any] = {
            "Name": block.name,
            "Type": int(block.element_type),
            "NodalConnectivity": block.connectivity.tolist(),
        }
        if print_indices:
            data["Indices"] = block.element_ids.tolist()
        blocks.append(data)
    return blocks


def _interface_block(
    local_mesh: LocalMesh, interfaces: Sequence[InterfaceGroup]
) -> List[Dict[str, Any]]:
    return [
        {
            "Master": group.master,
            "Slave": group.slave,
            "Value": group.sign,
            "Indices": local_mesh.interface_indices(group).tolist(),
            "GlobalStartId": group.global_start,
        }
        for group in interfaces
    ]


def partition_document(
    local_mesh: LocalMesh,
    interfaces: Optional[Sequence[InterfaceGroup]] = None,
    number_of_interface_nodes: int = 0,
    print_indices: bool = True,
) -> Dict[str, Any]:
    """
    Builds the JSON document of one partition.

    Args:
        local_mesh: The mesh of the partition.
        interfaces: The signed interface groups of the partition. None for a
            mesh that is not distributed; the document then has no
            local-to-global map and no interface block.
        number_of_interface_nodes: Total interface nodes of the whole
            decomposition.
        print_indices: Whether node and element index arrays are written.

    Returns:
        A dictionary ready for `json.dump`.
    """
    document: Dict[str, Any] = {
        "Nodes": [_node_block(local_mesh, print_indices)],
        "Elements": _element_blocks(local_mesh, print_indices),
    }
    if interfaces is not None:
        document["LocalToGlobalMap"] = local_mesh.local_to_global.tolist()
        document["NumInterfaceNodes"] = int(number_of_interface_nodes)
        document["Interface"] = _interface_block(local_mesh, interfaces)
    return document


def output_path(
    msh_file: Union[str, os.PathLike],
    partition: int,
    distributed: bool,
    output_dir: Optional[str] = None,
) -> str:
    """
    Returns the path of the document written for a partition.

    ``mesh.msh`` gives ``mesh.mesh`` for a single partition and
    ``mesh_<p>.mesh`` for partition ``p`` of a distributed mesh.
    """
    msh_file = os.fspath(msh_file)
    stem = os.path.splitext(os.path.basename(msh_file))[0]
    directory = output_dir if output_dir is not None else os.path.dirname(msh_file)
    filename = f"{stem}_{partition}{MESH_SUFFIX}" if distributed else f"{stem}{MESH_SUFFIX}"
    return os.path.join(directory, filename)


def write_document(document: Dict[str, Any], path: str, indent: Optional[int] = None) -> str:
    """Writes a partition document to `path` and returns the path."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(document, fh, indent=indent)
    return path
