# -*- coding: utf-8 -*-
"""
This module provides reporting functions for decomposed meshes.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from .interface import InterfaceTable
    from .mesh_partition_manager import PartitionExport


def format_partition_summary(
    exports: Sequence["PartitionExport"], interface_table: "InterfaceTable"
) -> str:
    """
    Formats a summary of the elements, nodes and interfaces per partition.
    """
    if not exports:
        return "No partitions found."

    report = []
    report.append(f"\n{'--- Partition Summary ---':^80}")
    report.append(f"  Number of partitions: {len(exports)}")
    report.append(_format_partition_table(exports, interface_table))
    report.append(_format_interface_table(interface_table))
    return "\n".join(report)


def _format_partition_table(
    exports: Sequence["PartitionExport"], interface_table: "InterfaceTable"
) -> str:
    """Formats the table of owned elements and nodes."""
    lines: List[str] = []
    lines.append(
        f"  {'Partition':<12} {'Elements':>12} {'Nodes':>12} {'Neighbours':>12}"
    )
    lines.append(f"  {'-'*11} {'-'*12} {'-'*12} {'-'*12}")
    for export in exports:
        mesh = export.local_mesh
        neighbours = len(interface_table.neighbours(export.partition))
        lines.append(
            f"  {export.partition:<12} {mesh.n_elements:>12} {mesh.n_nodes:>12} "
            f"{neighbours:>12}"
        )
    return "\n".join(lines)


def _format_interface_table(interface_table: "InterfaceTable") -> str:
    """Formats the interface groups and their global offsets."""
    lines = []
    lines.append(f"\n{'--- Interfaces ---':^80}")
    if not len(interface_table):
        lines.append("  No interfaces found.")
        return "\n".join(lines)

    lines.append(f"  {'Master':<8} {'Slave':<8} {'Nodes':>12} {'GlobalStartId':>15}")
    lines.append(f"  {'-'*7} {'-'*7} {'-'*12} {'-'*15}")
    for group in interface_table.groups:
        lines.append(
            f"  {group.master:<8} {group.slave:<8} {group.num_nodes:>12} "
            f"{group.global_start:>15}"
        )
    lines.append(
        f"  Total interface nodes: {interface_table.number_of_interface_nodes}"
    )
    return "\n".join(lines)


def print_partition_summary(
    exports: Sequence["PartitionExport"], interface_table: "InterfaceTable"
) -> None:
    """Prints a summary of the partitions and their interfaces."""
    print(format_partition_summary(exports, interface_table))
