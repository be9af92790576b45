import unittest

import numpy as np

from fem_mesh.distributed import InterfaceGroup, InterfaceTable, resolve_interfaces
from fem_mesh.distributed.interface import interface_local_indices
from fem_mesh.gmshreader import parse_gmsh
from fem_mesh.gmshreader.mesh_data import InterfaceAccumulator

from common_meshes import SKIN_MESH, THREE_PARTITION_MESH, TWO_PARTITION_MESH


class TestInterfaceTable(unittest.TestCase):

    def test_two_partitions(self):
        mesh = parse_gmsh(TWO_PARTITION_MESH)
        table = InterfaceTable.from_accumulator(mesh.interfaces)

        self.assertEqual(len(table), 1)
        self.assertEqual(table.number_of_interface_nodes, 2)
        self.assertEqual(table.groups[0], InterfaceGroup(1, 2, (5, 6), 0, 1))

        master = table.for_partition(1)
        slave = table.for_partition(2)
        self.assertEqual([g.sign for g in master], [1])
        self.assertEqual([g.sign for g in slave], [-1])
        self.assertEqual(master[0].nodes, slave[0].nodes)
        self.assertEqual(master[0].global_start, slave[0].global_start)

    def test_three_partitions(self):
        """Offsets follow the ascending order of the partition pairs."""
        mesh = parse_gmsh(THREE_PARTITION_MESH)
        table = InterfaceTable.from_accumulator(mesh.interfaces)

        self.assertEqual(
            [(g.master, g.slave, g.nodes, g.global_start) for g in table.groups],
            [(1, 2, (2, 6), 0), (2, 3, (3, 7), 2)],
        )
        self.assertEqual(table.number_of_interface_nodes, 4)

        self.assertEqual(table.neighbours(1), [2])
        self.assertEqual(table.neighbours(2), [1, 3])
        self.assertEqual(table.neighbours(3), [2])

        middle = table.for_partition(2)
        self.assertEqual([(g.master, g.slave, g.sign) for g in middle], [(1, 2, -1), (2, 3, 1)])

    def test_offsets_do_not_depend_on_the_queried_partition(self):
        mesh = parse_gmsh(THREE_PARTITION_MESH)
        starts = {}
        for p in (3, 1, 2):
            for g in resolve_interfaces(mesh.interfaces, p):
                starts.setdefault((g.master, g.slave), set()).add(g.global_start)
        self.assertEqual(starts, {(1, 2): {0}, (2, 3): {2}})

    def test_one_sided_pair_has_no_nodes(self):
        acc = InterfaceAccumulator()
        acc.add(1, 2, [1, 2])
        acc.add(1, 3, [2, 3])
        acc.add(3, 1, [3, 4])
        table = InterfaceTable.from_accumulator(acc)

        self.assertEqual(
            [(g.master, g.slave, g.nodes, g.global_start) for g in table.groups],
            [(1, 2, (), 0), (1, 3, (3,), 0)],
        )
        self.assertEqual(table.neighbours(1), [3])

    def test_undistributed_mesh_has_no_interfaces(self):
        table = InterfaceTable.from_accumulator(parse_gmsh(SKIN_MESH).interfaces)
        self.assertEqual(len(table), 0)
        self.assertEqual(table.number_of_interface_nodes, 0)
        self.assertEqual(table.for_partition(1), [])


class TestInterfaceGroup(unittest.TestCase):

    def setUp(self):
        self.group = InterfaceGroup(1, 2, (5, 6), 4)

    def test_seen_from(self):
        self.assertEqual(self.group.seen_from(1).sign, 1)
        self.assertEqual(self.group.seen_from(2).sign, -1)
        self.assertEqual(self.group.seen_from(2).global_start, 4)
        self.assertEqual(self.group.num_nodes, 2)

    def test_seen_from_unrelated_partition(self):
        with self.assertRaises(ValueError):
            self.group.seen_from(3)

    def test_local_indices(self):
        l2g = np.array([1, 4, 5, 6])
        np.testing.assert_array_equal(interface_local_indices(self.group, l2g), [2, 3])

    def test_local_indices_missing_node(self):
        with self.assertRaises(KeyError):
            interface_local_indices(self.group, np.array([1, 4, 5]))
        with self.assertRaises(KeyError):
            interface_local_indices(self.group, np.array([1, 2, 6]))


if __name__ == "__main__":
    unittest.main()
