import json
import os
import tempfile
import unittest
from pathlib import Path

from fem_mesh.common.options import IndexingBase, NodalOrdering, PartitionOptions
from fem_mesh.distributed import (
    InterfaceTable,
    MeshPartitionManager,
    format_partition_summary,
    output_path,
)
from fem_mesh.gmshreader import parse_gmsh

from common_meshes import SKIN_MESH, THREE_PARTITION_MESH, TWO_PARTITION_MESH, write_msh


class TestMeshPartitionManager(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_two_partition_documents(self):
        mesh = parse_gmsh(TWO_PARTITION_MESH)
        exports = MeshPartitionManager.export_partitions(mesh)

        self.assertEqual([e.partition for e in exports], [1, 2])
        first = exports[0].document
        self.assertEqual(
            set(first),
            {"Nodes", "Elements", "LocalToGlobalMap", "NumInterfaceNodes", "Interface"},
        )
        self.assertEqual(first["LocalToGlobalMap"], [1, 4, 5, 6])
        self.assertEqual(first["NumInterfaceNodes"], 2)
        self.assertEqual(first["Nodes"][0]["Indices"], [1, 4, 5, 6])
        self.assertEqual(
            first["Elements"],
            [
                {"Name": "Domain", "Type": 3, "NodalConnectivity": [[1, 3, 4, 2]], "Indices": [3]},
                {"Name": "Left", "Type": 1, "NodalConnectivity": [[1, 2]], "Indices": [1]},
            ],
        )
        self.assertEqual(
            first["Interface"],
            [{"Master": 1, "Slave": 2, "Value": 1, "Indices": [3, 4], "GlobalStartId": 0}],
        )

        second = exports[1].document
        self.assertEqual(second["Interface"][0]["Value"], -1)
        self.assertEqual(second["Interface"][0]["Indices"], [3, 4])
        self.assertEqual(second["Interface"][0]["GlobalStartId"], 0)

    def test_single_partition_has_no_interface_keys(self):
        exports = MeshPartitionManager.export_partitions(parse_gmsh(SKIN_MESH))
        self.assertEqual(len(exports), 1)
        self.assertEqual(set(exports[0].document), {"Nodes", "Elements"})
        self.assertIsNone(exports[0].interfaces)

    def test_without_indices(self):
        options = PartitionOptions(print_indices=False)
        exports = MeshPartitionManager.export_partitions(
            parse_gmsh(TWO_PARTITION_MESH), options
        )
        document = exports[0].document
        self.assertNotIn("Indices", document["Nodes"][0])
        self.assertTrue(all("Indices" not in b for b in document["Elements"]))
        self.assertIn("Indices", document["Interface"][0])

    def test_parallel_export_matches_sequential(self):
        mesh = parse_gmsh(THREE_PARTITION_MESH)
        sequential = MeshPartitionManager.export_partitions(mesh)
        parallel = MeshPartitionManager.export_partitions(
            mesh, PartitionOptions(max_workers=3)
        )
        self.assertEqual(
            [e.document for e in sequential], [e.document for e in parallel]
        )
        self.assertEqual(
            [g["GlobalStartId"] for g in parallel[1].document["Interface"]], [0, 2]
        )

    def test_empty_partition_is_written(self):
        """A partition id below the maximum without owned elements still exports."""
        text = THREE_PARTITION_MESH.replace(
            "2 3 6 1 0 3 2 -1 -3", "2 3 6 1 0 3 3 -1 -2"
        )
        mesh = parse_gmsh(text)
        with self.assertLogs("fem_mesh.distributed.mesh_partition_manager", "WARNING"):
            exports = MeshPartitionManager.export_partitions(mesh)

        self.assertEqual(len(exports), 3)
        empty = exports[1].document
        self.assertEqual(empty["Elements"], [])
        self.assertEqual(empty["LocalToGlobalMap"], [])

    def test_write_partitions(self):
        msh_file = write_msh(self.tmpdir.name, "plate.msh", TWO_PARTITION_MESH)
        out_dir = self.tmp_path / "out"
        options = PartitionOptions(indexing_base=IndexingBase.ZERO, output_dir=str(out_dir))

        exports = MeshPartitionManager.convert(msh_file, options, indent=2)

        self.assertEqual(
            [e.path for e in exports],
            [str(out_dir / "plate_1.mesh"), str(out_dir / "plate_2.mesh")],
        )
        with open(exports[0].path, encoding="utf-8") as fh:
            document = json.load(fh)
        self.assertEqual(document["LocalToGlobalMap"], [0, 3, 4, 5])
        self.assertEqual(document["Interface"][0]["Indices"], [2, 3])

    def test_write_single_partition_next_to_input(self):
        msh_file = write_msh(self.tmpdir.name, "skin.msh", SKIN_MESH)
        exports = MeshPartitionManager.convert(msh_file)
        self.assertEqual(exports[0].path, os.path.join(self.tmpdir.name, "skin.mesh"))
        self.assertTrue(os.path.isfile(exports[0].path))

    def test_create_local_meshes(self):
        meshes = MeshPartitionManager.create_local_meshes(
            parse_gmsh(THREE_PARTITION_MESH),
            PartitionOptions(ordering=NodalOrdering.GLOBAL),
        )
        self.assertEqual([m.partition for m in meshes], [1, 2, 3])
        self.assertEqual(meshes[1].blocks[0].connectivity.tolist(), [[2, 3, 7, 6]])

    def test_summary(self):
        mesh = parse_gmsh(THREE_PARTITION_MESH)
        exports = MeshPartitionManager.export_partitions(mesh)
        summary = format_partition_summary(
            exports, InterfaceTable.from_accumulator(mesh.interfaces)
        )
        self.assertIn("Number of partitions: 3", summary)
        self.assertIn("Total interface nodes: 4", summary)
        self.assertEqual(format_partition_summary([], InterfaceTable([])), "No partitions found.")


class TestPartitionOptions(unittest.TestCase):

    def test_defaults(self):
        options = PartitionOptions()
        self.assertTrue(options.local_numbering)
        self.assertFalse(options.zero_based)
        self.assertTrue(options.print_indices)
        self.assertEqual(options.max_workers, 1)

    def test_values_are_coerced(self):
        options = PartitionOptions(ordering="global", indexing_base=0)
        self.assertIs(options.ordering, NodalOrdering.GLOBAL)
        self.assertIs(options.indexing_base, IndexingBase.ZERO)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            PartitionOptions(max_workers=0)
        with self.assertRaises(ValueError):
            PartitionOptions(ordering="natural")


class TestOutputPath(unittest.TestCase):

    def test_names(self):
        self.assertEqual(output_path("data/plate.msh", 1, False), os.path.join("data", "plate.mesh"))
        self.assertEqual(output_path("data/plate.msh", 3, True), os.path.join("data", "plate_3.mesh"))
        self.assertEqual(output_path("plate.msh", 2, True, "out"), os.path.join("out", "plate_2.mesh"))


if __name__ == "__main__":
    unittest.main()
