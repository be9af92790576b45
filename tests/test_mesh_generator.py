import os
import tempfile
import unittest

from fem_mesh.distributed import MeshPartitionManager
from fem_mesh.gmshreader import ElementType, read_gmsh
from fem_mesh.meshgen.mesh_generator import create_partitioned_rectangle, gmsh


@unittest.skipIf(gmsh is None, "Gmsh Python API is not available")
class TestPartitionedRectangle(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.output_dir = self.tmpdir.name

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_structured_single_partition(self):
        """A 2x2 structured rectangle gives four quadrilaterals."""
        filename = os.path.join(self.output_dir, "rect.msh")
        create_partitioned_rectangle(2.0, 1.0, 2, 2, 1, filename=filename)

        self.assertTrue(os.path.exists(filename))
        mesh = read_gmsh(filename)
        self.assertAlmostEqual(mesh.version, 2.2)
        self.assertEqual(mesh.number_of_partitions, 1)
        self.assertEqual(len(mesh.elements[("domain", ElementType.QUADRILATERAL4)]), 4)
        self.assertEqual(len(mesh.elements[("left", ElementType.LINE2)]), 2)

    def test_partitioned_mesh_is_covered(self):
        """Every element of a partitioned mesh is exported by one partition."""
        filename = os.path.join(self.output_dir, "rect_parts.msh")
        create_partitioned_rectangle(
            1.0, 1.0, 4, 4, 2, filename=filename, mesh_type="triangular"
        )

        mesh = read_gmsh(filename)
        exports = MeshPartitionManager.export_partitions(mesh)

        self.assertEqual(len(exports), mesh.number_of_partitions)
        self.assertEqual(
            sum(e.local_mesh.n_elements for e in exports), mesh.num_elements
        )

    def test_invalid_arguments(self):
        filename = os.path.join(self.output_dir, "bad.msh")
        with self.assertRaises(ValueError):
            create_partitioned_rectangle(1.0, 1.0, 2, 2, 1, filename, mesh_type="hex")
        with self.assertRaises(ValueError):
            create_partitioned_rectangle(1.0, 1.0, 0, 2, 1, filename)
        with self.assertRaises(ValueError):
            create_partitioned_rectangle(1.0, 1.0, 2, 2, 0, filename)


if __name__ == "__main__":
    unittest.main()
