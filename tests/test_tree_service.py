"""
Tests for the in-memory tree service.
"""

import threading
import unittest

from layered_merkle.api.tree_service import TreeNotFoundError, TreeService
from layered_merkle.hashers import concat_combine
from layered_merkle.merkle import IndexOutOfRangeError, InvalidInputError, MerkleTree


class TestTreeService(unittest.TestCase):

    def setUp(self):
        self.service = TreeService(hasher="concat")

    def test_create_and_get(self):
        snapshot = self.service.create_tree(["1", "2", "3"], "t1")
        self.assertEqual(snapshot.tree_id, "t1")
        self.assertEqual(snapshot.root, "1-2-3")
        self.assertEqual(snapshot.depth, 2)
        self.assertEqual(self.service.get_root("t1"), "1-2-3")
        self.assertEqual(self.service.list_trees(), ["t1"])

    def test_generated_id(self):
        tree_id = self.service.create_tree(["1"]).tree_id
        self.assertTrue(tree_id)
        self.assertEqual(self.service.get_root(tree_id), "1")

    def test_proof_and_verify(self):
        self.service.create_tree(["1", "2", "3", "4", "5"], "t")
        proof = self.service.get_proof("t", 4)
        self.assertEqual(proof.path, ["1-2-3-4"])
        self.assertTrue(self.service.verify(proof.leaf, 4, proof.path, 5, proof.root))
        self.assertFalse(self.service.verify("9", 4, proof.path, 5, proof.root))

    def test_update_leaf(self):
        self.service.create_tree(["1", "2", "3"], "t")
        snapshot = self.service.update_leaf("t", 1, "9")
        self.assertEqual(snapshot.root, "1-9-3")
        self.assertEqual(snapshot.leaves, ["1", "9", "3"])
        self.assertEqual(self.service.describe("t"), snapshot)

    def test_snapshot_is_a_copy(self):
        snapshot = self.service.create_tree(["1", "2"], "t")
        snapshot.layers[0][0] = "changed"
        self.assertEqual(self.service.describe("t").leaves, ["1", "2"])
        self.assertEqual(self.service.get_root("t"), "1-2")

    def test_delete(self):
        self.service.create_tree(["1"], "t")
        self.service.delete_tree("t")
        self.assertEqual(self.service.list_trees(), [])
        with self.assertRaises(TreeNotFoundError):
            self.service.delete_tree("t")

    def test_unknown_tree(self):
        with self.assertRaises(TreeNotFoundError) as ctx:
            self.service.get_root("missing")
        self.assertEqual(ctx.exception.tree_id, "missing")
        self.assertIn("missing", str(ctx.exception))

    def test_core_errors_propagate(self):
        with self.assertRaises(InvalidInputError):
            self.service.create_tree([])
        self.service.create_tree(["1", "2"], "t")
        with self.assertRaises(IndexOutOfRangeError):
            self.service.get_proof("t", 2)
        with self.assertRaises(IndexOutOfRangeError):
            self.service.update_leaf("t", -1, "x")

    def test_explicit_combine_overrides_hasher(self):
        service = TreeService(hasher="sha256", combine=lambda a, b: a + b)
        service.create_tree(["a", "b"], "t")
        self.assertEqual(service.get_root("t"), "ab")

    def test_unknown_hasher(self):
        with self.assertRaises(ValueError):
            TreeService(hasher="nope")

    def test_concurrent_updates_are_serialized(self):
        """Updates from many threads end in the same state as a rebuild"""
        n = 16
        self.service.create_tree([str(i) for i in range(n)], "t")

        def worker(index):
            for round_ in range(20):
                self.service.update_leaf("t", index, f"{index}.{round_}")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = self.service.describe("t")
        expected = [f"{i}.19" for i in range(n)]
        self.assertEqual(snapshot.leaves, expected)
        self.assertEqual(snapshot.layers, MerkleTree(expected, concat_combine).layers)

    def test_describe_waits_for_update_in_progress(self):
        """A read issued mid-update sees the finished update, never a mix"""
        entered = threading.Event()
        release = threading.Event()
        blocking = {"on": False}

        def slow_combine(left, right):
            if blocking["on"]:
                entered.set()
                release.wait(5)
            return concat_combine(left, right)

        service = TreeService(combine=slow_combine)
        service.create_tree(["1", "2", "3", "4"], "t")
        blocking["on"] = True

        writer = threading.Thread(target=service.update_leaf, args=("t", 0, "9"))
        writer.start()
        self.assertTrue(entered.wait(5))

        seen = []
        reader = threading.Thread(target=lambda: seen.append(service.describe("t")))
        reader.start()
        reader.join(0.1)
        self.assertTrue(reader.is_alive())

        release.set()
        writer.join(5)
        reader.join(5)

        self.assertEqual(seen[0].root, "9-2-3-4")
        self.assertEqual(seen[0].layers, [["9", "2", "3", "4"], ["9-2", "3-4"], ["9-2-3-4"]])


if __name__ == "__main__":
    unittest.main(verbosity=2)
