"""
Proof Verification Tests

These tests check that paths produced by MerkleTree fold back into the root
with only the leaf, its index and the leaf count.
"""

import unittest

from layered_merkle.hashers import concat_combine, sha256_combine
from layered_merkle.merkle import (
    IndexOutOfRangeError,
    MerkleTree,
    batch_verify_proofs,
    compute_root_from_proof,
    get_layer_sizes,
    get_proof_indices,
    verify_merkle_proof,
)


def stub_combine(left: str, right: str) -> str:
    return f"H({left},{right})"


class TestLayerShape(unittest.TestCase):

    def test_get_layer_sizes(self):
        self.assertEqual(get_layer_sizes(1), [1])
        self.assertEqual(get_layer_sizes(2), [2, 1])
        self.assertEqual(get_layer_sizes(5), [5, 3, 2, 1])
        self.assertEqual(get_layer_sizes(8), [8, 4, 2, 1])
        with self.assertRaises(ValueError):
            get_layer_sizes(0)

    def test_layer_sizes_match_tree(self):
        for n in range(1, 30):
            with self.subTest(leaves=n):
                tree = MerkleTree([str(i) for i in range(n)], stub_combine)
                self.assertEqual(get_layer_sizes(n), [len(layer) for layer in tree.layers])

    def test_proof_indices(self):
        self.assertEqual(get_proof_indices(0, 4), [1, 1])
        self.assertEqual(get_proof_indices(2, 3), [0])
        self.assertEqual(get_proof_indices(4, 5), [0])
        self.assertEqual(get_proof_indices(0, 1), [])

    def test_proof_indices_match_path(self):
        for n in range(1, 20):
            tree = MerkleTree([str(i) for i in range(n)], stub_combine)
            for i in range(n):
                with self.subTest(leaves=n, index=i):
                    indices = get_proof_indices(i, n)
                    path = tree.merkle_path(i)
                    self.assertEqual(len(indices), len(path))
                    layers = tree.layers
                    # Sibling indices map onto successive layers that have one
                    level_values = []
                    idx = i
                    for layer in layers[:-1]:
                        sibling = idx ^ 1
                        if sibling < len(layer):
                            level_values.append(layer[sibling])
                        idx //= 2
                    self.assertEqual(level_values, path)


class TestRoundTrip(unittest.TestCase):

    def test_every_leaf_verifies(self):
        """Folding merkle_path(i) with leaf i reproduces the root"""
        for n in range(1, 18):
            leaves = [str(1000 + i) for i in range(n)]
            tree = MerkleTree(leaves, sha256_combine)
            for i in range(n):
                with self.subTest(leaves=n, index=i):
                    path = tree.merkle_path(i)
                    self.assertEqual(
                        compute_root_from_proof(leaves[i], i, path, n, sha256_combine),
                        tree.root(),
                    )
                    self.assertTrue(
                        verify_merkle_proof(leaves[i], path, i, n, tree.root(), sha256_combine)
                    )

    def test_round_trip_after_update(self):
        leaves = ["a", "b", "c", "d", "e", "f"]
        tree = MerkleTree(leaves, stub_combine)
        tree.update_leaf(4, "E")
        for i, leaf in enumerate(tree.leaves):
            with self.subTest(index=i):
                self.assertTrue(
                    verify_merkle_proof(leaf, tree.merkle_path(i), i, 6, tree.root(), stub_combine)
                )

    def test_wrong_leaf_fails(self):
        tree = MerkleTree(["a", "b", "c", "d"], stub_combine)
        self.assertFalse(
            verify_merkle_proof("x", tree.merkle_path(1), 1, 4, tree.root(), stub_combine)
        )

    def test_wrong_index_fails(self):
        tree = MerkleTree(["a", "b", "c", "d"], stub_combine)
        self.assertFalse(
            verify_merkle_proof("b", tree.merkle_path(1), 0, 4, tree.root(), stub_combine)
        )

    def test_wrong_length_proof(self):
        tree = MerkleTree(["a", "b", "c"], stub_combine)
        path = tree.merkle_path(0)
        self.assertFalse(verify_merkle_proof("a", path[:-1], 0, 3, tree.root(), stub_combine))
        self.assertFalse(verify_merkle_proof("a", path + ["x"], 0, 3, tree.root(), stub_combine))
        with self.assertRaises(ValueError):
            compute_root_from_proof("a", 0, path[:-1], 3, stub_combine)

    def test_index_out_of_range(self):
        with self.assertRaises(IndexOutOfRangeError):
            compute_root_from_proof("a", 3, [], 3, stub_combine)
        with self.assertRaises(IndexOutOfRangeError):
            verify_merkle_proof("a", [], -1, 3, "root", stub_combine)

    def test_concat_proof(self):
        tree = MerkleTree(["1234", "2345", "7545"], concat_combine)
        self.assertEqual(tree.merkle_path(2), ["1234-2345"])
        self.assertEqual(
            compute_root_from_proof("7545", 2, ["1234-2345"], 3, concat_combine),
            "1234-2345-7545",
        )

    def test_batch_verify(self):
        leaves = ["a", "b", "c", "d", "e"]
        tree = MerkleTree(leaves, stub_combine)
        proofs = [tree.merkle_path(i) for i in range(5)]
        results = batch_verify_proofs(
            ["a", "b", "x", "d", "e"], proofs, list(range(5)), 5, tree.root(), stub_combine
        )
        self.assertEqual(results, [True, True, False, True, True])

    def test_batch_verify_length_mismatch(self):
        tree = MerkleTree(["1", "2", "3"], stub_combine)
        proofs = [tree.merkle_path(0), tree.merkle_path(1)]
        with self.assertRaises(ValueError):
            batch_verify_proofs(["1", "2", "FORGED"], proofs, [0, 1, 2], 3, tree.root(), stub_combine)
        with self.assertRaises(ValueError):
            batch_verify_proofs(["1", "2"], proofs, [0], 3, tree.root(), stub_combine)


if __name__ == "__main__":
    unittest.main(verbosity=2)
