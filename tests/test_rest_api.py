"""
REST API Tests

Exercise the FastAPI application through its TestClient with a fresh
concat-hashing service per test.
"""

import unittest

from fastapi.testclient import TestClient
from pydantic import ValidationError

from layered_merkle import __version__
from layered_merkle.api import rest_api
from layered_merkle.api.tree_service import TreeService
from layered_merkle.merkle import HashError
from layered_merkle.models import HealthResponse


class TestRestAPI(unittest.TestCase):

    def setUp(self):
        self.service = TreeService(hasher="concat")
        rest_api.app.dependency_overrides[rest_api.get_tree_service] = lambda: self.service
        self.client = TestClient(rest_api.app)

    def tearDown(self):
        rest_api.app.dependency_overrides.clear()

    def create(self, leaves, tree_id="t"):
        response = self.client.post("/trees", json={"leaves": leaves, "tree_id": tree_id})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_root_and_health(self):
        self.assertEqual(self.client.get("/").json()["name"], "Layered Merkle API")
        health = self.client.get("/health").json()
        self.assertEqual(health["status"], "healthy")
        self.assertEqual(health["trees"], 0)
        self.assertEqual(health["hasher"], "concat")
        self.assertEqual(health["version"], __version__)

    def test_health_response_requires_version(self):
        with self.assertRaises(ValidationError):
            HealthResponse(status="healthy", trees=0, hasher="concat")

    def test_create_tree(self):
        body = self.create(["1234", "2345", "7545", "4564"])
        self.assertEqual(body["tree_id"], "t")
        self.assertEqual(body["root"], "1234-2345-7545-4564")
        self.assertEqual(body["leaf_count"], 4)
        self.assertEqual(body["depth"], 2)
        self.assertEqual(body["layers"][1], ["1234-2345", "7545-4564"])
        self.assertEqual(self.client.get("/trees").json(), ["t"])

    def test_get_tree(self):
        self.create(["1", "2", "3"])
        body = self.client.get("/trees/t").json()
        self.assertEqual(body["root"], "1-2-3")
        self.assertEqual(body["layers"], [["1", "2", "3"], ["1-2", "3"], ["1-2-3"]])

    def test_proof(self):
        self.create(["1", "2", "3"])
        body = self.client.get("/trees/t/proofs/2").json()
        self.assertEqual(body["path"], ["1-2"])
        self.assertEqual(body["leaf"], "3")
        self.assertEqual(body["leaf_count"], 3)
        self.assertEqual(body["root"], "1-2-3")

    def test_update_leaf(self):
        self.create(["1", "2", "3"])
        response = self.client.put("/trees/t/leaves/0", json={"value": "9"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["root"], "9-2-3")

    def test_verify(self):
        payload = {"leaf": "3", "index": 2, "path": ["1-2"], "leaf_count": 3, "root": "1-2-3"}
        self.assertTrue(self.client.post("/verify", json=payload).json()["valid"])
        payload["leaf"] = "4"
        self.assertFalse(self.client.post("/verify", json=payload).json()["valid"])

    def test_delete(self):
        self.create(["1"])
        self.assertEqual(self.client.delete("/trees/t").status_code, 204)
        self.assertEqual(self.client.get("/trees/t").status_code, 404)

    def test_empty_leaves(self):
        response = self.client.post("/trees", json={"leaves": []})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "INVALID_INPUT")

    def test_index_out_of_range(self):
        self.create(["1", "2"])
        for method, url, kwargs in (
            ("get", "/trees/t/proofs/2", {}),
            ("get", "/trees/t/proofs/-1", {}),
            ("put", "/trees/t/leaves/5", {"json": {"value": "9"}}),
        ):
            with self.subTest(url=url):
                response = getattr(self.client, method)(url, **kwargs)
                self.assertEqual(response.status_code, 404)
                body = response.json()
                self.assertEqual(body["code"], "INDEX_OUT_OF_RANGE")
                self.assertEqual(body["details"]["size"], 2)

    def test_tree_not_found(self):
        response = self.client.get("/trees/missing/proofs/0")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "TREE_NOT_FOUND")

    def test_hash_error(self):
        def failing(left, right):
            raise HashError("backend unavailable", left=left, right=right)

        self.service = TreeService(combine=failing)
        response = self.client.post("/trees", json={"leaves": ["1", "2"]})
        self.assertEqual(response.status_code, 502)
        body = response.json()
        self.assertEqual(body["code"], "HASH_ERROR")
        self.assertEqual(body["details"]["left"], "1")

    def test_request_validation(self):
        response = self.client.post("/trees", json={"leaves": ["1", ""]})
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/trees", json={"leaves": ["1"], "tree_id": "a/b"})
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main(verbosity=2)
