"""
Tree API Client

This module provides a client for a running Layered Merkle REST API. It
handles request construction, error decoding and connection failures.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import get_settings

logger = logging.getLogger(__name__)


class TreeAPIError(Exception):
    """
    Exception raised for tree API related errors.

    Attributes:
        status_code: HTTP status of the failed response, if one was received
        code: Error code from the API's error body, if present
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class TreeAPIClient:
    """
    Client for interacting with the Layered Merkle REST API.

    Examples:
        >>> client = TreeAPIClient("http://127.0.0.1:8000")
        >>> tree = client.create_tree(["1234", "2345", "7545"])
        >>> client.get_proof(tree["tree_id"], 2)["path"]
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30):
        """
        Initialize the API client.

        Args:
            base_url: Base URL for the API. If None, uses MERKLE_API_URL.
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or get_settings().api_url).rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

        logger.debug(f"Initialized TreeAPIClient with base_url: {self.base_url}")

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.ConnectionError as e:
            raise TreeAPIError(
                f"Failed to connect to tree API at {self.base_url}. "
                f"Check that the server is running (layered-merkle serve). "
                f"Original error: {e}"
            )
        except requests.Timeout as e:
            raise TreeAPIError(f"Timeout calling tree API at {url}: {e}")
        except requests.RequestException as e:
            raise TreeAPIError(f"Request to tree API at {url} failed: {e}")

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            message = body.get("error") or body.get("detail") or response.text
            raise TreeAPIError(
                f"{method} {path} failed with {response.status_code}: {message}",
                status_code=response.status_code,
                code=body.get("code"),
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def create_tree(self, leaves: List[str], tree_id: Optional[str] = None) -> Dict[str, Any]:
        """Build a tree on the server and return its description."""
        payload: Dict[str, Any] = {"leaves": list(leaves)}
        if tree_id is not None:
            payload["tree_id"] = tree_id
        return self._request("POST", "/trees", json=payload)

    def list_trees(self) -> List[str]:
        return self._request("GET", "/trees")

    def get_tree(self, tree_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/trees/{tree_id}")

    def get_root(self, tree_id: str) -> str:
        return self.get_tree(tree_id)["root"]

    def get_proof(self, tree_id: str, index: int) -> Dict[str, Any]:
        return self._request("GET", f"/trees/{tree_id}/proofs/{index}")

    def update_leaf(self, tree_id: str, index: int, value: str) -> Dict[str, Any]:
        return self._request("PUT", f"/trees/{tree_id}/leaves/{index}", json={"value": value})

    def delete_tree(self, tree_id: str) -> None:
        self._request("DELETE", f"/trees/{tree_id}")

    def verify(self, leaf: str, index: int, path: List[str], leaf_count: int, root: str) -> bool:
        """Ask the server to check an inclusion path."""
        payload = {
            "leaf": leaf,
            "index": index,
            "path": list(path),
            "leaf_count": leaf_count,
            "root": root,
        }
        return self._request("POST", "/verify", json=payload)["valid"]

    def health_check(self) -> bool:
        """
        Check if the API is accessible.

        Returns:
            True if API is accessible, False otherwise
        """
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=10)
            return response.status_code == 200
        except requests.RequestException:
            return False
