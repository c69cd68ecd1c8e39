import unittest

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from rank_api.app import create_app
from rank_api.db import InMemoryRankRepo
from rank_api.dependencies import get_rank_repo


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class MetricsTests(unittest.TestCase):
    def setUp(self):
        self.repo = InMemoryRankRepo()
        app = create_app()
        app.dependency_overrides[get_rank_repo] = lambda: self.repo
        self.client = TestClient(app)

    def test_domain_counters(self):
        created = _sample("rank_api_items_created_total")
        scored = _sample("rank_api_scores_recorded_total")
        missing = _sample("rank_api_item_lookups_total", {"result": "missing"})
        found = _sample("rank_api_item_lookups_total", {"result": "found"})

        self.client.post("/projects/m/items", json={"itemId": "i", "min": 0, "max": 10})
        self.client.post("/projects/m/items/i/rank", json={"score": 7})
        self.client.post("/projects/m/items/i/rank", json={"score": 11})
        self.client.get("/projects/m/items/i")
        self.client.get("/projects/m/items/unknown")

        self.assertEqual(_sample("rank_api_items_created_total"), created + 1)
        self.assertEqual(_sample("rank_api_scores_recorded_total"), scored + 1)
        self.assertEqual(
            _sample("rank_api_item_lookups_total", {"result": "missing"}), missing + 1
        )
        self.assertEqual(
            _sample("rank_api_item_lookups_total", {"result": "found"}), found + 1
        )

    def test_requests_are_labelled_by_route_template(self):
        labels = {
            "method": "GET",
            "route": "/projects/{project_id}/items/{item_id}",
            "status": "404",
        }
        before = _sample("rank_api_http_requests_total", labels)
        self.client.get("/projects/x/items/one")
        self.client.get("/projects/y/items/two")
        self.assertEqual(_sample("rank_api_http_requests_total", labels), before + 2)

        count = _sample(
            "rank_api_http_request_duration_seconds_count",
            {"method": "GET", "route": "/projects/{project_id}/items/{item_id}"},
        )
        self.assertGreaterEqual(count, 2)


if __name__ == "__main__":
    unittest.main()
