import math
import unittest
from datetime import datetime, timezone

from rank_api.errors import ScoreOutOfRangeError
from rank_api.json_utils import convert_keys
from rank_api.ranks import Rank, compute_rank_id


class RankTests(unittest.TestCase):
    def _rank(self, **kwargs) -> Rank:
        values = {"project_id": "proj", "item_id": "item", "min": 1.0, "max": 5.0}
        values.update(kwargs)
        return Rank(**values)

    def test_computed_id_concatenates_project_and_item(self):
        rank = self._rank()
        self.assertEqual(rank.get_computed_id(), "projitem")
        self.assertEqual(rank.id, "")
        rank.compute_id()
        self.assertEqual(rank.id, "projitem")
        self.assertEqual(compute_rank_id("a", "b"), "ab")

    def test_update_score_keeps_running_average(self):
        rank = self._rank()
        for score in (5, 3, 4, 1):
            rank.update_score(score)
        self.assertEqual(rank.total, 4)
        self.assertAlmostEqual(rank.average, 13 / 4)

    def test_first_score_ignores_placeholder_average(self):
        rank = self._rank(average=42.0)
        rank.update_score(2)
        self.assertEqual(rank.total, 1)
        self.assertEqual(rank.average, 2)

    def test_bounds_are_inclusive(self):
        rank = self._rank()
        rank.update_score(1.0)
        rank.update_score(5.0)
        self.assertEqual(rank.total, 2)
        self.assertEqual(rank.average, 3.0)

    def test_out_of_range_score_leaves_rank_untouched(self):
        rank = self._rank()
        rank.update_score(4)
        for score in (0.5, 5.5):
            with self.assertRaises(ScoreOutOfRangeError) as ctx:
                rank.update_score(score)
            self.assertEqual(ctx.exception.score, score)
        self.assertEqual(rank.total, 1)
        self.assertEqual(rank.average, 4)

    def test_non_finite_score_leaves_rank_untouched(self):
        rank = self._rank()
        rank.update_score(4)
        for score in (math.nan, math.inf, -math.inf):
            with self.assertRaises(ScoreOutOfRangeError):
                rank.update_score(score)
        self.assertEqual(rank.total, 1)
        self.assertEqual(rank.average, 4)

    def test_document_uses_camel_case_keys(self):
        created = datetime(2024, 1, 2, tzinfo=timezone.utc)
        rank = self._rank(created_at=created)
        rank.compute_id()
        doc = rank.to_document()
        self.assertEqual(
            set(doc),
            {
                "id",
                "projectId",
                "itemId",
                "total",
                "average",
                "min",
                "max",
                "createdAt",
                "deletedAt",
            },
        )
        self.assertEqual(doc["createdAt"], created)
        self.assertIsNone(doc["deletedAt"])

        restored = Rank.from_document(doc)
        self.assertEqual(restored, rank)

    def test_from_document_accepts_integer_numbers(self):
        rank = Rank.from_document(
            {
                "id": "pi",
                "projectId": "p",
                "itemId": "i",
                "total": 2,
                "average": 3,
                "min": 0,
                "max": 20,
                "createdAt": datetime(2024, 1, 2, tzinfo=timezone.utc),
                "deletedAt": None,
            }
        )
        rank.update_score(6)
        self.assertEqual(rank.total, 3)
        self.assertEqual(rank.average, 4)


class ConvertKeysTests(unittest.TestCase):
    def test_nested_structures(self):
        data = {"projectId": "p", "nested": [{"itemId": "i"}], "plain": 1}
        self.assertEqual(
            convert_keys(data, "camel_to_snake"),
            {"project_id": "p", "nested": [{"item_id": "i"}], "plain": 1},
        )
        self.assertEqual(
            convert_keys({"created_at": 1}, "snake_to_camel"), {"createdAt": 1}
        )

    def test_unknown_direction(self):
        with self.assertRaises(ValueError):
            convert_keys({}, "sideways")


if __name__ == "__main__":
    unittest.main()
