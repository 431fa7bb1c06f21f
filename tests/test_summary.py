from __future__ import annotations

from datetime import date
import unittest

from golfdraw.draw import describe_distribution, format_results
from golfdraw.records import DrawingGroup


class SummaryTests(unittest.TestCase):
    def test_describe_distribution_largest_first(self) -> None:
        self.assertEqual(describe_distribution([3, 2, 2]), "3-person x1, 2-person x2")
        self.assertEqual(describe_distribution([4, 4, 4, 3]), "4-person x3, 3-person x1")
        self.assertEqual(describe_distribution([]), "")

    def test_format_results(self) -> None:
        groups = [
            DrawingGroup(id=1, members=("Kim", "Lee", "Park")),
            DrawingGroup(id=2, members=("Choi", "Jung")),
        ]
        text = format_results(groups, title="Pairings", on_date=date(2024, 6, 2))
        self.assertEqual(
            text.splitlines(),
            [
                "Pairings",
                "",
                "Group 1: Kim, Lee, Park",
                "Group 2: Choi, Jung",
                "",
                "Date: 2024-06-02",
            ],
        )


if __name__ == "__main__":
    unittest.main()
