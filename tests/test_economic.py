import unittest

import pandas as pd
from pandas.testing import assert_frame_equal

from stormimpact.aggregate import aggregate_economy, normalize_damage
from tests.sample_events import events


class NormalizeDamageTests(unittest.TestCase):
    def test_known_exponent_codes(self):
        values = pd.Series([10, 2.5, 1, 5, 5])
        codes = pd.Series(["K", "M", "B", "", "?"])
        self.assertEqual(normalize_damage(values, codes).tolist(),
                         [10_000.0, 2_500_000.0, 1_000_000_000.0, 5.0, 5.0])

    def test_unrecognized_codes_keep_value(self):
        values = pd.Series([5, 5, 5, 5])
        codes = pd.Series(["k", "h", "+", None])
        self.assertEqual(normalize_damage(values, codes).tolist(), [5.0] * 4)

    def test_custom_multipliers(self):
        result = normalize_damage(pd.Series([3]), pd.Series(["H"]), {"H": 100.0})
        self.assertEqual(result.tolist(), [300.0])

    def test_preserves_index(self):
        values = pd.Series([1, 2], index=[7, 9])
        result = normalize_damage(values, pd.Series(["K", "K"], index=[7, 9]))
        self.assertEqual(result.index.tolist(), [7, 9])


class AggregateEconomyTests(unittest.TestCase):
    def test_hail_scenario(self):
        result = aggregate_economy(events([("HAIL", 0, 0, 5, "K", 2, "M")]))

        self.assertEqual(result["event_type"].tolist(), ["Hail", "Hail"])
        self.assertEqual(result["metric_name"].tolist(), ["property_damage", "crop_damage"])
        self.assertAlmostEqual(result["metric_value"].iloc[0], 0.000005)
        self.assertAlmostEqual(result["metric_value"].iloc[1], 0.002)
        self.assertAlmostEqual(result["event_total"].iloc[0], 0.002005)
        self.assertAlmostEqual(result["event_total"].iloc[1], 0.002005)

    def test_sums_per_event_type_in_billions(self):
        table = events([
            ("FLOOD", 0, 0, 1, "B", 500, "M"),
            ("FLOOD", 0, 0, 250, "M", None, ""),
            ("HAIL", 0, 0, 100, "K", 0, ""),
        ])
        result = aggregate_economy(table)

        flood = result[result["event_type"] == "Flood"]
        values = dict(zip(flood["metric_name"], flood["metric_value"]))
        self.assertAlmostEqual(values["property_damage"], 1.25)
        self.assertAlmostEqual(values["crop_damage"], 0.5)
        self.assertAlmostEqual(flood["event_total"].iloc[0], 1.75)
        self.assertEqual(result["event_type"].iloc[0], "Flood")

    def test_keeps_twice_the_health_breadth(self):
        table = events([(f"TYPE{i}", 0, 0, i + 1, "M", 0, "") for i in range(30)])

        self.assertEqual(len(aggregate_economy(table, top_n=5)), 20)
        self.assertEqual(len(aggregate_economy(table, top_n=5, breadth=1)), 10)
        self.assertEqual(len(aggregate_economy(table)), 40)

    def test_sorted_and_pairs_consistent(self):
        table = events([
            ("TORNADO", 0, 0, 3, "B", 1, "M"),
            ("DROUGHT", 0, 0, 0, "", 14, "B"),
            ("HURRICANE", 0, 0, 80, "B", 5, "B"),
            ("WILDFIRE", 0, 0, 900, "M", 0, ""),
        ])
        result = aggregate_economy(table, top_n=1)

        self.assertEqual(len(result), 4)
        self.assertEqual(list(pd.unique(result["event_type"])), ["Hurricane", "Drought"])
        totals = result["event_total"].tolist()
        self.assertEqual(totals, sorted(totals, reverse=True))
        for _, rows in result.groupby("event_type"):
            self.assertAlmostEqual(rows["metric_value"].sum(), rows["event_total"].iloc[0])

    def test_exponent_columns_dropped(self):
        result = aggregate_economy(events([("HAIL", 0, 0, 5, "K", 2, "M")]))
        self.assertEqual(list(result.columns),
                         ["event_type", "metric_name", "metric_value", "event_total"])

    def test_rerun_is_identical_and_input_untouched(self):
        table = events([("HAIL", 0, 0, 5, "K", 2, "M"), ("FLOOD", 0, 0, None, "X", 1, "B")])
        before = table.copy()

        assert_frame_equal(aggregate_economy(table), aggregate_economy(table))
        assert_frame_equal(table, before)

    def test_rejects_non_positive_breadth(self):
        with self.assertRaises(ValueError):
            aggregate_economy(events([("HAIL", 0, 0, 5, "K", 2, "M")]), breadth=0)


if __name__ == "__main__":
    unittest.main()
