import io
import tempfile
import unittest
from http.client import IncompleteRead
from pathlib import Path
from unittest.mock import MagicMock, patch
from urllib.error import URLError

from rich.console import Console

from stormimpact import run_pipeline
from stormimpact.aggregate import aggregate_health
from tests.sample_events import events, write_bz2_csv

URL = "https://example.org/StormData.csv.bz2"


class PipelineTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        patchers = [
            patch.object(run_pipeline, "FIGURES_DIR", self.tmp / "figures"),
            patch("stormimpact.build.build_report.REPORTS_DIR", self.tmp / "reports"),
            patch.object(run_pipeline, "ensure_directories"),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self):
        self._tmp.cleanup()

    def test_run_writes_charts_and_report(self):
        data = write_bz2_csv(self.tmp / "StormData.csv.bz2")
        with patch("stormimpact.fetch._fetch_utils.urlopen") as mocked:
            result = run_pipeline.run(data_path=data, url=URL, health_top_n=2, economy_top_n=1)

        mocked.assert_not_called()
        self.assertEqual(result["health"]["event_type"].tolist()[:2], ["Tornado", "Tornado"])
        self.assertEqual(len(result["health"]), 4)
        self.assertEqual(len(result["economy"]), 4)
        self.assertTrue(result["charts"]["health"].exists())
        self.assertEqual(result["charts"]["economy"].name, "economic_impact.html")
        self.assertTrue(result["report"].exists())
        self.assertIn("Tornado", result["report"].read_text(encoding="utf-8"))

    def test_economic_ranking_on_sample(self):
        data = write_bz2_csv(self.tmp / "StormData.csv.bz2")
        result = run_pipeline.run(data_path=data, url=URL)

        economy = result["economy"]
        self.assertEqual(economy["event_type"].iloc[0], "Flood")
        # TORNADO: 25K + 2.5M property, 1M crop
        tornado = economy[economy["event_type"] == "Tornado"]
        self.assertAlmostEqual(tornado["event_total"].iloc[0], 0.003525)
        # HEAT has an unrecognized "?" exponent, so its value is kept as-is
        heat = economy[economy["event_type"] == "Heat"]
        self.assertAlmostEqual(heat["event_total"].iloc[0], 3e-9)

    def test_main_returns_zero_on_success(self):
        data = write_bz2_csv(self.tmp / "StormData.csv.bz2")
        code = run_pipeline.main(["--data-path", str(data), "--url", URL, "--top-n", "3"])
        self.assertEqual(code, 0)
        self.assertTrue((self.tmp / "reports" / "storm_impact_report.md").exists())

    def test_main_returns_one_when_fetch_fails(self):
        missing = self.tmp / "raw" / "StormData.csv.bz2"
        with patch("stormimpact.fetch._fetch_utils.urlopen", side_effect=URLError("offline")):
            code = run_pipeline.main(["--data-path", str(missing), "--url", URL])
        self.assertEqual(code, 1)
        self.assertFalse(missing.exists())

    def test_main_returns_one_when_download_is_cut_short(self):
        missing = self.tmp / "raw" / "StormData.csv.bz2"
        resp = MagicMock()
        resp.__enter__.return_value = resp
        resp.status = 200
        resp.read.side_effect = IncompleteRead(b"partial", 1000)
        with patch("stormimpact.fetch._fetch_utils.urlopen", return_value=resp):
            code = run_pipeline.main(["--data-path", str(missing), "--url", URL])
        self.assertEqual(code, 1)
        self.assertEqual(list(missing.parent.iterdir()), [])

    def test_main_returns_one_on_unparseable_file(self):
        bad = self.tmp / "events.csv"
        bad.write_text("EVTYPE\nFLOOD\n", encoding="utf-8")
        self.assertEqual(run_pipeline.main(["--data-path", str(bad), "--url", URL]), 1)


class PrintSummaryTests(unittest.TestCase):
    def test_case_variants_with_equal_totals_get_their_own_rows(self):
        health = aggregate_health(events([
            ("TSTM WIND", 50, 0, 0, "", 0, ""),
            ("tstm wind", 0, 50, 0, "", 0, ""),
        ]))
        console = Console(file=io.StringIO(), record=True, width=100)
        run_pipeline.print_summary(console, "Health", health, "{:,.0f}")

        text = console.export_text()
        self.assertEqual(text.count("Tstm Wind"), 2)


if __name__ == "__main__":
    unittest.main()
