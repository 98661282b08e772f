import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from openpyxl import load_workbook
from PIL import Image


ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from scan2ratios.core import extract, pipeline
from scan2ratios.models import BALANCE_SHEET, INCOME_STATEMENT, UNKNOWN


BALANCE_SHEET_TEXT = """ABC Bank Limited
Balance Sheet as at 31 March 2024
(Rs. in Crore)
Total Assets 1,25,000.50 Cr
Gross Advances
|-----------|
82,000 Cr
Deposits 98,500 cr
Gross NPA 2,460 cr
Tier 1 Capital 11,200 cr
"""


class RunExtractionTests(unittest.TestCase):
    def test_balance_sheet_extraction(self) -> None:
        result = pipeline.run_extraction(BALANCE_SHEET_TEXT, source_file="abc.txt")
        self.assertEqual(result.document_type, BALANCE_SHEET)
        self.assertTrue(result.has_fields)
        self.assertEqual(
            sorted(result.mappings.keys()),
            ["deposits", "gross_advances", "gross_npas", "tier1_capital", "total_assets"],
        )
        self.assertAlmostEqual(result.mappings.get("total_assets").value, 125000.5)
        self.assertEqual(result.mappings.get("gross_advances").line_index, 6)
        # The "1" in the label is the first number on the line and has no unit.
        tier1 = result.mappings.get("tier1_capital")
        self.assertAlmostEqual(tier1.value, 1e-07)
        self.assertAlmostEqual(tier1.confidence, 0.8)

    def test_unknown_document_has_no_fields(self) -> None:
        result = pipeline.run_extraction("Minutes of the board meeting\nAttendance 12")
        self.assertEqual(result.document_type, UNKNOWN)
        self.assertFalse(result.has_fields)
        self.assertEqual(result.to_dict()["mappings"], {})

    def test_each_run_owns_a_fresh_store(self) -> None:
        first = pipeline.run_extraction(BALANCE_SHEET_TEXT)
        second = pipeline.run_extraction("Profit and Loss\nNet Profit 40 cr")
        self.assertEqual(second.document_type, INCOME_STATEMENT)
        self.assertEqual(second.mappings.keys(), ["net_income"])
        self.assertIn("total_assets", first.mappings)

    def test_build_form_values_applies_corrections_and_manual_entries(self) -> None:
        result = pipeline.run_extraction(BALANCE_SHEET_TEXT)
        confidence = result.mappings.get("deposits").confidence
        form = pipeline.build_form_values(
            result,
            overrides={"deposits": 99000.0, "net_income": 1500.0},
            previous={"prev_aum": 100000.0},
        )
        self.assertEqual(form["deposits"], "99000.00")
        self.assertEqual(form["net_income"], "1500.00")
        self.assertEqual(form["prev_aum"], "100000.00")
        self.assertEqual(form["total_assets"], "125000.50")
        self.assertEqual(result.mappings.get("deposits").confidence, confidence)
        self.assertNotIn("net_income", result.mappings)


class RunPipelineTests(unittest.TestCase):
    def test_text_statement_to_xlsx(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            input_path = os.path.join(temp_dir, "abc_bank.txt")
            with open(input_path, "w", encoding="utf-8") as handle:
                handle.write(BALANCE_SHEET_TEXT)
            output_path = os.path.join(temp_dir, "abc_bank.xlsx")
            debug_path = os.path.join(temp_dir, "abc_bank.json")

            report = pipeline.run_pipeline(
                input_path,
                output_path,
                previous={"prev_aum": 100000.0},
                debug_json=debug_path,
            )

            self.assertEqual(report.document_type, BALANCE_SHEET)
            self.assertEqual(report.fields_detected, 5)
            self.assertEqual(report.fields_high, 5)
            self.assertFalse(report.ocr_used)
            self.assertEqual(report.pages, 1)
            self.assertAlmostEqual(float(report.form_values["tier1_capital"]), 0.0)
            self.assertEqual(report.form_values["gross_npas"], "2460.00")
            by_key = {item.key: item for item in report.metrics}
            self.assertEqual(by_key["loan_to_deposit"].status, "good")
            self.assertEqual(by_key["aum_growth"].status, "excellent")

            workbook = load_workbook(output_path)
            self.assertEqual(workbook.sheetnames, ["INPUTS", "METRICS", "EXTRACTION"])
            metric_rows = list(workbook["METRICS"].iter_rows(values_only=True))
            self.assertEqual(metric_rows[0], ("category", "metric", "value", "benchmark", "status"))
            self.assertEqual(len(metric_rows), 19)
            extraction_values = [
                row[0] for row in workbook["EXTRACTION"].iter_rows(values_only=True) if row
            ]
            self.assertIn("total_assets", extraction_values)

            with open(debug_path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
            self.assertEqual(payload["extraction"]["document_type"], BALANCE_SHEET)
            self.assertEqual(payload["form_values"]["deposits"], "98500.00")

    def test_label_override_adds_aliases(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            input_path = os.path.join(temp_dir, "statement.txt")
            with open(input_path, "w", encoding="utf-8") as handle:
                handle.write("Balance Sheet\nClient Funds 4,000 cr\n")
            label_path = os.path.join(temp_dir, "labels.json")
            with open(label_path, "w", encoding="utf-8") as handle:
                json.dump({"fields": {BALANCE_SHEET: {"deposits": ["Client Funds"]}}}, handle)

            report = pipeline.run_pipeline(
                input_path, os.path.join(temp_dir, "out.xlsx"), label_path=label_path
            )
            self.assertEqual(report.form_values, {"deposits": "4000.00"})

    def test_image_goes_through_ocr(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            image_path = os.path.join(temp_dir, "scan.png")
            Image.new("RGB", (20, 20), "white").save(image_path)
            with mock.patch.object(
                extract, "ocr_image", return_value="Profit and Loss\nNet Profit 40 cr"
            ):
                report = pipeline.run_pipeline(image_path, os.path.join(temp_dir, "scan.xlsx"))
            self.assertTrue(report.ocr_used)
            self.assertEqual(report.document_type, INCOME_STATEMENT)
            self.assertEqual(report.form_values, {"net_income": "40.00"})


class ExtractTextTests(unittest.TestCase):
    def test_missing_and_unsupported_files(self) -> None:
        with self.assertRaises(ValueError):
            extract.extract_text("/nonexistent/statement.png")
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "statement.docx")
            Path(path).write_text("x", encoding="utf-8")
            with self.assertRaises(ValueError):
                extract.extract_text(path)

    def test_invalid_utf8_text_is_replaced_with_warning(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "statement.txt")
            Path(path).write_bytes(b"Deposits 500 cr\n\xff\xfe noise\n")
            with self.assertLogs("scan2ratios.core.extract", level="WARNING"):
                source = extract.extract_text(path)
        self.assertIn("Deposits 500 cr", source.text)
        self.assertIn("\ufffd", source.text)
        self.assertEqual(source.pages, 1)

    def test_image_rejected_without_ocr(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            image_path = os.path.join(temp_dir, "scan.png")
            Image.new("RGB", (10, 10), "white").save(image_path)
            with self.assertRaises(ValueError):
                extract.extract_text(image_path, ocr=False)

    def test_page_needs_ocr(self) -> None:
        self.assertTrue(extract.page_needs_ocr(0, 1))
        self.assertFalse(extract.page_needs_ocr(0, 0))
        self.assertFalse(extract.page_needs_ocr(500, 2))


if __name__ == "__main__":
    unittest.main()
