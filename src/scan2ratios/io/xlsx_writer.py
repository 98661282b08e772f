from typing import Iterable, List, Optional

from openpyxl import Workbook

from scan2ratios.core import scoring
from scan2ratios.models import BALANCE_SHEET, INCOME_STATEMENT, MetricResult
from scan2ratios.utils import labels as label_utils


INPUT_HEADERS: List[str] = ["category", "item", "value_inr_cr"]
METRIC_HEADERS: List[str] = ["category", "metric", "value", "benchmark", "status"]
EXTRACTION_HEADERS: List[str] = [
    "field_key",
    "field_name",
    "value",
    "confidence",
    "band",
    "original_text",
    "line_index",
]

INPUT_CATEGORIES = (
    (BALANCE_SHEET, "Balance Sheet"),
    (INCOME_STATEMENT, "Income Statement"),
)


def write_report(
    result,
    inputs,
    metric_results: Iterable[MetricResult],
    output_path: str,
    label_dict: Optional[dict] = None,
) -> None:
    workbook = Workbook()
    inputs_sheet = workbook.active
    inputs_sheet.title = "INPUTS"
    metrics_sheet = workbook.create_sheet("METRICS")
    extraction_sheet = workbook.create_sheet("EXTRACTION")

    input_values = inputs.to_dict()
    inputs_sheet.append(INPUT_HEADERS)
    for doc_type, category in INPUT_CATEGORIES:
        for key in label_utils.get_vocabulary(doc_type, label_dict):
            inputs_sheet.append(
                [
                    category,
                    label_utils.display_name(key, label_dict),
                    round(input_values.get(key, 0.0), 2),
                ]
            )
    for key in label_utils.PREVIOUS_PERIOD_KEYS:
        inputs_sheet.append(
            [
                "Previous Period",
                label_utils.display_name(key, label_dict),
                round(input_values.get(key, 0.0), 2),
            ]
        )

    metrics_sheet.append(METRIC_HEADERS)
    for item in metric_results:
        metrics_sheet.append(
            [
                item.category,
                item.name,
                item.formatted_value(),
                item.benchmark,
                _format_status(item.status),
            ]
        )

    extraction_sheet.append(["source_file", result.source_file])
    extraction_sheet.append(["document_type", result.document_type])
    extraction_sheet.append(["ocr_used", bool(result.ocr_used)])
    extraction_sheet.append([])
    extraction_sheet.append(EXTRACTION_HEADERS)
    for mapping in result.mappings:
        extraction_sheet.append(
            [
                mapping.field_key,
                mapping.field_name,
                round(mapping.value, 2),
                round(mapping.confidence, 2),
                scoring.confidence_band(mapping.confidence),
                mapping.original_text,
                mapping.line_index,
            ]
        )

    workbook.save(output_path)


def _format_status(status: str) -> str:
    if status == "not_calculated":
        return "Not Calculated"
    return status.capitalize()
