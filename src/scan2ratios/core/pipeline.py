import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from scan2ratios.core import classify, extract, matcher, metrics, scoring
from scan2ratios.core.store import MappingStore
from scan2ratios.io import json_debug, xlsx_writer
from scan2ratios.models import UNKNOWN, RunReport
from scan2ratios.utils import labels as label_utils
from scan2ratios.utils import text as text_utils


LOGGER = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    document_type: str = UNKNOWN
    text: str = ""
    mappings: MappingStore = field(default_factory=MappingStore)
    source_file: str = ""
    ocr_used: bool = False

    @property
    def has_fields(self) -> bool:
        return len(self.mappings) > 0

    def to_dict(self) -> dict:
        return {
            "source_file": self.source_file,
            "document_type": self.document_type,
            "ocr_used": self.ocr_used,
            "text": self.text,
            "mappings": self.mappings.to_dict(),
        }


def run_extraction(
    text: str,
    source_file: str = "",
    ocr_used: bool = False,
    label_dict: Optional[dict] = None,
) -> ExtractionResult:
    document_type = classify.classify_document(text, label_dict)
    store = matcher.extract_fields(text, document_type, label_dict=label_dict)
    result = ExtractionResult(
        document_type=document_type,
        text=text,
        mappings=store,
        source_file=source_file,
        ocr_used=ocr_used,
    )
    LOGGER.info(
        "Document type: %s, fields detected: %d", document_type, len(store)
    )
    if not result.has_fields:
        LOGGER.info("No fields detected; values must be entered manually.")
    return result


def build_form_values(
    result: ExtractionResult,
    overrides: Optional[Dict[str, float]] = None,
    previous: Optional[Dict[str, float]] = None,
) -> Dict[str, str]:
    """Copy extracted values into form fields, then apply manual entries.

    An override for an extracted field is a correction and goes through
    the store; any other override is a plain manual entry.
    """
    for key, value in (overrides or {}).items():
        if key in result.mappings:
            result.mappings.update_value(key, value)
    form = result.mappings.values_for_form()
    for key, value in (overrides or {}).items():
        if key not in result.mappings:
            form[key] = text_utils.format_amount(float(value))
    for key, value in (previous or {}).items():
        form[key] = text_utils.format_amount(float(value))
    return form


def run_pipeline(
    input_path: str,
    output_xlsx: str,
    previous: Optional[Dict[str, float]] = None,
    overrides: Optional[Dict[str, float]] = None,
    ocr: bool = True,
    debug_json: Optional[str] = None,
    label_path: Optional[str] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> RunReport:
    label_dict = label_utils.load_label_dictionary(label_path)
    source = extract.extract_text(input_path, ocr=ocr, progress_callback=progress_callback)
    LOGGER.info(
        "Text extracted from %s (%d chars, ocr_used=%s)",
        source.source_file,
        len(source.text),
        source.ocr_used,
    )

    result = run_extraction(
        source.text,
        source_file=source.source_file,
        ocr_used=source.ocr_used,
        label_dict=label_dict,
    )
    form_values = build_form_values(result, overrides=overrides, previous=previous)
    inputs = metrics.FinancialInputs.from_form(form_values)
    metric_results = metrics.compute_metrics(inputs)

    report = RunReport(
        source_file=source.source_file,
        document_type=result.document_type,
        ocr_used=source.ocr_used,
        pages=source.pages,
        text_len=len(source.text),
        lines_scanned=len(text_utils.split_lines(source.text)),
        fields_detected=len(result.mappings),
        corrections_applied=sorted(key for key in (overrides or {}) if key in result.mappings),
        form_values=form_values,
        metrics=metric_results,
        output_path=output_xlsx,
    )
    for mapping in result.mappings:
        band = scoring.confidence_band(mapping.confidence)
        report.fields.append({**mapping.to_dict(), "band": band})
        if band == "high":
            report.fields_high += 1
        elif band == "medium":
            report.fields_medium += 1
        else:
            report.fields_low += 1

    xlsx_writer.write_report(result, inputs, metric_results, output_xlsx, label_dict)
    LOGGER.info("Report written: %s", output_xlsx)

    if debug_json:
        payload = json_debug.build_debug_payload(result, form_values, metric_results)
        written = json_debug.write_debug_json(debug_json, payload)
        report.debug_json_path = debug_json
        LOGGER.info("Debug JSON written: %s", written)

    return report
