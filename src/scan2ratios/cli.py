import argparse
from pathlib import Path
from typing import Dict, List

from scan2ratios import config
from scan2ratios.core import pipeline
from scan2ratios.logging_setup import configure_logging
from scan2ratios.utils import labels as label_utils


SUPPORTED_EXTENSIONS = config.IMAGE_EXTENSIONS + config.PDF_EXTENSIONS + config.TEXT_EXTENSIONS


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract bank statement figures from a scan and compute graded ratios."
    )
    parser.add_argument(
        "--input",
        default="",
        help="Path to a statement image, PDF or OCR text file (default: single file in ./input).",
    )
    parser.add_argument(
        "--output",
        default="",
        help="Path to output XLSX or folder (default: ./output).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Correct or enter a field value in crores, e.g. total_assets=1250.5. Repeatable.",
    )
    parser.add_argument(
        "--prev",
        dest="previous",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Previous period value, e.g. prev_aum=1000. Repeatable.",
    )
    parser.add_argument(
        "--no-ocr",
        action="store_true",
        help="Use only the PDF text layer; images are rejected.",
    )
    parser.add_argument(
        "--labels",
        default="",
        help="Optional JSON file with extra field aliases (default: config/labels.json).",
    )
    parser.add_argument(
        "--debug-json",
        default="",
        help="Optional path to save the extraction result as JSON.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        input_path = resolve_input_path(args.input)
        output_path = resolve_output_path(args.output, input_path)
        overrides = parse_assignments(args.overrides, label_utils.all_field_keys())
        previous = parse_assignments(args.previous, label_utils.PREVIOUS_PERIOD_KEYS)
        report = pipeline.run_pipeline(
            input_path=input_path,
            output_xlsx=output_path,
            previous=previous,
            overrides=overrides,
            ocr=not args.no_ocr,
            debug_json=args.debug_json or None,
            label_path=args.labels or None,
        )
    except (ValueError, RuntimeError) as exc:
        print(f"ERROR: {exc}")
        return 1

    print_run_summary(report)
    return 0


def parse_assignments(items: List[str], allowed_keys) -> Dict[str, float]:
    values: Dict[str, float] = {}
    for item in items or []:
        if "=" not in item:
            raise ValueError(f"Expected FIELD=VALUE, got '{item}'")
        key, raw_value = item.split("=", 1)
        key = key.strip().lower()
        if key not in allowed_keys:
            raise ValueError(f"Unknown field: {key}")
        try:
            value = float(raw_value.replace(",", "").strip())
        except ValueError:
            raise ValueError(f"Invalid number for {key}: '{raw_value}'") from None
        if value < 0:
            raise ValueError(f"Negative value for {key}: {value}")
        values[key] = value
    return values


def resolve_input_path(input_arg: str) -> str:
    if input_arg:
        path = Path(input_arg)
        if path.is_dir():
            return _single_input(path)
        if not path.exists():
            raise ValueError(f"Input file not found: {path}")
        return str(path)

    default_dir = Path(config.INPUT_DIR)
    if not default_dir.exists():
        raise ValueError(f"Default input folder not found: {default_dir}")
    return _single_input(default_dir)


def _single_input(folder: Path) -> str:
    candidates = sorted(
        path for path in folder.iterdir() if path.suffix.lower() in SUPPORTED_EXTENSIONS
    )
    if len(candidates) == 1:
        return str(candidates[0])
    if not candidates:
        raise ValueError(f"No supported statements found in {folder}")
    raise ValueError(f"Multiple statements found in {folder}; specify --input file.")


def resolve_output_path(output_arg: str, input_path: str) -> str:
    input_stem = Path(input_path).stem
    output_dir = Path(config.OUTPUT_DIR)

    if output_arg:
        out_path = Path(output_arg)
        if out_path.suffix.lower() == ".xlsx":
            target = out_path
        else:
            target = out_path / f"{input_stem}.xlsx"
    else:
        target = output_dir / f"{input_stem}.xlsx"

    target.parent.mkdir(parents=True, exist_ok=True)
    return str(target)


def print_run_summary(report) -> None:
    print("\nSUMMARY")
    print(f"source_file: {report.source_file}")
    print(f"document_type: {report.document_type}")
    print(f"pages: {report.pages}")
    print(f"ocr_used: {report.ocr_used}")
    print(f"lines_scanned: {report.lines_scanned}")
    print(
        f"fields_detected: {report.fields_detected} "
        f"(high={report.fields_high}, medium={report.fields_medium}, low={report.fields_low})"
    )
    if report.corrections_applied:
        print(f"corrections_applied: {', '.join(report.corrections_applied)}")
    print("\nDETECTED FIELDS")
    if report.fields:
        for item in report.fields:
            print(format_field_line(item))
    else:
        print("No fields detected. Enter values manually with --set FIELD=VALUE.")

    print("\nFORM VALUES (INR Cr)")
    if report.form_values:
        for key, value in report.form_values.items():
            print(f"- {label_utils.display_name(key)}: {value}")
    else:
        print("- none")

    print("\nMETRICS")
    for item in report.metrics:
        print(f"- {item.category} | {item.name}: {item.formatted_value()} [{item.status}]")

    print(f"\noutput: {report.output_path}")
    if report.debug_json_path:
        print(f"debug_json: {report.debug_json_path}")


def format_field_line(item: dict) -> str:
    return (
        f"- {item['field_name']}: {item['value']:.2f} "
        f"({item['band']}, {item['confidence']:.2f}) <- {item['original_text']!r}"
    )


if __name__ == "__main__":
    raise SystemExit(main())
