import json
import os
from typing import Dict, List


def build_debug_payload(result, form_values: Dict[str, str], metric_results: List) -> dict:
    return {
        "extraction": result.to_dict(),
        "form_values": dict(form_values),
        "metrics": [item.to_dict() for item in metric_results],
    }


def write_debug_json(path: str, payload: dict) -> str:
    """Write the payload as UTF-8 JSON and return the absolute path.

    Raw OCR text keeps currency symbols such as the rupee sign readable.
    """
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
    return os.path.abspath(path)
