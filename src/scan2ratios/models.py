from dataclasses import asdict, dataclass, field
from typing import List, Optional


BALANCE_SHEET = "balance_sheet"
INCOME_STATEMENT = "income_statement"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class RawLine:
    index: int
    text: str


@dataclass
class FieldMapping:
    field_key: str
    value: float
    original_text: str
    confidence: float
    field_name: str
    line_index: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class MetricResult:
    key: str
    name: str
    category: str
    value: float = 0.0
    thresholds: tuple = ()
    kind: str = ""
    benchmark: str = ""
    status: str = "not_calculated"

    @property
    def calculated(self) -> bool:
        return self.status != "not_calculated"

    def formatted_value(self) -> str:
        if not self.calculated:
            return "-"
        return f"{self.value:.2f}%"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["thresholds"] = list(self.thresholds)
        data["formatted_value"] = self.formatted_value()
        return data


@dataclass
class RunReport:
    source_file: str = ""
    document_type: str = UNKNOWN
    ocr_used: bool = False
    pages: int = 1
    text_len: int = 0
    lines_scanned: int = 0
    fields_detected: int = 0
    fields_high: int = 0
    fields_medium: int = 0
    fields_low: int = 0
    corrections_applied: List[str] = field(default_factory=list)
    fields: List[dict] = field(default_factory=list)
    form_values: dict = field(default_factory=dict)
    metrics: List[MetricResult] = field(default_factory=list)
    output_path: str = ""
    debug_json_path: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
