import math
from dataclasses import asdict, dataclass, fields
from typing import Callable, Dict, List, Mapping, Tuple

from scan2ratios.models import MetricResult
from scan2ratios.utils import text as text_utils


HIGHER_BETTER = "higher_better"
LOWER_BETTER = "lower_better"
TARGET_RANGE = "target_range"

# (inner band, middle band, outer band) for target-range metrics.
LIQUIDITY_BANDS = ((70.0, 80.0), (65.0, 85.0), (60.0, 90.0))


@dataclass
class FinancialInputs:
    total_assets: float = 0.0
    interest_earning_assets: float = 0.0
    cash_equivalents: float = 0.0
    short_term_investments: float = 0.0
    gross_advances: float = 0.0
    gross_npas: float = 0.0
    provisions_npas: float = 0.0
    total_liabilities: float = 0.0
    deposits: float = 0.0
    external_debt: float = 0.0
    shareholders_equity: float = 0.0
    risk_weighted_assets: float = 0.0
    tier1_capital: float = 0.0
    tier2_capital: float = 0.0
    interest_income: float = 0.0
    interest_expense: float = 0.0
    non_interest_income: float = 0.0
    operating_income: float = 0.0
    operating_expenses: float = 0.0
    provisions_writeoffs: float = 0.0
    net_income: float = 0.0
    prev_aum: float = 0.0
    prev_loans: float = 0.0
    prev_deposits: float = 0.0
    prev_operating_income: float = 0.0

    @classmethod
    def from_form(cls, values: Mapping[str, object]) -> "FinancialInputs":
        known = {item.name for item in fields(cls)}
        return cls(
            **{
                key: text_utils.parse_form_number(value)
                for key, value in (values or {}).items()
                if key in known
            }
        )

    def to_dict(self) -> dict:
        return asdict(self)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def _growth(current: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def _net_interest_income(data: FinancialInputs) -> float:
    return data.interest_income - data.interest_expense


def _net_npa(data: FinancialInputs) -> float:
    net_advances = data.gross_advances - data.provisions_npas
    return _ratio(data.gross_npas - data.provisions_npas, net_advances)


def _efficiency(data: FinancialInputs) -> float:
    total_revenue = _net_interest_income(data) + data.non_interest_income
    return _ratio(data.operating_expenses, total_revenue)


@dataclass(frozen=True)
class MetricDefinition:
    key: str
    name: str
    category: str
    kind: str
    thresholds: Tuple[float, float, float]
    compute: Callable[[FinancialInputs], float]


METRICS: List[MetricDefinition] = [
    MetricDefinition(
        "aum_growth", "AUM Growth", "Growth", HIGHER_BETTER, (15, 20, 25),
        lambda d: _growth(d.total_assets, d.prev_aum),
    ),
    MetricDefinition(
        "loan_growth", "Loan Growth", "Growth", HIGHER_BETTER, (15, 20, 25),
        lambda d: _growth(d.gross_advances, d.prev_loans),
    ),
    MetricDefinition(
        "deposit_growth", "Deposit Growth", "Growth", HIGHER_BETTER, (15, 20, 25),
        lambda d: _growth(d.deposits, d.prev_deposits),
    ),
    MetricDefinition(
        "op_income_growth", "Operating Income Growth", "Growth", HIGHER_BETTER, (12, 18, 24),
        lambda d: _growth(d.operating_income, d.prev_operating_income),
    ),
    MetricDefinition(
        "nim", "Net Interest Margin", "Profitability", HIGHER_BETTER, (3.0, 4.5, 6.0),
        lambda d: _ratio(_net_interest_income(d), d.interest_earning_assets),
    ),
    MetricDefinition(
        "gross_nim", "Gross NIM", "Profitability", HIGHER_BETTER, (7, 10, 12),
        lambda d: _ratio(d.interest_income, d.interest_earning_assets),
    ),
    MetricDefinition(
        "roa", "Return on Assets", "Profitability", HIGHER_BETTER, (1.0, 2.0, 3.0),
        lambda d: _ratio(d.net_income, d.total_assets),
    ),
    MetricDefinition(
        "roe", "Return on Equity", "Profitability", HIGHER_BETTER, (12, 18, 25),
        lambda d: _ratio(d.net_income, d.shareholders_equity),
    ),
    MetricDefinition(
        "ppp_ratio", "PPP % of Risk Assets", "Profitability", HIGHER_BETTER, (2.5, 4.0, 5.5),
        lambda d: _ratio(d.operating_income - d.operating_expenses, d.risk_weighted_assets),
    ),
    MetricDefinition(
        "gross_npa", "Gross NPA", "Asset Quality", LOWER_BETTER, (3, 1.5, 0.5),
        lambda d: _ratio(d.gross_npas, d.gross_advances),
    ),
    MetricDefinition(
        "net_npa", "Net NPA", "Asset Quality", LOWER_BETTER, (1, 0.5, 0.1),
        _net_npa,
    ),
    MetricDefinition(
        "credit_cost", "Credit Cost", "Asset Quality", LOWER_BETTER, (1, 0.5, 0.2),
        lambda d: _ratio(d.provisions_writeoffs, d.risk_weighted_assets),
    ),
    MetricDefinition(
        "provision_coverage", "Provision Coverage Ratio", "Asset Quality", HIGHER_BETTER,
        (70, 85, 95),
        lambda d: _ratio(d.provisions_npas, d.gross_npas),
    ),
    MetricDefinition(
        "efficiency_ratio", "Efficiency Ratio", "Efficiency", LOWER_BETTER, (50, 40, 30),
        _efficiency,
    ),
    MetricDefinition(
        "cost_to_income", "Cost-to-Income", "Efficiency", LOWER_BETTER, (60, 50, 40),
        lambda d: _ratio(d.operating_expenses, d.operating_income),
    ),
    MetricDefinition(
        "car", "Capital Adequacy Ratio", "Capital Adequacy", HIGHER_BETTER, (11.5, 14, 16),
        lambda d: _ratio(d.tier1_capital + d.tier2_capital, d.risk_weighted_assets),
    ),
    MetricDefinition(
        "external_debt_tnw", "External Debt / TNW", "Capital Adequacy", LOWER_BETTER,
        (100, 75, 50),
        lambda d: _ratio(d.external_debt, d.shareholders_equity),
    ),
    MetricDefinition(
        "loan_to_deposit", "Loan-to-Deposit Ratio", "Liquidity", TARGET_RANGE, (80, 75, 70),
        lambda d: _ratio(d.gross_advances, d.deposits),
    ),
]


def metric_status(value: float, thresholds: Tuple[float, float, float], kind: str) -> str:
    if value == 0 or math.isnan(value) or math.isinf(value):
        return "not_calculated"
    poor, average, good = thresholds

    if kind == HIGHER_BETTER:
        if value >= good:
            return "excellent"
        if value >= average:
            return "good"
        if value >= poor:
            return "average"
        return "poor"

    if kind == LOWER_BETTER:
        if value <= good:
            return "excellent"
        if value <= average:
            return "good"
        if value <= poor:
            return "average"
        return "poor"

    if kind == TARGET_RANGE:
        for status, (low, high) in zip(("excellent", "good", "average"), LIQUIDITY_BANDS):
            if low <= value <= high:
                return status
        return "poor"

    return "average"


def benchmark_label(definition: MetricDefinition) -> str:
    poor, average, good = definition.thresholds
    if definition.kind == HIGHER_BETTER:
        return f">= {good}% excellent, >= {average}% good, >= {poor}% average"
    if definition.kind == LOWER_BETTER:
        return f"<= {good}% excellent, <= {average}% good, <= {poor}% average"
    low, high = LIQUIDITY_BANDS[0]
    return f"{low:g}-{high:g}% target"


def compute_metrics(data: FinancialInputs) -> List[MetricResult]:
    results: List[MetricResult] = []
    for definition in METRICS:
        value = definition.compute(data)
        results.append(
            MetricResult(
                key=definition.key,
                name=definition.name,
                category=definition.category,
                value=value,
                thresholds=definition.thresholds,
                kind=definition.kind,
                benchmark=benchmark_label(definition),
                status=metric_status(value, definition.thresholds, definition.kind),
            )
        )
    return results


def metrics_by_key(results: List[MetricResult]) -> Dict[str, MetricResult]:
    return {result.key: result for result in results}
