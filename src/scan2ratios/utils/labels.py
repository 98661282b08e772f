import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from scan2ratios import config
from scan2ratios.models import BALANCE_SHEET, INCOME_STATEMENT


LOGGER = logging.getLogger(__name__)
_SEPARATOR_RE = re.compile(r"[_\-\s]+")

DEFAULT_LABEL_DICTIONARY = {
    "version": "1.0",
    "document_keywords": {
        BALANCE_SHEET: [
            "balance sheet",
            "assets",
            "liabilities",
            "deposits",
            "capital",
        ],
        INCOME_STATEMENT: [
            "income statement",
            "profit and loss",
            "revenue",
            "expenses",
            "net income",
        ],
    },
    "fields": {
        BALANCE_SHEET: {
            "total_assets": ["total assets", "total asset"],
            "interest_earning_assets": [
                "interest earning assets",
                "interest-earning assets",
                "earning assets",
            ],
            "cash_equivalents": [
                "cash and cash equivalents",
                "cash equivalents",
                "cash and balances with rbi",
                "cash in hand",
            ],
            "short_term_investments": [
                "short term investments",
                "short-term investments",
                "current investments",
            ],
            "gross_advances": ["gross advances", "loans and advances", "advances"],
            "gross_npas": [
                "gross npa",
                "gross non-performing assets",
                "gross non performing assets",
            ],
            "provisions_npas": [
                "provisions for npa",
                "provision for npa",
                "npa provisions",
                "provisions held",
            ],
            "total_liabilities": ["total liabilities"],
            "deposits": ["total deposits", "customer deposits", "deposits"],
            "external_debt": ["external debt", "total borrowings", "borrowings"],
            "shareholders_equity": [
                "shareholders equity",
                "shareholders' equity",
                "total equity",
                "net worth",
            ],
            "risk_weighted_assets": ["risk weighted assets", "risk-weighted assets"],
            "tier1_capital": ["tier i capital", "tier 1 capital", "tier1 capital", "cet1"],
            "tier2_capital": ["tier ii capital", "tier 2 capital", "tier2 capital"],
        },
        INCOME_STATEMENT: {
            "interest_income": [
                "interest income",
                "interest earned",
                "total interest income",
            ],
            "interest_expense": ["interest expense", "interest expended", "interest paid"],
            "non_interest_income": [
                "non-interest income",
                "non interest income",
                "other income",
                "fee income",
            ],
            "operating_income": ["operating income", "net operating income", "total income"],
            "operating_expenses": ["operating expenses", "opex", "total expenses"],
            "provisions_writeoffs": [
                "provisions and contingencies",
                "write-offs",
                "write offs",
                "provisions",
            ],
            "net_income": ["net income", "net profit", "profit after tax"],
        },
    },
    "display_names": {
        "total_assets": "Total Assets",
        "interest_earning_assets": "Interest Earning Assets",
        "cash_equivalents": "Cash & Cash Equivalents",
        "short_term_investments": "Short Term Investments",
        "gross_advances": "Gross Advances",
        "gross_npas": "Gross NPAs",
        "provisions_npas": "Provisions for NPAs",
        "total_liabilities": "Total Liabilities",
        "deposits": "Deposits",
        "external_debt": "External Debt",
        "shareholders_equity": "Shareholders' Equity",
        "risk_weighted_assets": "Risk Weighted Assets",
        "tier1_capital": "Tier 1 Capital",
        "tier2_capital": "Tier 2 Capital",
        "interest_income": "Interest Income",
        "interest_expense": "Interest Expense",
        "non_interest_income": "Non-Interest Income",
        "operating_income": "Operating Income",
        "operating_expenses": "Operating Expenses",
        "provisions_writeoffs": "Provisions & Write-offs",
        "net_income": "Net Income",
        "prev_aum": "Previous Period AUM",
        "prev_loans": "Previous Period Loans",
        "prev_deposits": "Previous Period Deposits",
        "prev_operating_income": "Previous Period Operating Income",
    },
}

PREVIOUS_PERIOD_KEYS = (
    "prev_aum",
    "prev_loans",
    "prev_deposits",
    "prev_operating_income",
)


def load_label_dictionary(path: Optional[str] = None) -> dict:
    target = Path(path or config.LABEL_DICTIONARY_PATH)
    if path and not target.exists():
        LOGGER.warning("Label dictionary not found: %s", target)
        return DEFAULT_LABEL_DICTIONARY
    override = _load_dictionary(target, {})
    if not override:
        return DEFAULT_LABEL_DICTIONARY
    return merge_dictionaries(DEFAULT_LABEL_DICTIONARY, override)


def merge_dictionaries(base: dict, extra: dict) -> dict:
    merged_fields = {}
    base_fields = base.get("fields", {})
    extra_fields = extra.get("fields", {}) or {}
    for doc_type in set(base_fields) | set(extra_fields):
        merged_fields[doc_type] = merge_fields(
            base_fields.get(doc_type, {}), extra_fields.get(doc_type, {})
        )
    return {
        "version": extra.get("version") or base.get("version"),
        "document_keywords": merge_fields(
            base.get("document_keywords", {}), extra.get("document_keywords", {})
        ),
        "fields": merged_fields,
        "display_names": {
            **base.get("display_names", {}),
            **(extra.get("display_names") or {}),
        },
    }


def merge_fields(base_fields: Dict, extra_fields: Dict) -> Dict:
    merged = {key: list(values) for key, values in (base_fields or {}).items()}
    for field, labels in (extra_fields or {}).items():
        merged.setdefault(field, [])
        for label in labels or []:
            if not isinstance(label, str) or not label.strip():
                continue
            label = label.strip().lower()
            if label not in merged[field]:
                merged[field].append(label)
    return merged


def get_vocabulary(document_type: str, label_dict: Optional[dict] = None) -> Dict[str, List[str]]:
    label_dict = label_dict or DEFAULT_LABEL_DICTIONARY
    return dict(label_dict.get("fields", {}).get(document_type, {}))


def get_document_keywords(label_dict: Optional[dict] = None) -> Dict[str, List[str]]:
    label_dict = label_dict or DEFAULT_LABEL_DICTIONARY
    return label_dict.get("document_keywords", {})


def all_field_keys(label_dict: Optional[dict] = None) -> List[str]:
    keys: List[str] = []
    for doc_type in (BALANCE_SHEET, INCOME_STATEMENT):
        for key in get_vocabulary(doc_type, label_dict):
            if key not in keys:
                keys.append(key)
    return keys


def display_name(field_key: str, label_dict: Optional[dict] = None) -> str:
    label_dict = label_dict or DEFAULT_LABEL_DICTIONARY
    name = label_dict.get("display_names", {}).get(field_key)
    if name:
        return name
    return fallback_display_name(field_key)


def fallback_display_name(field_key: str) -> str:
    words = [word for word in _SEPARATOR_RE.split(field_key or "") if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _load_dictionary(path: Path, fallback: dict) -> dict:
    if not path.exists():
        LOGGER.debug("Label dictionary override not found: %s", path)
        return fallback
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError:
        LOGGER.warning("Invalid label dictionary JSON: %s", path)
        return fallback
    if not isinstance(data, dict):
        return fallback
    return data
