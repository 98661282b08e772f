from typing import Dict, Iterable, Optional

from scan2ratios.models import BALANCE_SHEET, INCOME_STATEMENT, UNKNOWN
from scan2ratios.utils import labels as label_utils


def count_keywords(lowered_text: str, keywords: Iterable[str]) -> int:
    # Presence only: a keyword repeated ten times still counts once.
    return sum(1 for keyword in keywords if keyword in lowered_text)


def score_document(text: str, label_dict: Optional[dict] = None) -> Dict[str, int]:
    keywords = label_utils.get_document_keywords(label_dict)
    lowered = (text or "").lower()
    return {
        BALANCE_SHEET: count_keywords(lowered, keywords.get(BALANCE_SHEET, [])),
        INCOME_STATEMENT: count_keywords(lowered, keywords.get(INCOME_STATEMENT, [])),
    }


def classify_document(text: str, label_dict: Optional[dict] = None) -> str:
    """Pick the statement type whose keyword set has more hits.

    Equal nonzero scores resolve to income_statement.
    """
    scores = score_document(text, label_dict)
    if scores[BALANCE_SHEET] > scores[INCOME_STATEMENT]:
        return BALANCE_SHEET
    if scores[INCOME_STATEMENT] > 0:
        return INCOME_STATEMENT
    return UNKNOWN
