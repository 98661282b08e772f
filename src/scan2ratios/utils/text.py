import math
import re
from typing import Callable, List, Optional, Tuple

from scan2ratios import config
from scan2ratios.models import RawLine


_NUMBER = r"([0-9]+(?:\.[0-9]+)?)"
_ALL_UNITS = r"crores|crore|cr|lakhs|lakh|million|billion|thousand|k|m|b"
_INDIAN_UNITS = r"crores|crore|cr|lakhs|lakh"
_ENGLISH_UNITS = r"million|billion|thousand"
_STRIP_RE = re.compile(r"[,()]")

Matcher = Callable[[str], Optional[Tuple[str, str]]]


def _regex_matcher(prefix: str, units: str) -> Matcher:
    # A unit only counts as a whole word; "1234 balance" is a bare 1234.
    pattern = re.compile(
        prefix + _NUMBER + r"(?:\s*(" + units + r")(?![a-z]))?",
        re.IGNORECASE,
    )

    def match(fragment: str) -> Optional[Tuple[str, str]]:
        found = pattern.search(fragment)
        if not found:
            return None
        return found.group(1), (found.group(2) or "")

    return match


match_bare = _regex_matcher("", _ALL_UNITS)
match_rupee = _regex_matcher(r"(?:₹|\brs\.?|\binr)\s*", _INDIAN_UNITS)
match_dollar = _regex_matcher(r"\$\s*", _ENGLISH_UNITS)

# Tried in order, first hit wins. Reordering changes results for fragments
# such as "$ 2 m" where more than one matcher applies.
AMOUNT_MATCHERS: List[Matcher] = [match_bare, match_rupee, match_dollar]


def match_amount(
    fragment: str, matchers: Optional[List[Matcher]] = None
) -> Optional[Tuple[str, str]]:
    cleaned = _STRIP_RE.sub("", fragment or "")
    for matcher in matchers or AMOUNT_MATCHERS:
        found = matcher(cleaned)
        if found:
            return found
    return None


def parse_amount(
    fragment: str, matchers: Optional[List[Matcher]] = None
) -> Optional[float]:
    """Parse a text fragment into crores.

    A number without a unit word is read as raw currency units, so it is
    still divided by the crore: "1234" gives 0.0001234 while "1234 cr"
    gives 1234.0. Returns None when no number is present.
    """
    found = match_amount(fragment, matchers)
    if not found:
        return None
    digits, unit = found
    try:
        value = float(digits)
    except ValueError:
        return None
    if unit:
        value *= config.UNIT_MULTIPLIERS.get(unit.lower(), 1)
    return value / config.CANONICAL_UNIT


def split_lines(text: str) -> List[RawLine]:
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    return [RawLine(index, line) for index, line in enumerate(lines)]


def format_amount(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def parse_form_number(value) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).replace(",", "").strip())
        except ValueError:
            return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number
