from typing import Optional

from scan2ratios import config


def score_match(line: str, keyword: str, value: Optional[float]) -> float:
    confidence = config.CONFIDENCE_BASE

    if keyword and keyword in (line or ""):
        confidence += config.CONFIDENCE_KEYWORD_BONUS
    if value is not None:
        if 0 < value < config.CONFIDENCE_RANGE_MAX:
            confidence += config.CONFIDENCE_RANGE_BONUS
        if value < config.CONFIDENCE_OUTLIER_MIN or value > config.CONFIDENCE_OUTLIER_MAX:
            confidence -= config.CONFIDENCE_OUTLIER_PENALTY

    return max(0.0, min(confidence, 1.0))


def confidence_band(confidence: float) -> str:
    if confidence >= config.CONFIDENCE_HIGH:
        return "high"
    if confidence >= config.CONFIDENCE_MEDIUM:
        return "medium"
    return "low"
