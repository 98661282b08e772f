import logging
from typing import Dict, List, Optional, Tuple

from scan2ratios import config
from scan2ratios.core import scoring
from scan2ratios.core.store import MappingStore
from scan2ratios.models import FieldMapping, RawLine
from scan2ratios.utils import labels as label_utils
from scan2ratios.utils import text as text_utils


LOGGER = logging.getLogger(__name__)


def find_value(
    lines: List[RawLine], idx: int, lookahead: int = config.LOOKAHEAD_LINES
) -> Optional[Tuple[float, RawLine]]:
    """Read a value from lines[idx], else from up to `lookahead` following lines.

    OCR often splits a label and its figure across lines, sometimes with a
    table border or other noise in between.
    """
    for look_idx in range(idx, min(len(lines), idx + lookahead + 1)):
        value = text_utils.parse_amount(lines[look_idx].text)
        if value is not None:
            return value, lines[look_idx]
    return None


def extract_fields(
    text: str,
    document_type: str,
    vocabulary: Optional[Dict[str, List[str]]] = None,
    label_dict: Optional[dict] = None,
) -> MappingStore:
    store = MappingStore()
    if vocabulary is None:
        vocabulary = label_utils.get_vocabulary(document_type, label_dict)
    if not vocabulary:
        LOGGER.info("No vocabulary for document type '%s'.", document_type)
        return store

    lines = text_utils.split_lines(text)
    for idx, line in enumerate(lines):
        lowered = line.text.lower()
        for field_key, keywords in vocabulary.items():
            for keyword in keywords:
                if keyword not in lowered:
                    continue
                found = find_value(lines, idx)
                if found is None:
                    LOGGER.debug("No value near '%s' on line %d", keyword, line.index)
                    continue
                value, source = found
                store.offer(
                    FieldMapping(
                        field_key=field_key,
                        value=value,
                        original_text=line.text,
                        confidence=scoring.score_match(lowered, keyword, value),
                        field_name=label_utils.display_name(field_key, label_dict),
                        line_index=source.index,
                    )
                )
    return store
