import logging
from typing import Dict, Iterator, List, Optional

from scan2ratios.models import FieldMapping
from scan2ratios.utils import text as text_utils


LOGGER = logging.getLogger(__name__)


class MappingStore:
    """Best-so-far extracted value per field key.

    Holds at most one FieldMapping per key. A candidate only replaces the
    current entry when its confidence is strictly higher.
    """

    def __init__(self) -> None:
        self._mappings: Dict[str, FieldMapping] = {}

    def offer(self, mapping: FieldMapping) -> bool:
        current = self._mappings.get(mapping.field_key)
        if current is not None and mapping.confidence <= current.confidence:
            return False
        if current is not None:
            LOGGER.debug(
                "Replacing %s (%.2f -> %.2f): %r",
                mapping.field_key,
                current.confidence,
                mapping.confidence,
                mapping.original_text,
            )
        self._mappings[mapping.field_key] = mapping
        return True

    def get(self, field_key: str) -> Optional[FieldMapping]:
        return self._mappings.get(field_key)

    def __contains__(self, field_key: object) -> bool:
        return field_key in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(list(self._mappings.values()))

    def keys(self) -> List[str]:
        return list(self._mappings.keys())

    def clear(self) -> None:
        self._mappings.clear()

    def update_value(self, field_key: str, value: float) -> FieldMapping:
        if field_key not in self._mappings:
            raise KeyError(field_key)
        mapping = self._mappings[field_key]
        mapping.value = float(value)
        return mapping

    def values_for_form(self) -> Dict[str, str]:
        return {
            key: text_utils.format_amount(mapping.value)
            for key, mapping in self._mappings.items()
        }

    def to_dict(self) -> Dict[str, dict]:
        return {key: mapping.to_dict() for key, mapping in self._mappings.items()}
