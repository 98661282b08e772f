import sys
import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from scan2ratios.core.store import MappingStore
from scan2ratios.models import FieldMapping


def make_mapping(value: float, confidence: float, text: str, key: str = "total_assets") -> FieldMapping:
    return FieldMapping(
        field_key=key,
        value=value,
        original_text=text,
        confidence=confidence,
        field_name="Total Assets",
        line_index=0,
    )


class MappingStoreTests(unittest.TestCase):
    def test_higher_confidence_wins_in_either_order(self) -> None:
        low = make_mapping(10.0, 0.6, "Total assets 10 cr")
        high = make_mapping(20.0, 0.9, "Total assets 20 cr")
        for order in ([low, high], [high, low]):
            store = MappingStore()
            for mapping in order:
                store.offer(mapping)
            kept = store.get("total_assets")
            self.assertEqual(len(store), 1)
            self.assertEqual(kept.confidence, 0.9)
            self.assertEqual(kept.value, 20.0)
            self.assertEqual(kept.original_text, "Total assets 20 cr")

    def test_tie_keeps_existing_entry(self) -> None:
        store = MappingStore()
        self.assertTrue(store.offer(make_mapping(10.0, 0.8, "first")))
        self.assertFalse(store.offer(make_mapping(99.0, 0.8, "second")))
        self.assertEqual(store.get("total_assets").original_text, "first")

    def test_update_value_keeps_confidence_and_source(self) -> None:
        store = MappingStore()
        store.offer(make_mapping(10.0, 0.7, "Total assets 10 cr"))
        store.update_value("total_assets", 12.5)
        mapping = store.get("total_assets")
        self.assertEqual(mapping.value, 12.5)
        self.assertEqual(mapping.confidence, 0.7)
        self.assertEqual(mapping.original_text, "Total assets 10 cr")
        with self.assertRaises(KeyError):
            store.update_value("deposits", 1.0)

    def test_values_for_form_does_not_mutate_store(self) -> None:
        store = MappingStore()
        store.offer(make_mapping(1234.5, 1.0, "a"))
        store.offer(make_mapping(7.0, 0.8, "b", key="deposits"))
        self.assertEqual(
            store.values_for_form(), {"total_assets": "1234.50", "deposits": "7.00"}
        )
        self.assertEqual(len(store), 2)
        self.assertEqual(store.get("total_assets").value, 1234.5)

    def test_clear_and_membership(self) -> None:
        store = MappingStore()
        store.offer(make_mapping(1.0, 0.8, "a"))
        self.assertIn("total_assets", store)
        self.assertEqual(store.keys(), ["total_assets"])
        store.clear()
        self.assertNotIn("total_assets", store)
        self.assertEqual(len(store), 0)
        self.assertEqual(store.to_dict(), {})


if __name__ == "__main__":
    unittest.main()
