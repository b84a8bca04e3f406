# qa_engine/tools/data_tracker.py

from enum import Enum
from typing import Dict, List, Union


class EntityKind(str, Enum):
    CLIENTS = "clients"
    PRODUCTS = "products"
    INVOICES = "invoices"
    PAYMENTS = "payments"
    TEMPLATES = "templates"


class TestDataTracker:
    """
    Registry of ids for entities created as a side effect of checks.

    It owns only the knowledge of what must be deleted, never the remote
    entities. One tracker belongs to one run; pass it around explicitly.
    """

    __test__ = False

    def __init__(self):
        self._ids: Dict[EntityKind, List[str]] = {kind: [] for kind in EntityKind}

    @staticmethod
    def _kind(kind: Union[EntityKind, str]) -> EntityKind:
        return kind if isinstance(kind, EntityKind) else EntityKind(kind)

    def track(self, kind: Union[EntityKind, str], entity_id: Union[str, int]) -> None:
        self._ids[self._kind(kind)].append(str(entity_id))

    def untrack(self, kind: Union[EntityKind, str], entity_id: Union[str, int]) -> bool:
        """Forget one id after it was deleted; returns whether it was tracked."""
        ids = self._ids[self._kind(kind)]
        entity_id = str(entity_id)
        if entity_id in ids:
            ids.remove(entity_id)
            return True
        return False

    def ids(self, kind: Union[EntityKind, str]) -> List[str]:
        return list(self._ids[self._kind(kind)])

    def get_tracked_data(self) -> Dict[str, List[str]]:
        """Copy of every list, keyed by kind name."""
        return {kind.value: list(ids) for kind, ids in self._ids.items()}

    def clear_tracked_data(self) -> None:
        for ids in self._ids.values():
            ids.clear()

    def is_empty(self) -> bool:
        return not any(self._ids.values())

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._ids.values())
