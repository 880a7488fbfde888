"""In-process equipment repository.

Used for local development, tests and as the fallback when Redis is not
reachable. Snapshots are immutable, so storing the instances themselves
is enough; nothing outside can alter them after ``save``.
"""
import threading
from typing import Dict, Optional

from lending.core.logging import get_logger
from lending.domain.equipment import Equipment
from lending.domain.identifiers import BorrowingId, EquipmentId
from lending.domain.repository import EquipmentRepository

logger = get_logger(__name__)


class InMemoryEquipmentRepository(EquipmentRepository):
    """Dict-backed repository issuing ``eq-001``, ``brw-001``, ... ids."""

    def __init__(self):
        self._items: Dict[EquipmentId, Equipment] = {}
        self._equipment_seq = 0
        self._borrowing_seq = 0
        self._lock = threading.Lock()

    def next_id(self) -> EquipmentId:
        with self._lock:
            self._equipment_seq += 1
            return EquipmentId(value=f"{EquipmentId.PREFIX}{self._equipment_seq:03d}")

    def next_borrowing_id(self) -> BorrowingId:
        with self._lock:
            self._borrowing_seq += 1
            return BorrowingId(value=f"{BorrowingId.PREFIX}{self._borrowing_seq:03d}")

    def save(self, equipment: Equipment) -> None:
        with self._lock:
            self._items[equipment.id] = equipment
        logger.debug(f"Equipment saved: {equipment.id}", extra={"equipment_id": str(equipment.id)})

    def find_by_id(self, equipment_id: EquipmentId) -> Optional[Equipment]:
        return self._items.get(equipment_id)

    def __len__(self) -> int:
        return len(self._items)
