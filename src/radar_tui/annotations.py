from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from .config import STORE_PATH, read_json_slot, write_json_slot
from .datamodels import AnnotationRecord

logger = logging.getLogger("radar")


def _sanitize_flags(name: str, raw: Any, reasons: List[str]) -> Dict[str, bool]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        reasons.append(f"'{name}' is {type(raw).__name__}, expected an object")
        return {}
    flags: Dict[str, bool] = {}
    for key, value in raw.items():
        if not isinstance(value, bool):
            reasons.append(f"'{name}' entry {key!r} is not a boolean")
            value = bool(value)
        flags[str(key)] = value
    return flags


def sanitize_record(raw: Any) -> Tuple[AnnotationRecord, List[str]]:
    """Validate persisted annotation data.

    Returns the usable record and the reasons anything was discarded. Only the
    broken member is reset: a bad ``star`` map does not wipe ``read``.
    """
    reasons: List[str] = []
    if raw is None:
        return AnnotationRecord(), reasons
    if not isinstance(raw, dict):
        reasons.append(f"record is {type(raw).__name__}, expected an object")
        return AnnotationRecord(), reasons

    record = AnnotationRecord(
        read=_sanitize_flags("read", raw.get("read"), reasons),
        star=_sanitize_flags("star", raw.get("star"), reasons),
    )
    return record, reasons


class AnnotationStore:
    """Device-local read/star flags, persisted after every change."""

    def __init__(self, path: str = STORE_PATH):
        self.path = path
        self.discarded: List[str] = []
        self.record = self.load()

    def load(self) -> AnnotationRecord:
        raw, problem = read_json_slot(self.path)
        record, reasons = sanitize_record(raw)
        if problem:
            reasons.insert(0, problem)
        for reason in reasons:
            logger.warning("Annotation store %s: %s", self.path, reason)
        self.discarded = reasons
        return record

    def save(self) -> None:
        if write_json_slot(self.path, self.record.to_dict()):
            logger.debug("Saved annotations to %s", self.path)

    def is_read(self, item_id: str) -> bool:
        return self.record.is_read(item_id)

    def is_starred(self, item_id: str) -> bool:
        return self.record.is_starred(item_id)

    def toggle_read(self, item_id: str) -> bool:
        value = not self.record.is_read(item_id)
        self.record.read[item_id] = value
        self.save()
        return value

    def toggle_star(self, item_id: str) -> bool:
        value = not self.record.is_starred(item_id)
        self.record.star[item_id] = value
        self.save()
        return value

    def mark_read(self, item_id: str) -> None:
        """Mark an item read, e.g. when it is opened."""
        self.record.read[item_id] = True
        self.save()
