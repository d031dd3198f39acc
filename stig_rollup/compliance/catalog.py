"""
NIST control catalog snapshot.

Holds the two reference tables the aggregator needs: CCI -> control
references, and the control definitions with their baseline flags. A
catalog is immutable once built and is shared read-only by aggregation
workers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from stig_rollup.compliance.models import CciItem, CciReference, ControlRecord, ControlTuple
from stig_rollup.core.constants import ImpactLevel
from stig_rollup.core.logging import LOG
from stig_rollup.exceptions import ValidationError
from stig_rollup.io.file_ops import FO


class ControlCatalog:
    """
    Immutable CCI and control-definition snapshot.

    Thread-safe: Yes (read-only after construction)
    """

    def __init__(self, cci_items: Iterable[CciItem], controls: Iterable[ControlRecord]):
        self._cci_items: Tuple[CciItem, ...] = tuple(cci_items)
        self._controls: Tuple[ControlRecord, ...] = tuple(controls)
        self._tuples: Tuple[ControlTuple, ...] = tuple(
            ControlTuple(
                cci=item.cci_id,
                control=ref.major_control,
                index=ref.index,
                title=ref.title,
                version=ref.version,
                location=ref.location,
            )
            for item in self._cci_items
            for ref in item.references
        )

    def __len__(self) -> int:
        return len(self._cci_items)

    @property
    def cci_items(self) -> Tuple[CciItem, ...]:
        return self._cci_items

    def control_tuples(self, major_control: Optional[str] = None) -> List[ControlTuple]:
        """Catalog flattened to one row per CCI reference, optionally for one family."""
        if major_control:
            return [t for t in self._tuples if t.control == major_control]
        return list(self._tuples)

    def control_records(self, impact: Optional[Union[str, ImpactLevel]] = None, pii: bool = False) -> List[ControlRecord]:
        """
        Control definitions in the requested baseline.

        ``impact`` of None (or empty) selects every control. With ``pii``
        the privacy-flagged controls are added to the baseline.
        """
        level = impact if isinstance(impact, ImpactLevel) else ImpactLevel.parse(impact)
        if level is None:
            return list(self._controls)
        selected = []
        for record in self._controls:
            in_baseline = getattr(record, level.value)
            if in_baseline or (pii and record.pii):
                selected.append(record)
        return selected

    def cci_ids_for_control(self, control: str) -> List[str]:
        """Distinct CCIs referencing ``control`` (family or exact index), in catalog order."""
        seen: List[str] = []
        for row in self._tuples:
            if control in (row.control, row.index) and row.cci not in seen:
                seen.append(row.cci)
        return seen

    # Loading

    @classmethod
    def from_dicts(cls, cci_data: Iterable[Dict[str, Any]], control_data: Iterable[Dict[str, Any]]) -> "ControlCatalog":
        """Build from the JSON shapes served by the catalog and controls services."""
        items = []
        for entry in cci_data:
            refs = tuple(
                CciReference(
                    major_control=str(ref.get("majorControl", "")),
                    index=str(ref.get("index", "")),
                    title=str(ref.get("title", "") or ""),
                    version=str(ref.get("version", "") or ""),
                    location=str(ref.get("location", "") or ""),
                )
                for ref in entry.get("references") or []
            )
            items.append(
                CciItem(
                    cci_id=str(entry.get("cciId", "")),
                    references=refs,
                    definition=str(entry.get("definition", "") or ""),
                )
            )

        controls = [
            ControlRecord(
                number=str(entry.get("number", "")),
                title=str(entry.get("title", "") or ""),
                sub_control_number=str(entry.get("subControlNumber", "") or ""),
                low=bool(entry.get("low", False)),
                moderate=bool(entry.get("moderate", False)),
                high=bool(entry.get("high", False)),
                pii=bool(entry.get("pii", False)),
            )
            for entry in control_data
        ]
        return cls(items, controls)

    @classmethod
    def load_json(cls, cci_path: Union[str, Path], controls_path: Union[str, Path]) -> "ControlCatalog":
        """
        Load a catalog from two JSON files (each a list of objects).

        Raises:
            ValidationError: If either file is not a JSON list
            FileError: If a file cannot be read
        """
        cci_data = cls._read_list(cci_path)
        control_data = cls._read_list(controls_path)
        catalog = cls.from_dicts(cci_data, control_data)
        LOG.i(f"Loaded catalog: {len(catalog)} CCIs, {len(catalog._controls)} controls")
        return catalog

    @staticmethod
    def _read_list(path: Union[str, Path]) -> List[Dict[str, Any]]:
        try:
            data = json.loads(FO.read(path))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON: {exc}", {"path": str(path)}) from exc
        if not isinstance(data, list):
            raise ValidationError("Expected a JSON list", {"path": str(path)})
        return data
