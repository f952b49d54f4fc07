"""Per-room BOQ document and its state transitions.

A room owns its answers, its current BOQ and the validation result describing
that BOQ. Any change to the BOQ or the answers invalidates the validation.
Generation and refinement are fail-closed: on error the previous BOQ is kept.
"""

import copy
import uuid
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from av_boq.core.logging import get_logger
from av_boq.core.schemas import BoqItem, TokenUsage, ValidationResult

from .encoder import ALL_SYSTEMS, requirements_text

if TYPE_CHECKING:
    from av_boq.orchestrator import BoqService

logger = get_logger(__name__)

_ALIASES = {f.alias: name for name, f in BoqItem.model_fields.items() if f.alias}


def _field_name(name: str) -> str:
    if name in ("total_price", "totalPrice"):
        raise ValueError("totalPrice is derived from quantity and unitPrice")
    return _ALIASES.get(name, name)


def blank_item() -> BoqItem:
    return BoqItem(
        category="",
        item_description="New Item",
        key_remarks="Manually added item.",
        brand="",
        model="",
        quantity=1,
        unit_price=0,
        source="web",
        price_source="estimated",
    )


class RoomDocument:
    def __init__(self, name: str, answers: Optional[Dict[str, Any]] = None) -> None:
        self.id = uuid.uuid4().hex[:7]
        self.name = name
        self.answers: Dict[str, Any] = dict(answers) if answers else {"requiredSystems": list(ALL_SYSTEMS)}
        self.boq: Optional[List[BoqItem]] = None
        self.validation: Optional[ValidationResult] = None
        self.token_usage: Optional[TokenUsage] = None
        self.error: Optional[str] = None

    @property
    def requirements_text(self) -> str:
        return requirements_text(self.answers)

    def _replace_boq(self, boq: List[BoqItem], usage: Optional[TokenUsage] = None) -> None:
        self.boq = boq
        self.validation = None
        if usage is not None:
            self.token_usage = usage

    # --- model-backed transitions ---

    async def generate(self, service: "BoqService") -> List[BoqItem]:
        self.error = None
        try:
            outcome = await service.generate(self.answers)
        except Exception as e:
            self.error = f"Operation failed: {e}"
            raise
        self._replace_boq(outcome.boq, outcome.usage)
        return outcome.boq

    async def refine(self, service: "BoqService", instruction: str) -> List[BoqItem]:
        try:
            outcome = await service.refine(self.boq or [], instruction)
        except Exception as e:
            self.error = f"Failed to refine: {e}"
            raise
        self.error = None
        self._replace_boq(outcome.boq, outcome.usage)
        return outcome.boq

    async def validate(self, service: "BoqService") -> Optional[ValidationResult]:
        if not self.boq:
            return None
        self.validation = await service.validate(self.boq, self.requirements_text)
        return self.validation

    # --- manual edits ---

    def update_answers(self, answers: Dict[str, Any]) -> None:
        self.answers = dict(answers)
        self.validation = None

    def update_item(self, index: int, **changes: Any) -> BoqItem:
        """Edit one line. Accepts field names or wire names (``unitPrice``).

        ``totalPrice`` is derived and cannot be set.
        """
        if self.boq is None:
            raise IndexError("Room has no BOQ")
        item = self.boq[index].model_copy()
        for name, value in changes.items():
            setattr(item, _field_name(name), value)
        boq = list(self.boq)
        boq[index] = item
        self._replace_boq(boq)
        return item

    def add_item(self) -> BoqItem:
        item = blank_item()
        self._replace_boq([*(self.boq or []), item])
        return item

    def delete_item(self, index: int) -> None:
        if self.boq is None:
            raise IndexError("Room has no BOQ")
        boq = list(self.boq)
        del boq[index]
        self._replace_boq(boq)

    def duplicate(self, name: Optional[str] = None) -> "RoomDocument":
        clone = copy.deepcopy(self)
        clone.id = uuid.uuid4().hex[:7]
        clone.name = name or f"{self.name} (Copy)"
        clone.validation = None
        return clone
