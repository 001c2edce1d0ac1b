"""
Base classes for cooling-load calculators.

All room-type calculators implement LoadCalculator; the dispatch layer
implements DisciplineCalculator.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from coolcalc.engineering.errors import MissingInputError


class RoomType(str, Enum):
    FREEZER = "freezer"
    COLD_ROOM = "coldroom"
    BLAST_FREEZER = "blastfreezer"

    @property
    def label(self) -> str:
        return {
            RoomType.FREEZER: "Freezer",
            RoomType.COLD_ROOM: "Cold Room",
            RoomType.BLAST_FREEZER: "Blast Freezer",
        }[self]


class FormStage(str, Enum):
    """Input stages, one per data-entry screen."""
    ROOM = "room"
    CONDITIONS = "conditions"
    CONSTRUCTION = "construction"
    PRODUCT = "product"
    USAGE = "usage"


@dataclass
class CalculationResult:
    calculation_type: str = ""
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DisciplineCalculator(ABC):
    """Abstract base class for discipline calculators."""

    @property
    @abstractmethod
    def discipline_name(self) -> str:
        pass

    @abstractmethod
    def available_calculations(self) -> List[str]:
        pass

    @abstractmethod
    def run_calculation(self, calculation_type: str, params: Dict[str, Any]) -> CalculationResult:
        pass


class LoadCalculator(ABC):
    """
    Common interface of the per-room-type load calculators.

    Each implementation carries its own tuned constants; calculators never
    call one another.
    """

    safety_factor: float = 1.0

    @property
    @abstractmethod
    def room_type(self) -> RoomType:
        pass

    @abstractmethod
    def calculate(
        self,
        room: Optional[Mapping[str, Any]],
        conditions: Optional[Mapping[str, Any]],
        product: Optional[Mapping[str, Any]],
    ) -> Any:
        """Compute the load breakdown from the three input stages."""
        pass

    def require(self, stage: FormStage, record: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
        """Return the stage record, raising MissingInputError when it is absent."""
        if record is None:
            raise MissingInputError(stage.value, self.room_type.value)
        return record
