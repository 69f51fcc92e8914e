"""
Data models for the medical fee allocation engine.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any
from datetime import datetime


@dataclass(frozen=True)
class ProcedureInput:
    """Raw inputs of one billable procedure."""

    code: str
    point_count: int = 0
    value_sp: float = 0.0
    value_sh: float = 0.0
    value_tsp: float = 0.0
    surcharge_percent: int = 0  # 0 disables the surcharge
    assistant_count: int = 0    # 0 to 5
    anesthesia_enabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class ProcedureLine(ProcedureInput):
    """One line of a multi-procedure calculation."""

    line_index: int = 1  # 1-based, also the row in the principal's percentage table
    description: str = ""


@dataclass(frozen=True)
class AllocationResult:
    """Fee split computed for a single procedure or one procedure line."""

    # Echoed inputs
    code: str
    point_count: int
    value_sp: float
    value_sh: float
    value_tsp: float
    surcharge_percent: int
    assistant_count: int
    anesthesia_enabled: bool

    # SH scaling (multi-procedure lines only; identity otherwise)
    sh_percentage: float
    sh_portion: float

    # Computed values
    adjusted_value_sh: float
    adjusted_value_sp: float
    anesthesia_value: float
    pool_value: float
    point_value: float
    surgeon_value: float
    first_assistant_value: float
    second_assistant_value: float
    third_assistant_value: float
    fourth_assistant_value: float
    fifth_assistant_value: float
    total_points: float
    total_procedure_value: float

    # Line metadata
    line_index: int = 0
    description: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def assistant_values(self) -> List[float]:
        """Values of the 1st to 5th assistants, in order."""
        return [
            self.first_assistant_value,
            self.second_assistant_value,
            self.third_assistant_value,
            self.fourth_assistant_value,
            self.fifth_assistant_value,
        ]

    @property
    def role_values(self) -> List[float]:
        """Surgeon value followed by the assistant values."""
        return [self.surgeon_value] + self.assistant_values

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data


@dataclass(frozen=True)
class AggregateResult:
    """Totals of a multi-procedure calculation plus its per-line results."""

    principal_code: str
    lines: List[AllocationResult]

    # Summed monetary fields
    value_sh: float
    value_sp: float
    value_tsp: float
    adjusted_value_sh: float
    adjusted_value_sp: float
    anesthesia_value: float
    pool_value: float
    point_value: float
    surgeon_value: float
    first_assistant_value: float
    second_assistant_value: float
    third_assistant_value: float
    fourth_assistant_value: float
    fifth_assistant_value: float
    total_points: float
    total_procedure_value: float

    # Display-only means, never used in further computation
    point_count: float
    surcharge_percent: float
    assistant_count: float
    anesthesia_enabled: bool

    description: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def code(self) -> str:
        """Principal procedure code, named like the single-procedure field."""
        return self.principal_code

    @property
    def assistant_values(self) -> List[float]:
        """Summed values of the 1st to 5th assistants, in order."""
        return [
            self.first_assistant_value,
            self.second_assistant_value,
            self.third_assistant_value,
            self.fourth_assistant_value,
            self.fifth_assistant_value,
        ]

    @property
    def role_values(self) -> List[float]:
        """Summed surgeon value followed by the assistant values."""
        return [self.surgeon_value] + self.assistant_values

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data['lines'] = [line.to_dict() for line in self.lines]
        data['timestamp'] = self.timestamp.isoformat()
        return data
