from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict

from .errors import ValidationError


@dataclass(frozen=True)
class BuildingConfig:
    """Fixed dimensions of the building served by the dispatcher."""

    num_floors: int = 5
    elevator_count: int = 2

    def __post_init__(self) -> None:
        if self.num_floors < 2:
            raise ValidationError(f"a building needs at least 2 floors, got {self.num_floors}")
        if self.elevator_count < 1:
            raise ValidationError(f"a building needs at least 1 elevator, got {self.elevator_count}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildingConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValidationError(f"unknown building settings: {', '.join(sorted(unknown))}")
        return cls(**data)
