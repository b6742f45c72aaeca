"""Snapshot and data provenance types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from opensky_utah.models.aircraft_state import AircraftState


class DataSource(str, Enum):
    """Where the currently displayed collection came from."""
    NONE = 'none'
    SAMPLE = 'sample'
    CACHE = 'cache'
    NETWORK = 'network'


@dataclass
class Snapshot:
    """One decoded /states/all response."""
    time: Optional[int] = None
    states: List[AircraftState] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.states

    def __len__(self) -> int:
        return len(self.states)
