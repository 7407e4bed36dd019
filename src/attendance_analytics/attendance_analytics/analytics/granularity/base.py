from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ...core.enums import Granularity


@dataclass(frozen=True)
class Slot:
    index: int
    label: str


class BucketGranularity(ABC):
    """Strategy Pattern: encapsulate how an instant maps onto a time bucket.

    All keys are derived from UTC calendar fields.
    """

    kind: Granularity

    @abstractmethod
    def slot_for(self, instant: datetime) -> Slot:
        raise NotImplementedError

    def skeleton(self) -> list[Slot]:
        """Fixed slots the series can be densified with; empty for open-ended axes."""
        return []
