from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Sequence

from ..core.enums import ActorType
from .model import AttendanceEvent, DepartmentHeadcount, DepartmentInfo

if TYPE_CHECKING:
    from ..analytics.filters import AnalyticsFilter


class AttendanceRecordSource(Protocol):
    """Read-only view over the attendance store.

    Note (DIP): analyzers depend on this interface, not on a concrete database.
    Implementations raise RecordSourceError when the store cannot be read.
    """

    def find_events(self, flt: "AnalyticsFilter") -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def count_actors_by_department(
        self,
        actor_type: ActorType,
        department_id: Optional[int] = None,
    ) -> Sequence[DepartmentHeadcount]:
        raise NotImplementedError

    def list_actor_ids(self, actor_type: ActorType, department_id: Optional[int] = None) -> Sequence[int]:
        raise NotImplementedError

    def get_departments(self) -> Mapping[int, DepartmentInfo]:
        raise NotImplementedError

    def get_actor_names(self, actor_type: ActorType, actor_ids: Sequence[int]) -> Mapping[int, str]:
        """Display names for the given actors; unknown ids are simply absent."""
        raise NotImplementedError
