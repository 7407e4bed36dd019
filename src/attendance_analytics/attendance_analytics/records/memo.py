from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from ..core.enums import ActorType
from .model import AttendanceEvent, DepartmentHeadcount, DepartmentInfo
from .repository import AttendanceRecordSource

if TYPE_CHECKING:
    from ..analytics.filters import AnalyticsFilter


class RequestScopedSource(AttendanceRecordSource):
    """Memoizes reads for the lifetime of one analytics request.

    Filters are frozen and hashable, so analyzers asking for the same scope
    share one query. Create a new instance per request.
    """

    def __init__(self, inner: AttendanceRecordSource):
        self._inner = inner
        self._events: dict["AnalyticsFilter", Sequence[AttendanceEvent]] = {}
        self._headcounts: dict[tuple, Sequence[DepartmentHeadcount]] = {}
        self._actors: dict[tuple, Sequence[int]] = {}
        self._departments: Optional[Mapping[int, DepartmentInfo]] = None
        self._names: dict[tuple, Mapping[int, str]] = {}

    @property
    def query_count(self) -> int:
        return (
            len(self._events)
            + len(self._headcounts)
            + len(self._actors)
            + len(self._names)
            + (self._departments is not None)
        )

    def find_events(self, flt: "AnalyticsFilter") -> Sequence[AttendanceEvent]:
        if flt not in self._events:
            self._events[flt] = tuple(self._inner.find_events(flt))
        return self._events[flt]

    def count_actors_by_department(
        self,
        actor_type: ActorType,
        department_id: Optional[int] = None,
    ) -> Sequence[DepartmentHeadcount]:
        key = (actor_type, department_id)
        if key not in self._headcounts:
            self._headcounts[key] = tuple(self._inner.count_actors_by_department(actor_type, department_id))
        return self._headcounts[key]

    def list_actor_ids(self, actor_type: ActorType, department_id: Optional[int] = None) -> Sequence[int]:
        key = (actor_type, department_id)
        if key not in self._actors:
            self._actors[key] = tuple(self._inner.list_actor_ids(actor_type, department_id))
        return self._actors[key]

    def get_departments(self) -> Mapping[int, DepartmentInfo]:
        if self._departments is None:
            self._departments = dict(self._inner.get_departments())
        return self._departments

    def get_actor_names(self, actor_type: ActorType, actor_ids: Sequence[int]) -> Mapping[int, str]:
        key = (actor_type, tuple(sorted(set(actor_ids))))
        if key not in self._names:
            self._names[key] = dict(self._inner.get_actor_names(actor_type, list(key[1])))
        return self._names[key]
