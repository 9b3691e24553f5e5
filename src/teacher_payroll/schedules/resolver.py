from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ..common.datetime_utils import iter_days
from .day_package import parse_day_package
from .model import ClassOccurrence, ScheduleAssignment


class ScheduleResolver:
    """Expands recurring assignments into the classes expected in a date range.

    Pure: the caller fetches the assignments, this only does the calendar work.
    """

    def resolve(
        self,
        assignments: Iterable[ScheduleAssignment],
        *,
        start: date,
        end: date,
        include_sundays: bool = True,
    ) -> List[ClassOccurrence]:
        occurrences: list[ClassOccurrence] = []

        for assignment in assignments:
            if not assignment.overlaps(start, end):
                continue

            package = parse_day_package(assignment.day_package)
            first = max(start, assignment.occupied_from)
            last = end if assignment.occupied_until is None else min(end, assignment.occupied_until)

            for day in iter_days(first, last):
                if package.includes(day, include_sundays=include_sundays):
                    occurrences.append(ClassOccurrence(day=day, assignment=assignment))

        occurrences.sort(key=lambda o: (o.day, o.assignment.time_slot, o.assignment.assignment_id))
        return occurrences
