"""
Course Catalog

Holds every known course record, keyed by display name, and answers
prerequisite lookups. A catalog is assembled once through a single-use
CourseCatalogBuilder and is read-only afterwards.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from coursegraph.errors import BuilderConsumedError
from coursegraph.prerequisites import CoursePrerequisite, referenced_courses

logger = logging.getLogger(__name__)


class Semester(Enum):
    """Terms in which a course may be offered."""
    SPRING = "spring"
    FALL = "fall"


@dataclass(frozen=True)
class CourseRecord:
    """One academic course."""
    course_number: str
    course_name: str
    prerequisite: Optional[CoursePrerequisite] = None
    semesters: Optional[Tuple[Semester, ...]] = None

    def __post_init__(self):
        if self.semesters is not None:
            object.__setattr__(self, "semesters", tuple(self.semesters))


class LookupStatus(Enum):
    NOT_FOUND = "not_found"
    NO_PREREQUISITE = "no_prerequisite"
    FOUND = "found"


@dataclass(frozen=True)
class PrerequisiteLookup:
    """Result of a prerequisite query that tells unknown courses apart."""
    status: LookupStatus
    prerequisite: Optional[CoursePrerequisite] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class CourseCatalog:
    """Read-only mapping from course name to CourseRecord."""

    def __init__(self, records: Iterable[CourseRecord]):
        records = list(records)
        by_name: Dict[str, CourseRecord] = {}
        by_number: Dict[str, CourseRecord] = {}

        for record in records:
            if record.course_name in by_name:
                logger.warning(
                    f"Duplicate course name '{record.course_name}': "
                    f"{by_name[record.course_name].course_number} replaced by {record.course_number}"
                )
            by_name[record.course_name] = record

        # index only records that survived, last one in input order per number
        for record in records:
            if by_name[record.course_name] is record:
                previous = by_number.get(record.course_number)
                if previous is not None and previous is not record:
                    logger.warning(
                        f"Course number '{record.course_number}' is shared by "
                        f"'{previous.course_name}' and '{record.course_name}'"
                    )
                by_number[record.course_number] = record

        self._classes = MappingProxyType(by_name)
        self._by_number = MappingProxyType(by_number)
        logger.debug(f"Built catalog with {len(by_name)} courses")

    @classmethod
    def from_records(cls, records: Iterable[CourseRecord]) -> "CourseCatalog":
        builder = CourseCatalogBuilder()
        for record in records:
            builder.add(record)
        return builder.build()

    def __len__(self) -> int:
        return len(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __iter__(self) -> Iterator[CourseRecord]:
        return iter(self._classes.values())

    def courses(self) -> List[CourseRecord]:
        """All records, in no particular order."""
        return list(self._classes.values())

    def sorted_courses(self) -> List[CourseRecord]:
        return sorted(self._classes.values(), key=lambda r: (r.course_number, r.course_name))

    def get(self, name: str) -> Optional[CourseRecord]:
        return self._classes.get(name)

    def find_by_number(self, course_number: str) -> Optional[CourseRecord]:
        """Look a course up by identifier instead of display name."""
        return self._by_number.get(course_number)

    def prerequisites(self, name: str) -> Optional[CoursePrerequisite]:
        """
        Return the prerequisite of the named course.

        None is returned both for unknown names and for courses without a
        prerequisite; use lookup_prerequisite() to tell the two apart.
        """
        record = self._classes.get(name)
        if record is None:
            return None
        return record.prerequisite

    def lookup_prerequisite(self, name: str) -> PrerequisiteLookup:
        record = self._classes.get(name)
        if record is None:
            return PrerequisiteLookup(LookupStatus.NOT_FOUND)
        if record.prerequisite is None:
            return PrerequisiteLookup(LookupStatus.NO_PREREQUISITE)
        return PrerequisiteLookup(LookupStatus.FOUND, record.prerequisite)

    def unknown_references(self) -> Set[str]:
        """Course numbers used in prerequisites that no catalog record carries."""
        referenced: Set[str] = set()
        for record in self._classes.values():
            if record.prerequisite is not None:
                referenced |= referenced_courses(record.prerequisite)
        return {number for number in referenced if number not in self._by_number}


class CourseCatalogBuilder:
    """Append-only accumulator of course records; build() may be called once."""

    def __init__(self):
        self.records: List[CourseRecord] = []
        self._consumed = False

    def add(self, record: CourseRecord) -> None:
        if self._consumed:
            raise BuilderConsumedError("Cannot add courses to a builder that was already built")
        self.records.append(record)

    def build(self) -> CourseCatalog:
        if self._consumed:
            raise BuilderConsumedError("Catalog builder can only be built once")
        self._consumed = True
        return CourseCatalog(self.records)
