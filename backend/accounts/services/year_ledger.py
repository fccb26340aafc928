"""Bounded promotion/demotion of a student's enrollment year.

The year is stored as text on Profile; this module converts at the boundary
and keeps every write inside 1..4. The database carries the same bound as
the `profiles_year_check` constraint.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from django.db import IntegrityError

from accounts.exceptions import ConstraintViolation
from accounts.models import Profile, Role

logger = logging.getLogger(__name__)

MIN_YEAR = 1
MAX_YEAR = 4
YEAR_CONSTRAINT_NAME = 'profiles_year_check'
OUT_OF_BOUNDS_MESSAGE = f'Year value must be between {MIN_YEAR} and {MAX_YEAR}.'


@dataclass(frozen=True)
class WarningOutOfRange:
    """Signal that a promote/demote was a deliberate no-op at a boundary."""
    year: int
    message: str


@dataclass(frozen=True)
class YearChange:
    student_id: int
    year: int
    changed: bool
    warning: Optional[WarningOutOfRange] = None


def to_year_number(raw, default: int = MIN_YEAR) -> int:
    """Convert a stored (textual) year to an int, `default` when missing."""
    if raw is None or raw == '':
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ConstraintViolation(f'Invalid year value "{raw}". {OUT_OF_BOUNDS_MESSAGE}', field='year')


def to_year_text(year: int) -> str:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ConstraintViolation(OUT_OF_BOUNDS_MESSAGE, field='year')
    return str(year)


def _write_year(student_id, new_year: int) -> int:
    text = to_year_text(new_year)
    try:
        updated = Profile.objects.filter(pk=student_id, role=Role.STUDENT).update(year=text)
    except IntegrityError as exc:
        if YEAR_CONSTRAINT_NAME in str(exc):
            raise ConstraintViolation(OUT_OF_BOUNDS_MESSAGE, field='year') from exc
        raise
    if not updated:
        raise Profile.DoesNotExist(f'Student {student_id} not found')
    return new_year


def promote(student_id, current_year) -> YearChange:
    current = to_year_number(current_year)
    if current >= MAX_YEAR:
        warning = WarningOutOfRange(
            year=current,
            message=f'Student is already in the final year (Year {MAX_YEAR}) and cannot be promoted further.',
        )
        return YearChange(student_id=student_id, year=current, changed=False, warning=warning)

    new_year = _write_year(student_id, current + 1)
    logger.info('student promoted student_id=%s year=%s->%s', student_id, current, new_year)
    return YearChange(student_id=student_id, year=new_year, changed=True)


def demote(student_id, current_year) -> YearChange:
    current = to_year_number(current_year)
    if current <= MIN_YEAR:
        warning = WarningOutOfRange(
            year=current,
            message=f'Student is already in Year {MIN_YEAR} and cannot be demoted further.',
        )
        return YearChange(student_id=student_id, year=current, changed=False, warning=warning)

    new_year = _write_year(student_id, current - 1)
    logger.info('student demoted student_id=%s year=%s->%s', student_id, current, new_year)
    return YearChange(student_id=student_id, year=new_year, changed=True)


def students_for_department(department: str, year: Optional[int] = None) -> List[Profile]:
    """Department roster, final-year students first, then by roll.

    Ordering happens here because the stored year is text.
    """
    students = list(Profile.objects.filter(department=department, role=Role.STUDENT))
    for s in students:
        s.year_number = to_year_number(s.year)
    if year is not None:
        students = [s for s in students if s.year_number == year]
    students.sort(key=lambda s: s.roll)
    students.sort(key=lambda s: s.year_number, reverse=True)
    return students
