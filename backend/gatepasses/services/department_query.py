"""Department-scoped gate pass retrieval.

Strategies are tried in order and the next one runs only when the previous
one raised a database error. An empty result is a valid answer and stops
the chain.

1. joined: one query filtering on the student's department across the join.
2. two_step: resolve the department's student ids, then fetch their passes
   by id. No students means an empty result, not an error.
"""
import logging
from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from django.db import DatabaseError, transaction

from accounts.models import Profile, Role
from gatepasses.exceptions import QueryError
from gatepasses.models import GatePass

logger = logging.getLogger(__name__)

Strategy = Callable[[str], List[GatePass]]


def _passes():
    return GatePass.objects.select_related('student', 'hod').order_by('-created_at')


def joined_filter(department: str) -> List[GatePass]:
    return list(_passes().filter(student__role=Role.STUDENT, student__department=department))


def student_ids_then_passes(department: str) -> List[GatePass]:
    student_ids = list(
        Profile.objects.filter(role=Role.STUDENT, department=department).values_list('pk', flat=True)
    )
    if not student_ids:
        return []
    return list(_passes().filter(student_id__in=student_ids))


DEFAULT_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ('joined', joined_filter),
    ('two_step', student_ids_then_passes),
)


def passes_for_department(department: str, strategies: Optional[Sequence[Tuple[str, Strategy]]] = None) -> List[GatePass]:
    """All passes of students in `department`, newest first.

    Raises QueryError naming the last failed stage only when every strategy
    failed.
    """
    strategies = DEFAULT_STRATEGIES if strategies is None else strategies
    failures = []

    for stage, strategy in strategies:
        try:
            # A failed tier rolls back to its savepoint so the next tier can still query.
            with transaction.atomic():
                rows = strategy(department)
        except DatabaseError as exc:
            logger.warning('department query stage failed department=%s stage=%s error=%s', department, stage, exc)
            failures.append((stage, str(exc)))
            continue

        if failures:
            logger.info('department query recovered department=%s stage=%s rows=%d', department, stage, len(rows))
        return rows

    if not failures:
        raise QueryError('none', 'no query strategies configured')

    stage, message = failures[-1]
    logger.error('department query exhausted department=%s failures=%s', department, failures)
    raise QueryError(stage, message, failures=failures)


def filter_by_status(passes: List[GatePass], status: Optional[str]) -> List[GatePass]:
    if not status or status == 'all':
        return passes
    return [p for p in passes if p.status == status]


def status_counts(passes: List[GatePass]) -> Dict[str, int]:
    counts = Counter(p.status for p in passes)
    return {s: counts.get(s, 0) for s in GatePass.Status.values}
