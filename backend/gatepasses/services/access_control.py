from typing import Optional

from accounts.context import Actor
from accounts.models import Role
from gatepasses.models import GatePass


def _student_department(gate_pass: GatePass) -> Optional[str]:
    student = getattr(gate_pass, 'student', None)
    return getattr(student, 'department', None)


def can_decide(gate_pass: GatePass, actor: Optional[Actor]) -> bool:
    """True if `actor` may approve, reject or reset `gate_pass`.

    Only an HOD of the student's own department may decide.
    """
    if actor is None or actor.role != Role.HOD:
        return False
    return _student_department(gate_pass) == actor.department


def can_view(gate_pass: GatePass, actor: Optional[Actor]) -> bool:
    """Rules (True if any):
    - actor is the student who owns the pass
    - actor is an HOD of the student's department
    - actor is a guard
    """
    if actor is None:
        return False
    if actor.role == Role.STUDENT:
        return gate_pass.student_id == actor.profile_id
    if actor.role == Role.HOD:
        return _student_department(gate_pass) == actor.department
    return actor.role == Role.GUARD
