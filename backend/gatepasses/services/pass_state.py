"""Tagged pass states.

A pass is exactly one of Pending, Approved(qr_url, approver_id) or
Rejected(approver_id). The persisted columns (status, qr_url, hod) are
always derived from one of these, so a status can never be stored with
the wrong companion fields.
"""
from dataclasses import dataclass
from typing import Union

from gatepasses.models import GatePass


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Approved:
    qr_url: str
    approver_id: int

    def __post_init__(self):
        if not self.qr_url:
            raise ValueError('Approved state requires a credential reference')
        if self.approver_id is None:
            raise ValueError('Approved state requires an approver')


@dataclass(frozen=True)
class Rejected:
    approver_id: int

    def __post_init__(self):
        if self.approver_id is None:
            raise ValueError('Rejected state requires an approver')


PassState = Union[Pending, Approved, Rejected]


def to_fields(state: PassState) -> dict:
    """Column values for an update; always all three mutable fields."""
    if isinstance(state, Approved):
        return {'status': GatePass.Status.APPROVED, 'qr_url': state.qr_url, 'hod_id': state.approver_id}
    if isinstance(state, Rejected):
        return {'status': GatePass.Status.REJECTED, 'qr_url': None, 'hod_id': state.approver_id}
    if isinstance(state, Pending):
        return {'status': GatePass.Status.PENDING, 'qr_url': None, 'hod_id': None}
    raise TypeError(f'Unknown pass state: {state!r}')


def from_record(gate_pass: GatePass) -> PassState:
    if gate_pass.status == GatePass.Status.APPROVED:
        return Approved(qr_url=gate_pass.qr_url, approver_id=gate_pass.hod_id)
    if gate_pass.status == GatePass.Status.REJECTED:
        return Rejected(approver_id=gate_pass.hod_id)
    return Pending()
