import logging
from typing import Optional

from gatepasses.models import GatePass

logger = logging.getLogger(__name__)


def _log(event: str, gate_pass: GatePass, actor_id: Optional[int], reason: str):
    payload = {
        'event': event,
        'pass_id': gate_pass.pk,
        'student_id': gate_pass.student_id,
        'status': gate_pass.status,
        'actor_id': actor_id,
        'reason': reason,
    }
    logger.info('%s', payload)


def notify_pass_approved(gate_pass: GatePass, actor_id: int):
    """The pass was approved and a fresh credential was minted."""
    _log('gatepass_approved', gate_pass, actor_id, 'Gate pass approved; QR code generated')


def notify_pass_rejected(gate_pass: GatePass, actor_id: int):
    _log('gatepass_rejected', gate_pass, actor_id, 'Gate pass rejected')


def notify_pass_reset(gate_pass: GatePass, actor_id: Optional[int]):
    """The decision was undone; any earlier credential is now orphaned."""
    _log('gatepass_reset', gate_pass, actor_id, 'Gate pass status reset to pending')
