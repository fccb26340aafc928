"""Guard-side verification of a scanned credential."""
import logging
from dataclasses import dataclass
from typing import Optional

from gatepasses.models import GatePass
from gatepasses.services.credential_encoder import CredentialPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    reason: str
    gate_pass: Optional[GatePass] = None


def verify_scan(raw_payload: str) -> VerificationResult:
    """Check a scanned payload against the stored pass.

    Valid only when the pass exists, is approved and belongs to the student
    named in the payload.
    """
    try:
        payload = CredentialPayload.from_json(raw_payload)
    except (TypeError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.info('scan rejected: unreadable payload (%s)', exc)
        return VerificationResult(False, 'Invalid QR code format')

    try:
        pass_id = int(payload.pass_id)
    except (TypeError, ValueError):
        return VerificationResult(False, 'Invalid QR code format')

    gate_pass = GatePass.objects.select_related('student').filter(pk=pass_id).first()
    if gate_pass is None:
        return VerificationResult(False, f'No gate pass found with id {payload.pass_id}')

    if str(gate_pass.student_id) != str(payload.student_id):
        logger.warning('scan rejected: student mismatch pass_id=%s scanned_student=%s', gate_pass.pk, payload.student_id)
        return VerificationResult(False, 'QR code does not belong to the pass holder', gate_pass)

    if gate_pass.status != GatePass.Status.APPROVED:
        return VerificationResult(False, f'Gate pass is {gate_pass.status}', gate_pass)

    return VerificationResult(True, 'Gate pass approved', gate_pass)
