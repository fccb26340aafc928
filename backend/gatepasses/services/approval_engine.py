"""Gate pass state machine.

Every transition is a single conditional UPDATE that overwrites all three
mutable fields (status, qr_url, hod). There is no row locking: concurrent
decisions on the same pass resolve as last-writer-wins, and the stored
record is always exactly the state written by the last transition.

Transitions:
- approve: any state -> approved, minting a fresh credential first
- reject:  any state -> rejected
- undo:    approved/rejected -> pending (pending -> pending is a no-op)
"""
import logging
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.utils import timezone

from accounts.context import Actor
from gatepasses.exceptions import CredentialGenerationError
from gatepasses.models import GatePass
from gatepasses.services import credential_encoder
from gatepasses.services import notification_service
from gatepasses.services.content_store import ContentStore, get_content_store
from gatepasses.services.pass_state import Approved, PassState, Pending, Rejected, from_record, to_fields

logger = logging.getLogger(__name__)


def credential_key(pass_id, now: datetime) -> str:
    # A fresh key per approval; the live credential is never overwritten in place.
    return f'{pass_id}-{now.strftime("%Y%m%d%H%M%S%f")}.png'


def _apply(pass_id, state: PassState) -> GatePass:
    """Write `state` in one UPDATE and return the fresh record."""
    updated = GatePass.objects.filter(pk=pass_id).update(**to_fields(state))
    if not updated:
        raise GatePass.DoesNotExist(f'Gate pass {pass_id} not found')
    return GatePass.objects.select_related('student', 'hod').get(pk=pass_id)


def mint_credential(gate_pass: GatePass, department: Optional[str], store: Optional[ContentStore] = None,
                    now: Optional[datetime] = None) -> str:
    """Encode and upload a credential for `gate_pass`; return its public reference.

    Raises CredentialGenerationError if either step fails. The pass record is
    never touched here.
    """
    store = store or get_content_store()
    now = now or timezone.now()
    payload = credential_encoder.build_payload(gate_pass.pk, gate_pass.student_id, department, now=now)

    try:
        image = credential_encoder.encode_png(payload)
    except Exception as exc:
        logger.exception('credential encoding failed pass_id=%s', gate_pass.pk)
        raise CredentialGenerationError(gate_pass.pk, 'encode', str(exc)) from exc

    key = credential_key(gate_pass.pk, now)
    try:
        store.put(
            key,
            image,
            cache_control=getattr(settings, 'GATEPASS_QR_CACHE_CONTROL', '3600'),
            upsert=True,
        )
        url = store.get_public_url(key)
    except Exception as exc:
        logger.exception('credential upload failed pass_id=%s key=%s', gate_pass.pk, key)
        raise CredentialGenerationError(gate_pass.pk, 'upload', str(exc)) from exc

    return url


def _discard_credential(store: ContentStore, pass_id, qr_url: str):
    try:
        store.delete(store.key_from_url(qr_url))
    except Exception:
        logger.exception('superseded credential not deleted pass_id=%s url=%s', pass_id, qr_url)


def approve(pass_id, actor: Actor, store: Optional[ContentStore] = None) -> GatePass:
    """Approve a pass on behalf of `actor`, minting its credential.

    Re-approving an approved or rejected pass is allowed and mints a new
    credential. If the credential cannot be produced the pass is left as it was,
    including the credential it already holds. A superseded credential is
    deleted only once the new one is recorded.
    """
    store = store or get_content_store()
    gate_pass = GatePass.objects.get(pk=pass_id)
    previous = from_record(gate_pass)
    qr_url = mint_credential(gate_pass, actor.department, store=store)
    logger.info('approving pass_id=%s from=%s by=%s', pass_id, type(previous).__name__, actor.profile_id)

    updated = _apply(pass_id, Approved(qr_url=qr_url, approver_id=actor.profile_id))
    if isinstance(previous, Approved) and previous.qr_url != qr_url:
        _discard_credential(store, pass_id, previous.qr_url)
    try:
        notification_service.notify_pass_approved(updated, actor.profile_id)
    except Exception:
        logger.exception('approve notification failed pass_id=%s', pass_id)
    return updated


def reject(pass_id, actor: Actor) -> GatePass:
    updated = _apply(pass_id, Rejected(approver_id=actor.profile_id))
    try:
        notification_service.notify_pass_rejected(updated, actor.profile_id)
    except Exception:
        logger.exception('reject notification failed pass_id=%s', pass_id)
    return updated


def undo(pass_id, actor: Optional[Actor] = None) -> GatePass:
    """Reset a decided pass to pending.

    This is a compensating transition: the credential reference is cleared
    and the stored image is left behind, not deleted.
    """
    updated = _apply(pass_id, Pending())
    try:
        notification_service.notify_pass_reset(updated, actor.profile_id if actor else None)
    except Exception:
        logger.exception('reset notification failed pass_id=%s', pass_id)
    return updated
