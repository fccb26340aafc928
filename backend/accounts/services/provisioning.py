"""Batch student provisioning.

Each account request is created independently: a failure is written to the
log in place of that item and the loop carries on. Only an unreadable
envelope (not a JSON array) fails the batch as a whole.
"""
import json
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from accounts.exceptions import BatchEnvelopeError, PerItemProvisioningError
from accounts.models import Role
from accounts.services.identity import AccountMetadata, get_identity_provider

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ('email', 'password', 'name', 'roll', 'department')
# Every provisioned student starts in year 1, whatever the input says.
DEFAULT_STUDENT_YEAR = 1


@dataclass(frozen=True)
class AccountRequest:
    email: str
    password: str
    name: str
    roll: str
    department: str


def parse_batch(raw) -> List:
    """Decode the uploaded batch. Items are returned as-is and validated one by one."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise BatchEnvelopeError(f'Batch file is not valid UTF-8: {exc}') from exc
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise BatchEnvelopeError(f'Batch file is not valid JSON: {exc}') from exc
    if not isinstance(data, list):
        raise BatchEnvelopeError('Batch file must contain a JSON array of accounts.')
    return data


def _to_request(item) -> AccountRequest:
    if not isinstance(item, dict):
        raise PerItemProvisioningError(str(item), 'Entry must be an object.')
    email = str(item.get('email') or '').strip()
    missing = [k for k in REQUIRED_KEYS if not str(item.get(k) or '').strip()]
    if missing:
        raise PerItemProvisioningError(email or '<missing email>', f'Missing field(s): {", ".join(missing)}')
    return AccountRequest(
        email=email,
        password=str(item['password']),
        name=str(item['name']).strip(),
        roll=str(item['roll']).strip(),
        department=str(item['department']).strip(),
    )


def provision_students(items: Iterable, identity=None) -> List[str]:
    """Create one student account per item, in order; return one log line per item."""
    identity = identity or get_identity_provider()
    logs: List[str] = []
    created = 0

    for index, item in enumerate(items, start=1):
        email: Optional[str] = item.get('email') if isinstance(item, dict) else None
        try:
            req = _to_request(item)
            email = req.email
            identity.create_account(
                req.email,
                req.password,
                AccountMetadata(
                    name=req.name,
                    roll=req.roll,
                    department=req.department,
                    role=Role.STUDENT,
                    year=DEFAULT_STUDENT_YEAR,
                ),
                email_confirm=True,
            )
        except PerItemProvisioningError as exc:
            label = email or exc.email
            logger.warning('provisioning failed item=%d email=%s error=%s', index, label, exc.message)
            logs.append(f'{label}: {exc.message}')
            continue
        except Exception as exc:
            logger.exception('provisioning crashed item=%d email=%s', index, email)
            logs.append(f'{email}: {exc}')
            continue

        created += 1
        logs.append(f'Created: {email}')

    logger.info('provisioning finished created=%d failed=%d', created, len(logs) - created)
    return logs
