"""Encode gate pass credentials as QR code PNGs."""
import io
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from qrcode.image.pil import PilImage
from django.utils import timezone

QR_DARK_COLOR = '#2563eb'
QR_LIGHT_COLOR = '#ffffff'
QR_BORDER = 2
QR_BOX_SIZE = 10


@dataclass(frozen=True)
class CredentialPayload:
    pass_id: int
    student_id: int
    timestamp: str
    department: Optional[str]

    def to_json(self) -> str:
        # Key names are what the guard scanner reads.
        return json.dumps({
            'passId': self.pass_id,
            'studentId': self.student_id,
            'timestamp': self.timestamp,
            'department': self.department,
        })

    @classmethod
    def from_json(cls, raw: str) -> 'CredentialPayload':
        """Parse a scanned payload. Raises ValueError when it is not one of ours."""
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError('payload is not an object')
        missing = [k for k in ('passId', 'studentId') if data.get(k) in (None, '')]
        if missing:
            raise ValueError(f'payload missing {", ".join(missing)}')
        return cls(
            pass_id=data['passId'],
            student_id=data['studentId'],
            timestamp=str(data.get('timestamp') or ''),
            department=data.get('department'),
        )


def build_payload(pass_id, student_id, department: Optional[str], now: Optional[datetime] = None) -> CredentialPayload:
    # Stamped at encoding time, so every approval mints a different credential.
    now = now or timezone.now()
    return CredentialPayload(
        pass_id=pass_id,
        student_id=student_id,
        timestamp=now.isoformat(),
        department=department,
    )


def encode_png(payload: CredentialPayload) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
        image_factory=PilImage,
    )
    qr.add_data(payload.to_json())
    qr.make(fit=True)
    img = qr.make_image(fill_color=QR_DARK_COLOR, back_color=QR_LIGHT_COLOR)

    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()
