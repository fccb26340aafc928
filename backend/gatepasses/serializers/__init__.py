from .gatepass import (
    GatePassCreateSerializer,
    GatePassSerializer,
    StudentSummarySerializer,
    VerifyScanSerializer,
)

__all__ = [
    'GatePassCreateSerializer',
    'GatePassSerializer',
    'StudentSummarySerializer',
    'VerifyScanSerializer',
]
