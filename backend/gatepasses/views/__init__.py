# views package for gate passes
from .pass_views import (
    CreateGatePassView,
    DepartmentGatePassesView,
    GatePassApproveView,
    GatePassDetailView,
    GatePassRejectView,
    GatePassUndoView,
    MyGatePassesView,
)
from .guard_views import VerifyScanView

__all__ = [
    'CreateGatePassView',
    'DepartmentGatePassesView',
    'GatePassApproveView',
    'GatePassDetailView',
    'GatePassRejectView',
    'GatePassUndoView',
    'MyGatePassesView',
    'VerifyScanView',
]
