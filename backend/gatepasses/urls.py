from django.urls import path

from gatepasses.views import (
    CreateGatePassView,
    DepartmentGatePassesView,
    GatePassApproveView,
    GatePassDetailView,
    GatePassRejectView,
    GatePassUndoView,
    MyGatePassesView,
    VerifyScanView,
)

urlpatterns = [
    path('', CreateGatePassView.as_view(), name='gatepass-create'),
    path('my/', MyGatePassesView.as_view(), name='gatepass-my'),
    path('department/', DepartmentGatePassesView.as_view(), name='gatepass-department'),
    path('verify/', VerifyScanView.as_view(), name='gatepass-verify'),
    path('<int:id>/', GatePassDetailView.as_view(), name='gatepass-detail'),
    path('<int:id>/approve/', GatePassApproveView.as_view(), name='gatepass-approve'),
    path('<int:id>/reject/', GatePassRejectView.as_view(), name='gatepass-reject'),
    path('<int:id>/undo/', GatePassUndoView.as_view(), name='gatepass-undo'),
]
