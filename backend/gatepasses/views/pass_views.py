from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.context import actor_for_user
from accounts.models import Profile
from accounts.permissions_api import IsHOD, IsStudent
from gatepasses.exceptions import CredentialGenerationError, QueryError
from gatepasses.models import GatePass
from gatepasses.serializers import GatePassCreateSerializer, GatePassSerializer
from gatepasses.services import access_control, approval_engine, department_query


class CreateGatePassView(APIView):
    permission_classes = (IsStudent,)

    def post(self, request, *args, **kwargs):
        student = get_object_or_404(Profile, pk=request.user.pk)
        serializer = GatePassCreateSerializer(data=request.data, context={'student': student})
        serializer.is_valid(raise_exception=True)
        gate_pass = serializer.save()
        return Response(GatePassSerializer(gate_pass).data, status=status.HTTP_201_CREATED)


class MyGatePassesView(APIView):
    permission_classes = (IsStudent,)

    def get(self, request, *args, **kwargs):
        qs = GatePass.objects.select_related('student').filter(student_id=request.user.pk).order_by('-created_at')
        return Response(GatePassSerializer(qs, many=True).data)


class GatePassDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        gate_pass = get_object_or_404(GatePass.objects.select_related('student'), pk=id)
        actor = actor_for_user(request.user)

        if not access_control.can_view(gate_pass, actor):
            return Response({'detail': 'Not authorized to view this gate pass'}, status=status.HTTP_403_FORBIDDEN)

        return Response(GatePassSerializer(gate_pass).data)


class DepartmentGatePassesView(APIView):
    """Gate passes of the calling HOD's department, newest first.

    Optional `?status=pending|approved|rejected|all`.
    """
    permission_classes = (IsHOD,)

    def get(self, request, *args, **kwargs):
        actor = actor_for_user(request.user)
        status_filter = request.query_params.get('status') or 'all'
        if status_filter != 'all' and status_filter not in GatePass.Status.values:
            return Response({'detail': f'Unknown status "{status_filter}"'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            passes = department_query.passes_for_department(actor.department)
        except QueryError as exc:
            return Response(
                {'detail': f'Could not load gate passes for {actor.department}', 'stage': exc.stage, 'error': exc.message},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response({
            'department': actor.department,
            'counts': department_query.status_counts(passes),
            'passes': GatePassSerializer(department_query.filter_by_status(passes, status_filter), many=True).data,
        })


class _DecisionView(APIView):
    permission_classes = (IsHOD,)

    def _load(self, request, id):
        gate_pass = get_object_or_404(GatePass.objects.select_related('student'), pk=id)
        actor = actor_for_user(request.user)
        if not access_control.can_decide(gate_pass, actor):
            return None, actor
        return gate_pass, actor

    def _forbidden(self):
        return Response({'detail': 'Gate pass belongs to a student of another department'}, status=status.HTTP_403_FORBIDDEN)


class GatePassApproveView(_DecisionView):

    def post(self, request, id: int, *args, **kwargs):
        gate_pass, actor = self._load(request, id)
        if gate_pass is None:
            return self._forbidden()

        try:
            updated = approval_engine.approve(gate_pass.pk, actor)
        except CredentialGenerationError as exc:
            return Response({'detail': str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(GatePassSerializer(updated).data)


class GatePassRejectView(_DecisionView):

    def post(self, request, id: int, *args, **kwargs):
        gate_pass, actor = self._load(request, id)
        if gate_pass is None:
            return self._forbidden()

        updated = approval_engine.reject(gate_pass.pk, actor)
        return Response(GatePassSerializer(updated).data)


class GatePassUndoView(_DecisionView):

    def post(self, request, id: int, *args, **kwargs):
        gate_pass, actor = self._load(request, id)
        if gate_pass is None:
            return self._forbidden()

        updated = approval_engine.undo(gate_pass.pk, actor)
        return Response(GatePassSerializer(updated).data)
