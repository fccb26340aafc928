import logging

from django.db import transaction
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.context import actor_for_user
from accounts.exceptions import BatchEnvelopeError, ConstraintViolation
from accounts.models import Profile, Role
from accounts.permissions_api import IsHOD
from accounts.serializers import ProfileSerializer, YearChangeRequestSerializer
from accounts.services import provisioning, year_ledger

log = logging.getLogger(__name__)


class MeView(APIView):
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request):
        profile = Profile.objects.select_related('user').filter(pk=request.user.pk).first()
        if profile is None:
            return Response({'detail': 'No profile for this account'}, status=status.HTTP_404_NOT_FOUND)
        return Response(ProfileSerializer(profile).data)


class BulkCreateUsersView(APIView):
    """Provision student accounts from an uploaded JSON array.

    Expects multipart/form-data with field `file`. Per-account failures are
    reported inside `logs`; only an unreadable upload is an error response.
    """
    parser_classes = (MultiPartParser, FormParser)
    permission_classes = (permissions.IsAdminUser,)

    def post(self, request):
        uploaded = request.FILES.get('file')
        if not uploaded:
            return Response({'error': 'No file uploaded'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            items = provisioning.parse_batch(uploaded.read())
        except BatchEnvelopeError as exc:
            return Response({'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        logs = provisioning.provision_students(items)
        return Response({'logs': logs})


class DepartmentStudentsView(APIView):
    permission_classes = (IsHOD,)

    def get(self, request):
        actor = actor_for_user(request.user)
        year = request.query_params.get('year')
        if year in (None, '', 'all'):
            year_filter = None
        else:
            try:
                year_filter = int(year)
            except ValueError:
                return Response({'detail': f'Invalid year filter "{year}"'}, status=status.HTTP_400_BAD_REQUEST)

        students = year_ledger.students_for_department(actor.department, year=year_filter)
        return Response(ProfileSerializer(students, many=True).data)


class _YearChangeView(APIView):
    permission_classes = (IsHOD,)
    operation = None

    def post(self, request, pk: int):
        actor = actor_for_user(request.user)
        student = Profile.objects.filter(pk=pk, role=Role.STUDENT).first()
        if student is None:
            return Response({'detail': f'Student {pk} not found'}, status=status.HTTP_404_NOT_FOUND)
        if student.department != actor.department:
            return Response({'detail': 'Student belongs to another department'}, status=status.HTTP_403_FORBIDDEN)

        serializer = YearChangeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            with transaction.atomic():
                change = self.operation(student.pk, serializer.validated_data['current_year'])
        except ConstraintViolation as exc:
            return Response({'detail': exc.message}, status=status.HTTP_400_BAD_REQUEST)

        payload = {'id': change.student_id, 'year': change.year, 'changed': change.changed}
        if change.warning is not None:
            payload['warning'] = change.warning.message
        return Response(payload)


class PromoteStudentView(_YearChangeView):
    operation = staticmethod(year_ledger.promote)


class DemoteStudentView(_YearChangeView):
    operation = staticmethod(year_ledger.demote)
