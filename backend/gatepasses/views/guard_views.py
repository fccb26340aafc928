from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions_api import IsGuard
from gatepasses.serializers import GatePassSerializer, VerifyScanSerializer
from gatepasses.services import verification


class VerifyScanView(APIView):
    permission_classes = (IsGuard,)

    def post(self, request, *args, **kwargs):
        serializer = VerifyScanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = verification.verify_scan(serializer.validated_data['payload'])
        return Response({
            'valid': result.valid,
            'reason': result.reason,
            'gate_pass': GatePassSerializer(result.gate_pass).data if result.gate_pass is not None else None,
        })
