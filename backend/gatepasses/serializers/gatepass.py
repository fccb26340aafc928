from rest_framework import serializers

from gatepasses.models import GatePass


class StudentSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(source='pk', read_only=True)
    name = serializers.CharField(read_only=True)
    roll = serializers.CharField(read_only=True)
    department = serializers.CharField(read_only=True)
    year = serializers.CharField(read_only=True, allow_null=True)


class GatePassCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = GatePass
        fields = ('reason', 'date')

    def validate_reason(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Reason is required')
        return value

    def create(self, validated_data):
        student = self.context['student']
        return GatePass.objects.create(student=student, **validated_data)


class GatePassSerializer(serializers.ModelSerializer):
    student = StudentSummarySerializer(read_only=True)
    hod_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = GatePass
        fields = ('id', 'student_id', 'student', 'reason', 'date', 'status', 'qr_url', 'hod_id', 'created_at')
        read_only_fields = fields


class VerifyScanSerializer(serializers.Serializer):
    payload = serializers.CharField()
