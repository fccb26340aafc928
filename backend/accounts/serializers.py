from rest_framework import serializers

from accounts.models import Profile
from accounts.services.year_ledger import to_year_number


class ProfileSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source='pk', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    year = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = ('id', 'email', 'name', 'roll', 'department', 'role', 'year', 'created_at')
        read_only_fields = fields

    def get_year(self, obj):
        if not obj.is_student:
            return None
        return to_year_number(obj.year)


class YearChangeRequestSerializer(serializers.Serializer):
    # Range is checked by the ledger so out-of-range values get the ledger's messages.
    current_year = serializers.IntegerField()
