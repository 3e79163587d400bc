from rest_framework import serializers
from .models import PlatformConfig
from .store import PlatformConfigStore


class PlatformConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlatformConfig
        fields = ['key', 'value', 'description', 'updated_at']
        read_only_fields = ['updated_at']


class UpdatePlatformConfigSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=100)
    value = serializers.CharField(max_length=500, allow_blank=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate_key(self, value):
        return value.strip()

    def validate(self, data):
        try:
            data['value'] = PlatformConfigStore.validate_value(data['key'], data['value'])
        except ValueError as e:
            raise serializers.ValidationError({"value": str(e)})
        return data

    def save(self, **kwargs):
        return PlatformConfigStore.set(
            self.validated_data['key'],
            self.validated_data['value'],
            self.validated_data.get('description')
        )
