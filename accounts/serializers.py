from rest_framework import serializers
from django.contrib.auth import get_user_model, authenticate
from rest_framework.exceptions import AuthenticationFailed
from .models import HostApprovalRequest

User = get_user_model()


class UserSerializer:
    class RegistrationSerializer(serializers.ModelSerializer):
        password = serializers.CharField(max_length=128, min_length=8, write_only=True)
        password2 = serializers.CharField(max_length=128, min_length=8, write_only=True)

        class Meta:
            model = User
            fields = ['first_name', 'last_name', 'username', 'email', 'password', 'password2']

        def validate(self, data):
            if data['password'] != data['password2']:
                raise serializers.ValidationError({"password": "Passwords do not match."})
            # Check for unique email and username
            if User.objects.filter(email=data['email']).exists():
                raise serializers.ValidationError({"email": "This email is already in use."})
            if User.objects.filter(username=data['username']).exists():
                raise serializers.ValidationError({"username": "This username is already taken."})
            return data

        def create(self, validated_data):
            validated_data.pop('password2')
            user = User.objects.create_user(
                first_name=validated_data['first_name'],
                last_name=validated_data.get('last_name', ''),
                username=validated_data['username'],
                email=validated_data['email'],
                password=validated_data['password'],
                is_participant=True,
                is_organizer=False,
                is_admin=False
            )
            return user

    class LoginSerializer(serializers.Serializer):
        username = serializers.CharField()
        password = serializers.CharField(write_only=True)

        def validate(self, data):
            user = authenticate(username=data['username'], password=data['password'], request=self.context.get('request'))
            if not user:
                raise AuthenticationFailed("Incorrect credentials.")
            user_tokens = user.tokens()
            return {
                'id': user.id,
                'access_token': user_tokens['access'],
                'refresh_token': user_tokens['refresh']
            }

    class RetrieveSerializer(serializers.ModelSerializer):
        host_status = serializers.SerializerMethodField()

        class Meta:
            model = User
            fields = [
                'id', 'username', 'email', 'first_name', 'last_name',
                'is_participant', 'is_organizer', 'is_admin', 'is_verified',
                'host_status', 'date_joined'
            ]

        def get_host_status(self, obj):
            host_request = HostApprovalRequest.objects.filter(user=obj).first()
            return host_request.status if host_request else None


class HostApprovalRequestSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()
    decided_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = HostApprovalRequest
        fields = ['id', 'user', 'status', 'organization_name', 'contact_email', 'message', 'requested_at', 'decided_by', 'decided_at']
        read_only_fields = ['status', 'requested_at', 'decided_by', 'decided_at']

    def get_user(self, obj):
        return {
            'id': obj.user.id,
            'username': obj.user.username,
            'email': obj.user.email,
            'full_name': obj.user.get_full_name
        }


class CreateHostRequestSerializer(serializers.Serializer):
    organization_name = serializers.CharField(max_length=128, required=False, allow_blank=True)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    message = serializers.CharField(required=False, allow_blank=True)


class DecideHostRequestSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(choices=[HostApprovalRequest.APPROVED, HostApprovalRequest.REJECTED])

    def to_internal_value(self, data):
        if isinstance(data.get('outcome'), str):
            data = {**data, 'outcome': data['outcome'].upper()}
        return super().to_internal_value(data)
