from rest_framework import serializers

from clinic.models import Role


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()
    role = serializers.ChoiceField(choices=Role.choices)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('username must not be blank')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('password must not be blank')
        return v
