from rest_framework import serializers

# Field names sent by the original login form
LEGACY_ALIASES = {'usuario': 'username', 'senha': 'password'}


def with_aliases(data, aliases):
    """Copy legacy keys onto their current names without overriding them."""
    payload = dict(data.items()) if hasattr(data, 'items') else {}
    for legacy, current in aliases.items():
        if legacy in payload and current not in payload:
            payload[current] = payload[legacy]
    return payload


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(error_messages={'required': 'Usuário e senha são obrigatórios',
                                                     'blank': 'Usuário e senha são obrigatórios'})
    password = serializers.CharField(trim_whitespace=False,
                                     error_messages={'required': 'Usuário e senha são obrigatórios',
                                                     'blank': 'Usuário e senha são obrigatórios'})

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Usuário e senha são obrigatórios')
        return v


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    full_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
