import re

from rest_framework import serializers

# Anything below 0x20 except tab, newline and carriage return, plus DEL.
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def _clean(v):
    v = (v or '').strip()
    if CONTROL_CHARS.search(v):
        raise serializers.ValidationError('Control characters are not allowed.')
    return v


class PatientUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=512)
    medicalHistory = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')

    def validate_name(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('name must not be blank')
        return v

    def validate_address(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('address must not be blank')
        return v

    def validate_medicalHistory(self, v):
        return _clean(v)


class PatientCreateSerializer(PatientUpdateSerializer):
    nhsNumber = serializers.CharField(max_length=32)

    def validate_nhsNumber(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('nhsNumber must not be blank')
        return v
