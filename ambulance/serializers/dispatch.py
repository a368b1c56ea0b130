import re

from rest_framework import serializers

# Anything below 0x20 except tab, newline and carriage return, plus DEL.
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def _clean(v):
    v = (v or '').strip()
    if CONTROL_CHARS.search(v):
        raise serializers.ValidationError('Control characters are not allowed.')
    return v


class DispatchCreateSerializer(serializers.Serializer):
    nhsNumber = serializers.CharField(max_length=32)
    condition = serializers.CharField(max_length=255)
    patientName = serializers.CharField(max_length=255)
    patientAddress = serializers.CharField(max_length=512)
    medicalHistory = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    patientLatitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    patientLongitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)

    def validate(self, attrs):
        for key in ('nhsNumber', 'condition', 'patientName', 'patientAddress', 'medicalHistory'):
            if key in attrs:
                try:
                    attrs[key] = _clean(attrs[key])
                except serializers.ValidationError as e:
                    raise serializers.ValidationError({key: e.detail})
        missing = [k for k in ('nhsNumber', 'condition', 'patientName', 'patientAddress') if not attrs.get(k)]
        if missing:
            raise serializers.ValidationError({k: ['This field may not be blank.'] for k in missing})
        return attrs


class DispatchAcceptSerializer(serializers.Serializer):
    ambulanceId = serializers.CharField(max_length=64)

    def validate_ambulanceId(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('ambulanceId must not be blank')
        return v
