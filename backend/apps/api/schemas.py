from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    requestId = serializers.CharField(required=False)
    details = serializers.JSONField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    ok = serializers.BooleanField(default=False)
    error = ErrorDetailSerializer()
