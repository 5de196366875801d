"""
Serializers for License API endpoints.

License string fields are never trimmed: the signature covers the exact
values the caller received.
"""

from rest_framework import serializers


class LicenseSerializer(serializers.Serializer):
    """Serializer for a license record."""

    license_id = serializers.CharField(trim_whitespace=False)
    customer = serializers.CharField(trim_whitespace=False)
    modules = serializers.ListField(
        child=serializers.CharField(trim_whitespace=False), allow_empty=False
    )
    issued_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    renewed_from = serializers.CharField(
        required=False, allow_null=True, trim_whitespace=False
    )
    signature = serializers.CharField(
        required=False, allow_null=True, trim_whitespace=False
    )


class SignedLicenseSerializer(LicenseSerializer):
    """Serializer for a license that must carry its signature."""

    signature = serializers.CharField(trim_whitespace=False)


class TimeoutMixin(serializers.Serializer):
    """Optional caller-supplied bound on signer calls."""

    timeout_seconds = serializers.FloatField(
        required=False, min_value=0.1, max_value=60.0
    )


class IssueLicenseRequestSerializer(TimeoutMixin):
    """Serializer for issue license request."""

    customer = serializers.CharField(trim_whitespace=False)
    modules = serializers.ListField(
        child=serializers.CharField(trim_whitespace=False), allow_empty=False
    )
    expires_at = serializers.DateTimeField()


class ValidateLicenseRequestSerializer(TimeoutMixin):
    """Serializer for validate license request."""

    license = SignedLicenseSerializer()


class RenewLicenseRequestSerializer(TimeoutMixin):
    """Serializer for renew license request."""

    license = SignedLicenseSerializer()
    new_expires_at = serializers.DateTimeField()


class LicenseResponseSerializer(serializers.Serializer):
    """Serializer for issue and renew responses."""

    license = LicenseSerializer()


class LicenseValidationResponseSerializer(serializers.Serializer):
    """Serializer for validate license response."""

    valid = serializers.BooleanField()
    signature_valid = serializers.BooleanField()
    expired = serializers.BooleanField()
    license = LicenseSerializer()
