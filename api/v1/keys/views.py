"""
Signing key diagnostics views.

Read-only pass-through to the key-management signer.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from licenses.infrastructure.signer_config import get_signing_client


class SigningKeyListSerializer(serializers.Serializer):
    """Serializer for the signing key list."""

    keys = serializers.ListField(child=serializers.CharField())


class ListSigningKeysView(APIView):
    """View for listing signing keys."""

    @extend_schema(
        operation_id="list_signing_keys",
        summary="List Signing Keys",
        description="List the keys known to the key-management signer.",
        tags=["Diagnostics"],
        responses={
            200: SigningKeyListSerializer,
            503: {"description": "Signing service unavailable"},
        },
    )
    def get(self, request: Request) -> Response:
        """List signing keys."""
        keys = async_to_sync(get_signing_client().list_keys)()
        return Response(SigningKeyListSerializer({"keys": keys}).data, status=status.HTTP_200_OK)


class SigningKeyDetailView(APIView):
    """View for signing key metadata."""

    @extend_schema(
        operation_id="get_signing_key",
        summary="Get Signing Key",
        description="Fetch metadata for a signing key from the key-management signer.",
        tags=["Diagnostics"],
        responses={
            200: {"description": "Key metadata as reported by the signer"},
            404: {"description": "Signing key not found"},
            503: {"description": "Signing service unavailable"},
        },
    )
    def get(self, request: Request, key_name: str) -> Response:
        """Get signing key metadata."""
        metadata = async_to_sync(get_signing_client().read_key)(key_name)
        return Response(metadata, status=status.HTTP_200_OK)
