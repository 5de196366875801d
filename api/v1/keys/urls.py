"""
URL configuration for signing key diagnostics endpoints.
"""

from django.urls import path

from api.v1.keys import views

app_name = "keys"

urlpatterns = [
    path(
        "",
        views.ListSigningKeysView.as_view(),
        name="list-keys",
    ),
    path(
        "<slug:key_name>",
        views.SigningKeyDetailView.as_view(),
        name="key-detail",
    ),
]
