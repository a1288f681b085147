"""URL configuration for the rollcall project."""

from django.http import HttpRequest, HttpResponseRedirect
from django.shortcuts import redirect, reverse  # type: ignore[attr-defined]
from django.urls import path

from api.api import api


def redirect_to_docs(request: HttpRequest) -> HttpResponseRedirect:
    """Redirect to the API documentation."""
    return redirect(reverse("api:openapi-view"))


urlpatterns = [
    path("api/", api.urls),
    path("", redirect_to_docs),
]
