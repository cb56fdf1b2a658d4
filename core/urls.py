"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.comparison, name="comparison"),
    path("api/comparison/", views.comparison_api, name="comparison_api"),
]
