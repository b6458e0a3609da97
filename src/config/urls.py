"""URL configuration for the prospecting CRM.

Only the Django admin is routed; reports are consumed in-process.
"""
from django.conf import settings
from django.contrib import admin
from django.urls import path

urlpatterns = []

if getattr(settings, "ENABLE_DJANGO_ADMIN", False):
    urlpatterns.insert(0, path("admin/", admin.site.urls))
