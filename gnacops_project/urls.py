"""
URL configuration for gnacops_project project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('memberships.api_urls')),
    path('api/appointments/', include('appointments.api_urls')),
]
