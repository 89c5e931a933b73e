"""
API URL patterns for the appointments app.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('generate-recurring/', views.generate_recurring, name='generate_recurring_appointments'),
]
