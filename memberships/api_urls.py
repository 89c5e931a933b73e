"""
API URL patterns for the memberships app.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('register/', views.register, name='register_member'),
    path('categories/', views.categories, name='membership_categories'),
]
