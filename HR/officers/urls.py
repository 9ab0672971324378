"""
URL configuration for the Officer Directory.
"""
from django.urls import path

from . import views

app_name = 'officers'

urlpatterns = [
    path('', views.officer_list, name='officer_list'),
    path('export/', views.officer_export, name='officer_export'),
    path('<int:pk>/', views.officer_detail, name='officer_detail'),
    path('<int:pk>/visibility/', views.officer_visibility, name='officer_visibility'),
    path('<int:pk>/unmask-requests/', views.officer_unmask_requests, name='officer_unmask_requests'),
    path('<int:pk>/audit-trail/', views.officer_audit_trail, name='officer_audit_trail'),
]
