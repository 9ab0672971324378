from django.urls import path
from . import views

app_name = 'privacy'

urlpatterns = [
    path('unmask-requests/', views.unmask_request_list, name='unmask_request_list'),
    path('unmask-requests/<int:pk>/', views.unmask_request_detail, name='unmask_request_detail'),
    path('unmask-requests/<int:pk>/decision/', views.unmask_request_decision, name='unmask_request_decision'),
]
