from django.urls import path

from .views import UserManagementView

urlpatterns = [
    path('', UserManagementView.as_view(), name='users'),
    path('<int:pk>/', UserManagementView.as_view(), name='user-detail'),
]
