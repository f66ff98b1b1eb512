from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import get_user_data, login_user, register_user

urlpatterns = [
    path('register/', register_user, name='registerUser'),
    path('login/', login_user, name='loginUser'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', get_user_data, name='get_user_data'),
]
