from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from . import views

urlpatterns = [
    # Authentication
    path('auth/signup/', views.SignupView.as_view(), name='signup'),
    path('auth/login/', views.CustomTokenObtainPairView.as_view(), name='login'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Current user
    path('users/me/', views.CurrentUserView.as_view(), name='current-user'),
    path('users/me/activities/', views.ActivityLogListView.as_view(), name='user-activities'),
]
