from rest_framework_simplejwt.views import TokenRefreshView
from django.urls import path


from . import views as my_views


urlpatterns = [
    path('auth/token', my_views.LoginAPIView.as_view(), name='token-obtain-pair'),
    path('auth/token/refresh', TokenRefreshView.as_view(), name='token-refresh'),
    path('auth/register', my_views.RegistrationAPIView.as_view(), name='register'),
    path('auth/logout', my_views.LogoutAPIView.as_view(), name='logout'),
    path('users/me', my_views.CurrentUserAPIView.as_view(), name='current-user'),
    path('users/<int:id>', my_views.RetrieveUserAPIView.as_view(), name='retrieve-user'),

    path('contractors', my_views.ListCreateContractorAPIView.as_view(), name='list-create-contractor'),
    path('contractors/<int:id>', my_views.RetrieveUpdateContractorAPIView.as_view(), name='retrieve-update-contractor'),
]
