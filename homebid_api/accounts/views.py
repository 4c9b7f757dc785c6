from django.db import transaction
from rest_framework import generics, permissions, status, views
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response
from rest_framework_simplejwt import views as jwt_views
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from drf_yasg.utils import swagger_auto_schema

from homebid_api.exceptions import ValidationError
from . import serializers as my_serializers
from .models import Contractor, CustomUser
from .permissions import IsContractorOwner
from .throttles import LoginRateThrottle


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


class LoginAPIView(jwt_views.TokenObtainPairView):
    """Email + password login. Returns an access/refresh JWT pair."""
    serializer_class = my_serializers.CustomTokenObtainPairSerializer
    throttle_classes = [LoginRateThrottle]


class RegistrationAPIView(generics.CreateAPIView):
    """
    Sign up as a homeowner or a contractor.

    Responds with the new user and a token pair so the client is logged in
    straight away. Contractors create their business profile separately via
    POST /api/contractors.
    """
    serializer_class = my_serializers.RegistrationSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(operation_summary="Register a homeowner or contractor account")
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            user = serializer.save()

        payload = {'user': my_serializers.UserSummarySerializer(user).data}
        payload.update(issue_tokens(user))
        return Response(payload, status=status.HTTP_201_CREATED)


class LogoutAPIView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Revoke a refresh token",
        request_body=my_serializers.LogoutSerializer,
        responses={204: "Logged out", 400: "Invalid token"},
    )
    def post(self, request):
        serializer = my_serializers.LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            RefreshToken(serializer.validated_data['refresh']).blacklist()
        except TokenError as e:
            raise ValidationError(f"Invalid refresh token: {e}")

        return Response(status=status.HTTP_204_NO_CONTENT)


class CurrentUserAPIView(generics.RetrieveUpdateAPIView):
    serializer_class = my_serializers.UserProfileSerializer
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_object(self):
        return self.request.user


class RetrieveUserAPIView(generics.RetrieveAPIView):
    serializer_class = my_serializers.UserSummarySerializer
    queryset = CustomUser.objects.filter(is_active=True, deleted_at__isnull=True)
    lookup_field = 'id'


class ListCreateContractorAPIView(generics.ListCreateAPIView):
    """
    GET lists contractor profiles, searchable by company name and description
    and orderable by rating, experience or review count.
    POST creates the caller's own contractor profile.
    """
    serializer_class = my_serializers.ContractorSerializer
    queryset = Contractor.objects.select_related('user').order_by('-rating', 'id')
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ['company_name', 'description']
    ordering_fields = ['rating', 'experience', 'review_count']

    @swagger_auto_schema(
        operation_summary="Create the current user's contractor profile",
        responses={201: my_serializers.ContractorSerializer, 400: "Invalid input"},
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class RetrieveUpdateContractorAPIView(generics.RetrieveUpdateAPIView):
    serializer_class = my_serializers.ContractorSerializer
    permission_classes = [permissions.IsAuthenticated, IsContractorOwner]
    queryset = Contractor.objects.select_related('user')
    lookup_field = 'id'
