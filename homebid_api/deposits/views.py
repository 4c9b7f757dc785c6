from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status, views
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
import logging

from accounts.models import Contractor
from homebid_api.exceptions import NotFoundError, PaymentDeclinedError
from projects.models import Project
from .models import Deposit
from .serializers import (
    ConfirmPaymentSerializer,
    CreatePaymentIntentSerializer,
    DepositSerializer,
    DepositWithBidSerializer,
    PaymentIntentResponseSerializer,
)
from .services import DepositService

logger = logging.getLogger(__name__)


class CreatePaymentIntentView(views.APIView):
    """The project's homeowner starts paying the deposit on a bid."""
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Create a payment intent for a bid deposit",
        request_body=CreatePaymentIntentSerializer,
        responses={
            200: PaymentIntentResponseSerializer,
            400: "Validation error",
            403: "Forbidden",
            404: "Not found",
            500: "Payment provider error",
        }
    )
    def post(self, request):
        serializer = CreatePaymentIntentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        project = Project.objects.filter(id=data['projectId']).first()
        if project is None:
            raise NotFoundError("Project not found.")
        if project.homeowner_id != request.user.id and not request.user.is_staff:
            raise PermissionDenied("Only the project owner can pay a deposit.")

        result = DepositService().initiate_deposit(
            bid_id=data['bidId'],
            project_id=project.id,
            contractor_id=data['contractorId'],
            payer_id=request.user.id,
            description=data.get('description', ""),
        )
        return Response(
            {
                'clientSecret': result['client_secret'],
                'depositId': result['deposit_id'],
                'amount': result['amount'],
            },
            status=status.HTTP_200_OK,
        )


class ConfirmPaymentView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Confirm a deposit payment after the client completes it",
        request_body=ConfirmPaymentSerializer,
        responses={
            200: DepositSerializer,
            400: "Payment not completed or invalid state",
            403: "Forbidden",
            404: "Not found",
            500: "Payment provider error",
        }
    )
    def post(self, request):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        deposit = Deposit.objects.filter(id=data['depositId']).first()
        if deposit is None:
            raise NotFoundError("Deposit not found.")
        if deposit.payer_id != request.user.id and not request.user.is_staff:
            raise PermissionDenied("Not authorised to confirm this deposit.")

        try:
            deposit = DepositService().confirm_deposit(
                payment_intent_id=data['paymentIntentId'],
                deposit_id=deposit.id,
            )
        except PaymentDeclinedError as e:
            logger.info(f"Deposit {deposit.id} confirmation declined for user {request.user.id}")
            return Response({'success': False, 'message': str(e.detail)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'success': True, 'deposit': DepositSerializer(deposit).data}, status=status.HTTP_200_OK)


class ProjectDepositListView(generics.ListAPIView):
    """
    The project's homeowner (and staff) see every deposit on the project; a
    contractor sees only the deposits on their own bids there.
    """
    serializer_class = DepositWithBidSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = []

    def get_queryset(self):
        project = get_object_or_404(Project, id=self.kwargs['project_id'])
        deposits = DepositService().list_for_project(project_id=project.id).select_related('bid')

        user = self.request.user
        if user.is_staff or project.homeowner_id == user.id:
            return deposits

        own = deposits.filter(contractor__user=user)
        if not own.exists():
            raise PermissionDenied("Not authorised to view deposits on this project.")
        return own


class ContractorDepositListView(generics.ListAPIView):
    """Deposits on a contractor's bids. Only that contractor (or staff) can list them."""
    serializer_class = DepositWithBidSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = []

    def get_queryset(self):
        contractor = get_object_or_404(Contractor, id=self.kwargs['contractor_id'])
        if contractor.user_id != self.request.user.id and not self.request.user.is_staff:
            raise PermissionDenied("Not authorised to view these deposits.")
        return DepositService().list_for_contractor(contractor_id=contractor.id).select_related('bid')


class PayerDepositListView(generics.ListAPIView):
    """Deposits paid by a user. Only that user (or staff) can list them."""
    serializer_class = DepositWithBidSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = []

    @swagger_auto_schema(
        operation_summary="List deposits paid by a user",
        responses={200: DepositWithBidSerializer(many=True), 403: "Forbidden"}
    )
    def get(self, request, *args, **kwargs):
        if self.kwargs['payer_id'] != request.user.id and not request.user.is_staff:
            raise PermissionDenied("Not authorised to view these deposits.")
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return DepositService().list_for_payer(payer_id=self.kwargs['payer_id']).select_related('bid')
