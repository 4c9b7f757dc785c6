from django.db import transaction
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions
from drf_yasg.utils import swagger_auto_schema
import logging

from deposits.services import DepositService
from .models import WebhookEvent
from .serializers import StripeWebhookSerializer
from .services import PaymentService


logger = logging.getLogger(__name__)


class StripeWebhookView(APIView):
    """
    Receives Stripe events. Payment intent events drive deposit settlement;
    already-processed event ids are acknowledged without side effects.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(operation_summary="Stripe webhook receiver", responses={200: "Received", 400: "Invalid payload"})
    def post(self, request):
        signature = request.headers.get('Stripe-Signature', '')
        event = PaymentService(provider_name='stripe').construct_webhook_event(
            payload=request.body,
            signature=signature,
        )

        serializer = StripeWebhookSerializer(data=event)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if WebhookEvent.objects.filter(event_id=data['id']).exists():
            logger.info(f"Duplicate Stripe webhook ignored: {data['id']}")
            return Response({'received': True, 'duplicate': True}, status=status.HTTP_200_OK)

        # The unique event_id makes a concurrent replay fail here; Stripe retries it and hits the check above.
        with transaction.atomic():
            WebhookEvent.objects.create(provider='stripe', event_id=data['id'], event_type=data['type'])
            if data['payment_intent_id']:
                DepositService().handle_intent_event(
                    event_type=data['type'],
                    payment_intent_id=data['payment_intent_id'],
                )

        logger.info(f"Stripe webhook processed: {data['type']} ({data['id']})")
        return Response({'received': True}, status=status.HTTP_200_OK)
