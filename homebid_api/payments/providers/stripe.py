import json
import logging

import stripe
from django.conf import settings

from homebid_api.exceptions import ExternalServiceError, ValidationError
from .base import BasePaymentProvider

logger = logging.getLogger(__name__)

class StripeProvider(BasePaymentProvider):
    """
    Stripe payment provider. Creates and retrieves Payment Intents for
    project deposits and verifies Stripe webhook payloads.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        stripe.api_key = kwargs.get('api_key') or settings.STRIPE_SECRET_KEY
        self.currency = getattr(settings, 'STRIPE_CURRENCY', 'usd')
        self.webhook_secret = getattr(settings, 'STRIPE_WEBHOOK_SECRET', '')

    @staticmethod
    def to_minor_units(amount):
        # Stripe uses the smallest currency unit
        return int(amount) * 100

    def create_intent(self, amount, currency=None, metadata=None, description=""):
        """
        Create a Stripe Payment Intent.

        Args:
            amount: Amount in whole currency units
            currency: Currency code, defaults to STRIPE_CURRENCY
            metadata: String key/values stored on the intent
            description: Shown in the Stripe dashboard

        Returns:
            Dict with 'id', 'client_secret', 'status' and 'amount_minor'
        """
        amount_minor = self.to_minor_units(amount)
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency or self.currency,
                metadata={key: str(value) for key, value in (metadata or {}).items()},
                description=description,
                automatic_payment_methods={
                    'enabled': True,
                },
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe API error in create_intent: {str(e)}")
            raise ExternalServiceError(f"Error creating payment intent: {e.user_message or str(e)}")

        logger.info(f"Stripe Payment Intent created: {intent.id}, amount: {amount_minor} {currency or self.currency}")

        return {
            'id': intent.id,
            'client_secret': intent.client_secret,
            'status': intent.status,
            'amount_minor': amount_minor,
        }

    def retrieve_intent(self, intent_id):
        """
        Retrieve a Stripe Payment Intent.

        Args:
            intent_id: Payment Intent ID

        Returns:
            Dict with 'id', 'status' and 'charge_id'
        """
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe retrieve error for intent {intent_id}: {str(e)}")
            raise ExternalServiceError(f"Error retrieving payment intent: {e.user_message or str(e)}")

        charge = getattr(intent, 'latest_charge', None)
        charge_id = getattr(charge, 'id', charge)

        logger.info(f"Stripe intent {intent_id} status: {intent.status}")
        return {
            'id': intent.id,
            'status': intent.status,
            'charge_id': charge_id,
        }

    def construct_webhook_event(self, payload, signature):
        """
        Verify the Stripe-Signature header and return the parsed event.

        Without a configured signing secret events are only accepted in DEBUG.
        """
        if not self.webhook_secret:
            if not settings.DEBUG:
                raise ValidationError("Webhook signing secret is not configured.")
            logger.warning("STRIPE_WEBHOOK_SECRET not set; accepting unverified webhook payload")
            try:
                return json.loads(payload)
            except ValueError:
                raise ValidationError("Invalid webhook payload.")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError:
            raise ValidationError("Invalid webhook payload.")
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature verification failed: {str(e)}")
            raise ValidationError("Webhook signature verification failed.")

        return {
            'id': event['id'],
            'type': event['type'],
            'data': {'object': event['data']['object']},
        }
