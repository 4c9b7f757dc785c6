from abc import ABC, abstractmethod

class BasePaymentProvider(ABC):
    """
    Interface the deposit flow relies on: create an intent the client pays
    against, look it up again to learn the outcome, and parse webhooks.
    Amounts cross this boundary in whole currency units.
    """

    def __init__(self, **kwargs):
        self.config = kwargs

    @abstractmethod
    def create_intent(self, amount, currency, metadata=None, description=""):
        """
        Create a payment intent the client completes in the processor's hosted UI.

        Args:
            amount: Amount in whole currency units (int)
            currency: ISO currency code, e.g. "usd"
            metadata: Dict of string key/values attached to the intent
            description: Human readable description

        Returns:
            Dict with 'id', 'client_secret' and 'status'

        Raises:
            ExternalServiceError: the provider call failed
        """
        pass

    @abstractmethod
    def retrieve_intent(self, intent_id):
        """
        Look up the current state of a payment intent.

        Args:
            intent_id: Intent ID from the provider

        Returns:
            Dict with 'id', 'status' and 'charge_id' (may be None)

        Raises:
            ExternalServiceError: the provider call failed
        """
        pass

    def is_successful(self, intent):
        """True when a retrieved intent denotes a settled payment."""
        return intent.get('status') == 'succeeded'

    def construct_webhook_event(self, payload, signature):
        """
        Validate a webhook signature and parse the payload (optional implementation).

        Args:
            payload: Raw webhook payload (bytes)
            signature: Webhook signature header

        Returns:
            Dict with 'id', 'type' and 'data'
        """
        raise NotImplementedError(f"{type(self).__name__} does not support webhooks")
