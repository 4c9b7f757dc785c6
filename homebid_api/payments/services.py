from django.conf import settings
from .providers import get_payment_provider
import logging

logger = logging.getLogger(__name__)

class PaymentService:
    """
    Provider adapter. This class should NOT create or update Deposit records.
    It only calls the configured payment provider.
    """
    def __init__(self, provider_name=None):
        self.default_provider_name = provider_name or getattr(settings, 'PAYMENT_PROVIDER', None)

    def _get_provider(self, provider_name=None):
        name = provider_name or self.default_provider_name
        if not name:
            raise ValueError("provider_name is required (no default configured).")
        return get_payment_provider(name), name

    @property
    def provider_name(self):
        return self.default_provider_name

    def create_intent(self, *, amount, currency, metadata=None, description="", provider_name=None):
        provider, _ = self._get_provider(provider_name)
        return provider.create_intent(amount, currency, metadata=metadata, description=description)

    def retrieve_intent(self, *, intent_id, provider_name=None):
        provider, _ = self._get_provider(provider_name)
        return provider.retrieve_intent(intent_id)

    def is_successful(self, intent, provider_name=None):
        provider, _ = self._get_provider(provider_name)
        return provider.is_successful(intent)

    def construct_webhook_event(self, *, payload, signature, provider_name=None):
        provider, _ = self._get_provider(provider_name)
        return provider.construct_webhook_event(payload, signature)
