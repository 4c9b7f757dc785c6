from .base import BasePaymentProvider
from .stripe import StripeProvider

PROVIDERS = {
    'stripe': StripeProvider,
}


def get_payment_provider(provider_name: str, **kwargs) -> BasePaymentProvider:
    """Instantiate the provider registered under `provider_name`; raises ValueError for unknown names."""
    try:
        provider_class = PROVIDERS[provider_name]
    except KeyError:
        raise ValueError(f"Unknown payment provider: {provider_name}")
    return provider_class(**kwargs)
