from rest_framework import serializers


class StripeWebhookSerializer(serializers.Serializer):
    """
    Normalised Stripe event. For payment_intent.* events the intent id is
    pulled out of data.object into `payment_intent_id`; it is None otherwise.
    """
    id = serializers.CharField()
    type = serializers.CharField()
    data = serializers.DictField()

    def validate(self, attrs):
        event_object = attrs['data'].get('object') or {}
        intent_id = None
        if attrs['type'].startswith('payment_intent.'):
            intent_id = event_object.get('id')
            if not intent_id:
                raise serializers.ValidationError({'data': "payment_intent event without an intent id."})

        attrs['payment_intent_id'] = intent_id
        attrs['object_status'] = event_object.get('status')
        return attrs
