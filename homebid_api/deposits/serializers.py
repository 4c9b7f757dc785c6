from rest_framework import serializers

from projects.serializers import BidSerializer
from .models import Deposit


class DepositSerializer(serializers.ModelSerializer):
    projectId = serializers.IntegerField(source='project_id', read_only=True)
    contractorId = serializers.IntegerField(source='contractor_id', read_only=True)
    bidId = serializers.IntegerField(source='bid_id', read_only=True)
    payerId = serializers.IntegerField(source='payer_id', read_only=True)
    stripePaymentIntentId = serializers.CharField(source='stripe_payment_intent_id', read_only=True)
    stripeChargeId = serializers.CharField(source='stripe_charge_id', read_only=True)
    dueDate = serializers.DateTimeField(source='due_date', read_only=True)
    paidAt = serializers.DateTimeField(source='paid_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Deposit
        fields = [
            'id', 'projectId', 'contractorId', 'bidId', 'payerId', 'amount', 'currency', 'status',
            'stripePaymentIntentId', 'stripeChargeId', 'description', 'dueDate', 'paidAt',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class DepositWithBidSerializer(DepositSerializer):
    bid = BidSerializer(read_only=True)

    class Meta(DepositSerializer.Meta):
        fields = DepositSerializer.Meta.fields + ['bid']
        read_only_fields = fields


class CreatePaymentIntentSerializer(serializers.Serializer):
    """
    Start a deposit for a bid. The amount is always computed server side from
    the bid and the project's deposit percentage; a client-sent amount is ignored.
    """
    projectId = serializers.IntegerField(min_value=1)
    bidId = serializers.IntegerField(min_value=1)
    contractorId = serializers.IntegerField(min_value=1)
    amount = serializers.IntegerField(required=False, write_only=True)
    description = serializers.CharField(required=False, allow_blank=True, max_length=500)


class PaymentIntentResponseSerializer(serializers.Serializer):
    clientSecret = serializers.CharField()
    depositId = serializers.IntegerField()
    amount = serializers.IntegerField()


class ConfirmPaymentSerializer(serializers.Serializer):
    paymentIntentId = serializers.CharField(max_length=255)
    depositId = serializers.IntegerField(min_value=1)
