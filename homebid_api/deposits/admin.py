from django.contrib import admin
from .models import Deposit


@admin.register(Deposit)
class DepositAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'bid', 'payer', 'amount', 'currency', 'status', 'due_date', 'paid_at')
    list_filter = ('status', 'currency')
    search_fields = ('stripe_payment_intent_id', 'stripe_charge_id', 'payer__email')
    readonly_fields = ('amount', 'status', 'stripe_payment_intent_id', 'stripe_charge_id', 'paid_at')
