from django.conf import settings
from django.db import models
from auditlog.registry import auditlog

from accounts.models import Contractor
from projects.models import Project, Bid


class Deposit(models.Model):
    """
    Escrow-style partial payment for one bid. The amount is in whole currency
    units and is fixed when the row is created.
    """
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('processing', 'Processing'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    )
    OPEN_STATUSES = ('pending', 'processing')

    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name='deposits')
    contractor = models.ForeignKey(Contractor, on_delete=models.PROTECT, related_name='deposits')
    bid = models.ForeignKey(Bid, on_delete=models.PROTECT, related_name='deposits')
    payer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='deposits_paid')
    amount = models.PositiveIntegerField()
    currency = models.CharField(max_length=3, default='usd')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    stripe_payment_intent_id = models.CharField(max_length=255, unique=True)
    stripe_charge_id = models.CharField(max_length=255, blank=True)
    description = models.CharField(max_length=500, blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    # Reserved: no operation issues refunds yet.
    refunded_at = models.DateTimeField(null=True, blank=True)
    refund_amount = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Deposit {self.amount} {self.currency} for {self.project.title} ({self.status})"


auditlog.register(Deposit, include_fields=['status', 'paid_at', 'stripe_charge_id'])
