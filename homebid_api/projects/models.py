from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from auditlog.registry import auditlog

from accounts.models import Contractor


class Project(models.Model):
    STATUS_CHOICES = (
        ('posted', 'Posted'),
        ('bidding', 'Bidding'),
        ('awarded', 'Awarded'),
        ('in_progress', 'In Progress'),
        ('completed', 'Completed'),
    )
    OPEN_STATUSES = ('posted', 'bidding')

    homeowner = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='projects', on_delete=models.PROTECT)
    title = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=100)
    budget_min = models.PositiveIntegerField(null=True, blank=True)
    budget_max = models.PositiveIntegerField(null=True, blank=True)
    timeline = models.CharField(max_length=255, blank=True)
    location = models.CharField(max_length=255)
    images = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='posted')
    # Percent of the accepted bid collected as deposit; read once when a deposit is created.
    deposit_percentage = models.PositiveSmallIntegerField(
        default=25,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def is_open_for_bids(self):
        return self.status in self.OPEN_STATUSES


class Bid(models.Model):
    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
    )

    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name='bids')
    contractor = models.ForeignKey(Contractor, on_delete=models.PROTECT, related_name='bids')
    amount = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    timeline = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Bid {self.amount} on {self.project.title} by {self.contractor} ({self.status})"


auditlog.register(Project, include_fields=['status', 'deposit_percentage'])
auditlog.register(Bid, include_fields=['status'])
