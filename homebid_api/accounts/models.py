from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from country_list import countries_for_language
from auditlog.registry import auditlog
from auditlog.models import AuditlogHistoryField


class CustomUserManager(BaseUserManager):
    """Users log in with their email address; there is no username."""
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("An email address is required.")
        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('user_type', 'homeowner')
        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Marketplace user. Uses email as the unique identifier and is either a
    'homeowner' (posts projects, pays deposits) or a 'contractor' (bids).
    """
    USER_TYPE_CHOICES = (
        ('homeowner', 'Homeowner'),
        ('contractor', 'Contractor'),
    )

    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES)
    phone_number = models.CharField(max_length=20, blank=True)
    location = models.CharField(max_length=255, blank=True)
    profile_image = models.URLField(blank=True)
    country = models.CharField(max_length=50, choices=countries_for_language('en'), blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    email = models.EmailField(unique=True, blank=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    username = None

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name',]

    objects = CustomUserManager()

    history = AuditlogHistoryField()

    def __str__(self):
        return self.email

    @property
    def is_homeowner(self):
        return self.user_type == 'homeowner'

    @property
    def is_contractor(self):
        return self.user_type == 'contractor'


class Contractor(models.Model):
    """
    Business profile of a contractor user. Bids and deposits reference this
    record rather than the user directly.
    """
    user = models.OneToOneField(CustomUser, on_delete=models.CASCADE, related_name='contractor_profile')
    company_name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    specialties = models.JSONField(default=list, blank=True)
    experience = models.PositiveIntegerField(null=True, blank=True, help_text="Years of experience")
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    review_count = models.PositiveIntegerField(default=0)
    portfolio = models.JSONField(default=list, blank=True, help_text="Portfolio image URLs")
    licenses = models.JSONField(default=list, blank=True)
    insurance = models.BooleanField(default=False)

    def __str__(self):
        return self.company_name


auditlog.register(CustomUser, exclude_fields=['password', 'last_login'])
