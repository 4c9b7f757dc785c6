from django.urls import path

from . import views

urlpatterns = [
    path("stripe-webhook", views.StripeWebhookView.as_view(), name="stripe-webhook"),
]
