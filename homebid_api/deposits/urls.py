from django.urls import path
from . import views

urlpatterns = [
    path('deposits/create-payment-intent', views.CreatePaymentIntentView.as_view(), name='deposit-create-intent'),
    path('deposits/confirm-payment', views.ConfirmPaymentView.as_view(), name='deposit-confirm'),
    path('deposits/project/<int:project_id>', views.ProjectDepositListView.as_view(), name='deposits-by-project'),
    path('deposits/contractor/<int:contractor_id>', views.ContractorDepositListView.as_view(), name='deposits-by-contractor'),
    path('deposits/payer/<int:payer_id>', views.PayerDepositListView.as_view(), name='deposits-by-payer'),
]
