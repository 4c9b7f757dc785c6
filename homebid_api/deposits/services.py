from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from homebid_api.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PaymentDeclinedError,
    ValidationError,
)
from payments.services import PaymentService
from projects.models import Bid, Project
from projects.services import BidService
from .models import Deposit

logger = logging.getLogger(__name__)

User = get_user_model()


class DepositService:
    """
    Deposit settlement: creates the processor-side intent and the pending
    deposit row, then confirms the outcome and cascades a completed payment
    into the bid (accepted) and the project (awarded).
    """
    def __init__(self, payment_service=None):
        self.payment_service = payment_service or PaymentService()

    @staticmethod
    def calculate_amount(bid_amount, deposit_percentage=None):
        """Deposit in whole currency units, rounded half up."""
        percentage = deposit_percentage or settings.DEFAULT_DEPOSIT_PERCENTAGE
        amount = Decimal(bid_amount) * Decimal(percentage) / Decimal(100)
        return int(amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    def initiate_deposit(self, *, bid_id, project_id, contractor_id, payer_id=None, description=""):
        """
        Create a payment intent for the deposit on `bid_id` and persist a
        pending Deposit pointing at it.

        Returns a dict with the processor client secret, the deposit id and
        the deposit amount.
        """
        bid = Bid.objects.filter(id=bid_id).first()
        if bid is None:
            raise NotFoundError("Bid not found.")
        project = Project.objects.filter(id=project_id).first()
        if project is None:
            raise NotFoundError("Project not found.")

        if bid.project_id != project.id:
            raise ValidationError("Bid does not belong to this project.")
        if bid.contractor_id != contractor_id:
            raise ValidationError("Contractor does not match the bid.")
        if bid.status == 'rejected':
            raise InvalidTransitionError("Cannot take a deposit for a rejected bid.")
        if Deposit.objects.filter(bid=bid, status__in=['processing', 'completed']).exists():
            raise InvalidTransitionError("A deposit for this bid is already paid or processing.")
        if Bid.objects.filter(project=project, status='accepted').exclude(id=bid.id).exists():
            raise InvalidTransitionError("Another bid on this project has already been accepted.")

        payer_id = payer_id or project.homeowner_id
        if not User.objects.filter(id=payer_id).exists():
            raise ValidationError("Payer does not exist.")

        amount = self.calculate_amount(bid.amount, project.deposit_percentage)
        if amount <= 0:
            raise ValidationError("Deposit amount must be greater than zero.")

        description = description or f"Deposit for project: {project.title}"
        currency = getattr(settings, 'STRIPE_CURRENCY', 'usd')

        intent = self.payment_service.create_intent(
            amount=amount,
            currency=currency,
            metadata={
                'projectId': project.id,
                'bidId': bid.id,
                'contractorId': contractor_id,
                'type': 'project_deposit',
            },
            description=description,
        )

        deposit = Deposit.objects.create(
            project=project,
            contractor_id=contractor_id,
            bid=bid,
            payer_id=payer_id,
            amount=amount,
            currency=currency,
            status='pending',
            stripe_payment_intent_id=intent['id'],
            description=description,
            due_date=timezone.now() + timedelta(days=settings.DEPOSIT_DUE_DAYS),
        )

        logger.info(
            "Deposit initiated",
            extra={'deposit_id': deposit.id, 'bid_id': bid.id, 'project_id': project.id, 'amount': amount},
        )

        return {
            'client_secret': intent['client_secret'],
            'deposit_id': deposit.id,
            'amount': amount,
        }

    def confirm_deposit(self, *, payment_intent_id, deposit_id):
        """
        Settle a deposit from the processor's view of its intent.

        Succeeded: deposit completed, bid accepted, project awarded. Safe to
        repeat. Anything else: deposit failed and PaymentDeclinedError raised;
        the failed status is committed before the error propagates.
        """
        deposit = Deposit.objects.filter(id=deposit_id).first()
        if deposit is None:
            raise NotFoundError("Deposit not found.")
        if deposit.stripe_payment_intent_id != payment_intent_id:
            raise ValidationError("Payment intent does not match this deposit.")

        if deposit.status == 'completed':
            with transaction.atomic():
                self._cascade(deposit)
            return deposit
        if deposit.status not in Deposit.OPEN_STATUSES:
            raise InvalidTransitionError(f"Deposit is already {deposit.status}.")

        intent = self.payment_service.retrieve_intent(intent_id=payment_intent_id)

        if self.payment_service.is_successful(intent):
            return self._complete(deposit.id, charge_id=intent.get('charge_id'))

        self._fail(deposit.id)
        logger.warning(f"Deposit {deposit.id} payment not completed (intent status: {intent.get('status')})")
        raise PaymentDeclinedError("Payment not completed")

    def mark_processing(self, *, payment_intent_id):
        return Deposit.objects.filter(
            stripe_payment_intent_id=payment_intent_id, status='pending'
        ).update(status='processing', updated_at=timezone.now())

    def handle_intent_event(self, *, event_type, payment_intent_id):
        """
        Apply a processor webhook event to the matching deposit, if there is one.

        payment_failed is not final on the processor side (the same intent can
        still be paid), so it leaves the deposit open. A succeeded event also
        settles a deposit that an earlier confirm call marked failed, since the
        processor has taken the money for that intent.
        """
        deposit = Deposit.objects.filter(stripe_payment_intent_id=payment_intent_id).first()
        if deposit is None:
            logger.info(f"No deposit for payment intent {payment_intent_id}; ignoring {event_type}")
            return None

        if event_type == 'payment_intent.succeeded':
            if deposit.status == 'failed':
                return self._recover_failed(deposit)
            try:
                return self.confirm_deposit(payment_intent_id=payment_intent_id, deposit_id=deposit.id)
            except (PaymentDeclinedError, InvalidTransitionError) as e:
                logger.warning(f"Webhook {event_type} for deposit {deposit.id} not applied: {e.detail}")
        elif event_type == 'payment_intent.canceled':
            self._fail(deposit.id)
        elif event_type == 'payment_intent.payment_failed':
            logger.info(f"Payment attempt failed for deposit {deposit.id}; intent can still be paid")
        elif event_type == 'payment_intent.processing':
            self.mark_processing(payment_intent_id=payment_intent_id)

        deposit.refresh_from_db()
        return deposit

    def _recover_failed(self, deposit):
        intent = self.payment_service.retrieve_intent(intent_id=deposit.stripe_payment_intent_id)
        if not self.payment_service.is_successful(intent):
            logger.warning(f"Deposit {deposit.id} is failed and intent reports {intent.get('status')}; left as is")
            return deposit
        logger.warning(f"Deposit {deposit.id} was marked failed but its intent succeeded; completing it")
        return self._complete(deposit.id, charge_id=intent.get('charge_id'), allowed_from=('failed',))

    def _complete(self, deposit_id, charge_id=None, allowed_from=Deposit.OPEN_STATUSES):
        with transaction.atomic():
            deposit = Deposit.objects.select_for_update().get(id=deposit_id)
            if deposit.status != 'completed':
                if deposit.status not in allowed_from:
                    raise InvalidTransitionError(f"Deposit is already {deposit.status}.")
                deposit.status = 'completed'
                deposit.paid_at = timezone.now()
                deposit.stripe_charge_id = charge_id or ""
                deposit.save(update_fields=['status', 'paid_at', 'stripe_charge_id', 'updated_at'])
                logger.info(f"Deposit {deposit.id} completed")
            self._cascade(deposit)
        return deposit

    def _fail(self, deposit_id):
        with transaction.atomic():
            Deposit.objects.filter(id=deposit_id, status__in=Deposit.OPEN_STATUSES).update(
                status='failed', updated_at=timezone.now()
            )

    def _cascade(self, deposit):
        """Project -> awarded and bid -> accepted; both no-ops when already there."""
        project = Project.objects.select_for_update().get(id=deposit.project_id)
        if project.is_open_for_bids:
            project.status = 'awarded'
            project.save(update_fields=['status', 'updated_at'])

        other_accepted = (
            Bid.objects.filter(project_id=deposit.project_id, status='accepted')
            .exclude(id=deposit.bid_id)
            .exists()
        )
        if other_accepted:
            logger.warning(f"Deposit {deposit.id}: another bid on project {project.id} is already accepted")
            return
        if not BidService.compare_and_set(deposit.bid_id, 'pending', 'accepted'):
            bid_status = Bid.objects.filter(id=deposit.bid_id).values_list('status', flat=True).first()
            if bid_status != 'accepted':
                logger.warning(f"Deposit {deposit.id}: bid {deposit.bid_id} is {bid_status}, not accepting")

    def list_for_project(self, *, project_id):
        return Deposit.objects.filter(project_id=project_id)

    def list_for_contractor(self, *, contractor_id):
        return Deposit.objects.filter(contractor_id=contractor_id)

    def list_for_payer(self, *, payer_id):
        return Deposit.objects.filter(payer_id=payer_id)
