from decimal import Decimal

import pytest

from deposits.models import Deposit
from deposits.services import DepositService
from homebid_api.exceptions import (
    ExternalServiceError,
    InvalidTransitionError,
    NotFoundError,
    PaymentDeclinedError,
    ValidationError,
)
from projects.models import Bid
from projects.services import BidService


pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('bid_amount,percentage,expected', [
    (32000, 25, 8000),
    (1000, 10, 100),
    (1002, 25, 251),
    (1001, 25, 250),
    (7, 50, 4),
])
def test_calculate_amount_rounds_half_up(bid_amount, percentage, expected):
    assert DepositService.calculate_amount(bid_amount, percentage) == expected


def test_initiate_deposit_amount_and_intent(bid, project, contractor, homeowner, stripe_intents):
    result = DepositService().initiate_deposit(
        bid_id=bid.id,
        project_id=project.id,
        contractor_id=contractor.id,
    )

    assert result['amount'] == 8000
    assert result['client_secret'] == 'pi_test_1_secret_abc'

    deposit = Deposit.objects.get(id=result['deposit_id'])
    assert deposit.amount == 8000
    assert deposit.status == 'pending'
    assert deposit.payer_id == homeowner.id
    assert deposit.stripe_payment_intent_id == 'pi_test_1'
    assert deposit.due_date is not None

    kwargs = stripe_intents.create.call_args.kwargs
    assert kwargs['amount'] == 800000
    assert kwargs['currency'] == 'usd'
    assert kwargs['metadata'] == {
        'projectId': str(project.id),
        'bidId': str(bid.id),
        'contractorId': str(contractor.id),
        'type': 'project_deposit',
    }


def test_initiate_uses_project_percentage(bid, project, contractor, stripe_intents):
    project.deposit_percentage = 10
    project.save()

    result = DepositService().initiate_deposit(bid_id=bid.id, project_id=project.id, contractor_id=contractor.id)

    assert result['amount'] == 3200


def test_initiate_missing_bid(project, contractor, stripe_intents):
    with pytest.raises(NotFoundError):
        DepositService().initiate_deposit(bid_id=999, project_id=project.id, contractor_id=contractor.id)
    stripe_intents.create.assert_not_called()


def test_initiate_contractor_mismatch(bid, project, other_contractor, stripe_intents):
    with pytest.raises(ValidationError):
        DepositService().initiate_deposit(bid_id=bid.id, project_id=project.id, contractor_id=other_contractor.id)
    assert not Deposit.objects.exists()


def test_initiate_rejected_bid(bid, project, contractor, stripe_intents):
    BidService().set_bid_status(bid_id=bid.id, new_status='rejected')

    with pytest.raises(InvalidTransitionError):
        DepositService().initiate_deposit(bid_id=bid.id, project_id=project.id, contractor_id=contractor.id)


def test_initiate_bridge_failure_stores_nothing(bid, project, contractor):
    class FailingPayments:
        def create_intent(self, **kwargs):
            raise ExternalServiceError("Error creating payment intent: card network down")

    with pytest.raises(ExternalServiceError):
        DepositService(payment_service=FailingPayments()).initiate_deposit(
            bid_id=bid.id, project_id=project.id, contractor_id=contractor.id,
        )
    assert not Deposit.objects.exists()


def _initiate(bid, project, contractor):
    result = DepositService().initiate_deposit(bid_id=bid.id, project_id=project.id, contractor_id=contractor.id)
    return Deposit.objects.get(id=result['deposit_id'])


def test_confirm_completes_and_cascades(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)

    confirmed = DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    assert confirmed.status == 'completed'
    assert confirmed.paid_at is not None
    assert confirmed.stripe_charge_id == 'ch_test_1'
    bid.refresh_from_db()
    project.refresh_from_db()
    assert bid.status == 'accepted'
    assert project.status == 'awarded'


def test_confirm_twice_is_idempotent(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    service = DepositService()

    first = service.confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)
    second = service.confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    assert first.paid_at == second.paid_at
    assert Deposit.objects.filter(status='completed').count() == 1
    assert stripe_intents.retrieve.call_count == 1
    bid.refresh_from_db()
    project.refresh_from_db()
    assert bid.status == 'accepted'
    assert project.status == 'awarded'


def test_confirm_after_bid_already_accepted(bid, project, contractor, stripe_intents):
    BidService().set_bid_status(bid_id=bid.id, new_status='accepted')
    deposit = _initiate(bid, project, contractor)

    confirmed = DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    assert confirmed.status == 'completed'
    bid.refresh_from_db()
    assert bid.status == 'accepted'


@pytest.mark.parametrize('intent_status', ['requires_payment_method', 'canceled', 'processing'])
def test_confirm_not_succeeded_marks_failed(bid, project, contractor, stripe_intents, intent_status):
    deposit = _initiate(bid, project, contractor)
    stripe_intents.retrieve_status = intent_status

    with pytest.raises(PaymentDeclinedError):
        DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    deposit.refresh_from_db()
    bid.refresh_from_db()
    project.refresh_from_db()
    assert deposit.status == 'failed'
    assert deposit.paid_at is None
    assert bid.status == 'pending'
    assert project.status == 'posted'


def test_confirm_failed_deposit_is_rejected(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    Deposit.objects.filter(id=deposit.id).update(status='failed')

    with pytest.raises(InvalidTransitionError):
        DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)
    stripe_intents.retrieve.assert_not_called()


def test_confirm_intent_mismatch(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)

    with pytest.raises(ValidationError):
        DepositService().confirm_deposit(payment_intent_id='pi_somebody_else', deposit_id=deposit.id)


def test_confirm_missing_deposit(stripe_intents):
    with pytest.raises(NotFoundError):
        DepositService().confirm_deposit(payment_intent_id='pi_test_1', deposit_id=12345)


def test_completed_deposit_blocks_new_deposit(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    with pytest.raises(InvalidTransitionError):
        _initiate(bid, project, contractor)


def test_cascade_skips_bid_when_rival_accepted(bid, project, contractor, other_contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    rival = Bid.objects.create(project=project, contractor=other_contractor, amount=30000, timeline='8 weeks')
    BidService().set_bid_status(bid_id=rival.id, new_status='accepted')

    confirmed = DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    assert confirmed.status == 'completed'
    bid.refresh_from_db()
    rival.refresh_from_db()
    assert bid.status == 'pending'
    assert rival.status == 'accepted'
    assert Bid.objects.filter(project=project, status='accepted').count() == 1


def test_amount_is_not_recomputed(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    project.deposit_percentage = 50
    project.save()

    confirmed = DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    assert confirmed.amount == 8000
    assert Decimal(confirmed.amount) == Decimal(32000) * Decimal('0.25')


def test_handle_intent_events(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    service = DepositService()

    service.handle_intent_event(event_type='payment_intent.processing', payment_intent_id=deposit.stripe_payment_intent_id)
    deposit.refresh_from_db()
    assert deposit.status == 'processing'

    service.handle_intent_event(event_type='payment_intent.succeeded', payment_intent_id=deposit.stripe_payment_intent_id)
    deposit.refresh_from_db()
    assert deposit.status == 'completed'

    # A late failure event does not undo a completed deposit.
    service.handle_intent_event(event_type='payment_intent.payment_failed', payment_intent_id=deposit.stripe_payment_intent_id)
    deposit.refresh_from_db()
    assert deposit.status == 'completed'


def test_handle_intent_event_unknown_intent(stripe_intents):
    assert DepositService().handle_intent_event(
        event_type='payment_intent.succeeded', payment_intent_id='pi_unrelated',
    ) is None


def test_initiate_refused_when_rival_already_accepted(bid, project, contractor, other_contractor, stripe_intents):
    rival = Bid.objects.create(project=project, contractor=other_contractor, amount=30000, timeline='8 weeks')
    BidService().set_bid_status(bid_id=rival.id, new_status='accepted')

    with pytest.raises(InvalidTransitionError):
        DepositService().initiate_deposit(bid_id=bid.id, project_id=project.id, contractor_id=contractor.id)

    stripe_intents.create.assert_not_called()
    assert not Deposit.objects.exists()
    bid.refresh_from_db()
    assert bid.status == 'pending'


def test_failed_attempt_then_success_completes(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    service = DepositService()

    service.handle_intent_event(event_type='payment_intent.payment_failed', payment_intent_id=deposit.stripe_payment_intent_id)
    deposit.refresh_from_db()
    assert deposit.status == 'pending'

    service.handle_intent_event(event_type='payment_intent.succeeded', payment_intent_id=deposit.stripe_payment_intent_id)
    deposit.refresh_from_db()
    bid.refresh_from_db()
    assert deposit.status == 'completed'
    assert bid.status == 'accepted'


def test_succeeded_event_settles_deposit_marked_failed_by_confirm(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)
    stripe_intents.retrieve_status = 'requires_payment_method'
    with pytest.raises(PaymentDeclinedError):
        DepositService().confirm_deposit(payment_intent_id=deposit.stripe_payment_intent_id, deposit_id=deposit.id)

    stripe_intents.retrieve_status = 'succeeded'
    DepositService().handle_intent_event(
        event_type='payment_intent.succeeded', payment_intent_id=deposit.stripe_payment_intent_id,
    )

    deposit.refresh_from_db()
    bid.refresh_from_db()
    project.refresh_from_db()
    assert deposit.status == 'completed'
    assert deposit.stripe_charge_id == 'ch_test_1'
    assert bid.status == 'accepted'
    assert project.status == 'awarded'


def test_canceled_event_fails_deposit(bid, project, contractor, stripe_intents):
    deposit = _initiate(bid, project, contractor)

    DepositService().handle_intent_event(event_type='payment_intent.canceled', payment_intent_id=deposit.stripe_payment_intent_id)

    deposit.refresh_from_db()
    assert deposit.status == 'failed'
