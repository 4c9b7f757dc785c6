from types import SimpleNamespace
from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from accounts.models import CustomUser, Contractor
from projects.models import Project, Bid


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def homeowner(db):
    return CustomUser.objects.create_user(
        email='owner@example.com',
        password='S3cure-pass!',
        first_name='Hana',
        last_name='Owner',
        user_type='homeowner',
    )


@pytest.fixture
def contractor_user(db):
    return CustomUser.objects.create_user(
        email='builder@example.com',
        password='S3cure-pass!',
        first_name='Bo',
        last_name='Builder',
        user_type='contractor',
    )


@pytest.fixture
def contractor(contractor_user):
    return Contractor.objects.create(
        user=contractor_user,
        company_name='Builder & Sons',
        specialties=['kitchen', 'roofing'],
        experience=12,
    )


@pytest.fixture
def other_contractor(db):
    user = CustomUser.objects.create_user(
        email='rival@example.com',
        password='S3cure-pass!',
        first_name='Rae',
        last_name='Rival',
        user_type='contractor',
    )
    return Contractor.objects.create(user=user, company_name='Rival Renovations')


@pytest.fixture
def project(homeowner):
    return Project.objects.create(
        homeowner=homeowner,
        title='Kitchen remodel',
        description='Full kitchen remodel with new cabinets.',
        category='kitchen',
        budget_min=25000,
        budget_max=40000,
        location='Austin, TX',
    )


@pytest.fixture
def bid(project, contractor):
    return Bid.objects.create(
        project=project,
        contractor=contractor,
        amount=32000,
        timeline='6 weeks',
        description='Cabinets, counters and fixtures.',
    )


@pytest.fixture
def stripe_intents():
    """
    Stubs the Stripe PaymentIntent API. Set `retrieve_status` on the returned
    namespace to control what a retrieved intent reports.
    """
    state = SimpleNamespace(retrieve_status='succeeded', counter=0)

    def create(**kwargs):
        state.counter += 1
        intent_id = f"pi_test_{state.counter}"
        return SimpleNamespace(id=intent_id, client_secret=f"{intent_id}_secret_abc", status='requires_payment_method')

    def retrieve(intent_id):
        charge = 'ch_test_1' if state.retrieve_status == 'succeeded' else None
        return SimpleNamespace(id=intent_id, status=state.retrieve_status, latest_charge=charge)

    with patch('payments.providers.stripe.stripe.PaymentIntent.create', side_effect=create) as create_mock, \
            patch('payments.providers.stripe.stripe.PaymentIntent.retrieve', side_effect=retrieve) as retrieve_mock:
        state.create = create_mock
        state.retrieve = retrieve_mock
        yield state
