import pytest

from homebid_api.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from projects.models import Bid
from projects.services import BidService


pytestmark = pytest.mark.django_db


def test_submit_bid_creates_pending_bid(project, contractor):
    bid = BidService().submit_bid(
        project_id=project.id,
        contractor_id=contractor.id,
        amount=28000,
        timeline='5 weeks',
    )

    assert bid.status == 'pending'
    assert bid.amount == 28000
    project.refresh_from_db()
    assert project.status == 'posted'


@pytest.mark.parametrize('amount', [0, -100, None])
def test_submit_bid_rejects_non_positive_amount(project, contractor, amount):
    with pytest.raises(ValidationError):
        BidService().submit_bid(project_id=project.id, contractor_id=contractor.id, amount=amount, timeline='1 week')
    assert not Bid.objects.exists()


def test_submit_bid_requires_timeline(project, contractor):
    with pytest.raises(ValidationError):
        BidService().submit_bid(project_id=project.id, contractor_id=contractor.id, amount=1000, timeline='   ')


def test_submit_bid_unknown_project(contractor):
    with pytest.raises(ValidationError):
        BidService().submit_bid(project_id=9999, contractor_id=contractor.id, amount=1000, timeline='1 week')


def test_submit_bid_on_awarded_project(project, contractor):
    project.status = 'awarded'
    project.save()

    with pytest.raises(ValidationError):
        BidService().submit_bid(project_id=project.id, contractor_id=contractor.id, amount=1000, timeline='1 week')


def test_accept_bid_awards_project(bid, project):
    updated = BidService().set_bid_status(bid_id=bid.id, new_status='accepted')

    assert updated.status == 'accepted'
    project.refresh_from_db()
    assert project.status == 'awarded'


def test_reject_bid_leaves_project_untouched(bid, project):
    updated = BidService().set_bid_status(bid_id=bid.id, new_status='rejected')

    assert updated.status == 'rejected'
    project.refresh_from_db()
    assert project.status == 'posted'


@pytest.mark.parametrize('first,second', [
    ('accepted', 'rejected'),
    ('accepted', 'accepted'),
    ('rejected', 'accepted'),
    ('rejected', 'pending'),
])
def test_decided_bid_cannot_change(bid, project, first, second):
    service = BidService()
    service.set_bid_status(bid_id=bid.id, new_status=first)
    project.refresh_from_db()
    project_status = project.status

    with pytest.raises(InvalidTransitionError):
        service.set_bid_status(bid_id=bid.id, new_status=second)

    bid.refresh_from_db()
    project.refresh_from_db()
    assert bid.status == first
    assert project.status == project_status


def test_pending_to_pending_is_noop(bid):
    assert BidService().set_bid_status(bid_id=bid.id, new_status='pending').status == 'pending'


def test_unknown_status(bid):
    with pytest.raises(ValidationError):
        BidService().set_bid_status(bid_id=bid.id, new_status='withdrawn')


def test_missing_bid():
    with pytest.raises(NotFoundError):
        BidService().set_bid_status(bid_id=424242, new_status='accepted')


def test_second_accept_on_same_project_fails(bid, project, other_contractor):
    rival = Bid.objects.create(project=project, contractor=other_contractor, amount=30000, timeline='8 weeks')
    service = BidService()
    service.set_bid_status(bid_id=bid.id, new_status='accepted')

    with pytest.raises(InvalidTransitionError):
        service.set_bid_status(bid_id=rival.id, new_status='accepted')

    rival.refresh_from_db()
    assert rival.status == 'pending'


def test_accept_does_not_reject_siblings(bid, project, other_contractor):
    rival = Bid.objects.create(project=project, contractor=other_contractor, amount=30000, timeline='8 weeks')

    BidService().set_bid_status(bid_id=bid.id, new_status='accepted')

    rival.refresh_from_db()
    assert rival.status == 'pending'


def test_list_project_bids_in_insertion_order(bid, project, other_contractor):
    rival = Bid.objects.create(project=project, contractor=other_contractor, amount=30000, timeline='8 weeks')

    bids = list(BidService().list_project_bids(project_id=project.id))

    assert [b.id for b in bids] == [bid.id, rival.id]


def test_accept_leaves_started_project_status(bid, project):
    project.status = 'in_progress'
    project.save()

    BidService().set_bid_status(bid_id=bid.id, new_status='accepted')

    project.refresh_from_db()
    assert project.status == 'in_progress'
