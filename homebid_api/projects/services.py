from django.db import transaction
import logging

from accounts.models import Contractor
from homebid_api.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from .models import Bid, Project

logger = logging.getLogger(__name__)


class BidService:
    """
    Bid lifecycle: submission and the pending -> accepted/rejected transition,
    including the cascade of an acceptance into the parent project.
    """

    def submit_bid(self, *, project_id, contractor_id, amount, timeline, description=""):
        if amount is None or amount <= 0:
            raise ValidationError("Bid amount must be a positive whole number.")
        if not timeline or not str(timeline).strip():
            raise ValidationError("Timeline is required.")

        project = Project.objects.filter(id=project_id).first()
        if project is None:
            raise ValidationError("Project does not exist.")
        if not project.is_open_for_bids:
            raise ValidationError(f"Project is not accepting bids (status: {project.status}).")
        if not Contractor.objects.filter(id=contractor_id).exists():
            raise ValidationError("Contractor does not exist.")

        bid = Bid.objects.create(
            project=project,
            contractor_id=contractor_id,
            amount=amount,
            timeline=str(timeline).strip(),
            description=description or "",
            status='pending',
        )
        logger.info(
            "Bid submitted",
            extra={'bid_id': bid.id, 'project_id': project.id, 'contractor_id': contractor_id, 'amount': amount},
        )
        return bid

    def set_bid_status(self, *, bid_id, new_status):
        valid_statuses = {choice for choice, _ in Bid.STATUS_CHOICES}
        if new_status not in valid_statuses:
            raise ValidationError(f"Unknown bid status: {new_status}")

        bid = Bid.objects.filter(id=bid_id).first()
        if bid is None:
            raise NotFoundError("Bid not found.")

        if new_status == 'pending':
            if bid.status != 'pending':
                raise InvalidTransitionError(f"Bid is already {bid.status}.")
            return bid

        if bid.status != 'pending':
            raise InvalidTransitionError(f"Bid is already {bid.status}.")

        if new_status == 'accepted':
            return self._accept(bid)
        return self._reject(bid)

    def _accept(self, bid):
        with transaction.atomic():
            project = Project.objects.select_for_update().get(id=bid.project_id)

            if Bid.objects.filter(project=project, status='accepted').exclude(id=bid.id).exists():
                raise InvalidTransitionError("A bid has already been accepted for this project.")

            if not self.compare_and_set(bid.id, 'pending', 'accepted'):
                raise InvalidTransitionError("Bid is no longer pending.")

            if project.is_open_for_bids:
                project.status = 'awarded'
                project.save(update_fields=['status', 'updated_at'])

        bid.refresh_from_db()
        logger.info(f"Bid {bid.id} accepted; project {project.id} is {project.status}")
        return bid

    def _reject(self, bid):
        with transaction.atomic():
            if not self.compare_and_set(bid.id, 'pending', 'rejected'):
                raise InvalidTransitionError("Bid is no longer pending.")

        bid.refresh_from_db()
        logger.info(f"Bid {bid.id} rejected")
        return bid

    @staticmethod
    def compare_and_set(bid_id, expected, new_status):
        """Atomically move a bid from `expected` to `new_status`. Returns False if it was not in `expected`."""
        return Bid.objects.filter(id=bid_id, status=expected).update(status=new_status) == 1

    def list_project_bids(self, *, project_id):
        return (
            Bid.objects.filter(project_id=project_id)
            .select_related('contractor', 'contractor__user')
            .order_by('created_at', 'id')
        )

    def list_contractor_bids(self, *, contractor_id):
        return (
            Bid.objects.filter(contractor_id=contractor_id)
            .select_related('project', 'project__homeowner')
            .order_by('-created_at', '-id')
        )
