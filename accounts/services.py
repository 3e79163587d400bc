import logging
from django.db import IntegrityError, transaction
from django.utils import timezone

from utils.failures import AlreadyDecided, Forbidden, NotFound, UnknownOutcome
from .models import HostApprovalRequest

logger = logging.getLogger(__name__)


class HostApprovalWorkflow:
    """
    Organizer (host) signup approval.

    A request starts PENDING and is decided once by an administrator. Decided
    requests are terminal. Approval only unlocks hackathon creation; it does
    not touch the user's role flags, which belong to the identity system.
    """

    OUTCOMES = (HostApprovalRequest.APPROVED, HostApprovalRequest.REJECTED)

    @staticmethod
    def request_host(user, organization_name='', contact_email='', message=''):
        """Return the user's host request, creating a PENDING one if none exists."""
        existing = HostApprovalRequest.objects.filter(user=user).first()
        if existing:
            return existing
        try:
            with transaction.atomic():
                host_request = HostApprovalRequest.objects.create(
                    user=user,
                    organization_name=organization_name,
                    contact_email=contact_email or user.email,
                    message=message,
                )
        except IntegrityError:
            # Lost a race with a concurrent request for the same user.
            return HostApprovalRequest.objects.get(user=user)
        logger.info(f"Host request {host_request.id} created for user {user.id}")
        return host_request

    @staticmethod
    def decide(admin, request_id, outcome, now=None):
        """
        Approve or reject a pending host request.

        Returns the updated request, or Forbidden / UnknownOutcome / NotFound /
        AlreadyDecided.
        """
        if not getattr(admin, 'is_admin', False):
            logger.warning(f"User {getattr(admin, 'id', None)} tried to decide host request {request_id}")
            return Forbidden('Only administrators can decide host requests.')
        if outcome not in HostApprovalWorkflow.OUTCOMES:
            return UnknownOutcome(outcome)

        with transaction.atomic():
            host_request = HostApprovalRequest.objects.select_for_update().filter(id=request_id).first()
            if host_request is None:
                return NotFound('Host request')
            if not host_request.is_pending:
                return AlreadyDecided(host_request.status)
            host_request.status = outcome
            host_request.decided_by = admin
            host_request.decided_at = now or timezone.now()
            host_request.save(update_fields=['status', 'decided_by', 'decided_at'])

        logger.info(f"Host request {host_request.id} {outcome.lower()} by admin {admin.id}")
        return host_request

    @staticmethod
    def is_approved_host(user):
        if user is None or not getattr(user, 'pk', None):
            return False
        return HostApprovalRequest.objects.filter(user=user, status=HostApprovalRequest.APPROVED).exists()

    @staticmethod
    def pending_requests():
        return HostApprovalRequest.objects.filter(status=HostApprovalRequest.PENDING).select_related('user')
