import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from accounts.services import HostApprovalWorkflow
from configuration.store import PlatformConfigStore
from utils.failures import HostNotApproved, IncompleteDraft, PaymentRequired
from .models import CreationPayment, Hackathon, HackathonStatus, Track

logger = logging.getLogger(__name__)

DATE_FIELDS = ('registration_start', 'registration_end', 'start_date', 'submission_deadline', 'end_date')
REQUIRED_FIELDS = ('title', 'banner_image', 'logo_image') + DATE_FIELDS + ('contact_email', 'contact_person')

HACKATHON_FIELDS = (
    'title', 'description', 'category', 'banner_image', 'logo_image', 'rules', 'venue', 'is_virtual',
    'prize_amount', 'min_team_size', 'max_team_size', 'allow_individual',
    'contact_email', 'contact_person', 'contact_phone',
) + DATE_FIELDS


@dataclass(frozen=True)
class Created:
    hackathon: Hackathon
    payment: Optional[CreationPayment] = None


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def missing_draft_fields(draft):
    missing = [name for name in REQUIRED_FIELDS if _blank(draft.get(name))]
    tracks = draft.get('tracks') or []
    if not tracks:
        missing.append('tracks')
    for index, track in enumerate(tracks):
        if track.get('number') and track['number'] in [t.get('number') for t in tracks[:index]]:
            missing.append(f'tracks[{index}].number')
        if _blank(track.get('title')):
            missing.append(f'tracks[{index}].title')
        if _blank(track.get('document_url')):
            missing.append(f'tracks[{index}].document_url')
    return tuple(missing)


def number_tracks(tracks):
    """Track numbers in draft order; unnumbered tracks take the lowest numbers nobody claimed."""
    taken = {track['number'] for track in tracks if track.get('number')}
    numbers = []
    candidate = 1
    for track in tracks:
        if track.get('number'):
            numbers.append(track['number'])
            continue
        while candidate in taken:
            candidate += 1
        taken.add(candidate)
        numbers.append(candidate)
    return numbers


class CreationGate:
    """
    Paid hackathon creation.

    Only approved hosts get through, and only with a complete draft. When the
    ``creation_fee`` config value is positive the first call answers
    ``PaymentRequired`` and the host comes back through ``confirm_creation``
    with the payment receipt. Hackathons always start in DRAFT.
    """

    @staticmethod
    def _check(host, draft):
        if not HostApprovalWorkflow.is_approved_host(host):
            logger.warning(f"User {getattr(host, 'id', None)} tried to create a hackathon without host approval")
            return HostNotApproved()
        missing = missing_draft_fields(draft)
        if missing:
            return IncompleteDraft(missing)
        return None

    @staticmethod
    def request_creation(host, draft):
        failure = CreationGate._check(host, draft)
        if failure is not None:
            return failure
        fee = PlatformConfigStore.creation_fee()
        if fee > 0:
            return PaymentRequired(fee)
        return Created(CreationGate._persist(host, draft))

    @staticmethod
    def confirm_creation(host, draft, receipt):
        failure = CreationGate._check(host, draft)
        if failure is not None:
            return failure
        fee = PlatformConfigStore.creation_fee()
        receipt = receipt or {}
        payment_id = (receipt.get('payment_id') or '').strip()
        provider_payment_id = (receipt.get('provider_payment_id') or '').strip()
        if not payment_id or not provider_payment_id:
            return PaymentRequired(fee)

        with transaction.atomic():
            hackathon = CreationGate._persist(host, draft)
            payment = CreationPayment.objects.create(
                hackathon=hackathon,
                host=host,
                amount=fee,
                payment_id=payment_id,
                provider_payment_id=provider_payment_id,
            )
        logger.info(f"Recorded creation payment {payment_id} of {fee} for hackathon {hackathon.id}")
        return Created(hackathon, payment)

    @staticmethod
    @transaction.atomic
    def _persist(host, draft):
        fields = {name: draft[name] for name in HACKATHON_FIELDS if draft.get(name) is not None}
        hackathon = Hackathon.objects.create(organizer=host, status=HackathonStatus.DRAFT, **fields)
        for number, track in zip(number_tracks(draft['tracks']), draft['tracks']):
            Track.objects.create(
                hackathon=hackathon,
                number=number,
                title=track['title'].strip(),
                description=track.get('description') or '',
                document_url=track['document_url'],
            )
        logger.info(f"Hackathon {hackathon.id} '{hackathon.title}' created in DRAFT by user {host.id}")
        return hackathon
