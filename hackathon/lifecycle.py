"""
Hackathon status transitions.

PUBLISHED and LIVE are two names for the same "live" state. REJECTED,
CANCELLED and COMPLETED have no way out, and a live hackathon can never be
cancelled or rejected so that registered participants are not stranded.

``transition`` only decides; the caller saves the new status.
"""
from dataclasses import dataclass

from utils.failures import Forbidden, IncompleteHackathon, InvalidTransition
from .models import HackathonStatus

LIVE_STATUSES = frozenset({HackathonStatus.PUBLISHED, HackathonStatus.LIVE})
# Targets only an administrator may move a hackathon into.
ADMIN_ONLY_TARGETS = frozenset({HackathonStatus.REJECTED})

TRANSITIONS = {
    HackathonStatus.DRAFT: frozenset({
        HackathonStatus.UPCOMING,
        HackathonStatus.PUBLISHED,
        HackathonStatus.LIVE,
        HackathonStatus.CANCELLED,
        HackathonStatus.REJECTED,
    }),
    HackathonStatus.UPCOMING: frozenset({
        HackathonStatus.PUBLISHED,
        HackathonStatus.LIVE,
        HackathonStatus.CANCELLED,
        HackathonStatus.REJECTED,
    }),
    HackathonStatus.PUBLISHED: frozenset({HackathonStatus.COMPLETED, HackathonStatus.UPCOMING}),
    HackathonStatus.LIVE: frozenset({HackathonStatus.COMPLETED, HackathonStatus.UPCOMING}),
    HackathonStatus.COMPLETED: frozenset(),
    HackathonStatus.REJECTED: frozenset(),
    HackathonStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class Transitioned:
    from_status: str
    to_status: str


def is_live(status):
    return status in LIVE_STATUSES


def can_transition(from_status, to_status):
    return to_status in TRANSITIONS.get(from_status, frozenset())


def allowed_targets(from_status):
    return sorted(TRANSITIONS.get(from_status, frozenset()))


def is_owner(hackathon, user):
    user_id = getattr(user, 'pk', None)
    return user_id is not None and user_id == hackathon.organizer_id


def is_admin(user):
    return bool(getattr(user, 'is_admin', False))


def missing_live_content(hackathon):
    """Names of the content fields a hackathon still needs before it can go live."""
    missing = []
    if not hackathon.banner_image:
        missing.append('banner_image')
    if not hackathon.logo_image:
        missing.append('logo_image')
    if not (hackathon.rules or '').strip():
        missing.append('rules')
    if hackathon.pk is None or not hackathon.tracks.exists():
        missing.append('tracks')
    return tuple(missing)


def registration_open(hackathon, now):
    return is_live(hackathon.status) and hackathon.registration_start <= now <= hackathon.registration_end


def submission_window_open(hackathon, now):
    return hackathon.start_date <= now <= hackathon.submission_deadline


def transition(hackathon, target_status, actor):
    """
    Decide whether ``actor`` may move ``hackathon`` to ``target_status``.

    Checks run in a fixed order: who is asking, whether the edge exists, then
    whether a hackathon going live has its content. Returns ``Transitioned``
    or the first failure hit.
    """
    current = hackathon.status
    if not (is_owner(hackathon, actor) or is_admin(actor)):
        return Forbidden('Only the organizer or an administrator can change this hackathon\'s status.')
    if target_status in ADMIN_ONLY_TARGETS and not is_admin(actor):
        return Forbidden('Only an administrator can reject a hackathon.')
    if not can_transition(current, target_status):
        return InvalidTransition(current, target_status)
    if is_live(target_status):
        missing = missing_live_content(hackathon)
        if missing:
            return IncompleteHackathon(missing)
    return Transitioned(current, target_status)
