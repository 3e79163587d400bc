import logging

from django.db import IntegrityError, transaction

from accounts.models import User
from team.models import Team, TeamMember
from team.validators import validate_team_composition
from utils.failures import AlreadyRegistered, Failure, Forbidden, IneligibleWindow
from .eligibility import Action, evaluate
from .lifecycle import is_live, is_owner, submission_window_open
from .models import Registration, Submission

logger = logging.getLogger(__name__)

SUBMISSION_FIELDS = ('title', 'description', 'repository_url', 'demo_url', 'presentation_url')


def register_for_hackathon(hackathon, user, registration_type, team_name='', members=None, track=None, description='', *, now):
    """
    Register ``user`` for ``hackathon`` as an individual or as a team leader.

    Returns the new ``Registration`` or a failure. The unique
    (hackathon, user) constraint settles concurrent attempts.
    """
    if Registration.objects.filter(hackathon=hackathon, user=user).exists():
        return AlreadyRegistered()
    if is_owner(hackathon, user):
        return Forbidden('Organizers cannot register for their own hackathon.')
    if evaluate(hackathon, user, None, None, now=now) != Action.REGISTER:
        logger.warning(f"User {user.id} tried to register for hackathon {hackathon.id} outside the registration window")
        return IneligibleWindow('register')

    draft = validate_team_composition(
        hackathon, user, registration_type,
        team_name=team_name, members=members, track=track, description=description,
    )
    if isinstance(draft, Failure):
        return draft

    try:
        with transaction.atomic():
            team = Team.objects.create(name=draft.name, description=draft.description)
            for position, member in enumerate(draft.members):
                linked = user if member.user_id == user.pk else User.objects.filter(email__iexact=member.email).first()
                TeamMember.objects.create(
                    team=team,
                    user=linked,
                    name=member.name,
                    email=member.email,
                    role=member.role,
                    position=position,
                )
            registration = Registration.objects.create(
                hackathon=hackathon,
                user=user,
                team=team,
                registration_type=draft.registration_type,
                track=hackathon.tracks.filter(number=draft.track).first() if draft.track else None,
                registered_at=now,
            )
    except IntegrityError:
        return AlreadyRegistered()

    logger.info(f"User {user.id} registered for hackathon {hackathon.id} as team '{team.name}' ({draft.size} members)")
    return registration


def save_submission(registration, payload, finalize=False, *, now):
    """
    Create or edit the submission of a registration.

    A submission can be created and edited between the hackathon's start and
    its submission deadline. After the deadline a draft that was never
    finalized can still be edited but no longer finalized; a finalized
    submission is locked. Nothing moves unless the hackathon is live.
    """
    hackathon = registration.hackathon
    submission = Submission.objects.filter(registration=registration).first()
    if not is_live(hackathon.status):
        logger.warning(f"Registration {registration.id} tried to save a submission while hackathon {hackathon.id} is {hackathon.status}")
        if submission is None:
            return IneligibleWindow('create_submission')
        return IneligibleWindow('finalize_submission' if finalize else 'edit_submission')
    in_window = submission_window_open(hackathon, now)

    if submission is None:
        if not in_window:
            return IneligibleWindow('create_submission')
        submission = Submission(registration=registration)
    elif not in_window:
        if now < hackathon.start_date or submission.is_finalized:
            return IneligibleWindow('edit_submission')
        if finalize:
            return IneligibleWindow('finalize_submission')

    for name in SUBMISSION_FIELDS:
        if name in payload:
            setattr(submission, name, payload[name] or '')
    if finalize and not submission.is_finalized:
        submission.is_draft = False
        submission.submitted_at = now
    submission.save()

    state = 'finalized' if submission.is_finalized else 'draft'
    logger.info(f"Submission {submission.id} for registration {registration.id} saved ({state})")
    return submission
