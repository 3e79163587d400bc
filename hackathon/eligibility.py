"""
Which action a user can take on a hackathon right now.

The rules below are evaluated top to bottom and the first match wins. The
windows can overlap when dates are misconfigured, so the order matters:
the organizer check always comes first and "before start" is checked before
"deadline passed".
"""
from enum import Enum

from .lifecycle import is_live, is_owner
from .models import HackathonStatus


class Action(str, Enum):
    REGISTER = 'REGISTER'
    SUBMISSION_OPENS_SOON = 'SUBMISSION_OPENS_SOON'
    SUBMIT_PROJECT = 'SUBMIT_PROJECT'
    EDIT_SUBMISSION = 'EDIT_SUBMISSION'
    VIEW_SUBMISSION = 'VIEW_SUBMISSION'
    SUBMISSION_DEADLINE_PASSED = 'SUBMISSION_DEADLINE_PASSED'
    VIEW_RESULTS = 'VIEW_RESULTS'
    MANAGE_AS_ORGANIZER = 'MANAGE_AS_ORGANIZER'
    NONE = 'NONE'


def evaluate(hackathon, user, registration=None, submission=None, *, now):
    if is_owner(hackathon, user):
        return Action.MANAGE_AS_ORGANIZER
    if registration is None and is_live(hackathon.status) and now <= hackathon.registration_end:
        return Action.REGISTER
    if hackathon.status == HackathonStatus.COMPLETED:
        return Action.VIEW_RESULTS
    if registration is not None and now < hackathon.start_date:
        return Action.SUBMISSION_OPENS_SOON
    if (registration is not None and submission is None
            and hackathon.start_date <= now <= hackathon.submission_deadline):
        return Action.SUBMIT_PROJECT
    if submission is not None and now <= hackathon.submission_deadline:
        return Action.EDIT_SUBMISSION
    if submission is not None:
        return Action.VIEW_SUBMISSION
    if now > hackathon.submission_deadline:
        return Action.SUBMISSION_DEADLINE_PASSED
    return Action.NONE


def can_register(hackathon, user, registration=None, *, now):
    return evaluate(hackathon, user, registration, None, now=now) == Action.REGISTER


def can_submit(hackathon, user, registration, submission=None, *, now):
    """True when the user may create or edit their submission at ``now``."""
    if registration is None or is_owner(hackathon, user):
        return False
    return evaluate(hackathon, user, registration, submission, now=now) in (
        Action.SUBMIT_PROJECT, Action.EDIT_SUBMISSION,
    )
