"""
Failure values returned by the hackathon core.

Operations return one of these instead of raising, so a caller has to look at
the result before using it::

    result = transition(hackathon, HackathonStatus.LIVE, request.user)
    if isinstance(result, Failure):
        return failure_response(result)
"""
from dataclasses import dataclass, field, asdict
from decimal import Decimal
from typing import List, Tuple

from rest_framework import status
from rest_framework.response import Response


@dataclass(frozen=True)
class Failure:
    code = 'failure'
    http_status = status.HTTP_400_BAD_REQUEST
    message = 'The operation could not be completed.'

    def detail(self):
        return self.message

    def as_dict(self):
        data = {'error': self.code, 'detail': self.detail()}
        for key, value in asdict(self).items():
            if isinstance(value, Decimal):
                value = str(value)
            elif isinstance(value, tuple):
                value = list(value)
            data[key] = value
        return data


@dataclass(frozen=True)
class Forbidden(Failure):
    reason: str = ''

    code = 'forbidden'
    http_status = status.HTTP_403_FORBIDDEN
    message = 'You are not allowed to perform this action.'

    def detail(self):
        return self.reason or self.message


@dataclass(frozen=True)
class NotFound(Failure):
    resource: str = ''

    code = 'not_found'
    http_status = status.HTTP_404_NOT_FOUND

    def detail(self):
        return f"{self.resource or 'Resource'} not found."


@dataclass(frozen=True)
class InvalidTransition(Failure):
    from_status: str = ''
    to_status: str = ''

    code = 'invalid_transition'

    def detail(self):
        return f"Cannot move a hackathon from {self.from_status} to {self.to_status}."


@dataclass(frozen=True)
class IncompleteHackathon(Failure):
    missing_fields: Tuple[str, ...] = ()

    code = 'incomplete_hackathon'

    def detail(self):
        return f"Hackathon is missing required content: {', '.join(self.missing_fields)}."


@dataclass(frozen=True)
class IncompleteDraft(Failure):
    missing_fields: Tuple[str, ...] = ()

    code = 'incomplete_draft'

    def detail(self):
        return f"Hackathon draft is missing required fields: {', '.join(self.missing_fields)}."


@dataclass(frozen=True)
class IneligibleWindow(Failure):
    action: str = ''

    code = 'ineligible_window'

    def detail(self):
        return f"'{self.action}' is not allowed at this time."


@dataclass(frozen=True)
class TeamCompositionViolation(Failure):
    violations: List[dict] = field(default_factory=list)

    code = 'team_composition_violation'
    message = 'The registration has one or more problems.'

    def fields(self):
        return [violation['field'] for violation in self.violations]


@dataclass(frozen=True)
class HostNotApproved(Failure):
    code = 'host_not_approved'
    http_status = status.HTTP_403_FORBIDDEN
    message = 'Your host request has not been approved yet.'


@dataclass(frozen=True)
class AlreadyDecided(Failure):
    current_status: str = ''

    code = 'already_decided'
    http_status = status.HTTP_409_CONFLICT

    def detail(self):
        return f"This host request was already {self.current_status.lower()}."


@dataclass(frozen=True)
class UnknownOutcome(Failure):
    outcome: str = ''

    code = 'unknown_outcome'

    def detail(self):
        return f"'{self.outcome}' is not a host request outcome."

@dataclass(frozen=True)
class AlreadyRegistered(Failure):
    code = 'already_registered'
    http_status = status.HTTP_409_CONFLICT
    message = 'You are already registered for this hackathon.'


@dataclass(frozen=True)
class PaymentRequired(Failure):
    amount: Decimal = Decimal('0')

    code = 'payment_required'
    http_status = status.HTTP_402_PAYMENT_REQUIRED

    def detail(self):
        return f"A creation fee of {self.amount} must be paid before the hackathon is created."


def failure_response(failure):
    return Response(failure.as_dict(), status=failure.http_status)
