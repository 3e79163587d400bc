"""
Team composition rules for hackathon registration.

``validate_team_composition`` collects every problem it finds so the
registration form can show them all at once. It never touches the database
beyond reading the hackathon's tracks.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from utils.failures import TeamCompositionViolation
from .models import TeamMember

INDIVIDUAL = 'INDIVIDUAL'
TEAM = 'TEAM'
REGISTRATION_TYPES = (INDIVIDUAL, TEAM)


@dataclass(frozen=True)
class MemberDraft:
    name: str
    email: str
    role: str = TeamMember.MEMBER
    user_id: Optional[int] = None


@dataclass(frozen=True)
class TeamDraft:
    registration_type: str
    name: str
    description: str
    members: Tuple[MemberDraft, ...]
    track: Optional[int] = None

    @property
    def size(self):
        return len(self.members)

    @property
    def leader(self):
        return self.members[0]


def _blank(value):
    return value is None or not str(value).strip()


def _is_valid_email(value):
    try:
        validate_email(value)
    except ValidationError:
        return False
    return True


def _registrant_name(registrant):
    full_name = getattr(registrant, 'get_full_name', '')
    if callable(full_name):
        full_name = full_name()
    return (full_name or '').strip() or getattr(registrant, 'username', '')


def track_numbers(hackathon):
    return sorted(track.number for track in hackathon.tracks.all())


def validate_track(hackathon, track, violations):
    defined = track_numbers(hackathon)
    if not defined:
        return None
    if track in (None, ''):
        violations.append({'field': 'track', 'message': 'Please select a problem statement track.'})
        return None
    try:
        track = int(track)
    except (TypeError, ValueError):
        track = None
    if track not in defined:
        violations.append({'field': 'track', 'message': f"Track must be one of {defined}."})
        return None
    return track


def validate_team_composition(hackathon, registrant, registration_type, team_name='', members=None, track=None, description=''):
    """
    Check a registration request against the hackathon's team rules.

    ``members`` are the people registered alongside the registrant, each a
    mapping with ``name`` and ``email``. The registrant is always the LEADER
    and counts towards the team size.

    Returns a ``TeamDraft`` or a ``TeamCompositionViolation`` listing every
    problem found.
    """
    members = list(members or [])
    violations = []
    registration_type = (registration_type or '').upper()

    leader = MemberDraft(
        name=_registrant_name(registrant),
        email=(registrant.email or '').strip().lower(),
        role=TeamMember.LEADER,
        user_id=getattr(registrant, 'pk', None),
    )

    if registration_type not in REGISTRATION_TYPES:
        violations.append({'field': 'registration_type', 'message': 'Registration type must be INDIVIDUAL or TEAM.'})
        validate_track(hackathon, track, violations)
        return TeamCompositionViolation(violations)

    if registration_type == INDIVIDUAL:
        if not hackathon.allow_individual:
            violations.append({'field': 'registration_type', 'message': 'This hackathon does not allow individual participation.'})
        if members:
            violations.append({'field': 'members', 'message': 'Individual registrations cannot include other members.'})
        name = leader.name if _blank(team_name) else team_name.strip()
        member_drafts = (leader,)
    else:
        if _blank(team_name):
            violations.append({'field': 'team_name', 'message': 'Please enter a team name.'})
        name = (team_name or '').strip()

        total = len(members) + 1
        if total < hackathon.min_team_size:
            violations.append({'field': 'members', 'message': f"Minimum team size is {hackathon.min_team_size} members."})
        if total > hackathon.max_team_size:
            violations.append({'field': 'members', 'message': f"Maximum team size is {hackathon.max_team_size} members."})

        seen_emails = {leader.email}
        drafts = [leader]
        for index, member in enumerate(members):
            member_name = (member.get('name') or '').strip()
            member_email = (member.get('email') or '').strip().lower()
            if _blank(member_name):
                violations.append({'field': f'members[{index}].name', 'message': f"Please enter name for team member {index + 1}."})
            if _blank(member_email):
                violations.append({'field': f'members[{index}].email', 'message': f"Please enter email for team member {index + 1}."})
            elif not _is_valid_email(member_email):
                violations.append({'field': f'members[{index}].email', 'message': f"Invalid email for team member {index + 1}."})
            elif member_email in seen_emails:
                violations.append({'field': f'members[{index}].email', 'message': f"Duplicate email for team member {index + 1}."})
            if (member.get('role') or TeamMember.MEMBER).upper() != TeamMember.MEMBER:
                violations.append({'field': f'members[{index}].role', 'message': 'Only the registrant can lead the team.'})
            seen_emails.add(member_email)
            drafts.append(MemberDraft(name=member_name, email=member_email))
        member_drafts = tuple(drafts)

    selected_track = validate_track(hackathon, track, violations)

    if violations:
        return TeamCompositionViolation(violations)
    return TeamDraft(
        registration_type=registration_type,
        name=name,
        description=(description or '').strip(),
        members=member_drafts,
        track=selected_track,
    )
