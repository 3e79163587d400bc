import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings

from .models import PlatformConfig

logger = logging.getLogger(__name__)

CREATION_FEE = 'creation_fee'

DESCRIPTIONS = {
    CREATION_FEE: 'Fee charged for creating a new hackathon',
}


def _parse_non_negative_decimal(value):
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"'{value}' is not a number.")
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"'{value}' must be a non-negative amount.")
    return amount


# Keys whose values must parse; everything else is stored as free text.
VALIDATORS = {
    CREATION_FEE: _parse_non_negative_decimal,
}


class PlatformConfigStore:
    """Key/value store for platform parameters administrators can tune at runtime."""

    @staticmethod
    def default_for(key):
        return getattr(settings, 'PLATFORM_CONFIG_DEFAULTS', {}).get(key)

    @staticmethod
    def get(key, default=None):
        entry = PlatformConfig.objects.filter(key=key).first()
        if entry is not None:
            return entry.value
        if default is not None:
            return default
        return PlatformConfigStore.default_for(key)

    @staticmethod
    def get_entry(key):
        """Return ``{key, value, description}`` for a key, falling back to its default."""
        entry = PlatformConfig.objects.filter(key=key).first()
        if entry is not None:
            return {'key': entry.key, 'value': entry.value, 'description': entry.description}
        return {
            'key': key,
            'value': PlatformConfigStore.default_for(key),
            'description': DESCRIPTIONS.get(key, ''),
        }

    @staticmethod
    def validate_value(key, value):
        validator = VALIDATORS.get(key)
        if validator is not None:
            validator(value)
        return str(value).strip()

    @staticmethod
    def set(key, value, description=None):
        value = PlatformConfigStore.validate_value(key, value)
        defaults = {'value': value}
        if description is not None:
            defaults['description'] = description
        elif not PlatformConfig.objects.filter(key=key).exists():
            defaults['description'] = DESCRIPTIONS.get(key, '')
        entry, _ = PlatformConfig.objects.update_or_create(key=key, defaults=defaults)
        logger.info(f"Platform config '{key}' set to '{value}'")
        return entry

    @staticmethod
    def get_decimal(key, default='0'):
        raw = PlatformConfigStore.get(key, default)
        try:
            return _parse_non_negative_decimal(raw)
        except ValueError:
            logger.warning(f"Platform config '{key}' holds an invalid amount '{raw}', using '{default}'")
            return _parse_non_negative_decimal(default)

    @staticmethod
    def creation_fee():
        return PlatformConfigStore.get_decimal(CREATION_FEE, PlatformConfigStore.default_for(CREATION_FEE) or '0')

    @staticmethod
    def all():
        return PlatformConfig.objects.all()
