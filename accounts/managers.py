from django.contrib.auth.models import BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Creates participants by default; admins are participants with the admin flags set."""

    def _create(self, email, username, first_name, last_name, password, **flags):
        if not email:
            raise ValueError(_('An email address is required.'))
        try:
            validate_email(email)
        except ValidationError:
            raise ValueError(_('Please enter a valid email address.'))
        if not username:
            raise ValueError(_('A username is required.'))
        if not first_name:
            raise ValueError(_('A first name is required.'))
        user = self.model(
            email=self.normalize_email(email),
            username=username,
            first_name=first_name,
            last_name=last_name,
            **flags
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, username, first_name, last_name=None, password=None, **extra_fields):
        extra_fields.setdefault('is_participant', True)
        return self._create(email, username, first_name, last_name, password, **extra_fields)

    def create_superuser(self, email, username, first_name, last_name=None, password=None, **extra_fields):
        for flag in ('is_admin', 'is_staff', 'is_superuser', 'is_verified'):
            if extra_fields.setdefault(flag, True) is not True:
                raise ValueError(_('Superuser must have %(flag)s=True.') % {'flag': flag})
        return self._create(email, username, first_name, last_name, password, **extra_fields)
