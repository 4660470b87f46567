from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


DISPLAY_NAME_MAX_LENGTH = 60


def normalize_login_email(email):
    """Login emails compare case-insensitively, so they are stored lower-cased."""
    return (email or '').strip().lower()


class UserManager(BaseUserManager):
    """Creates roommates keyed by their lower-cased email."""

    use_in_migrations = True

    def _create(self, email, password, **fields):
        email = normalize_login_email(email)
        if not email:
            raise ValueError('Email is required')

        # Roommates always have a name to show on balances and settlements
        if not (fields.get('display_name') or '').strip():
            fields['display_name'] = email.split('@')[0][:DISPLAY_NAME_MAX_LENGTH]

        user = self.model(email=email, **fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **fields):
        fields.setdefault('is_staff', False)
        fields.setdefault('is_superuser', False)
        return self._create(email, password, **fields)

    def create_superuser(self, email, password=None, **fields):
        fields.update(is_staff=True, is_superuser=True)
        return self._create(email, password, **fields)


class User(AbstractBaseUser, PermissionsMixin):
    """A roommate. Signs in with email, shown to others by display name."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    display_name = models.CharField(max_length=DISPLAY_NAME_MAX_LENGTH)
    avatar_url = models.URLField(blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    joined_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['display_name']

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.display_name
