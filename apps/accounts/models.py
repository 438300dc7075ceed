"""
User model for the MotorHub marketplace.

A user starts as a ``private`` member and may be elevated to a privileged
role (dealer, provider, ministry official, transport coordinator) through an
approved role request. The role and the embedded ministry/coordinator
profiles are written only by the provisioning service.
"""
from django.db import models
from django.contrib.auth.hashers import make_password, check_password
from django.utils import timezone
from django.utils.crypto import salted_hmac
from apps.core.models import BaseModel


class UserManager(models.Manager):
    """
    Manager for User queries.

    Compatible with Django's authentication system and admin interface.
    """

    def active(self):
        """Return only active users."""
        return self.filter(is_active=True)

    def admins(self):
        """Return active users who may review role requests."""
        return self.active().filter(role=User.ROLE_ADMIN)

    def create_user(self, email, password=None, **extra_fields):
        """Create a new user with hashed password."""
        if not email:
            raise ValueError('Email address is required')

        email = self.normalize_email(email)
        extra_fields.setdefault('is_active', True)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create a platform administrator.

        Required for Django's createsuperuser command.
        """
        extra_fields['role'] = User.ROLE_ADMIN
        return self.create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_email(email):
        """Lowercase the domain part of the email address."""
        email = email or ''
        try:
            email_name, domain_part = email.strip().rsplit('@', 1)
        except ValueError:
            return email
        return email_name + '@' + domain_part.lower()

    def get_by_natural_key(self, email):
        return self.get(**{self.model.USERNAME_FIELD: email})


class User(BaseModel):
    """
    Marketplace identity and the AUTH_USER_MODEL for the application.

    ``dealership_id`` and ``provider_account_id`` point at the privileged
    accounts created for this user on approval.
    """

    ROLE_PRIVATE = 'private'
    ROLE_DEALER = 'dealer'
    ROLE_PROVIDER = 'provider'
    ROLE_MINISTRY = 'ministry'
    ROLE_COORDINATOR = 'coordinator'
    ROLE_ADMIN = 'admin'

    ROLE_CHOICES = [
        (ROLE_PRIVATE, 'Private'),
        (ROLE_DEALER, 'Dealer'),
        (ROLE_PROVIDER, 'Service Provider'),
        (ROLE_MINISTRY, 'Ministry Official'),
        (ROLE_COORDINATOR, 'Transport Coordinator'),
        (ROLE_ADMIN, 'Administrator'),
    ]

    email = models.EmailField(
        unique=True,
        help_text="User email address (unique globally)"
    )
    password_hash = models.CharField(
        max_length=255,
        blank=True,
        help_text="Hashed password"
    )
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_PRIVATE,
        db_index=True,
        help_text="Current platform role"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether user account is active"
    )
    last_login = models.DateTimeField(null=True, blank=True)

    # Ministry officials carry their ministry details on the user record
    ministry_info = models.JSONField(
        default=dict,
        blank=True,
        help_text="Ministry name, department, position and employee id"
    )
    # Coordinators keep their role and get a profile flag instead
    coordinator_profile = models.JSONField(
        default=dict,
        blank=True,
        help_text="is_coordinator flag, stations, approval metadata"
    )

    dealership_id = models.UUIDField(
        null=True,
        blank=True,
        help_text="Dealer account provisioned for this user"
    )
    provider_account_id = models.UUIDField(
        null=True,
        blank=True,
        help_text="Service provider account provisioned for this user"
    )

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['role', 'is_active'], name='users_role_active_idx'),
        ]

    def __str__(self):
        return self.email

    @property
    def password(self):
        return self.password_hash

    @password.setter
    def password(self, value):
        self.password_hash = value

    def check_password(self, raw_password):
        return check_password(raw_password, self.password_hash)

    def set_password(self, raw_password):
        self.password_hash = make_password(raw_password)

    def get_session_auth_hash(self):
        """Session hash for admin logins; changes when the password changes."""
        return salted_hmac(
            'apps.accounts.models.User.get_session_auth_hash',
            self.password_hash,
            algorithm='sha256',
        ).hexdigest()

    def update_last_login(self):
        self.last_login = timezone.now()
        self.save(update_fields=['last_login'])

    def get_full_name(self):
        if self.first_name or self.last_name:
            return f"{self.first_name} {self.last_name}".strip()
        return self.email

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_coordinator(self):
        return bool((self.coordinator_profile or {}).get('is_coordinator'))

    def has_role(self, role):
        """
        Whether the user already holds ``role``.

        Coordinators keep their base role, so the profile flag counts too.
        """
        if self.role == role:
            return True
        return role == self.ROLE_COORDINATOR and self.is_coordinator

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    @property
    def is_staff(self):
        return self.is_admin

    @property
    def is_superuser(self):
        return self.is_admin

    def has_perm(self, perm, obj=None):
        return self.is_active and self.is_admin

    def has_perms(self, perm_list, obj=None):
        return self.is_active and self.is_admin

    def has_module_perms(self, app_label):
        return self.is_active and self.is_admin

    def natural_key(self):
        return (self.email,)
