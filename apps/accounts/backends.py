"""
Email authentication backend for the Django admin.

API requests authenticate with bearer tokens; this backend only serves
session logins to the admin site.
"""
from django.contrib.auth.backends import BaseBackend
from django.contrib.auth import get_user_model


class EmailAuthBackend(BaseBackend):
    """Authenticate using email address instead of username."""

    def authenticate(self, request, username=None, password=None, **kwargs):
        # Django admin passes email as 'username'
        email = username or kwargs.get('email')
        if not email or not password:
            return None

        User = get_user_model()
        try:
            user = User.objects.get(email=User.objects.normalize_email(email))
        except User.DoesNotExist:
            # Run the hasher once to reduce timing difference for unknown users
            User().set_password(password)
            return None

        if user.check_password(password) and user.is_active:
            return user
        return None

    def get_user(self, user_id):
        User = get_user_model()
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
