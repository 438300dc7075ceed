"""
Tests for the User model and manager.
"""
import pytest

from apps.accounts.models import User
from apps.accounts.backends import EmailAuthBackend


@pytest.mark.django_db
class TestUserManager:
    """Test user creation helpers."""

    def test_create_user_hashes_password(self):
        """Passwords are stored hashed and verified with check_password."""
        user = User.objects.create_user(email='seller@Example.COM', password='pa55word!')

        assert user.email == 'seller@example.com'
        assert user.password_hash != 'pa55word!'
        assert user.check_password('pa55word!')
        assert not user.check_password('wrong')
        assert user.role == User.ROLE_PRIVATE
        assert user.is_active

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email='')

    def test_create_superuser_is_admin(self):
        admin = User.objects.create_superuser(email='root@example.com', password='pa55word!')

        assert admin.role == User.ROLE_ADMIN
        assert admin.is_admin
        assert admin.is_staff
        assert admin.has_perm('anything')

    def test_admins_excludes_inactive(self, admin_user):
        User.objects.create_superuser(email='gone@example.com', is_active=False)

        assert list(User.objects.admins()) == [admin_user]


@pytest.mark.django_db
class TestUserRoles:
    """Test role checks used by intake."""

    def test_has_role_matches_current_role(self, user):
        user.role = User.ROLE_DEALER

        assert user.has_role('dealer')
        assert not user.has_role('provider')

    def test_coordinator_profile_counts_as_role(self, user):
        """Coordinators keep their base role but hold the coordinator role."""
        user.role = User.ROLE_DEALER
        user.coordinator_profile = {'is_coordinator': True, 'stations': ['Nairobi CBD']}

        assert user.has_role('coordinator')
        assert user.has_role('dealer')

    def test_empty_profile_is_not_coordinator(self, user):
        assert not user.is_coordinator
        assert not user.has_role('coordinator')

    def test_private_user_is_not_staff(self, user):
        assert not user.is_admin
        assert not user.is_staff
        assert not user.has_module_perms('role_requests')


@pytest.mark.django_db
class TestEmailAuthBackend:
    """Test admin-site authentication."""

    def test_authenticates_with_email(self, user):
        backend = EmailAuthBackend()

        assert backend.authenticate(None, username='buyer@example.com', password='s3cure-pass') == user

    def test_rejects_wrong_password(self, user):
        backend = EmailAuthBackend()

        assert backend.authenticate(None, username='buyer@example.com', password='nope') is None

    def test_rejects_inactive_user(self, user):
        user.is_active = False
        user.save()

        assert EmailAuthBackend().authenticate(None, username=user.email, password='s3cure-pass') is None

    def test_unknown_email(self, db):
        assert EmailAuthBackend().authenticate(None, username='ghost@example.com', password='x') is None

    def test_get_user(self, user):
        assert EmailAuthBackend().get_user(user.id) == user
