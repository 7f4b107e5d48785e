"""
Unit Tests for the Role Policy
"""
import pytest

from django.contrib.auth.models import AnonymousUser

from panchayat_tax import permissions
from panchayat_tax.models import User


@pytest.mark.django_db
class TestCan:

    def test_super_admin_can_do_everything(self, super_admin):
        assert all(permissions.can(action, super_admin) for action in permissions.ALL_ACTIONS)

    def test_admin_generates_bills_but_not_settings(self, admin_user):
        assert permissions.can(permissions.GENERATE_BILL, admin_user)
        assert permissions.can(permissions.RECORD_PAYMENT, admin_user)
        assert not permissions.can(permissions.UPDATE_SETTINGS, admin_user)
        assert not permissions.can(permissions.MANAGE_USERS, admin_user)

    def test_viewer_is_read_only(self, viewer):
        assert permissions.can(permissions.VIEW, viewer)
        assert permissions.can(permissions.EXPORT_REPORT, viewer)
        assert not permissions.can(permissions.GENERATE_BILL, viewer)

    def test_inactive_user_can_do_nothing(self, admin_user):
        admin_user.is_active = False

        assert not permissions.can(permissions.VIEW, admin_user)

    def test_anonymous(self):
        assert not permissions.can(permissions.VIEW, AnonymousUser())
        assert not permissions.can(permissions.VIEW, None)

    def test_super_admin_by_email(self, settings, admin_user):
        settings.SUPER_ADMIN_EMAIL = 'Secretary@Loni.example.in'

        assert admin_user.is_super_admin
        assert permissions.can(permissions.UPDATE_SETTINGS, admin_user)

    def test_unknown_action(self, viewer):
        with pytest.raises(ValueError):
            permissions.can('launch_rocket', viewer)


class TestRoles:

    def test_default_role_is_viewer(self):
        assert User().role == User.ROLE_VIEWER
