"""
Role policy - which staff role may perform which action
"""

from .models import User


VIEW = 'view'
EXPORT_REPORT = 'export_report'
GENERATE_BILL = 'generate_bill'
MANAGE_PROPERTIES = 'manage_properties'
RECORD_PAYMENT = 'record_payment'
UPDATE_SETTINGS = 'update_settings'
MANAGE_USERS = 'manage_users'

ROLE_ACTIONS = {
    User.ROLE_VIEWER: {VIEW, EXPORT_REPORT},
    User.ROLE_ADMIN: {VIEW, EXPORT_REPORT, GENERATE_BILL, MANAGE_PROPERTIES, RECORD_PAYMENT},
}

ALL_ACTIONS = {
    VIEW, EXPORT_REPORT, GENERATE_BILL, MANAGE_PROPERTIES, RECORD_PAYMENT,
    UPDATE_SETTINGS, MANAGE_USERS,
}


def can(action, actor):
    """True when the actor's role allows the action; super admins may do everything"""
    if action not in ALL_ACTIONS:
        raise ValueError(f"Unknown action: {action!r}")
    if actor is None or not getattr(actor, 'is_authenticated', False) or not actor.is_active:
        return False
    if actor.is_super_admin:
        return True
    return action in ROLE_ACTIONS.get(actor.role, set())
