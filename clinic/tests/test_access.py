import pytest

from clinic.models import Role
from clinic.services.access import (
    NAVIGATION,
    RESOURCE_ALLOWLIST,
    Notice,
    Outcome,
    Resource,
    authorize,
    visible_navigation,
)
from clinic.services.session import ANONYMOUS, UNRESOLVED, Session, SessionState


def as_role(role):
    return Session(SessionState.AUTHENTICATED, subject=f'{role}-user', role=Role(role), user_id=1)


def test_unresolved_session_is_pending():
    d = authorize(UNRESOLVED, Resource.BILLING, '/billing')
    assert d.outcome is Outcome.PENDING
    assert d.redirect_to is None


def test_anonymous_is_sent_to_login_with_return_path():
    d = authorize(ANONYMOUS, Resource.PATIENTS, '/patients/p1')
    assert d.outcome is Outcome.DENY
    assert d.notice is Notice.AUTHENTICATION_REQUIRED
    assert d.redirect_to == '/login'
    assert d.return_to == '/patients/p1'
    assert d.login_url == '/login?from=%2Fpatients%2Fp1'


def test_anonymous_is_denied_even_unrestricted_resources():
    assert authorize(ANONYMOUS, Resource.DASHBOARD).notice is Notice.AUTHENTICATION_REQUIRED


def test_patient_is_denied_billing_and_sent_home():
    d = authorize(as_role('patient'), Resource.BILLING, '/billing')
    assert d.outcome is Outcome.DENY
    assert d.notice is Notice.ACCESS_DENIED
    assert d.redirect_to == '/'
    assert d.return_to is None


def test_finance_may_open_billing():
    assert authorize(as_role('finance'), 'billing').allowed


@pytest.mark.parametrize('resource', list(Resource))
def test_admin_is_allowed_everywhere(resource):
    assert authorize(as_role('admin'), resource).allowed


@pytest.mark.parametrize('role', list(Role))
@pytest.mark.parametrize('resource', [Resource.DASHBOARD, Resource.SETTINGS, Resource.PROFILE])
def test_unrestricted_resources(role, resource):
    assert authorize(as_role(role), resource).allowed


@pytest.mark.parametrize('role', [r for r in Role if r is not Role.ADMIN])
@pytest.mark.parametrize('resource', list(Resource))
def test_allowlist_decides_for_non_admins(role, resource):
    allowed = RESOURCE_ALLOWLIST[resource]
    expected = allowed is None or role in allowed
    assert authorize(as_role(role), resource).allowed is expected


def test_only_admin_manages_the_database():
    for role in Role:
        assert authorize(as_role(role), Resource.DATABASE_MANAGEMENT).allowed is (role is Role.ADMIN)


def test_unknown_resource_is_rejected():
    with pytest.raises(ValueError):
        authorize(as_role('admin'), 'wards')


def test_unexpected_role_raises():
    with pytest.raises(ValueError):
        authorize(Session(SessionState.AUTHENTICATED, subject='x', role='janitor'), Resource.PATIENTS)


# ---------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------
def titles(nav):
    return {section: [item.title for item in items] for section, items in nav.items()}


def test_signed_out_sessions_see_no_navigation():
    for session in (ANONYMOUS, UNRESOLVED):
        assert titles(visible_navigation(session)) == {'main': [], 'secondary': []}


def test_admin_sees_everything():
    nav = visible_navigation(as_role('admin'))
    assert nav == {section: list(items) for section, items in NAVIGATION.items()}


def test_patient_navigation():
    assert titles(visible_navigation(as_role('patient'))) == {
        'main': ['Dashboard', 'Doctors', 'Appointments'],
        'secondary': ['Medical Records', 'Settings'],
    }


def test_pharmacist_navigation():
    assert titles(visible_navigation(as_role('pharmacist'))) == {
        'main': ['Dashboard'],
        'secondary': ['Pharmacy', 'Inventory', 'Settings'],
    }


@pytest.mark.parametrize('role', list(Role))
def test_navigation_agrees_with_the_gate(role):
    session = as_role(role)
    visible = {item.href for items in visible_navigation(session).values() for item in items}
    for items in NAVIGATION.values():
        for item in items:
            assert (item.href in visible) is authorize(session, item.resource).allowed
