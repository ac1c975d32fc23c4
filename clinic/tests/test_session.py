import pytest
from rest_framework.authtoken.models import Token

from clinic.models import Role, User
from clinic.services.session import SessionManager, SessionState, session_for_user

pytestmark = pytest.mark.django_db


@pytest.fixture
def doctor():
    return User.objects.create_user(username='jsmith', password='P@ssw0rd1', role=Role.DOCTOR)


def test_starts_unresolved():
    assert SessionManager().current.state is SessionState.UNRESOLVED


def test_start_without_credential_is_unauthenticated():
    assert SessionManager().start().state is SessionState.UNAUTHENTICATED


def test_login_with_matching_role(doctor):
    m = SessionManager()
    assert m.login('jsmith', 'P@ssw0rd1', 'doctor') is True
    s = m.current
    assert s.state is SessionState.AUTHENTICATED
    assert s.subject == 'jsmith'
    assert s.role is Role.DOCTOR
    assert Token.objects.filter(user=doctor, key=m.token_key).exists()


def test_login_cannot_claim_another_role(doctor):
    m = SessionManager()
    assert m.login('jsmith', 'P@ssw0rd1', 'admin') is False
    assert m.current.state is SessionState.UNAUTHENTICATED
    assert m.token_key is None
    assert not Token.objects.filter(user=doctor).exists()


def test_login_with_wrong_password(doctor):
    m = SessionManager()
    assert m.login('jsmith', 'nope', 'doctor') is False
    assert m.current.state is SessionState.UNAUTHENTICATED


def test_stored_credential_is_restored(doctor):
    first = SessionManager()
    first.login('jsmith', 'P@ssw0rd1', 'doctor')
    again = SessionManager(token_key=first.token_key)
    assert again.start().role is Role.DOCTOR


def test_stale_credential_is_discarded():
    m = SessionManager(token_key='0' * 40)
    assert m.start().state is SessionState.UNAUTHENTICATED
    assert m.token_key is None


def test_inactive_user_is_not_authenticated(doctor):
    token = Token.objects.create(user=doctor)
    doctor.is_active = False
    doctor.save()
    assert SessionManager(token_key=token.key).start().state is SessionState.UNAUTHENTICATED


def test_logout_drops_the_token(doctor):
    m = SessionManager()
    m.login('jsmith', 'P@ssw0rd1', 'doctor')
    key = m.token_key
    assert m.logout().state is SessionState.UNAUTHENTICATED
    assert not Token.objects.filter(key=key).exists()
    assert SessionManager(token_key=key).start().state is SessionState.UNAUTHENTICATED


def test_session_for_anonymous():
    assert session_for_user(None).state is SessionState.UNAUTHENTICATED


def test_login_with_unknown_role_fails(doctor):
    m = SessionManager()
    assert m.login('jsmith', 'P@ssw0rd1', 'superuser') is False
    assert m.current.state is SessionState.UNAUTHENTICATED
    assert m.token_key is None
