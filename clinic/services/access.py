"""
Authorization gate and navigation filter.

Every protected resource has a static allowlist of roles.  The gate turns
a session plus a resource into a :class:`Decision`; navigation entries are
filtered through the same rule so a menu never links to something the
gate would refuse.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from clinic.models import Role
from clinic.services.session import Session, SessionState

LOGIN_PATH = '/login'
HOME_PATH = '/'


class Resource(str, enum.Enum):
    DASHBOARD = 'dashboard'
    SETTINGS = 'settings'
    PROFILE = 'profile'
    PATIENTS = 'patients'
    DOCTORS = 'doctors'
    APPOINTMENTS = 'appointments'
    NEW_APPOINTMENT = 'new-appointment'
    MEDICAL_RECORDS = 'medical-records'
    LAB_RESULTS = 'lab-results'
    PHARMACY = 'pharmacy'
    INVENTORY = 'inventory'
    BILLING = 'billing'
    INVOICES = 'invoices'
    STAFF = 'staff'
    ANALYTICS = 'analytics'
    DATABASE_MANAGEMENT = 'database-management'


R = Role

# None: any authenticated role
RESOURCE_ALLOWLIST: dict[Resource, Optional[frozenset]] = {
    Resource.DASHBOARD: None,
    Resource.SETTINGS: None,
    Resource.PROFILE: None,
    Resource.PATIENTS: frozenset({R.ADMIN, R.DOCTOR, R.NURSE, R.RECEPTIONIST}),
    Resource.DOCTORS: frozenset({R.ADMIN, R.DOCTOR, R.NURSE, R.RECEPTIONIST, R.PATIENT}),
    Resource.APPOINTMENTS: frozenset({R.ADMIN, R.DOCTOR, R.NURSE, R.RECEPTIONIST, R.PATIENT}),
    Resource.NEW_APPOINTMENT: frozenset({R.ADMIN, R.DOCTOR, R.RECEPTIONIST, R.PATIENT}),
    Resource.MEDICAL_RECORDS: frozenset({R.ADMIN, R.DOCTOR, R.NURSE, R.PATIENT}),
    Resource.LAB_RESULTS: frozenset({R.ADMIN, R.DOCTOR, R.NURSE, R.LAB_TECHNICIAN}),
    Resource.PHARMACY: frozenset({R.ADMIN, R.DOCTOR, R.NURSE, R.PHARMACIST}),
    Resource.INVENTORY: frozenset({R.ADMIN, R.PHARMACIST}),
    Resource.BILLING: frozenset({R.ADMIN, R.FINANCE}),
    Resource.INVOICES: frozenset({R.ADMIN, R.FINANCE}),
    Resource.STAFF: frozenset({R.ADMIN}),
    Resource.ANALYTICS: frozenset({R.ADMIN, R.DOCTOR, R.FINANCE}),
    Resource.DATABASE_MANAGEMENT: frozenset({R.ADMIN}),
}

# entity kind -> resource guarding its API
RESOURCE_FOR_KIND = {
    'patients': Resource.PATIENTS,
    'doctors': Resource.DOCTORS,
    'appointments': Resource.APPOINTMENTS,
    'medications': Resource.PHARMACY,
    'lab_tests': Resource.LAB_RESULTS,
    'invoices': Resource.BILLING,
    'inventory': Resource.INVENTORY,
    'staff': Resource.STAFF,
}


class Outcome(str, enum.Enum):
    PENDING = 'pending'
    ALLOW = 'allow'
    DENY = 'deny'


class Notice(str, enum.Enum):
    AUTHENTICATION_REQUIRED = 'authentication_required'
    ACCESS_DENIED = 'access_denied'


NOTICE_MESSAGES = {
    Notice.AUTHENTICATION_REQUIRED: 'Please log in to access this page',
    Notice.ACCESS_DENIED: "You don't have permission to access this page",
}


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    notice: Optional[Notice] = None
    redirect_to: Optional[str] = None
    return_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOW

    @property
    def message(self) -> str:
        if self.outcome is Outcome.PENDING:
            return 'session is still being resolved'
        return NOTICE_MESSAGES.get(self.notice, '')

    @property
    def login_url(self) -> Optional[str]:
        """``/login?from=<path>`` for authentication denials."""
        if self.notice is not Notice.AUTHENTICATION_REQUIRED:
            return None
        if not self.return_to:
            return self.redirect_to
        return f"{self.redirect_to}?{urlencode({'from': self.return_to})}"

    def as_dict(self) -> dict:
        return {
            'outcome': self.outcome.value,
            'notice': self.notice.value if self.notice else None,
            'message': self.message,
            'redirect': self.redirect_to,
            'from': self.return_to,
        }


PENDING = Decision(Outcome.PENDING)
ALLOWED = Decision(Outcome.ALLOW)


def role_may_access(role: Role, resource: Resource) -> bool:
    allowed = RESOURCE_ALLOWLIST[Resource(resource)]
    if allowed is None:
        return True
    if Role(role) is Role.ADMIN:
        return True
    return Role(role) in allowed


def authorize(session: Session, resource, requested_path: Optional[str] = None) -> Decision:
    """Decide whether ``session`` may view ``resource``.

    Rules, first match wins: an unresolved session is pending; an
    unauthenticated one is sent to the login page remembering
    ``requested_path``; unrestricted resources and the admin role are
    allowed; otherwise the role must be on the resource's allowlist, and
    a refusal redirects home.
    """
    resource = Resource(resource)
    state = session.state
    if state is SessionState.UNRESOLVED:
        return PENDING
    if state is SessionState.UNAUTHENTICATED:
        return Decision(
            Outcome.DENY, Notice.AUTHENTICATION_REQUIRED, redirect_to=LOGIN_PATH, return_to=requested_path
        )
    if state is not SessionState.AUTHENTICATED:
        raise ValueError(f"unexpected session state {state!r}")
    if session.role not in set(Role):
        raise ValueError(f"unexpected role {session.role!r}")
    if role_may_access(session.role, resource):
        return ALLOWED
    return Decision(Outcome.DENY, Notice.ACCESS_DENIED, redirect_to=HOME_PATH)


@dataclass(frozen=True)
class NavItem:
    title: str
    href: str
    resource: Resource

    def as_dict(self) -> dict:
        return {'title': self.title, 'href': self.href, 'resource': self.resource.value}


NAVIGATION: dict[str, tuple[NavItem, ...]] = {
    'main': (
        NavItem('Dashboard', '/', Resource.DASHBOARD),
        NavItem('Patients', '/patients', Resource.PATIENTS),
        NavItem('Doctors', '/doctors', Resource.DOCTORS),
        NavItem('Appointments', '/appointments', Resource.APPOINTMENTS),
        NavItem('Billing', '/billing', Resource.BILLING),
    ),
    'secondary': (
        NavItem('Medical Records', '/medical-records', Resource.MEDICAL_RECORDS),
        NavItem('Pharmacy', '/pharmacy', Resource.PHARMACY),
        NavItem('Lab Results', '/lab-results', Resource.LAB_RESULTS),
        NavItem('Inventory', '/inventory', Resource.INVENTORY),
        NavItem('Staff Directory', '/staff', Resource.STAFF),
        NavItem('Analytics', '/analytics', Resource.ANALYTICS),
        NavItem('Settings', '/settings', Resource.SETTINGS),
    ),
}


def visible_navigation(session: Session) -> dict[str, list[NavItem]]:
    """Navigation entries the session may follow, sections kept in order."""
    return {
        section: [item for item in items if authorize(session, item.resource, item.href).allowed]
        for section, items in NAVIGATION.items()
    }
