"""
DRF permission classes backed by the authorization gate.
"""
from rest_framework.permissions import BasePermission

from clinic.exceptions import AccessDenied, AuthenticationRequired, SessionPending
from clinic.services.access import RESOURCE_FOR_KIND, Notice, Outcome, Resource, authorize
from clinic.services.entities import resolve_kind_name
from clinic.services.session import session_for_user


def request_session(request):
    return session_for_user(getattr(request, "user", None))


class ResourceAccess(BasePermission):
    """Run the gate for ``view.resource`` (or ``resource`` given at class level).

    Refusals raise instead of returning ``False`` so the response carries
    the gate's notice and redirect target.
    """
    resource = None

    @classmethod
    def for_resource(cls, resource):
        return type(f"{cls.__name__}[{Resource(resource).value}]", (cls,), {"resource": Resource(resource)})

    def resource_for(self, request, view):
        return self.resource or getattr(view, "resource", None)

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        resource = self.resource_for(request, view)
        if resource is None:
            return True
        decision = authorize(request_session(request), resource, request.get_full_path())
        if decision.outcome is Outcome.ALLOW:
            return True
        if decision.outcome is Outcome.PENDING:
            raise SessionPending(decision)
        if decision.notice is Notice.AUTHENTICATION_REQUIRED:
            raise AuthenticationRequired(decision)
        raise AccessDenied(decision)


class IsAdminRole(ResourceAccess):
    """Administrative endpoints (database management)."""
    resource = Resource.DATABASE_MANAGEMENT


class KindAccess(ResourceAccess):
    """Gate for ``/api/<kind>`` routes: the resource follows the ``kind`` URL argument."""

    def resource_for(self, request, view):
        kind = resolve_kind_name(view.kwargs["kind"])
        return RESOURCE_FOR_KIND[kind]
