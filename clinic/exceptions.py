import logging

from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for entity store failures that are not validation errors."""


class ReferentialIntegrityError(StoreError):
    """Deletion refused because other records still reference the target."""

    def __init__(self, kind: str, record_id: str, dependents: dict[str, list[str]]):
        self.kind = kind
        self.record_id = record_id
        self.dependents = dependents
        summary = ', '.join(f"{k}={len(v)}" for k, v in dependents.items())
        super().__init__(f"{kind} {record_id} is still referenced ({summary})")


class UnknownEntityKind(StoreError):
    pass


# ---------------------------------------------------------------------
# Authorization gate outcomes surfaced over HTTP
# ---------------------------------------------------------------------
class GateException(APIException):
    """Carries the gate decision so the handler can render notice and redirect."""

    def __init__(self, decision):
        self.decision = decision
        super().__init__(detail=decision.message)


class AuthenticationRequired(GateException, NotAuthenticated):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = 'authentication_required'


class AccessDenied(GateException, PermissionDenied):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = 'access_denied'


class SessionPending(GateException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = 'session_pending'


def api_exception_handler(exc, context):
    if isinstance(exc, ReferentialIntegrityError):
        return Response({'ok': False, 'error': {
            'code': 'referential_integrity',
            'message': str(exc),
            'dependents': exc.dependents,
        }}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, UnknownEntityKind):
        return Response({'ok': False, 'error': {'code': 'not_found', 'message': str(exc)}},
                        status=status.HTTP_404_NOT_FOUND)
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("unhandled error in %s", context.get('view').__class__.__name__, exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    if isinstance(exc, GateException):
        d = exc.decision
        code = d.notice.value if d.notice else exc.default_code
        body = {'ok': False, 'error': {'code': code, 'message': d.message}, 'redirect': d.redirect_to}
        if d.return_to:
            body['from'] = d.return_to
        resp.data = body
        return resp
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data if isinstance(resp.data, list) else str(resp.data)
    code = getattr(exc, 'default_code', None) or 'api_error'
    resp.data = {'ok': False, 'error': {'code': code, 'message': detail}}
    return resp
