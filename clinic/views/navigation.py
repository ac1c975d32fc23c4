"""
Navigation menu and gate preview for the signed-in actor.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..permissions import request_session
from ..services.access import Resource, authorize, visible_navigation


@api_view(['GET'])
@permission_classes([AllowAny])
def navigation(request):
    """Menu entries the caller may follow; empty sections when signed out."""
    session = request_session(request)
    return Response({
        'session': session.as_dict(),
        'sections': {
            section: [item.as_dict() for item in items]
            for section, items in visible_navigation(session).items()
        },
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def access_preview(request, resource):
    """What the gate would decide for ``resource``, without enforcing it."""
    try:
        resource = Resource(resource)
    except ValueError:
        raise NotFound(f"unknown resource {resource!r}")
    decision = authorize(request_session(request), resource, request.query_params.get('from'))
    return Response({'resource': resource.value, **decision.as_dict()})
