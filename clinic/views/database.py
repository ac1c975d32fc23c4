"""
Database management: export every collection and restore seed data.

Administrator only.
"""
from __future__ import annotations

import logging

from django.utils import timezone
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..exceptions import UnknownEntityKind
from ..permissions import IsAdminRole
from ..services.audit import log_action
from ..services.entities import KINDS, resolve_kind_name
from ..services.runtime import get_store

logger = logging.getLogger(__name__)


class ResetSerializer(serializers.Serializer):
    kinds = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=False)

    def validate_kinds(self, v):
        try:
            return [resolve_kind_name(k) for k in v]
        except UnknownEntityKind as exc:
            raise serializers.ValidationError(str(exc))


@api_view(['GET'])
@permission_classes([IsAdminRole])
def export_database(request):
    store = get_store()
    return Response({
        'exportedAt': timezone.now().isoformat(),
        'collections': {KINDS[name].storage_key: records for name, records in store.snapshot().items()},
    })


@api_view(['POST'])
@permission_classes([IsAdminRole])
def reset_database(request):
    """Overwrite collections with seed data; ``{"kinds": [...]}`` limits the reset."""
    s = ResetSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    names = get_store().reset(s.validated_data.get('kinds'))
    logger.warning("database reset by %s: %s", request.user, names)
    log_action(user=request.user, action='database_reset', object_type='store', detail={'kinds': names})
    return Response({'ok': True, 'reset': names})
