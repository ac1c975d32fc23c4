"""
Dashboard and statistics endpoints.

Aggregates are recomputed from the store on every request.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..permissions import ResourceAccess
from ..services.access import Resource
from ..services.runtime import get_store

UPCOMING_LIMIT = 5


@api_view(['GET'])
@permission_classes([ResourceAccess.for_resource(Resource.APPOINTMENTS)])
def appointment_stats(request):
    return Response(get_store().appointment_stats())


@api_view(['GET'])
@permission_classes([ResourceAccess.for_resource(Resource.INVENTORY)])
def inventory_stats(request):
    return Response(get_store().inventory_stats())


@api_view(['GET'])
@permission_classes([ResourceAccess.for_resource(Resource.DASHBOARD)])
def dashboard(request):
    """Overview for the landing page.

    Counts per collection, appointment figures, the next scheduled
    appointments and the open balance of unpaid invoices.
    """
    store = get_store()
    scheduled = [a for a in store.appointments.all() if a.get('status') == 'scheduled']
    scheduled.sort(key=lambda a: (a.get('date', ''), a.get('time', '')))
    outstanding = sum(
        i.get('totalAmount', 0) - i.get('paidAmount', 0)
        for i in store.invoices.all()
        if i.get('status') in ('pending', 'overdue')
    )
    return Response({
        'counts': {c.kind.name: len(c) for c in store},
        'appointments': store.appointment_stats(),
        'upcomingAppointments': scheduled[:UPCOMING_LIMIT],
        'lowStockItems': [i['name'] for i in store.inventory.all() if i.get('status') != 'in-stock'],
        'outstandingBalance': round(outstanding, 2),
    })
