"""
Generic record endpoints for the entity store.

One set of views serves all eight kinds; the ``kind`` URL argument picks
the collection and, through :class:`~clinic.permissions.KindAccess`, the
resource whose allowlist guards it.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from clinic.permissions import KindAccess, ResourceAccess
from clinic.services.access import Resource
from clinic.services.audit import log_action
from clinic.services.entities import get_kind
from clinic.services.runtime import get_store

# query parameter -> record field used for ?patientId= / ?doctorId= filtering
LIST_FILTERS = {
    'appointments': ('patientId', 'doctorId'),
    'medications': ('patientId', 'prescribedById'),
    'lab_tests': ('patientId', 'orderedById'),
    'invoices': ('patientId',),
}
FILTER_ALIASES = {'doctorId': {'medications': 'prescribedById', 'lab_tests': 'orderedById'}}


def _not_found(kind, record_id):
    return NotFound(f"{get_kind(kind).label} {record_id} not found")


@api_view(['GET', 'POST'])
@permission_classes([KindAccess])
def collection_view(request, kind):
    """List records (``GET``) or add one (``POST``)."""
    entity = get_kind(kind)
    collection = get_store()[entity.name]
    if request.method == 'POST':
        record = collection.add(request.data)
        log_action(user=request.user, action=f'{entity.name}_add', object_type=entity.name,
                   object_id=record['id'])
        return Response(record, status=status.HTTP_201_CREATED)

    records = collection.all()
    allowed = LIST_FILTERS.get(entity.name, ())
    for param, value in request.query_params.items():
        field = FILTER_ALIASES.get(param, {}).get(entity.name, param)
        if field in allowed and value:
            records = [r for r in records if r.get(field) == value]
    return Response(records)


@api_view(['GET', 'PATCH', 'PUT', 'DELETE'])
@permission_classes([KindAccess])
def record_view(request, kind, record_id):
    entity = get_kind(kind)
    store = get_store()
    collection = store[entity.name]

    if request.method == 'GET':
        record = collection.get(record_id)
        if record is None:
            raise _not_found(kind, record_id)
        return Response(record)

    if request.method == 'DELETE':
        if not store.delete(entity.name, record_id):
            raise _not_found(kind, record_id)
        log_action(user=request.user, action=f'{entity.name}_delete', object_type=entity.name,
                   object_id=record_id)
        return Response({'ok': True, 'id': record_id})

    # PUT is accepted as a merge, like PATCH
    record = collection.update(record_id, request.data)
    if record is None:
        raise _not_found(kind, record_id)
    log_action(user=request.user, action=f'{entity.name}_update', object_type=entity.name,
               object_id=record_id, detail={'fields': sorted(k for k in request.data.keys() if k != 'id')})
    return Response(record)


# ---------------------------------------------------------------------
# Relational lookups
# ---------------------------------------------------------------------
PATIENT_RELATIONS = {
    'appointments': (Resource.APPOINTMENTS, 'patient_appointments'),
    'medications': (Resource.PHARMACY, 'patient_medications'),
    'lab-tests': (Resource.LAB_RESULTS, 'patient_lab_tests'),
    'invoices': (Resource.BILLING, 'patient_invoices'),
}


class PatientRelationAccess(ResourceAccess):
    def resource_for(self, request, view):
        relation = view.kwargs['relation']
        if relation not in PATIENT_RELATIONS:
            raise NotFound(f"unknown relation {relation!r}")
        return PATIENT_RELATIONS[relation][0]


@api_view(['GET'])
@permission_classes([PatientRelationAccess])
def patient_related(request, patient_id, relation):
    store = get_store()
    if store.patients.get(patient_id) is None:
        raise _not_found('patients', patient_id)
    query = getattr(store, PATIENT_RELATIONS[relation][1])
    return Response(query(patient_id))


@api_view(['GET'])
@permission_classes([ResourceAccess.for_resource(Resource.APPOINTMENTS)])
def doctor_appointments(request, doctor_id):
    store = get_store()
    if store.doctors.get(doctor_id) is None:
        raise _not_found('doctors', doctor_id)
    return Response(store.doctor_appointments(doctor_id))
