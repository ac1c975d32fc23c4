"""
Registry of the entity kinds held by the store.

Each kind knows its durable storage key, the type tag prefixed to its
ids and the serializer that validates its payloads.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass

from clinic.exceptions import UnknownEntityKind
from clinic.serializers.records import (
    AppointmentSerializer,
    DoctorSerializer,
    InventorySerializer,
    InvoiceSerializer,
    LabTestSerializer,
    MedicationSerializer,
    PatientSerializer,
    StaffSerializer,
)


@dataclass(frozen=True)
class EntityKind:
    name: str
    storage_key: str
    id_prefix: str
    serializer_class: type
    label: str

    def mint_id(self) -> str:
        """Return ``<prefix><uuid4>``; the uuid part is 36 characters."""
        return f"{self.id_prefix}{uuid.uuid4()}"


PATIENTS = EntityKind('patients', 'hospital_patients', 'p', PatientSerializer, 'patient')
DOCTORS = EntityKind('doctors', 'hospital_doctors', 'd', DoctorSerializer, 'doctor')
APPOINTMENTS = EntityKind('appointments', 'hospital_appointments', 'a', AppointmentSerializer, 'appointment')
MEDICATIONS = EntityKind('medications', 'hospital_medications', 'm', MedicationSerializer, 'medication')
LAB_TESTS = EntityKind('lab_tests', 'hospital_lab_tests', 'l', LabTestSerializer, 'lab test')
INVOICES = EntityKind('invoices', 'hospital_invoices', 'i', InvoiceSerializer, 'invoice')
INVENTORY = EntityKind('inventory', 'hospital_inventory', 'inv', InventorySerializer, 'inventory item')
STAFF = EntityKind('staff', 'hospital_staff', 's', StaffSerializer, 'staff member')

KINDS: dict[str, EntityKind] = {
    k.name: k for k in (PATIENTS, DOCTORS, APPOINTMENTS, MEDICATIONS, LAB_TESTS, INVOICES, INVENTORY, STAFF)
}

# URL spellings
ALIASES = {'lab-tests': 'lab_tests', 'labtests': 'lab_tests', 'labTests': 'lab_tests'}


def resolve_kind_name(name: str) -> str:
    name = ALIASES.get(name, name)
    if name not in KINDS:
        raise UnknownEntityKind(f"unknown entity kind: {name!r}")
    return name


def get_kind(name: str) -> EntityKind:
    return KINDS[resolve_kind_name(name)]
