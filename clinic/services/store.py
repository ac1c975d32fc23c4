"""
In-process entity store.

:class:`EntityStore` owns the eight record collections and is the single
point of mutation for them.  Every successful add/update/delete writes
the full collection through to the configured :class:`BaseStorage`
before returning, so memory and the durable medium never disagree.

Records are plain JSON-shaped dicts.  Reads hand out copies: mutating a
returned record never changes store state.

Writes from any thread hold one re-entrant lock per store, so a
read-modify-write of a collection is never interleaved with another.
"""
from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import timezone as dt_timezone
from typing import Callable, Iterable, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from prometheus_client import Counter
from rest_framework import serializers
from rest_framework.settings import api_settings

from clinic.exceptions import ReferentialIntegrityError
from clinic.services.entities import KINDS, EntityKind, resolve_kind_name
from clinic.services.persistence import BaseStorage
from clinic.services.seed import seed_for

logger = logging.getLogger(__name__)

STORE_MUTATIONS = Counter(
    'clinic_store_mutations_total', 'Entity store mutations written through to storage', ['kind', 'action']
)

REFERENTIAL_POLICIES = ('cascade', 'restrict', 'ignore')


@dataclass(frozen=True)
class ChangeEvent:
    kind: str
    action: str
    record_id: Optional[str] = None


def _jsonable(data) -> dict:
    # dates -> 'YYYY-MM-DD', nested serializer dicts -> plain dicts
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


def _money(value) -> float:
    return round(float(value), 2)


class Collection:
    """Ordered records of one entity kind."""

    def __init__(self, kind: EntityKind, storage: BaseStorage, notify: Callable[[ChangeEvent], None],
                 lock: Optional[threading.RLock] = None):
        self.kind = kind
        self._storage = storage
        self._notify = notify
        # held across every read-modify-write, shared by all collections of a store
        self._lock = lock or threading.RLock()
        self._records: list[dict] = []

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id) -> bool:
        return self._index_of(record_id) is not None

    def __iter__(self):
        return iter(self.all())

    # ------------------------------------------------------------------
    # hydration
    # ------------------------------------------------------------------
    def hydrate(self) -> None:
        key = self.kind.storage_key
        with self._lock:
            records = self._storage.load(key)
            if records is None:
                records = seed_for(self.kind.name)
                logger.info("collection %s absent from storage, seeded %d records", key, len(records))
                self._storage.save(key, records)
            self._records = records

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def all(self) -> list[dict]:
        return copy.deepcopy(self._records)

    def get(self, record_id: str) -> Optional[dict]:
        idx = self._index_of(record_id)
        return None if idx is None else copy.deepcopy(self._records[idx])

    def filter_by(self, field: str, value) -> list[dict]:
        return [copy.deepcopy(r) for r in self._records if r.get(field) == value]

    def ids(self) -> list[str]:
        return [r['id'] for r in self._records]

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def add(self, payload: dict) -> dict:
        """Validate ``payload``, mint an id and append the new record."""
        record = self.validate(payload)
        with self._lock:
            record['id'] = self._mint_id()
            self.on_add(record)
            self._commit(self._records + [record], 'add', record['id'])
        return copy.deepcopy(record)

    def update(self, record_id: str, changes: dict) -> Optional[dict]:
        """Shallow-merge ``changes`` into an existing record.

        Returns ``None`` when ``record_id`` is unknown; nothing is written
        in that case.  The id itself can never be changed.
        """
        if changes is None:
            changes = {}
        if not isinstance(changes, dict):
            raise serializers.ValidationError(
                {api_settings.NON_FIELD_ERRORS_KEY: [f'expected an object, got {type(changes).__name__}']}
            )
        changes = {k: v for k, v in changes.items() if k != 'id'}
        with self._lock:
            idx = self._index_of(record_id)
            if idx is None:
                return None
            current = self._records[idx]
            data = self.validate(changes, partial=True, instance=current)
            merged = {**copy.deepcopy(current), **data}
            self.on_update(current, merged, data)
            records = list(self._records)
            records[idx] = merged
            self._commit(records, 'update', record_id)
        return copy.deepcopy(merged)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            idx = self._index_of(record_id)
            if idx is None:
                return False
            self._commit(self._records[:idx] + self._records[idx + 1:], 'delete', record_id)
        return True

    def delete_many(self, record_ids: Iterable[str]) -> int:
        doomed = set(record_ids)
        with self._lock:
            kept = [r for r in self._records if r['id'] not in doomed]
            removed = len(self._records) - len(kept)
            if removed:
                self._commit(kept, 'delete', None)
        return removed

    def replace_all(self, records: list[dict]) -> None:
        records = copy.deepcopy(records)
        with self._lock:
            self._commit(records, 'reset', None)

    # ------------------------------------------------------------------
    # hooks for kind-specific rules
    # ------------------------------------------------------------------
    def validate(self, payload: dict, partial: bool = False, instance: Optional[dict] = None) -> dict:
        s = self.kind.serializer_class(instance, data=payload, partial=partial)
        s.is_valid(raise_exception=True)
        return _jsonable(s.validated_data)

    def on_add(self, record: dict) -> None:
        pass

    def on_update(self, current: dict, merged: dict, changes: dict) -> None:
        pass

    # ------------------------------------------------------------------
    def _index_of(self, record_id) -> Optional[int]:
        for i, r in enumerate(self._records):
            if r.get('id') == record_id:
                return i
        return None

    def _mint_id(self) -> str:
        taken = set(self.ids())
        new_id = self.kind.mint_id()
        while new_id in taken:
            new_id = self.kind.mint_id()
        return new_id

    def _commit(self, records: list[dict], action: str, record_id: Optional[str]) -> None:
        # write first: a failing backend leaves the in-memory state untouched
        self._storage.save(self.kind.storage_key, records)
        self._records = records
        STORE_MUTATIONS.labels(kind=self.kind.name, action=action).inc()
        logger.debug("%s %s %s (%d records)", action, self.kind.name, record_id or '-', len(records))
        self._notify(ChangeEvent(self.kind.name, action, record_id))


class AppointmentCollection(Collection):
    def on_add(self, record):
        now = timezone.now().isoformat()
        record['createdAt'] = now
        record['updatedAt'] = now

    def on_update(self, current, merged, changes):
        now = timezone.now()
        previous = parse_datetime(current.get('updatedAt') or '')
        if previous is not None and timezone.is_naive(previous):
            previous = timezone.make_aware(previous, dt_timezone.utc)
        if previous is not None and previous > now:
            now = previous
        merged['updatedAt'] = now.isoformat()


class InvoiceCollection(Collection):
    """Keeps ``totalAmount`` equal to the sum of item totals."""

    def validate(self, payload, partial=False, instance=None):
        data = super().validate(payload, partial=partial, instance=instance)
        for item in data.get('items', []):
            if 'quantity' not in item or 'unitPrice' not in item:
                raise serializers.ValidationError({'items': ['every item needs quantity and unitPrice']})
            item.setdefault('id', f"ii{uuid.uuid4()}")
            item['totalPrice'] = _money(item['quantity'] * item['unitPrice'])
        return data

    def on_add(self, record):
        self._reconcile(record, record)

    def on_update(self, current, merged, changes):
        if {'items', 'totalAmount', 'paidAmount'} & changes.keys():
            self._reconcile(merged, changes)

    @staticmethod
    def _reconcile(record, supplied):
        expected = _money(sum(i['quantity'] * i['unitPrice'] for i in record.get('items', [])))
        given = supplied.get('totalAmount')
        if given is not None and _money(given) != expected:
            raise serializers.ValidationError(
                {'totalAmount': [f'totalAmount {given} does not match item total {expected}']}
            )
        record['totalAmount'] = expected
        record['paidAmount'] = _money(record.get('paidAmount') or 0)
        if record['paidAmount'] > record['totalAmount']:
            raise serializers.ValidationError({'paidAmount': ['paidAmount exceeds totalAmount']})


class InventoryCollection(Collection):
    def on_add(self, record):
        record.setdefault('status', stock_status(record['quantity'], record['reorderLevel']))
        record.setdefault('lastUpdated', timezone.localdate().isoformat())


def stock_status(quantity: int, reorder_level: int) -> str:
    if quantity <= 0:
        return 'out-of-stock'
    if quantity <= reorder_level:
        return 'low-stock'
    return 'in-stock'


COLLECTION_CLASSES = {
    'appointments': AppointmentCollection,
    'invoices': InvoiceCollection,
    'inventory': InventoryCollection,
}


def _collection(name):
    return property(lambda self: self._collections[name], doc=f"The {name} collection.")


class EntityStore:
    """The eight collections plus relational and aggregate queries.

    Construct once per process (see :mod:`clinic.services.runtime`) and
    call :meth:`hydrate` before use.
    """

    patients = _collection('patients')
    doctors = _collection('doctors')
    appointments = _collection('appointments')
    medications = _collection('medications')
    lab_tests = _collection('lab_tests')
    invoices = _collection('invoices')
    inventory = _collection('inventory')
    staff = _collection('staff')

    def __init__(self, storage: BaseStorage, *, referential_policy: str = 'cascade'):
        if referential_policy not in REFERENTIAL_POLICIES:
            raise ValueError(f"referential_policy must be one of {REFERENTIAL_POLICIES}")
        self.storage = storage
        self.referential_policy = referential_policy
        self.hydrated = False
        self._subscribers: list[Callable[[ChangeEvent], None]] = []
        self._lock = threading.RLock()
        self._collections: dict[str, Collection] = {
            name: COLLECTION_CLASSES.get(name, Collection)(kind, storage, self._publish, self._lock)
            for name, kind in KINDS.items()
        }

    def __getitem__(self, kind: str) -> Collection:
        return self._collections[resolve_kind_name(kind)]

    def __iter__(self):
        return iter(self._collections.values())

    def hydrate(self) -> 'EntityStore':
        for collection in self._collections.values():
            collection.hydrate()
        self.hydrated = True
        logger.info("entity store hydrated from %s", type(self.storage).__name__)
        return self

    # ------------------------------------------------------------------
    # relational queries
    # ------------------------------------------------------------------
    def patient_appointments(self, patient_id: str) -> list[dict]:
        return self.appointments.filter_by('patientId', patient_id)

    def doctor_appointments(self, doctor_id: str) -> list[dict]:
        return self.appointments.filter_by('doctorId', doctor_id)

    def patient_medications(self, patient_id: str) -> list[dict]:
        return self.medications.filter_by('patientId', patient_id)

    def patient_lab_tests(self, patient_id: str) -> list[dict]:
        return self.lab_tests.filter_by('patientId', patient_id)

    def patient_invoices(self, patient_id: str) -> list[dict]:
        return self.invoices.filter_by('patientId', patient_id)

    def doctor_medications(self, doctor_id: str) -> list[dict]:
        return self.medications.filter_by('prescribedById', doctor_id)

    def doctor_lab_tests(self, doctor_id: str) -> list[dict]:
        return self.lab_tests.filter_by('orderedById', doctor_id)

    # ------------------------------------------------------------------
    # aggregates, computed on every call
    # ------------------------------------------------------------------
    def appointment_stats(self) -> dict:
        counts = {'scheduled': 0, 'completed': 0, 'cancelled': 0, 'no-show': 0}
        records = self.appointments.all()
        for a in records:
            if a.get('status') in counts:
                counts[a['status']] += 1
        return {
            'scheduled': counts['scheduled'],
            'completed': counts['completed'],
            'cancelled': counts['cancelled'],
            'noShow': counts['no-show'],
            'total': len(records),
        }

    def inventory_stats(self) -> dict:
        items = self.inventory.all()
        return {
            'inStock': sum(1 for i in items if i.get('status') == 'in-stock'),
            'lowStock': sum(1 for i in items if i.get('status') == 'low-stock'),
            'outOfStock': sum(1 for i in items if i.get('status') == 'out-of-stock'),
            'total': len(items),
            'value': _money(sum(i.get('quantity', 0) * i.get('unitPrice', 0) for i in items)),
        }

    # ------------------------------------------------------------------
    # deletes that respect references
    # ------------------------------------------------------------------
    def patient_dependents(self, patient_id: str) -> dict[str, list[str]]:
        found = {
            'appointments': [a['id'] for a in self.patient_appointments(patient_id)],
            'medications': [m['id'] for m in self.patient_medications(patient_id)],
            'lab_tests': [t['id'] for t in self.patient_lab_tests(patient_id)],
            'invoices': [i['id'] for i in self.patient_invoices(patient_id)],
        }
        return {k: v for k, v in found.items() if v}

    def doctor_dependents(self, doctor_id: str) -> dict[str, list[str]]:
        found = {
            'appointments': [a['id'] for a in self.doctor_appointments(doctor_id)],
            'medications': [m['id'] for m in self.doctor_medications(doctor_id)],
            'lab_tests': [t['id'] for t in self.doctor_lab_tests(doctor_id)],
        }
        return {k: v for k, v in found.items() if v}

    def delete_patient(self, patient_id: str) -> bool:
        """Delete a patient applying the referential policy.

        ``cascade`` removes the patient's appointments, medications, lab
        tests and invoices; ``restrict`` raises
        :class:`ReferentialIntegrityError` while any exist; ``ignore``
        leaves them dangling.
        """
        with self._lock:
            if patient_id not in self.patients:
                return False
            dependents = self.patient_dependents(patient_id)
            if dependents and self.referential_policy == 'restrict':
                raise ReferentialIntegrityError('patients', patient_id, dependents)
            if dependents and self.referential_policy == 'cascade':
                for kind, ids in dependents.items():
                    self[kind].delete_many(ids)
                logger.info("cascaded delete of patient %s: %s", patient_id,
                            {k: len(v) for k, v in dependents.items()})
            return self.patients.delete(patient_id)

    def delete_doctor(self, doctor_id: str) -> bool:
        """Delete a doctor; refused while clinical records reference them
        unless the policy is ``ignore``."""
        with self._lock:
            if doctor_id not in self.doctors:
                return False
            dependents = self.doctor_dependents(doctor_id)
            if dependents and self.referential_policy != 'ignore':
                raise ReferentialIntegrityError('doctors', doctor_id, dependents)
            return self.doctors.delete(doctor_id)

    def delete(self, kind: str, record_id: str) -> bool:
        name = resolve_kind_name(kind)
        if name == 'patients':
            return self.delete_patient(record_id)
        if name == 'doctors':
            return self.delete_doctor(record_id)
        return self[name].delete(record_id)

    # ------------------------------------------------------------------
    # database management
    # ------------------------------------------------------------------
    def snapshot(self) -> dict[str, list[dict]]:
        return {name: c.all() for name, c in self._collections.items()}

    def reset(self, kinds: Optional[Iterable[str]] = None) -> list[str]:
        """Overwrite the given collections (all by default) with seed data."""
        names = [resolve_kind_name(k) for k in kinds] if kinds else list(self._collections)
        with self._lock:
            for name in names:
                self._collections[name].replace_all(seed_for(name))
        logger.warning("entity store reset to seed data: %s", ', '.join(names))
        return names

    # ------------------------------------------------------------------
    # change notification
    # ------------------------------------------------------------------
    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[ChangeEvent], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _publish(self, event: ChangeEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("store subscriber %r failed on %s", callback, event)
