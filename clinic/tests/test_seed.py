import pytest

from clinic.exceptions import UnknownEntityKind
from clinic.services.entities import KINDS
from clinic.services.seed import SEEDERS, seed_for


def test_every_kind_has_a_seeder():
    assert set(SEEDERS) == set(KINDS)


@pytest.mark.parametrize('kind', sorted(KINDS))
def test_seed_is_deterministic_and_fresh(kind):
    first, second = seed_for(kind), seed_for(kind)
    assert first == second
    assert first is not second
    ids = [r['id'] for r in first]
    assert len(ids) == len(set(ids))
    assert all(i.startswith(KINDS[kind].id_prefix) for i in ids)


@pytest.mark.parametrize('kind', sorted(KINDS))
def test_seed_records_pass_validation(kind):
    serializer_class = KINDS[kind].serializer_class
    for record in seed_for(kind):
        payload = {k: v for k, v in record.items() if k not in ('id', 'createdAt', 'updatedAt')}
        s = serializer_class(data=payload)
        assert s.is_valid(), (record['id'], s.errors)


def test_seed_references_are_consistent():
    patients = {p['id'] for p in seed_for('patients')}
    doctors = {d['id'] for d in seed_for('doctors')}
    for kind in ('appointments', 'medications', 'lab_tests', 'invoices'):
        assert {r['patientId'] for r in seed_for(kind)} <= patients
    assert {a['doctorId'] for a in seed_for('appointments')} <= doctors
    assert {m['prescribedById'] for m in seed_for('medications')} <= doctors
    assert {t['orderedById'] for t in seed_for('lab_tests')} <= doctors


def test_seed_invoice_totals_match_items():
    for inv in seed_for('invoices'):
        assert inv['totalAmount'] == sum(i['quantity'] * i['unitPrice'] for i in inv['items'])


def test_unknown_kind():
    with pytest.raises(UnknownEntityKind):
        seed_for('wards')
