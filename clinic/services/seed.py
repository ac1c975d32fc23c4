"""
Starter dataset used when a collection has never been persisted.

The records are hand-written and deterministic so that a fresh
environment always looks the same; foreign keys between kinds are
mutually consistent (``p1`` has appointments ``a1``/``a4``, medications
``m1``/``m2`` and so on).  Every call returns new objects.
"""
from __future__ import annotations

import copy

from clinic.exceptions import UnknownEntityKind

WEEKDAY_9_TO_5 = [
    {'day': 'Monday', 'startTime': '09:00', 'endTime': '17:00'},
    {'day': 'Tuesday', 'startTime': '09:00', 'endTime': '17:00'},
    {'day': 'Wednesday', 'startTime': '09:00', 'endTime': '17:00'},
    {'day': 'Thursday', 'startTime': '09:00', 'endTime': '17:00'},
]


def _shift(days, start='08:00', end='16:00'):
    return [{'day': d, 'startTime': start, 'endTime': end} for d in days]


def seed_patients() -> list[dict]:
    return [
        {
            'id': 'p1',
            'name': 'Emma Wilson',
            'dateOfBirth': '1988-06-15',
            'gender': 'Female',
            'contactNumber': '+1 (555) 123-4567',
            'email': 'emma.wilson@example.com',
            'address': '123 Main St, Anytown, AN 12345',
            'bloodType': 'A+',
            'emergencyContact': 'John Wilson (Husband): +1 (555) 987-6543',
            'insuranceProvider': 'HealthPlus Insurance',
            'insurancePolicyNumber': 'HP-987654321',
            'allergies': ['Penicillin', 'Peanuts'],
            'chronicConditions': ['Hypertension', 'Asthma'],
            'primaryPhysician': 'Dr. Jane Smith',
            'lastVisit': '2023-04-10',
            'nextAppointment': '2023-06-20',
            'registrationDate': '2020-01-15',
            'status': 'active',
        },
        {
            'id': 'p2',
            'name': 'James Rodriguez',
            'dateOfBirth': '1995-11-22',
            'gender': 'Male',
            'contactNumber': '+1 (555) 234-5678',
            'email': 'james.rodriguez@example.com',
            'address': '456 Elm St, Anytown, AN 12345',
            'bloodType': 'O-',
            'emergencyContact': 'Maria Rodriguez (Sister): +1 (555) 876-5432',
            'insuranceProvider': 'BlueHealth Insurance',
            'insurancePolicyNumber': 'BH-123456789',
            'allergies': ['Sulfa drugs'],
            'chronicConditions': ['Diabetes Type 2'],
            'primaryPhysician': 'Dr. Michael Chen',
            'lastVisit': '2023-05-05',
            'nextAppointment': '2023-08-10',
            'registrationDate': '2019-03-20',
            'status': 'active',
        },
        {
            'id': 'p3',
            'name': 'Olivia Smith',
            'dateOfBirth': '1978-03-10',
            'gender': 'Female',
            'contactNumber': '+1 (555) 345-6789',
            'email': 'olivia.smith@example.com',
            'address': '789 Oak St, Anytown, AN 12345',
            'bloodType': 'B+',
            'emergencyContact': 'David Smith (Husband): +1 (555) 765-4321',
            'insuranceProvider': 'MediCare Plus',
            'insurancePolicyNumber': 'MP-456789123',
            'allergies': ['Latex', 'Shellfish'],
            'chronicConditions': ['Arthritis', 'Hypertension'],
            'primaryPhysician': 'Dr. Jane Smith',
            'lastVisit': '2023-04-22',
            'nextAppointment': '2023-07-15',
            'registrationDate': '2018-06-10',
            'status': 'active',
        },
    ]


def seed_doctors() -> list[dict]:
    return [
        {
            'id': 'd1',
            'name': 'Dr. Jane Smith',
            'specialization': 'Cardiology',
            'department': 'Cardiology',
            'contactNumber': '+1 (555) 111-2222',
            'email': 'jane.smith@hospital.com',
            'availableDays': ['Monday', 'Tuesday', 'Wednesday', 'Thursday'],
            'availableHours': '09:00 AM - 05:00 PM',
            'education': ['MD, Harvard Medical School', 'Residency, Mayo Clinic',
                          'Fellowship, Johns Hopkins Hospital'],
            'experience': '15 years',
            'bio': 'Cardiologist with over 15 years of experience in treating heart conditions.',
            'rating': 4.8,
            'status': 'active',
        },
        {
            'id': 'd2',
            'name': 'Dr. Michael Chen',
            'specialization': 'Endocrinology',
            'department': 'Internal Medicine',
            'contactNumber': '+1 (555) 222-3333',
            'email': 'michael.chen@hospital.com',
            'availableDays': ['Monday', 'Wednesday', 'Friday'],
            'availableHours': '08:00 AM - 04:00 PM',
            'education': ['MD, Stanford University', 'Residency, UCLA Medical Center',
                          'Fellowship, UCSF Medical Center'],
            'experience': '10 years',
            'bio': 'Specializes in diabetes management and thyroid disorders.',
            'rating': 4.7,
            'status': 'active',
        },
        {
            'id': 'd3',
            'name': 'Dr. Sarah Johnson',
            'specialization': 'Pediatrics',
            'department': 'Pediatrics',
            'contactNumber': '+1 (555) 333-4444',
            'email': 'sarah.johnson@hospital.com',
            'availableDays': ['Monday', 'Tuesday', 'Thursday', 'Friday'],
            'availableHours': '09:00 AM - 05:00 PM',
            'education': ['MD, Yale School of Medicine', "Residency, Children's Hospital of Philadelphia"],
            'experience': '8 years',
            'bio': 'Pediatrician providing comprehensive care for children of all ages.',
            'rating': 4.9,
            'status': 'active',
        },
    ]


def seed_appointments() -> list[dict]:
    return [
        {
            'id': 'a1', 'patientId': 'p1', 'patientName': 'Emma Wilson',
            'doctorId': 'd1', 'doctorName': 'Dr. Jane Smith',
            'date': '2023-06-20', 'time': '10:00 AM', 'duration': 30,
            'type': 'Regular Checkup', 'reason': 'Blood pressure review',
            'status': 'scheduled', 'department': 'Cardiology',
            'createdAt': '2023-05-15T10:30:00Z', 'updatedAt': '2023-05-15T10:30:00Z',
        },
        {
            'id': 'a2', 'patientId': 'p2', 'patientName': 'James Rodriguez',
            'doctorId': 'd2', 'doctorName': 'Dr. Michael Chen',
            'date': '2023-08-10', 'time': '02:30 PM', 'duration': 45,
            'type': 'Follow-up', 'reason': 'Diabetes management',
            'status': 'scheduled', 'department': 'Internal Medicine',
            'createdAt': '2023-05-20T14:15:00Z', 'updatedAt': '2023-05-20T14:15:00Z',
        },
        {
            'id': 'a3', 'patientId': 'p3', 'patientName': 'Olivia Smith',
            'doctorId': 'd1', 'doctorName': 'Dr. Jane Smith',
            'date': '2023-07-15', 'time': '11:15 AM', 'duration': 30,
            'type': 'Follow-up', 'reason': 'Hypertension check',
            'status': 'scheduled', 'department': 'Cardiology',
            'createdAt': '2023-05-18T09:45:00Z', 'updatedAt': '2023-05-18T09:45:00Z',
        },
        {
            'id': 'a4', 'patientId': 'p1', 'patientName': 'Emma Wilson',
            'doctorId': 'd1', 'doctorName': 'Dr. Jane Smith',
            'date': '2023-04-10', 'time': '09:30 AM', 'duration': 30,
            'type': 'Regular Checkup', 'reason': 'Annual physical',
            'status': 'completed', 'notes': 'Blood pressure elevated, medication adjusted',
            'department': 'Cardiology',
            'createdAt': '2023-03-20T11:00:00Z', 'updatedAt': '2023-04-10T10:15:00Z',
        },
    ]


def seed_medications() -> list[dict]:
    return [
        {
            'id': 'm1', 'patientId': 'p1', 'name': 'Lisinopril', 'dosage': '10mg',
            'frequency': 'Once daily', 'startDate': '2023-01-15', 'endDate': '2023-07-15',
            'prescribedBy': 'Dr. Jane Smith', 'prescribedById': 'd1', 'status': 'active',
            'notes': 'Take in the morning with water', 'refills': 2,
        },
        {
            'id': 'm2', 'patientId': 'p1', 'name': 'Ventolin HFA', 'dosage': '90mcg',
            'frequency': 'As needed for asthma symptoms', 'startDate': '2022-11-10',
            'prescribedBy': 'Dr. Michael Chen', 'prescribedById': 'd2', 'status': 'active',
            'notes': '1-2 puffs every 4-6 hours as needed', 'refills': 3,
        },
        {
            'id': 'm3', 'patientId': 'p2', 'name': 'Metformin', 'dosage': '500mg',
            'frequency': 'Twice daily with meals', 'startDate': '2023-02-05', 'endDate': '2023-08-05',
            'prescribedBy': 'Dr. Michael Chen', 'prescribedById': 'd2', 'status': 'active',
            'notes': 'Take with breakfast and dinner', 'refills': 5,
        },
    ]


def seed_lab_tests() -> list[dict]:
    return [
        {
            'id': 'l1', 'patientId': 'p1', 'patientName': 'Emma Wilson',
            'testName': 'Complete Blood Count (CBC)', 'testType': 'Blood', 'date': '2023-04-10',
            'result': 'Normal', 'resultDate': '2023-04-12',
            'orderedBy': 'Dr. Jane Smith', 'orderedById': 'd1', 'status': 'completed',
        },
        {
            'id': 'l2', 'patientId': 'p1', 'patientName': 'Emma Wilson',
            'testName': 'Lipid Panel', 'testType': 'Blood', 'date': '2023-04-10',
            'result': 'Abnormal - High cholesterol', 'resultDate': '2023-04-12',
            'orderedBy': 'Dr. Jane Smith', 'orderedById': 'd1', 'status': 'completed',
            'notes': 'LDL: 160 mg/dL (High), HDL: 45 mg/dL, Triglycerides: 180 mg/dL',
        },
        {
            'id': 'l3', 'patientId': 'p2', 'patientName': 'James Rodriguez',
            'testName': 'Hemoglobin A1C', 'testType': 'Blood', 'date': '2023-05-05',
            'result': 'Abnormal - 7.2%', 'resultDate': '2023-05-07',
            'orderedBy': 'Dr. Michael Chen', 'orderedById': 'd2', 'status': 'completed',
            'notes': 'Target is below 7.0%',
        },
    ]


def seed_invoices() -> list[dict]:
    return [
        {
            'id': 'i1', 'patientId': 'p1', 'patientName': 'Emma Wilson',
            'date': '2023-04-10', 'dueDate': '2023-05-10',
            'totalAmount': 250.0, 'paidAmount': 250.0, 'status': 'paid',
            'items': [
                {'id': 'ii1', 'description': 'Office Visit', 'quantity': 1, 'unitPrice': 150.0,
                 'totalPrice': 150.0, 'category': 'Consultation', 'serviceDate': '2023-04-10'},
                {'id': 'ii2', 'description': 'Blood Tests', 'quantity': 2, 'unitPrice': 50.0,
                 'totalPrice': 100.0, 'category': 'Laboratory', 'serviceDate': '2023-04-10'},
            ],
            'insuranceClaim': True,
            'insuranceProvider': 'HealthPlus Insurance',
            'insurancePolicyNumber': 'HP-987654321',
            'paymentMethod': 'Credit Card',
            'paymentDate': '2023-04-15',
        },
        {
            'id': 'i2', 'patientId': 'p2', 'patientName': 'James Rodriguez',
            'date': '2023-05-05', 'dueDate': '2023-06-05',
            'totalAmount': 350.0, 'paidAmount': 0.0, 'status': 'pending',
            'items': [
                {'id': 'ii3', 'description': 'Office Visit', 'quantity': 1, 'unitPrice': 150.0,
                 'totalPrice': 150.0, 'category': 'Consultation', 'serviceDate': '2023-05-05'},
                {'id': 'ii4', 'description': 'Hemoglobin A1C Test', 'quantity': 1, 'unitPrice': 80.0,
                 'totalPrice': 80.0, 'category': 'Laboratory', 'serviceDate': '2023-05-05'},
                {'id': 'ii5', 'description': 'Glucose Meter Kit', 'quantity': 1, 'unitPrice': 120.0,
                 'totalPrice': 120.0, 'category': 'Medical Equipment', 'serviceDate': '2023-05-05'},
            ],
            'insuranceClaim': True,
            'insuranceProvider': 'BlueHealth Insurance',
            'insurancePolicyNumber': 'BH-123456789',
        },
    ]


def seed_inventory() -> list[dict]:
    return [
        {
            'id': 'inv1', 'name': 'Lisinopril 10mg', 'category': 'medication', 'quantity': 500,
            'unit': 'tablets', 'unitPrice': 0.25, 'supplier': 'PharmaCorp', 'reorderLevel': 100,
            'location': 'Pharmacy Shelf A1', 'expiryDate': '2024-06-30', 'status': 'in-stock',
            'lastUpdated': '2023-04-01',
        },
        {
            'id': 'inv2', 'name': 'Ventolin HFA 90mcg', 'category': 'medication', 'quantity': 50,
            'unit': 'inhalers', 'unitPrice': 15.0, 'supplier': 'MediSupply', 'reorderLevel': 10,
            'location': 'Pharmacy Shelf B2', 'expiryDate': '2024-03-15', 'status': 'in-stock',
            'lastUpdated': '2023-04-15',
        },
        {
            'id': 'inv3', 'name': 'Blood Pressure Monitor', 'category': 'equipment', 'quantity': 8,
            'unit': 'units', 'unitPrice': 45.0, 'supplier': 'MedEquip', 'reorderLevel': 5,
            'location': 'Equipment Room C3', 'status': 'in-stock', 'lastUpdated': '2023-05-01',
        },
        {
            'id': 'inv4', 'name': 'Latex Gloves (Medium)', 'category': 'supplies', 'quantity': 2000,
            'unit': 'pieces', 'unitPrice': 0.1, 'supplier': 'MediSupply', 'reorderLevel': 500,
            'location': 'Supply Room D1', 'status': 'in-stock', 'lastUpdated': '2023-05-10',
        },
    ]


def seed_staff() -> list[dict]:
    weekdays = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']
    return [
        {
            'id': 's1', 'name': 'Dr. Jane Smith', 'role': 'doctor', 'department': 'Cardiology',
            'contactNumber': '+1 (555) 111-2222', 'email': 'jane.smith@hospital.com',
            'employmentDate': '2008-03-15', 'schedule': copy.deepcopy(WEEKDAY_9_TO_5), 'status': 'active',
        },
        {
            'id': 's2', 'name': 'Dr. Michael Chen', 'role': 'doctor', 'department': 'Internal Medicine',
            'contactNumber': '+1 (555) 222-3333', 'email': 'michael.chen@hospital.com',
            'employmentDate': '2013-06-10', 'schedule': _shift(['Monday', 'Wednesday', 'Friday']),
            'status': 'active',
        },
        {
            'id': 's3', 'name': 'Nancy White', 'role': 'nurse', 'department': 'Cardiology',
            'contactNumber': '+1 (555) 333-4444', 'email': 'nancy.white@hospital.com',
            'employmentDate': '2015-02-20', 'schedule': _shift(weekdays), 'status': 'active',
        },
        {
            'id': 's4', 'name': 'Rebecca Johnson', 'role': 'receptionist', 'department': 'Front Desk',
            'contactNumber': '+1 (555) 444-5555', 'email': 'rebecca.johnson@hospital.com',
            'employmentDate': '2019-01-15', 'schedule': _shift(weekdays), 'status': 'active',
        },
    ]


SEEDERS = {
    'patients': seed_patients,
    'doctors': seed_doctors,
    'appointments': seed_appointments,
    'medications': seed_medications,
    'lab_tests': seed_lab_tests,
    'invoices': seed_invoices,
    'inventory': seed_inventory,
    'staff': seed_staff,
}


def seed_for(kind: str) -> list[dict]:
    try:
        return SEEDERS[kind]()
    except KeyError:
        raise UnknownEntityKind(f"no seed data for {kind!r}") from None
