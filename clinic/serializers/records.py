"""
Validation schemas for the eight entity kinds held by the entity store.

Field names are camelCase because records are stored and served in the
same JSON shape the front end uses.  Store-managed fields (``id``,
appointment ``createdAt``/``updatedAt``) are not accepted from callers.
"""
import bleach
from django.core.validators import RegexValidator
from rest_framework import serializers

from clinic.models import Role

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

hhmm = RegexValidator(r'^([01]\d|2[0-3]):[0-5]\d$', 'use HH:MM (24h)')


def _text(**kwargs):
    kwargs.setdefault('required', False)
    kwargs.setdefault('allow_blank', True)
    kwargs.setdefault('max_length', 255)
    return serializers.CharField(**kwargs)


def _tags(**kwargs):
    return serializers.ListField(child=serializers.CharField(max_length=255), required=False, **kwargs)


class CleanNameMixin:
    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        if len(v) < 2:
            raise serializers.ValidationError('name must have at least 2 characters')
        return v


class MergedFieldsMixin:
    """Cross-field checks on partial updates see the stored record.

    ``instance`` is the stored record dict; a field missing from ``attrs``
    is read from it and parsed the way the field parses input.
    """

    def merged(self, attrs, name):
        if name in attrs:
            return attrs[name]
        stored = self.instance.get(name) if isinstance(self.instance, dict) else None
        if stored in (None, ''):
            return None
        return self.fields[name].to_internal_value(stored)


class PatientSerializer(CleanNameMixin, serializers.Serializer):
    name = serializers.CharField(max_length=128)
    dateOfBirth = serializers.DateField()
    gender = serializers.CharField(max_length=32)
    contactNumber = serializers.CharField(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = _text()
    bloodType = _text(max_length=8)
    emergencyContact = _text()
    insuranceProvider = _text()
    insurancePolicyNumber = _text(max_length=64)
    allergies = _tags()
    chronicConditions = _tags()
    primaryPhysician = _text(max_length=128)
    lastVisit = serializers.DateField(required=False)
    nextAppointment = serializers.DateField(required=False)
    registrationDate = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=['active', 'inactive'], default='active')


class DoctorSerializer(CleanNameMixin, serializers.Serializer):
    name = serializers.CharField(max_length=128)
    specialization = serializers.CharField(max_length=128)
    department = serializers.CharField(max_length=128)
    contactNumber = _text(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)
    availableDays = serializers.ListField(child=serializers.ChoiceField(choices=WEEKDAYS), required=False)
    availableHours = _text(max_length=64)
    education = _tags()
    experience = _text(max_length=64)
    photo = _text(max_length=512)
    bio = _text(max_length=2000)
    rating = serializers.FloatField(required=False, min_value=0, max_value=5)
    status = serializers.ChoiceField(choices=['active', 'inactive'], default='active')


class AppointmentSerializer(serializers.Serializer):
    STATUSES = ['scheduled', 'completed', 'cancelled', 'no-show']

    patientId = serializers.CharField(max_length=64)
    patientName = _text(max_length=128)
    doctorId = serializers.CharField(max_length=64)
    doctorName = _text(max_length=128)
    date = serializers.DateField()
    time = serializers.CharField(max_length=16)
    duration = serializers.IntegerField(min_value=1, max_value=24 * 60, default=30)
    type = _text(max_length=64)
    reason = _text(max_length=500)
    status = serializers.ChoiceField(choices=STATUSES, default='scheduled')
    notes = _text(max_length=2000)
    followUp = serializers.BooleanField(required=False)
    department = _text(max_length=128)


class MedicationSerializer(CleanNameMixin, MergedFieldsMixin, serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=128)
    dosage = serializers.CharField(max_length=64)
    frequency = serializers.CharField(max_length=128)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    prescribedBy = _text(max_length=128)
    prescribedById = serializers.CharField(max_length=64)
    status = serializers.ChoiceField(choices=['active', 'completed', 'cancelled'], default='active')
    notes = _text(max_length=2000)
    refills = serializers.IntegerField(required=False, min_value=0)
    sideEffects = _tags()
    interactions = _tags()

    def validate(self, attrs):
        start, end = self.merged(attrs, 'startDate'), self.merged(attrs, 'endDate')
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': 'endDate is before startDate'})
        return attrs


class LabTestSerializer(serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = _text(max_length=128)
    testName = serializers.CharField(max_length=128)
    testType = _text(max_length=64)
    date = serializers.DateField()
    result = _text(max_length=500)
    resultDate = serializers.DateField(required=False)
    orderedBy = _text(max_length=128)
    orderedById = serializers.CharField(max_length=64)
    status = serializers.ChoiceField(choices=['ordered', 'completed', 'cancelled'], default='ordered')
    notes = _text(max_length=2000)
    attachments = _tags()


class InvoiceItemSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64, required=False)
    description = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.FloatField(min_value=0)
    totalPrice = serializers.FloatField(required=False, min_value=0)
    category = _text(max_length=64)
    serviceDate = serializers.DateField(required=False)


class InvoiceSerializer(MergedFieldsMixin, serializers.Serializer):
    patientId = serializers.CharField(max_length=64)
    patientName = _text(max_length=128)
    date = serializers.DateField()
    dueDate = serializers.DateField()
    totalAmount = serializers.FloatField(required=False, min_value=0)
    paidAmount = serializers.FloatField(min_value=0, default=0)
    status = serializers.ChoiceField(choices=['pending', 'paid', 'overdue', 'cancelled'], default='pending')
    items = InvoiceItemSerializer(many=True)
    insuranceClaim = serializers.BooleanField(required=False)
    insuranceProvider = _text()
    insurancePolicyNumber = _text(max_length=64)
    paymentMethod = _text(max_length=64)
    paymentDate = serializers.DateField(required=False)
    notes = _text(max_length=2000)

    def validate(self, attrs):
        issued, due = self.merged(attrs, 'date'), self.merged(attrs, 'dueDate')
        if issued and due and due < issued:
            raise serializers.ValidationError({'dueDate': 'dueDate is before the invoice date'})
        return attrs


class InventorySerializer(CleanNameMixin, serializers.Serializer):
    name = serializers.CharField(max_length=128)
    category = serializers.ChoiceField(choices=['medication', 'equipment', 'supplies'])
    quantity = serializers.IntegerField(min_value=0)
    unit = _text(max_length=32)
    unitPrice = serializers.FloatField(min_value=0)
    supplier = _text(max_length=128)
    reorderLevel = serializers.IntegerField(min_value=0)
    location = _text(max_length=128)
    expiryDate = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=['in-stock', 'low-stock', 'out-of-stock'], required=False)
    lastUpdated = serializers.DateField(required=False)


class ScheduleEntrySerializer(serializers.Serializer):
    day = serializers.ChoiceField(choices=WEEKDAYS)
    startTime = serializers.CharField(validators=[hhmm])
    endTime = serializers.CharField(validators=[hhmm])

    def validate(self, attrs):
        if attrs['endTime'] <= attrs['startTime']:
            raise serializers.ValidationError('endTime must be after startTime')
        return attrs


class StaffSerializer(CleanNameMixin, serializers.Serializer):
    name = serializers.CharField(max_length=128)
    role = serializers.ChoiceField(choices=[r for r in Role.values if r != Role.PATIENT])
    department = serializers.CharField(max_length=128)
    contactNumber = _text(max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)
    employmentDate = serializers.DateField(required=False)
    schedule = ScheduleEntrySerializer(many=True, required=False)
    status = serializers.ChoiceField(choices=['active', 'on-leave', 'inactive'], default='active')
