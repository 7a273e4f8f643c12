import datetime as dt

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from clinic.models import Appointment, Doctor, Patient, User

PASSWORD = 'Str0ng!Pass'


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters and analytics live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    counter = {'n': 0}

    def _make(role=User.Role.PATIENT, **kw):
        counter['n'] += 1
        kw.setdefault('email', f'{role}{counter["n"]}@example.com')
        kw.setdefault('name', f'{role.title()} {counter["n"]}')
        return User.objects.create_user(password=PASSWORD, role=role, **kw)
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(User.Role.ADMIN)


@pytest.fixture
def reception_user(make_user):
    return make_user(User.Role.RECEPTION)


@pytest.fixture
def doctor_user(make_user):
    return make_user(User.Role.DOCTOR)


@pytest.fixture
def patient_user(make_user):
    return make_user(User.Role.PATIENT)


@pytest.fixture
def client_for():
    def _client(user=None):
        c = APIClient()
        if user is not None:
            c.force_authenticate(user=user)
        return c
    return _client


@pytest.fixture
def anon():
    return APIClient()


@pytest.fixture
def make_patient(db):
    counter = {'n': 0}

    def _make(**kw):
        counter['n'] += 1
        kw.setdefault('name', f'Patient {counter["n"]}')
        kw.setdefault('age', 30 + counter['n'])
        kw.setdefault('gender', Patient.Gender.FEMALE)
        kw.setdefault('phone', f'90000000{counter["n"]:02d}')
        kw.setdefault('address', '12 Main Street')
        return Patient.objects.create(**kw)
    return _make


@pytest.fixture
def make_doctor(make_user):
    def _make(user=None, **kw):
        user = user or make_user(User.Role.DOCTOR)
        kw.setdefault('name', user.name)
        kw.setdefault('specialization', 'Cardiology')
        kw.setdefault('phone', '8000000001')
        kw.setdefault('email', user.email)
        kw.setdefault('availability', [{'day': 'Monday', 'startTime': '09:00', 'endTime': '17:00'}])
        return Doctor.objects.create(user=user, **kw)
    return _make


@pytest.fixture
def make_appointment(db):
    def _make(patient, doctor, **kw):
        kw.setdefault('date', timezone.now() + dt.timedelta(days=1))
        kw.setdefault('time', '10:30')
        kw.setdefault('reason', 'Checkup')
        return Appointment.objects.create(patient=patient, doctor=doctor, **kw)
    return _make


@pytest.fixture
def own_patient(make_patient, patient_user):
    return make_patient(user=patient_user)


@pytest.fixture
def own_doctor(make_doctor, doctor_user):
    return make_doctor(user=doctor_user)
