import datetime as dt

import pytest
from django.core import mail
from django.urls import reverse
from django.utils import timezone

from clinic.models import Appointment

pytestmark = pytest.mark.django_db

MISSING = '00000000-0000-0000-0000-000000000000'


def at(day, hour=9):
    return timezone.make_aware(dt.datetime(2024, 6, day, hour, 0))


def test_reception_books_appointment(client_for, reception_user, make_patient, make_doctor):
    p, d = make_patient(), make_doctor()
    r = client_for(reception_user).post(reverse('appointments'), {
        'patientId': str(p.pk), 'doctorId': str(d.pk), 'date': '2024-06-10', 'time': '10:00', 'reason': 'Fever',
    }, format='json')
    assert r.status_code == 201
    appt = r.json()['data']['appointment']
    assert appt['status'] == 'pending'
    assert appt['emailNotificationSent'] is False
    assert appt['patientId'] == {'_id': str(p.pk), 'name': p.name, 'age': p.age, 'gender': p.gender, 'phone': p.phone}
    assert appt['doctorId'] == {'_id': str(d.pk), 'name': d.name, 'specialization': d.specialization}
    assert appt['createdBy']['email'] == reception_user.email


@pytest.mark.parametrize('missing,label', [('patientId', 'Patient'), ('doctorId', 'Doctor')])
def test_missing_reference_aborts_create(client_for, admin_user, make_patient, make_doctor, missing, label):
    data = {'patientId': str(make_patient().pk), 'doctorId': str(make_doctor().pk), 'date': '2024-06-10', 'time': '10:00'}
    data[missing] = MISSING
    r = client_for(admin_user).post(reverse('appointments'), data, format='json')
    assert r.status_code == 404
    assert r.json() == {'success': False, 'error': f'{label} not found'}
    assert not Appointment.objects.exists()


def test_patient_books_only_for_self(client_for, patient_user, own_patient, make_patient, make_doctor):
    d = make_doctor()
    client = client_for(patient_user)
    base = {'doctorId': str(d.pk), 'date': '2024-06-10', 'time': '10:00'}
    r = client.post(reverse('appointments'), {**base, 'patientId': str(own_patient.pk)}, format='json')
    assert r.status_code == 201
    r = client.post(reverse('appointments'), {**base, 'patientId': str(make_patient().pk)}, format='json')
    assert r.status_code == 403
    assert Appointment.objects.count() == 1


def test_patient_booking_for_unknown_id_is_forbidden(client_for, patient_user, own_patient, make_doctor):
    r = client_for(patient_user).post(reverse('appointments'), {
        'patientId': MISSING, 'doctorId': str(make_doctor().pk), 'date': '2024-06-10', 'time': '10:00',
    }, format='json')
    assert r.status_code == 403
    assert r.json()['error'] == 'Not authorized to book appointments for this patient'


def test_doctor_cannot_book(client_for, doctor_user, make_patient, make_doctor):
    r = client_for(doctor_user).post(reverse('appointments'), {
        'patientId': str(make_patient().pk), 'doctorId': str(make_doctor().pk), 'date': '2024-06-10', 'time': '10:00',
    }, format='json')
    assert r.status_code == 403
    assert not Appointment.objects.exists()


def test_list_filters_by_status_and_day(client_for, admin_user, make_patient, make_doctor, make_appointment):
    p, d = make_patient(), make_doctor()
    make_appointment(p, d, date=at(10, 0), status='approved')
    make_appointment(p, d, date=at(10, 23), status='pending')
    make_appointment(p, d, date=at(11, 9), status='approved')
    client = client_for(admin_user)

    r = client.get(reverse('appointments'), {'date': '2024-06-10'})
    assert r.json()['pagination']['total'] == 2

    r = client.get(reverse('appointments'), {'date': '2024-06-10', 'status': 'approved'})
    assert r.json()['pagination']['total'] == 1

    r = client.get(reverse('appointments'), {'date': 'not-a-date'})
    assert r.status_code == 400

    r = client.get(reverse('appointments'))
    dates = [a['date'] for a in r.json()['data']['appointments']]
    assert dates == sorted(dates, reverse=True)


def test_doctor_list_is_scoped(client_for, doctor_user, own_doctor, make_patient, make_doctor, make_appointment):
    p = make_patient()
    mine = make_appointment(p, own_doctor)
    make_appointment(p, make_doctor())
    r = client_for(doctor_user).get(reverse('appointments'))
    body = r.json()
    assert body['pagination']['total'] == 1
    assert body['data']['appointments'][0]['_id'] == str(mine.pk)


def test_doctor_without_record_sees_nothing(client_for, doctor_user, make_patient, make_doctor, make_appointment):
    make_appointment(make_patient(), make_doctor())
    r = client_for(doctor_user).get(reverse('appointments'))
    assert r.status_code == 200
    assert r.json()['data']['appointments'] == []


def test_by_doctor_sorted_ascending(client_for, reception_user, make_patient, make_doctor, make_appointment):
    p, d = make_patient(), make_doctor()
    make_appointment(p, d, date=at(12), time='11:00')
    make_appointment(p, d, date=at(12), time='09:00')
    make_appointment(p, d, date=at(11), time='15:00')
    r = client_for(reception_user).get(reverse('appointments-doctor', args=[d.pk]))
    body = r.json()
    assert body['count'] == 3
    assert [a['time'] for a in body['data']['appointments']] == ['15:00', '09:00', '11:00']


def test_by_patient_ownership(client_for, patient_user, own_patient, make_patient, make_doctor, make_appointment):
    d = make_doctor()
    make_appointment(own_patient, d)
    other = make_patient()
    make_appointment(other, d)
    client = client_for(patient_user)

    r = client.get(reverse('appointments-patient', args=[own_patient.pk]))
    assert r.status_code == 200
    assert r.json()['count'] == 1

    r = client.get(reverse('appointments-patient', args=[other.pk]))
    assert r.status_code == 403
    assert r.json()['error'] == 'Not authorized to view these appointments'


def test_detail_expands_more_fields_and_checks_owner(client_for, patient_user, own_patient, make_patient,
                                                    make_doctor, make_appointment):
    d = make_doctor()
    mine = make_appointment(own_patient, d)
    theirs = make_appointment(make_patient(), d)
    client = client_for(patient_user)

    r = client.get(reverse('appointment-detail', args=[mine.pk]))
    assert r.status_code == 200
    appt = r.json()['data']['appointment']
    assert appt['patientId']['address'] == own_patient.address
    assert set(appt['doctorId']) == {'_id', 'name', 'specialization', 'phone', 'email'}

    assert client.get(reverse('appointment-detail', args=[theirs.pk])).status_code == 403


def test_update_status(client_for, doctor_user, make_patient, make_doctor, make_appointment):
    a = make_appointment(make_patient(), make_doctor())
    client = client_for(doctor_user)
    r = client.put(reverse('appointment-detail', args=[a.pk]), {'status': 'completed'}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['appointment']['status'] == 'completed'

    r = client.put(reverse('appointment-detail', args=[a.pk]), {'status': 'done'}, format='json')
    assert r.status_code == 400
    a.refresh_from_db()
    assert a.status == 'completed'


def test_patient_cannot_update(client_for, patient_user, own_patient, make_doctor, make_appointment):
    a = make_appointment(own_patient, make_doctor())
    r = client_for(patient_user).put(reverse('appointment-detail', args=[a.pk]), {'status': 'cancelled'}, format='json')
    assert r.status_code == 403
    a.refresh_from_db()
    assert a.status == 'pending'


def test_delete_appointment(client_for, admin_user, reception_user, make_patient, make_doctor, make_appointment):
    a = make_appointment(make_patient(), make_doctor())
    assert client_for(reception_user).delete(reverse('appointment-detail', args=[a.pk])).status_code == 403
    r = client_for(admin_user).delete(reverse('appointment-detail', args=[a.pk]))
    assert r.json() == {'success': True, 'message': 'Appointment deleted successfully', 'data': {}}
    assert client_for(admin_user).delete(reverse('appointment-detail', args=[a.pk])).status_code == 404


def test_notify_sends_mail_to_linked_account(client_for, reception_user, patient_user, own_patient,
                                             make_doctor, make_appointment):
    a = make_appointment(own_patient, make_doctor())
    r = client_for(reception_user).post(reverse('appointment-notify', args=[a.pk]))
    assert r.status_code == 200
    assert r.json()['data']['appointment']['emailNotificationSent'] is True
    assert len(mail.outbox) == 1
    assert mail.outbox[0].to == [patient_user.email]


def test_notify_without_account_is_not_marked(client_for, admin_user, make_patient, make_doctor, make_appointment):
    a = make_appointment(make_patient(), make_doctor())
    r = client_for(admin_user).post(reverse('appointment-notify', args=[a.pk]))
    assert r.status_code == 200
    assert r.json()['data']['appointment']['emailNotificationSent'] is False
    assert len(mail.outbox) == 0
