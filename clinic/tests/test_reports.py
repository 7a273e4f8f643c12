import pytest
from django.test import override_settings
from django.urls import reverse

from clinic.models import Report

pytestmark = pytest.mark.django_db

MISSING = '00000000-0000-0000-0000-000000000000'


@pytest.fixture
def visit(make_patient, make_doctor, make_appointment, own_doctor):
    patient = make_patient()
    return make_appointment(patient, own_doctor)


def report_payload(appt, **kw):
    data = {
        'appointmentId': str(appt.pk), 'patientId': str(appt.patient_id), 'doctorId': str(appt.doctor_id),
        'diagnosis': 'Seasonal flu', 'prescription': 'Rest and fluids',
        'labTests': [{'testName': 'CBC', 'result': 'normal', 'date': '2024-06-10'}],
    }
    data.update(kw)
    return data


def make_report(appt, **kw):
    kw.setdefault('diagnosis', 'Flu')
    kw.setdefault('prescription', 'Rest')
    return Report.objects.create(appointment=appt, patient=appt.patient, doctor=appt.doctor, **kw)


def test_doctor_writes_report(client_for, doctor_user, visit):
    r = client_for(doctor_user).post(reverse('reports'), report_payload(visit), format='json')
    assert r.status_code == 201
    report = r.json()['data']['report']
    assert report['labTests'][0]['testName'] == 'CBC'
    assert report['labTests'][0]['date'].startswith('2024-06-10')
    assert report['appointmentId']['_id'] == str(visit.pk)
    assert set(report['appointmentId']) == {'_id', 'date', 'time'}


@pytest.mark.parametrize('field,label', [
    ('appointmentId', 'Appointment'), ('patientId', 'Patient'), ('doctorId', 'Doctor'),
])
def test_missing_reference_is_404(client_for, admin_user, visit, field, label):
    r = client_for(admin_user).post(reverse('reports'), report_payload(visit, **{field: MISSING}), format='json')
    assert r.status_code == 404
    assert r.json()['error'] == f'{label} not found'
    assert not Report.objects.exists()


def test_reception_cannot_write_reports(client_for, reception_user, visit):
    r = client_for(reception_user).post(reverse('reports'), report_payload(visit), format='json')
    assert r.status_code == 403
    assert not Report.objects.exists()


def test_doctor_list_is_scoped(client_for, doctor_user, visit, make_doctor, make_appointment):
    make_report(visit)
    make_report(make_appointment(visit.patient, make_doctor()))
    r = client_for(doctor_user).get(reverse('reports'))
    assert r.json()['pagination']['total'] == 1


def test_admin_sees_all_reports(client_for, admin_user, visit, make_doctor, make_appointment):
    make_report(visit)
    make_report(make_appointment(visit.patient, make_doctor()))
    assert client_for(admin_user).get(reverse('reports')).json()['pagination']['total'] == 2


def test_patient_reads_own_reports(client_for, patient_user, own_patient, make_patient, own_doctor, make_appointment):
    mine = make_report(make_appointment(own_patient, own_doctor))
    theirs = make_report(make_appointment(make_patient(), own_doctor))
    client = client_for(patient_user)

    r = client.get(reverse('report-detail', args=[mine.pk]))
    assert r.status_code == 200
    assert r.json()['data']['report']['appointmentId']['status'] == 'pending'
    assert client.get(reverse('report-detail', args=[theirs.pk])).status_code == 403

    r = client.get(reverse('reports-patient', args=[own_patient.pk]))
    assert r.json()['count'] == 1
    assert client.get(reverse('reports-patient', args=[theirs.patient_id])).status_code == 403


def test_patient_cannot_list_all_reports(client_for, patient_user):
    assert client_for(patient_user).get(reverse('reports')).status_code == 403


def test_update_report(client_for, doctor_user, visit):
    rep = make_report(visit)
    r = client_for(doctor_user).put(reverse('report-detail', args=[rep.pk]), {'notes': 'Follow up in 7 days'}, format='json')
    assert r.status_code == 200
    rep.refresh_from_db()
    assert rep.notes == 'Follow up in 7 days'
    assert rep.diagnosis == 'Flu'


def test_delete_report(client_for, admin_user, doctor_user, visit):
    rep = make_report(visit)
    assert client_for(doctor_user).delete(reverse('report-detail', args=[rep.pk])).status_code == 403
    assert client_for(admin_user).delete(reverse('report-detail', args=[rep.pk])).status_code == 200
    assert not Report.objects.exists()


def test_pdf_placeholder_without_renderer(client_for, admin_user, visit):
    rep = make_report(visit)
    r = client_for(admin_user).get(reverse('report-pdf', args=[rep.pk]))
    assert r.status_code == 200
    body = r.json()
    assert body['success'] is True
    assert body['data']['report']['_id'] == str(rep.pk)


def fake_renderer(record):
    return b'%PDF-1.4 ' + str(record.pk).encode()


@override_settings(DOCUMENT_RENDERER='clinic.tests.test_reports.fake_renderer')
def test_pdf_with_renderer(client_for, admin_user, visit):
    rep = make_report(visit)
    r = client_for(admin_user).get(reverse('report-pdf', args=[rep.pk]))
    assert r.status_code == 200
    assert r['Content-Type'] == 'application/pdf'
    assert r.content.startswith(b'%PDF')
    assert f'report-{rep.pk}.pdf' in r['Content-Disposition']


def test_pdf_of_missing_report_is_404(client_for, admin_user):
    r = client_for(admin_user).get(reverse('report-pdf', args=[MISSING]))
    assert r.status_code == 404
    assert r.json()['error'] == 'Report not found'
