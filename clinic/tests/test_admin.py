from decimal import Decimal

import pytest
from django.urls import reverse

from clinic.models import Bill, Patient

pytestmark = pytest.mark.django_db


def test_analytics_overview(client_for, admin_user, make_patient, make_doctor, make_appointment):
    p1 = make_patient(gender='Male')
    p2 = make_patient(gender='Female')
    make_patient(gender='Female')
    d = make_doctor()
    make_appointment(p1, d, status='approved')
    make_appointment(p2, d)
    Bill.objects.create(patient=p1, total_amount=Decimal('100.50'), payment_status='paid')
    Bill.objects.create(patient=p1, total_amount=Decimal('49.50'), payment_status='paid')
    Bill.objects.create(patient=p2, total_amount=Decimal('20'))

    r = client_for(admin_user).get(reverse('admin-analytics'))
    assert r.status_code == 200
    data = r.json()['data']
    assert data['overview'] == {
        'totalPatients': 3,
        'totalDoctors': 1,
        'totalAppointments': 2,
        'totalReports': 0,
        'totalBills': 3,
        'totalRevenue': 150.0,
        'pendingAmount': 20.0,
        'recentAppointments': 2,
    }
    assert {row['_id']: row['count'] for row in data['appointmentsByStatus']} == {'approved': 1, 'pending': 1}
    assert {row['_id']: row['count'] for row in data['patientsByGender']} == {'Male': 1, 'Female': 2}
    paid = next(row for row in data['revenueStats'] if row['_id'] == 'paid')
    assert paid == {'_id': 'paid', 'total': 150.0, 'count': 2}


def test_analytics_is_cached(client_for, admin_user, make_patient):
    client = client_for(admin_user)
    make_patient()
    assert client.get(reverse('admin-analytics')).json()['data']['overview']['totalPatients'] == 1
    make_patient()
    assert client.get(reverse('admin-analytics')).json()['data']['overview']['totalPatients'] == 1
    assert Patient.objects.count() == 2


def test_analytics_empty_database(client_for, admin_user):
    data = client_for(admin_user).get(reverse('admin-analytics')).json()['data']
    assert data['overview']['totalRevenue'] == 0
    assert data['revenueStats'] == []


@pytest.mark.parametrize('role_fixture', ['doctor_user', 'reception_user', 'patient_user'])
def test_admin_routes_reject_other_roles(request, client_for, role_fixture):
    client = client_for(request.getfixturevalue(role_fixture))
    assert client.get(reverse('admin-analytics')).status_code == 403
    assert client.get(reverse('admin-users')).status_code == 403


def test_list_users_with_role_filter(client_for, admin_user, make_user):
    make_user('doctor')
    make_user('doctor')
    make_user('patient')
    client = client_for(admin_user)

    r = client.get(reverse('admin-users'))
    assert r.json()['pagination']['total'] == 4

    r = client.get(reverse('admin-users'), {'role': 'doctor'})
    body = r.json()
    assert body['pagination']['total'] == 2
    for user in body['data']['users']:
        assert 'password' not in user
        assert 'reset_password_token' not in user


def test_user_detail(client_for, admin_user, patient_user):
    client = client_for(admin_user)
    r = client.get(reverse('admin-user-detail', args=[patient_user.pk]))
    assert r.json()['data']['user']['email'] == patient_user.email
    r = client.get(reverse('admin-user-detail', args=['00000000-0000-0000-0000-000000000000']))
    assert r.status_code == 404
    assert r.json()['error'] == 'User not found'


def test_analytics_refreshes_after_api_writes(client_for, admin_user, reception_user, make_patient):
    patient = make_patient()
    admin = client_for(admin_user)
    assert admin.get(reverse('admin-analytics')).json()['data']['overview']['totalRevenue'] == 0

    r = client_for(reception_user).post(reverse('bills'), {
        'patientId': str(patient.pk), 'services': [{'name': 'Consultation', 'cost': 300}], 'totalAmount': 300,
    }, format='json')
    assert r.status_code == 201
    bill_id = r.json()['data']['bill']['_id']
    client_for(reception_user).put(reverse('bill-detail', args=[bill_id]), {'paymentStatus': 'paid'}, format='json')

    overview = admin.get(reverse('admin-analytics')).json()['data']['overview']
    assert overview['totalBills'] == 1
    assert overview['totalRevenue'] == 300.0

    admin.delete(reverse('bill-detail', args=[bill_id]))
    assert admin.get(reverse('admin-analytics')).json()['data']['overview']['totalBills'] == 0
