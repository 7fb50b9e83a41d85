from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from palm.dashboard import build_water_summary, resolve_timezone
from palm.extensions import db
from palm.models.water import WaterEntry, WaterPlan


def test_create_water_entry(client, auth_headers):
    """Test logging water with an offset timestamp stored as UTC"""
    response = client.post('/api/water', json={
        'amount': 2,
        'unit': 'LITERS',
        'date_time': '2024-01-15T09:30:00+02:00',
        'notes': 'Morning bottle'
    }, headers=auth_headers)

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['amount'] == 2
    assert data['unit'] == 'LITERS'
    assert data['date_time'] == '2024-01-15T07:30:00'


def test_water_amount_zero_rejected(client, auth_headers):
    """Test a zero amount is a validation failure and creates no row"""
    response = client.post('/api/water', json={'amount': 0}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['details'][0]['field'] == 'amount'
    assert WaterEntry.query.count() == 0


def test_water_unknown_unit_rejected(client, auth_headers):
    """Test units outside the enumeration are rejected"""
    response = client.post('/api/water', json={'amount': 8, 'unit': 'GALLONS'}, headers=auth_headers)

    assert response.status_code == 400
    assert WaterEntry.query.count() == 0


def test_water_plan_negative_target_rejected(client, auth_headers):
    """Test a negative daily target is rejected and creates no row"""
    response = client.post('/api/water-plans', json={'name': 'Hydrate', 'daily_target': -1},
                           headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['details'][0]['field'] == 'daily_target'
    assert WaterPlan.query.count() == 0


def test_water_plan_defaults(client, auth_headers):
    """Test a new water plan defaults to 64 fluid ounces"""
    response = client.post('/api/water-plans', json={'name': 'Default'}, headers=auth_headers)

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['daily_target'] == 64
    assert data['unit'] == 'FLUID_OUNCES'


def test_list_water_paginates(client, auth_headers):
    """Test list pagination meta and limit capping"""
    for hour in range(3):
        client.post('/api/water', json={'amount': 8, 'date_time': f'2024-01-15T0{hour}:00:00Z'},
                    headers=auth_headers)

    body = client.get('/api/water?page=2&limit=2', headers=auth_headers).get_json()
    assert body['meta'] == {'page': 2, 'limit': 2, 'total': 3, 'total_pages': 2}
    assert len(body['data']) == 1
    assert body['data'][0]['date_time'] == '2024-01-15T00:00:00'

    body = client.get('/api/water?limit=1000', headers=auth_headers).get_json()
    assert body['meta']['limit'] == 100


def test_list_water_date_range(client, auth_headers):
    """Test start_date and end_date bound the listing"""
    for day in (10, 15, 20):
        client.post('/api/water', json={'amount': 8, 'date_time': f'2024-01-{day}T12:00:00Z'},
                    headers=auth_headers)

    body = client.get('/api/water?start_date=2024-01-12T00:00:00Z&end_date=2024-01-18T00:00:00Z',
                      headers=auth_headers).get_json()
    assert [entry['date_time'] for entry in body['data']] == ['2024-01-15T12:00:00']


def test_delete_active_water_plan_clears_pointer(client, auth_headers):
    """Test deleting the active water plan clears the pointer"""
    plan_id = client.post('/api/water-plans', json={'name': 'Hydrate'}, headers=auth_headers).get_json()['data']['id']
    client.post(f'/api/water-plans/{plan_id}/activate', headers=auth_headers)
    assert client.get('/api/users/me', headers=auth_headers).get_json()['data']['active_water_plan_id'] == plan_id

    assert client.delete(f'/api/water-plans/{plan_id}', headers=auth_headers).status_code == 200

    assert client.get('/api/users/me', headers=auth_headers).get_json()['data']['active_water_plan_id'] is None


def test_summary_uses_default_target(client, auth_headers):
    """Test the summary converts entries and falls back to 64 fl oz"""
    client.post('/api/water', json={'amount': 2, 'unit': 'LITERS'}, headers=auth_headers)

    data = client.get('/api/water/summary', headers=auth_headers).get_json()['data']

    assert data['timezone'] == 'UTC'
    assert data['unit'] == 'FLUID_OUNCES'
    assert data['daily_target_fl_oz'] == 64
    assert data['today_total_fl_oz'] == pytest.approx(67.63, abs=0.01)
    assert data['progress'] == 100
    assert len(data['weekly_data']) == 7


def test_summary_reflects_new_entries(client, auth_headers):
    """Test the summary picks up water logged since the last read"""
    assert client.get('/api/water/summary', headers=auth_headers).get_json()['data']['today_total'] == 0

    client.post('/api/water', json={'amount': 16}, headers=auth_headers)

    assert client.get('/api/water/summary', headers=auth_headers).get_json()['data']['today_total'] == 16


def test_summary_honors_timezone_cookie(client, auth_headers):
    """Test the timezone cookie selects the bucketing zone"""
    client.set_cookie('timezone', 'Asia/Tokyo')
    data = client.get('/api/water/summary', headers=auth_headers).get_json()['data']
    assert data['timezone'] == 'Asia/Tokyo'

    client.set_cookie('timezone', 'Not/AZone')
    data = client.get('/api/water/summary', headers=auth_headers).get_json()['data']
    assert data['timezone'] == 'UTC'


def test_summary_buckets_in_local_time(test_user):
    """Test an entry late in the local evening lands on the local day"""
    tz = ZoneInfo('America/New_York')
    # 03:00 UTC on Jan 15 is 22:00 on Jan 14 in New York
    db.session.add(WaterEntry(user_id=test_user.id, amount=10, unit='FLUID_OUNCES',
                              date_time=datetime(2024, 1, 15, 3, 0)))
    plan = WaterPlan(user_id=test_user.id, name='Liters', daily_target=2, unit='LITERS')
    db.session.add(plan)
    db.session.commit()
    test_user.active_water_plan_id = plan.id
    db.session.commit()

    data = build_water_summary(test_user, tz, now=datetime(2024, 1, 15, 12, 0))

    assert data['date'] == '2024-01-15'
    assert data['unit'] == 'LITERS'
    assert data['daily_target'] == 2
    assert data['today_total'] == 0
    by_day = {entry['date_key']: entry for entry in data['weekly_data']}
    assert by_day['2024-01-14']['total_fl_oz'] == 10
    assert by_day['2024-01-15']['total_fl_oz'] == 0


def test_resolve_timezone_fallback():
    """Test missing or unknown zones fall back to UTC"""
    assert resolve_timezone(None).key == 'UTC'
    assert resolve_timezone('Mars/Olympus').key == 'UTC'
    assert resolve_timezone('Europe/Paris').key == 'Europe/Paris'
