from datetime import date, datetime, timedelta

from palm.app import create_app
from palm.dashboard import build_dashboard_data, end_of_day, start_of_day
from palm.extensions import db
from palm.models.meal import Meal
from palm.models.plan import Plan

NOW = datetime(2024, 3, 10, 15, 30)


def add_meal(user, when, **used):
    meal = Meal(user_id=user.id, date_time=when, **used)
    db.session.add(meal)
    db.session.commit()
    return meal


def activate_plan(user, **slots):
    plan = Plan(user_id=user.id, name='Daily', **slots)
    db.session.add(plan)
    db.session.commit()
    user.active_plan_id = plan.id
    db.session.commit()
    return plan


def test_day_boundaries():
    """Test that a day spans midnight through 23:59:59.999"""
    assert start_of_day(NOW) == datetime(2024, 3, 10)
    assert end_of_day(NOW) == datetime(2024, 3, 10, 23, 59, 59, 999000)


def test_todays_used_totals(test_user):
    """Test that only meals inside today's range are summed"""
    add_meal(test_user, datetime(2024, 3, 10, 0, 0), proteins_used=2, carbs_used=1)
    add_meal(test_user, datetime(2024, 3, 10, 23, 59, 59, 999000), proteins_used=1, junk_used=3)
    add_meal(test_user, datetime(2024, 3, 9, 23, 59), proteins_used=5)

    data = build_dashboard_data(test_user, now=NOW)

    assert data['used_slots'] == {'proteins': 3, 'carbs': 1, 'fats': 0, 'veggies': 0, 'junk': 3}
    assert len(data['meals']) == 2


def test_weekly_view_absent_without_plan(test_user):
    """Test that no active plan means no weekly view rather than zero targets"""
    add_meal(test_user, NOW, proteins_used=1)

    data = build_dashboard_data(test_user, now=NOW)

    assert data['weekly_data'] is None
    assert data['meal_plan'] is None
    assert data['historical_data'] is not None


def test_weekly_view_is_dense_and_not_full(test_user):
    """Test meals on days 1, 3 and 5 of the window leave the week incomplete"""
    activate_plan(test_user, protein_slots=4, carb_slots=3)
    for offset in (6, 4, 2):
        add_meal(test_user, NOW - timedelta(days=offset), proteins_used=2)

    weekly = build_dashboard_data(test_user, now=NOW)['weekly_data']

    assert [entry['date_key'] for entry in weekly['data']] == [
        (date(2024, 3, 10) - timedelta(days=offset)).isoformat() for offset in range(6, -1, -1)
    ]
    assert [entry['proteins'] for entry in weekly['data']] == [2, 0, 2, 0, 2, 0, 0]
    assert weekly['data'][-1]['day'] == 'Sunday'
    assert weekly['data'][-1]['day_short'] == 'Sun'
    assert weekly['has_full_week'] is False
    assert weekly['summary']['proteins'] == {'used': 6, 'total': 28}
    assert weekly['summary']['carbs'] == {'used': 0, 'total': 21}


def test_weekly_view_full_week(test_user):
    """Test a meal on each of the last seven days completes the week"""
    activate_plan(test_user, veggie_slots=5)
    for offset in range(7):
        add_meal(test_user, start_of_day(NOW) - timedelta(days=offset), veggies_used=1)

    weekly = build_dashboard_data(test_user, now=NOW)['weekly_data']

    assert weekly['has_full_week'] is True
    assert weekly['summary']['veggies'] == {'used': 7, 'total': 35}


def test_historical_view_absent_without_meals(test_user):
    """Test that a user with no meals gets no historical series"""
    data = build_dashboard_data(test_user, now=NOW)

    assert data['historical_data'] is None
    assert data['used_slots'] == {'proteins': 0, 'carbs': 0, 'fats': 0, 'veggies': 0, 'junk': 0}


def test_historical_view_first_meal_today(test_user):
    """Test a first meal today yields a single entry labelled Today"""
    add_meal(test_user, NOW - timedelta(hours=1), fats_used=1)

    historical = build_dashboard_data(test_user, now=NOW)['historical_data']

    assert len(historical['data']) == 1
    entry = historical['data'][0]
    assert entry['date_key'] == '2024-03-10'
    assert entry['date_short'] == 'Today'
    assert entry['fats'] == 1
    assert historical['first_meal_date'] == '2024-03-10'


def test_historical_view_is_dense(test_user):
    """Test every day from the first meal through today is present and zero-filled"""
    add_meal(test_user, datetime(2024, 2, 28, 23, 0), junk_used=2)
    add_meal(test_user, datetime(2024, 3, 5, 8, 0), junk_used=1)

    historical = build_dashboard_data(test_user, now=NOW)['historical_data']
    keys = [entry['date_key'] for entry in historical['data']]

    # 2024 is a leap year: Feb 28, Feb 29, then Mar 1-10
    assert len(keys) == 12
    assert keys == sorted(keys)
    assert keys[0] == '2024-02-28'
    assert keys[1] == '2024-02-29'
    assert keys[-1] == '2024-03-10'
    by_key = {entry['date_key']: entry for entry in historical['data']}
    assert by_key['2024-02-28']['junk'] == 2
    assert by_key['2024-02-29']['junk'] == 0
    assert by_key['2024-03-05']['junk'] == 1
    assert by_key['2024-03-05']['date_short'] == '3/5'
    assert by_key['2024-03-05']['date'] == 'Mar 5'
    assert by_key['2024-03-10']['date_short'] == 'Today'


def test_future_meals_are_ignored(test_user):
    """Test meals after today do not leak into any view"""
    add_meal(test_user, NOW + timedelta(days=1), proteins_used=9)

    data = build_dashboard_data(test_user, now=NOW)

    assert data['historical_data'] is None
    assert data['used_slots']['proteins'] == 0


def test_dashboard_route_refreshes_after_meal(client, auth_headers):
    """Test that a logged meal shows up on the next dashboard read"""
    response = client.get('/api/dashboard', headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['data']['historical_data'] is None

    client.post('/api/meals', json={'proteins_used': 2}, headers=auth_headers)

    data = client.get('/api/dashboard', headers=auth_headers).get_json()['data']
    assert data['used_slots']['proteins'] == 2
    assert data['historical_data']['data'][-1]['date_short'] == 'Today'


def test_dashboard_sees_writes_from_other_workers(tmp_path):
    """Test a meal logged through one app instance shows up on another's next dashboard read"""
    overrides = {'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'shared.db'}"}
    reader = create_app('testing', overrides)
    writer = create_app('testing', overrides)
    with reader.app_context():
        db.create_all()

    try:
        reader_client = reader.test_client()
        response = reader_client.post('/api/auth/register',
                                      json={'email': 'shared@example.com', 'password': 'testpassword123'})
        headers = {'Authorization': f"Bearer {response.get_json()['data']['access_token']}"}

        before = reader_client.get('/api/dashboard', headers=headers).get_json()['data']
        assert before['used_slots']['proteins'] == 0

        response = writer.test_client().post('/api/meals', json={'proteins_used': 3}, headers=headers)
        assert response.status_code == 201

        after = reader_client.get('/api/dashboard', headers=headers).get_json()['data']
        assert after['used_slots']['proteins'] == 3
    finally:
        for app in (reader, writer):
            with app.app_context():
                db.engine.dispose()
