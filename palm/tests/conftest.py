import pytest

from palm.app import create_app
from palm.extensions import db
from palm.models.user import User


@pytest.fixture
def app(tmp_path):
    """Create application for the tests."""
    app = create_app('testing')
    app.config['IMAGE_STORAGE_ROOT'] = str(tmp_path / 'images')

    # Create tables
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def register(client):
    """Register a user through the API and return (user, auth headers)."""
    def _register(email='test@example.com', password='testpassword123', **fields):
        response = client.post('/api/auth/register', json={'email': email, 'password': password, **fields})
        assert response.status_code == 201
        data = response.get_json()['data']
        return data['user'], {'Authorization': f"Bearer {data['access_token']}"}
    return _register


@pytest.fixture
def auth_headers(register):
    _, headers = register()
    return headers


@pytest.fixture
def test_user(app):
    """Create a test user directly in the database."""
    user = User(
        email='direct@example.com',
        password='testpassword123',
        first_name='Test',
        last_name='User'
    )
    db.session.add(user)
    db.session.commit()
    return user
