import os
import sys
import importlib
import pytest
import email_validator

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')
# Fixtures use the special-use `.test` domain; email-validator 2.x only
# accepts it when its documented test-environment switch is on.
email_validator.TEST_ENVIRONMENT = True

from models import db


def load_app(monkeypatch, env=None):
    """Build a fresh testing app after applying ``env`` (None deletes a var)."""
    monkeypatch.setenv('APP_ENV', 'testing')
    for key, value in (env or {}).items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    import bidhaa.config as config
    importlib.reload(config)
    from bidhaa import create_app
    import extensions
    app = create_app(config.get_config_class())
    extensions.limiter.reset()
    return app


@pytest.fixture(scope='session')
def app_instance():
    from bidhaa import create_app
    from bidhaa.config import TestingConfig
    return create_app(TestingConfig)


@pytest.fixture(scope='function')
def app(app_instance):
    from bidhaa.services.catalog import reset_registry
    import extensions
    extensions.limiter.reset()
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        reset_registry(app_instance)
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Insert a storefront account through the service layer; returns (user, token)."""
    from bidhaa.services.accounts import register_user
    from bidhaa.utils import create_user_token

    def _make(role='student', email=None, password='secret123', username='Test User'):
        email = email or f'{role}@example.com'
        user = register_user(username, email, password, role)
        db.session.commit()
        return user, create_user_token(user.id, user.role)

    return _make


@pytest.fixture
def make_admin(app):
    from bidhaa.services.accounts import register_admin

    def _make(admin_role='super_admin', email=None, password='adminpass1', username='Admin'):
        email = email or f'{admin_role}@mybidhaa.test'
        admin = register_admin(username, email, password, admin_role)
        db.session.commit()
        return admin

    return _make


@pytest.fixture
def app_factory(monkeypatch):
    def _factory(env=None):
        return load_app(monkeypatch, env)
    return _factory
