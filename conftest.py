# conftest.py

import os

import pytest

# Set testing environment BEFORE importing app so app.py uses TestingConfig
os.environ["FLASK_ENV"] = "testing"

# Now import app and other modules after environment is set
from app import app as flask_app
from turfboard.models import LoginRecord, Membership, MembershipRole, Organization, db
from turfboard.services.response_cache import ResponseCache


@pytest.fixture(scope="function")
def app():
    """Create and configure a test Flask application"""
    flask_app.config.update(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key-for-testing-only",
            "MONITORING_ENABLED": False,
            "ENABLE_FILE_LOGGING": False,
            "ENABLE_CONSOLE_LOGGING": False,
            "LOG_LEVEL": "DEBUG",
            "LEGACY_ANONYMOUS_ACCESS": True,
            "IDENTITY_HEADER": "X-User-Email",
        }
    )

    # Fresh cache per test; the app object outlives a single test
    flask_app.extensions["response_cache"] = ResponseCache(
        ttl_seconds=flask_app.config["RESPONSE_CACHE_TTL_SECONDS"]
    )

    with flask_app.app_context():
        # Drop any existing tables to ensure clean state
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture(autouse=True)
def app_context(app):
    """Automatically provide app context for all tests"""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    """Create a test client for the Flask application"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask application"""
    return app.test_cli_runner()


@pytest.fixture
def cache(app):
    return app.extensions["response_cache"]


@pytest.fixture
def organizations(app):
    """Two organizations: Acme and Globex"""
    acme = Organization(name="Acme", company_name="Acme Corp")
    globex = Organization(name="Globex", company_name="Globex Inc")
    db.session.add_all([acme, globex])
    db.session.commit()
    return {"acme": acme, "globex": globex}


@pytest.fixture
def memberships(organizations):
    """
    admin@example.com    admin in Acme
    vendor@example.com   vendor in Acme
    viewer@example.com   viewer in Acme
    globex@example.com   vendor in Globex
    """
    acme = organizations["acme"]
    globex = organizations["globex"]
    db.session.add_all(
        [
            Membership(user_email="admin@example.com", organization_id=acme.id, role=MembershipRole.ADMIN),
            Membership(user_email="vendor@example.com", organization_id=acme.id, role=MembershipRole.VENDOR),
            Membership(user_email="viewer@example.com", organization_id=acme.id, role=MembershipRole.VIEWER),
            Membership(user_email="globex@example.com", organization_id=globex.id, role=MembershipRole.VENDOR),
        ]
    )
    db.session.commit()
    return organizations


@pytest.fixture
def logins(memberships):
    """Three logins: two in Acme, one in Globex, plus one without an organization"""
    acme = memberships["acme"]
    globex = memberships["globex"]
    records = {
        "ana": LoginRecord(login="Ana Souza", slug="ana-souza-0001", on_turf=70, off_turf=30, organization_id=acme.id),
        "bruno": LoginRecord(login="Bruno", slug="bruno-0002", on_turf=10, off_turf=10, organization_id=acme.id),
        "carla": LoginRecord(login="Carla", slug="carla-0003", on_turf=5, off_turf=0, organization_id=globex.id),
        "orphan": LoginRecord(login="Orphan", slug="orphan-0004", on_turf=0, off_turf=0),
    }
    db.session.add_all(records.values())
    db.session.commit()
    return records

