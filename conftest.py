# conftest.py

import os
import tempfile

import pytest
from flask import g, request

# Set testing environment BEFORE importing app so app.py picks TestingConfig
os.environ["FLASK_ENV"] = "testing"

from app import app as flask_app  # noqa: E402
from enquiry_app.fields.registry import FieldDefinitionRegistry  # noqa: E402
from enquiry_app.models import Enquiry, FieldDefinition, db  # noqa: E402
from enquiry_app.stores import SQLAlchemyFieldDefinitionStore, SQLAlchemyRecordStore  # noqa: E402

PRIVILEGED_HEADER = "X-Test-Privileged"


# Stand-in for the host application's auth layer.
@flask_app.before_request
def _mark_test_requester():
    g.requester_is_privileged = request.headers.get(PRIVILEGED_HEADER) == "1"


@pytest.fixture(scope="function")
def app():
    """Create and configure a test Flask application"""
    import uuid

    db_fd, temp_db = tempfile.mkstemp(suffix=f"_{uuid.uuid4().hex[:8]}.db")
    upload_dir = tempfile.mkdtemp(prefix="enquiry_uploads_")

    try:
        flask_app.config.update(
            {
                "TESTING": True,
                "SQLALCHEMY_DATABASE_URI": f"sqlite:///{temp_db}",
                "SQLALCHEMY_ECHO": False,
                "SECRET_KEY": "test-secret-key-for-testing-only",
                "ENABLE_FILE_LOGGING": False,
                "ENABLE_CONSOLE_LOGGING": True,
                "LOG_LEVEL": "DEBUG",
                "LOG_FORMAT": "text",
                "IMPORTER_ENABLED": True,
                "IMPORTER_ALIAS_PATH": None,
                "IMPORTER_UPLOAD_DIR": upload_dir,
                "IMPORTER_HEADER_ROW": 1,
                "IMPORTER_SCAN_BATCH_SIZE": 200,
                "IMPORTER_FIELD_NAME_MAX_LENGTH": 50,
                "IMPORTER_MAX_UPLOAD_MB": 25,
                "MAX_CONTENT_LENGTH": 25 * 1024 * 1024,
            }
        )
        flask_app.extensions.pop("_enquiry_alias_cache", None)

        from enquiry_app.utils.logging_config import setup_logging

        setup_logging(flask_app)

        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            yield flask_app
            db.session.remove()
            db.drop_all()
    finally:
        try:
            os.close(db_fd)
        except OSError:
            pass
        try:
            if os.path.exists(temp_db):
                os.unlink(temp_db)
        except OSError:
            pass


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
def privileged_headers():
    return {PRIVILEGED_HEADER: "1"}


@pytest.fixture
def runner(app):
    """Create a test CLI runner for the Flask application"""
    return app.test_cli_runner()


@pytest.fixture
def record_store(app):
    return SQLAlchemyRecordStore(db.session, batch_size=3)


@pytest.fixture
def definition_store(app):
    return SQLAlchemyFieldDefinitionStore(db.session)


@pytest.fixture
def registry(definition_store, record_store):
    return FieldDefinitionRegistry(definition_store, record_store, scan_batch_size=3)


@pytest.fixture
def make_enquiry(app):
    """Persist an enquiry with the given dynamic fields (values already tagged)."""

    def _make(enquiry_number, dynamic_fields=None, **attributes):
        enquiry = Enquiry(
            enquiry_number=enquiry_number,
            customer_name=attributes.pop("customer_name", f"Customer-{enquiry_number}"),
            dynamic_fields=dict(dynamic_fields or {}),
            **attributes,
        )
        db.session.add(enquiry)
        db.session.commit()
        return enquiry

    return _make


@pytest.fixture
def make_field(app):
    def _make(name, label=None, field_type="text", options=None, **attributes):
        from enquiry_app.models import FieldType

        definition = FieldDefinition(
            name=name,
            label=label or name.replace("_", " ").title(),
            field_type=FieldType.coerce(field_type),
            options=list(options or []),
            **attributes,
        )
        db.session.add(definition)
        db.session.commit()
        return definition

    return _make


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers and ensure testing environment"""
    os.environ["FLASK_ENV"] = "testing"

    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers"""
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.slow)
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
