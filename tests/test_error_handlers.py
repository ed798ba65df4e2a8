"""Tests for JSON error rendering"""

from unittest.mock import patch

import pytest
from flask import Flask
from sqlalchemy.exc import OperationalError

from turfboard.utils.error_handler import (
    NotFound,
    PermissionDenied,
    StoreUnavailable,
    TurfError,
    ValidationError,
    init_error_handlers,
)


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        "error_class, status_code, message",
        [
            (ValidationError, 400, "invalid values"),
            (NotFound, 404, "not found"),
            (PermissionDenied, 403, "no permission"),
            (StoreUnavailable, 500, "internal error"),
        ],
    )
    def test_defaults(self, error_class, status_code, message):
        error = error_class()
        assert isinstance(error, TurfError)
        assert error.status_code == status_code
        assert error.message == message

    def test_custom_message(self):
        assert ValidationError("no plans provided").message == "no plans provided"

    def test_handlers_render_message_only(self):
        app = Flask(__name__)
        init_error_handlers(app)

        @app.route("/denied")
        def denied():
            raise PermissionDenied()

        response = app.test_client().get("/denied")
        assert response.status_code == 403
        assert response.get_json() == {"message": "no permission"}


class TestAppErrorHandlers:
    def test_unknown_route_is_json(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.get_json() == {"message": "not found"}

    def test_method_not_allowed_is_json(self, client):
        response = client.delete("/api/logins")
        assert response.status_code == 405
        assert "message" in response.get_json()

    def test_store_failure_is_opaque(self, client, logins):
        with patch("turfboard.services.login_store.LoginRecord.query") as mock_query:
            mock_query.options.side_effect = OperationalError("SELECT", {}, Exception("password=hunter2"))
            response = client.get("/api/logins")

        assert response.status_code == 500
        assert response.get_json() == {"message": "internal error"}

    def test_unexpected_exception_is_opaque(self, client, logins):
        with patch("turfboard.routes.logins.LoginStore.list_all", side_effect=RuntimeError("secret detail")):
            response = client.get("/api/logins")

        assert response.status_code == 500
        assert response.get_json() == {"message": "internal error"}
