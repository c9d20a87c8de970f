"""
Tests for the root endpoint and the JSON error responses.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import pytest
from flask import Flask
from flask.testing import FlaskClient

from db.repositories import HobbitRepository
from db.seeds import HOBBITS_SEED

if TYPE_CHECKING:
    from db.protocols import DatabaseBackendProtocol


@pytest.mark.api
class TestWelcome:
    """Test GET /"""

    def test_get_root(self, client: FlaskClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.mimetype == "application/json"
        data = response.get_json()
        assert data["message"] == "Welcome to our API"
        assert re.search(r"api", data["message"], re.IGNORECASE)

    def test_content_type_charset(self, client: FlaskClient) -> None:
        response = client.get("/")
        assert response.headers["Content-Type"] == "application/json; charset=UTF-8"

    def test_post_not_allowed(self, client: FlaskClient) -> None:
        response = client.post("/")

        assert response.status_code == 405
        assert response.mimetype == "application/json"
        assert response.get_json() == {"message": "Method not allowed"}


@pytest.mark.api
class TestErrors:
    """Test JSON error responses"""

    def test_unknown_path(self, client: FlaskClient) -> None:
        response = client.get("/dwarves")

        assert response.status_code == 404
        assert response.mimetype == "application/json"
        assert response.get_json() == {"message": "Not found"}

    def test_server_error_discards_writes(
        self,
        app: Flask,
        client: FlaskClient,
        backend: "DatabaseBackendProtocol",
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A failing view returns a JSON 500, logs the error and leaves
        none of its writes behind."""

        def list_all_then_fail(self: HobbitRepository) -> list:
            self.create("gollum")
            raise RuntimeError("lost the precious")

        monkeypatch.setattr(HobbitRepository, "list_all", list_all_then_fail)
        monkeypatch.setitem(app.config, "PROPAGATE_EXCEPTIONS", False)

        with caplog.at_level(logging.ERROR):
            response = client.get("/hobbits")

        assert response.status_code == 500
        assert response.mimetype == "application/json"
        assert response.get_json() == {"message": "An error occurred in the server"}
        assert "Server error: lost the precious" in caplog.text

        monkeypatch.undo()
        backend.rollback()
        assert [h.name for h in backend.hobbits.list_all()] == list(HOBBITS_SEED)
