"""SessionsService over HTTP, plus the error envelope every method shares."""

import pytest
from sqlalchemy.exc import OperationalError

from forms_api.data import forms as form_store
from tests.conftest import TEST_PASSWORD


class TestCreateSession:
    def test_login_returns_token_and_user_id(self, rpc, register):
        user = register()
        res = rpc("SessionsService", "CreateSession", {"email": "alice@example.com", "password": TEST_PASSWORD})

        assert res.status_code == 200
        body = res.json()
        assert body["userId"] == user["id"]
        assert body["token"]

    @pytest.mark.parametrize(
        "body",
        [
            {"password": TEST_PASSWORD},
            {"email": "alice@example.com"},
            {"email": "", "password": ""},
            {},
        ],
    )
    def test_missing_credentials_are_invalid_argument(self, rpc, register, body):
        register()
        res = rpc("SessionsService", "CreateSession", body)

        assert res.status_code == 400
        assert res.json() == {
            "code": 3,
            "status": "INVALID_ARGUMENT",
            "message": "Email and password are required",
        }

    def test_failed_logins_look_identical(self, rpc, register):
        register()
        wrong_password = rpc("SessionsService", "CreateSession", {"email": "alice@example.com", "password": "nope123"})
        unknown_email = rpc("SessionsService", "CreateSession", {"email": "ghost@example.com", "password": "nope123"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {
            "code": 16,
            "status": "UNAUTHENTICATED",
            "message": "Invalid email or password",
        }

    def test_each_login_gets_its_own_token(self, register, login):
        register()
        assert login() != login()


class TestValidateSession:
    def test_returns_the_caller(self, rpc, alice):
        res = rpc("SessionsService", "ValidateSession", {"token": alice["token"]})

        assert res.status_code == 200
        body = res.json()
        assert body["id"] == alice["user"]["id"]
        assert body["email"] == "alice@example.com"
        assert body["name"] == "Alice"
        assert body["createdAt"]
        assert "password" not in body and "passwordHash" not in body

    def test_expired_token(self, rpc, alice, clock):
        clock.advance(days=7)
        res = rpc("SessionsService", "ValidateSession", {"token": alice["token"]})
        assert res.status_code == 401


class TestDeleteSession:
    def test_logout_then_token_is_dead(self, rpc, alice):
        res = rpc("SessionsService", "DeleteSession", {"token": alice["token"]})
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Logged out successfully"}

        assert rpc("SessionsService", "ValidateSession", {"token": alice["token"]}).status_code == 401
        assert rpc("FormsService", "ListForms", {"token": alice["token"]}).status_code == 401

    def test_second_logout_is_unauthenticated(self, rpc, alice):
        rpc("SessionsService", "DeleteSession", {"token": alice["token"]})
        res = rpc("SessionsService", "DeleteSession", {"token": alice["token"]})
        assert res.status_code == 401

    def test_other_sessions_survive(self, rpc, alice, login):
        laptop = alice["token"]
        phone = login()

        rpc("SessionsService", "DeleteSession", {"token": laptop})

        assert rpc("FormsService", "ListForms", {"token": laptop}).status_code == 401
        assert rpc("FormsService", "ListForms", {"token": phone}).status_code == 200

    def test_deleting_the_user_revokes_their_sessions(self, rpc, alice, login):
        other_device = login()
        res = rpc("UsersService", "DeleteUser", {"token": alice["token"], "userId": alice["user"]["id"]})
        assert res.status_code == 200

        for token in (alice["token"], other_device):
            assert rpc("SessionsService", "ValidateSession", {"token": token}).status_code == 401


class TestErrorEnvelope:
    def test_unparseable_json_is_invalid_argument(self, client):
        res = client.post(
            "/forms.FormsService/ListForms",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert res.status_code == 400
        assert res.json() == {"code": 3, "status": "INVALID_ARGUMENT", "message": "Malformed request"}

    def test_wrongly_typed_field_is_invalid_argument(self, rpc, alice):
        res = rpc(
            "ResponsesService",
            "CreateResponse",
            {"token": alice["token"], "formId": "1", "answers": "not-a-list"},
        )
        assert res.status_code == 400
        assert res.json()["status"] == "INVALID_ARGUMENT"

    def test_storage_failure_is_internal(self, rpc, alice, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(form_store, "list_forms_for_user", broken)
        res = rpc("FormsService", "ListForms", {"token": alice["token"]})

        assert res.status_code == 500
        assert res.json() == {"code": 13, "status": "INTERNAL", "message": "Internal server error"}

    def test_unknown_method_is_not_found(self, client):
        assert client.post("/forms.FormsService/DropTables", json={}).status_code == 404
