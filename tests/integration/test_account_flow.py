"""
Integration tests for the account flow.

Drives the real application (routes, dependencies, domain service) over
in-memory stores, reading verification codes from the recorded emails.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from cinepass.adapters.smtp.console import ConsoleNotificationSender
from cinepass.api.main import app


@pytest.fixture
def client(credential_store, code_store, sender) -> TestClient:
    """Create test client with in-memory stores in app state."""
    app.state.pool = None
    app.state.credential_store = credential_store
    app.state.code_store = code_store
    app.state.notifier = sender
    return TestClient(app)


def signup(client: TestClient, email: str = "a@x.com", password: str = "pw1"):
    return client.post("/signup", json={"username": "alice", "email": email, "password": password})


class TestAccountFlow:
    def test_full_scenario(self, client: TestClient, sender) -> None:
        """signup -> signin (not verified) -> verify -> signin ok -> wrong password."""
        response = signup(client)
        assert response.status_code == 201
        assert response.json() == {
            "message": "User created successfully, verification code sent to email"
        }

        response = client.post("/signin", json={"email": "a@x.com", "password": "pw1"})
        assert response.status_code == 400
        assert response.json() == {"message": "Email not verified"}

        code = sender.last_code("a@x.com")
        response = client.post("/verify", json={"email": "a@x.com", "code": code})
        assert response.status_code == 200
        assert response.json() == {"message": "Verification successful"}

        response = client.post("/signin", json={"email": "a@x.com", "password": "pw1"})
        assert response.status_code == 200
        assert response.json() == {"message": "Sign-in successful"}

        response = client.post("/signin", json={"email": "a@x.com", "password": "wrong"})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid email or password"}

    def test_password_longer_than_72_bytes(self, client: TestClient, sender) -> None:
        long_password = "p" * 80
        response = signup(client, password=long_password)
        assert response.status_code == 201

        code = sender.last_code("a@x.com")
        assert client.post("/verify", json={"email": "a@x.com", "code": code}).status_code == 200

        response = client.post("/signin", json={"email": "a@x.com", "password": long_password})
        assert response.status_code == 200

        response = client.post("/signin", json={"email": "a@x.com", "password": "q" * 80})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid email or password"}

    def test_duplicate_signup_rejected(self, client: TestClient, sender) -> None:
        assert signup(client).status_code == 201

        response = signup(client, password="other")

        assert response.status_code == 400
        assert response.json() == {"message": "Email already in use"}
        assert len(sender.sent) == 1

    def test_replayed_code_rejected(self, client: TestClient, sender) -> None:
        signup(client)
        code = sender.last_code("a@x.com")
        assert client.post("/verify", json={"email": "a@x.com", "code": code}).status_code == 200

        response = client.post("/verify", json={"email": "a@x.com", "code": code})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid verification code"}

    def test_expired_code_rejected(self, client: TestClient, sender, clock) -> None:
        signup(client)
        code = sender.last_code("a@x.com")
        clock.advance(10 * 60)

        response = client.post("/verify", json={"email": "a@x.com", "code": code})

        assert response.status_code == 400
        response = client.post("/signin", json={"email": "a@x.com", "password": "pw1"})
        assert response.json() == {"message": "Email not verified"}

    def test_unknown_email_signin_matches_wrong_password(self, client: TestClient) -> None:
        response = client.post("/signin", json={"email": "nobody@x.com", "password": "pw1"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid email or password"}

    def test_failed_send_keeps_account_and_resend_recovers(
        self, client: TestClient, sender, credential_store
    ) -> None:
        original_send = sender.send

        def broken_send(to_address: str, subject: str, body: str) -> None:
            raise OSError("relay unreachable")

        sender.send = broken_send
        response = signup(client)
        assert response.status_code == 500
        assert response.json() == {"message": "Error creating user"}
        assert credential_store.find_by_email("a@x.com") is not None

        sender.send = original_send
        assert signup(client).status_code == 400

        response = client.post("/resend-code", json={"email": "a@x.com"})
        assert response.status_code == 200
        code = sender.last_code("a@x.com")
        assert client.post("/verify", json={"email": "a@x.com", "code": code}).status_code == 200
        response = client.post("/signin", json={"email": "a@x.com", "password": "pw1"})
        assert response.status_code == 200

    def test_resend_for_verified_account_rejected(self, client: TestClient, sender) -> None:
        signup(client)
        client.post("/verify", json={"email": "a@x.com", "code": sender.last_code("a@x.com")})

        response = client.post("/resend-code", json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json() == {"message": "Account is not pending verification"}

    def test_console_sender_logs_code(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        app.state.notifier = ConsoleNotificationSender()

        with caplog.at_level(logging.INFO):
            response = signup(client, email="console@x.com")

        assert response.status_code == 201
        assert "[VERIFICATION]" in caplog.text
        assert "console@x.com" in caplog.text


def test_health_without_database(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
