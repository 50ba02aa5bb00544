"""
Test the authentication flow pipeline.
"""
from datetime import timedelta

from fastapi import status

from backend.models.db.user import User, UserSession
from backend.services.auth_service import AuthService
from backend.utils.validators import utc_now


class TestAuthenticationFlow:
    """Test the complete authentication pipeline."""

    def test_user_registration_success(self, test_client, test_user_data):
        """Registration returns the user, a token and no password hash."""
        response = test_client.post("/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "User registered successfully"
        assert data["user"]["email"] == test_user_data["email"]
        assert data["user"]["role"] == "user"
        assert data["token"]
        assert "hashedPassword" not in data["user"]
        assert "hashed_password" not in data["user"]

    def test_registration_lowercases_email(self, test_client):
        response = test_client.post(
            "/auth/register", json={"email": "Mixed.Case@Example.com", "password": "password123"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["email"] == "mixed.case@example.com"

    def test_user_registration_duplicate_email(self, test_client, test_user_data):
        """A second registration with the same email is a conflict."""
        response = test_client.post("/auth/register", json=test_user_data)
        assert response.status_code == status.HTTP_201_CREATED

        response = test_client.post("/auth/register", json=test_user_data)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {
            "error": "Conflict",
            "message": "User with this email already exists",
        }

    def test_registration_validates_input(self, test_client):
        response = test_client.post("/auth/register", json={"email": "bad", "password": "password123"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid email address format"

        response = test_client.post("/auth/register", json={"email": "ok@example.com", "password": "short"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "at least 8 characters" in response.json()["message"]

        response = test_client.post("/auth/register", json={})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Email and password are required"

    def test_user_login_success(self, test_client, test_db_session, test_user_data):
        """Login issues a token and records the login time."""
        test_client.post("/auth/register", json=test_user_data)

        response = test_client.post("/auth/login", json=test_user_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["token"]
        user = test_db_session.query(User).filter(User.email == test_user_data["email"]).one()
        assert user.last_login_at is not None

    def test_user_login_invalid_credentials(self, test_client, test_user_data):
        """Wrong password and unknown email give the same answer."""
        test_client.post("/auth/register", json=test_user_data)

        wrong_password = test_client.post(
            "/auth/login", json={"email": test_user_data["email"], "password": "wrongpassword"}
        )
        unknown_email = test_client.post(
            "/auth/login", json={"email": "nobody@example.com", "password": "whatever123"}
        )

        for response in (wrong_password, unknown_email):
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
            assert response.json() == {"error": "Unauthorized", "message": "Invalid email or password"}

    def test_inactive_user_cannot_login(self, test_client, test_db_session, test_user_data):
        test_client.post("/auth/register", json=test_user_data)
        user = test_db_session.query(User).filter(User.email == test_user_data["email"]).one()
        user.is_active = False
        test_db_session.commit()

        response = test_client.post("/auth/login", json=test_user_data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_profile_with_valid_token(self, test_client, auth_headers, test_user_data):
        response = test_client.get("/auth/profile", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == test_user_data["email"]

    def test_profile_without_token(self, test_client):
        response = test_client.get("/auth/profile")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "No token provided"

    def test_profile_with_invalid_token(self, test_client):
        response = test_client.get("/auth/profile", headers={"Authorization": "Bearer invalid-token"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Invalid token"

    def test_logout_ends_session(self, test_client, auth_headers):
        response = test_client.post("/auth/logout", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True

        response = test_client.get("/auth/profile", headers=auth_headers)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Session not found"

        response = test_client.post("/auth/logout", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_expired_session_is_rejected_and_removed(self, test_client, test_db_session, auth_headers):
        token = auth_headers["Authorization"].split(" ", 1)[1]
        session = test_db_session.query(UserSession).filter(UserSession.token == token).one()
        session.expires_at = utc_now() - timedelta(minutes=1)
        test_db_session.commit()

        response = test_client.get("/auth/profile", headers=auth_headers)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Token expired"
        assert test_db_session.query(UserSession).filter(UserSession.token == token).count() == 0

    def test_cleanup_expired_sessions(self, test_db_session, test_client, auth_headers):
        session = test_db_session.query(UserSession).one()
        session.expires_at = utc_now() - timedelta(days=1)
        test_db_session.commit()

        removed = AuthService(test_db_session).cleanup_expired_sessions()

        assert removed == 1
        assert test_db_session.query(UserSession).count() == 0


class TestAdminGuard:
    """Admin-only routes check the role carried by the session's user."""

    def test_regular_user_is_forbidden(self, test_client, auth_headers):
        response = test_client.get("/applications", headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "Forbidden"

    def test_admin_is_allowed(self, test_client, admin_headers):
        response = test_client.get("/applications", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_anonymous_is_unauthorized(self, test_client):
        response = test_client.get("/applications")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
