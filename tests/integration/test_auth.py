"""
Integration tests for authentication endpoints.
"""

TEST_PASSWORD = "secret123"


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_register_success(self, client):
        """Test registering returns the user and a token."""
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user"]["username"] == "alice"
        assert body["data"]["user"]["email"] == "alice@example.com"
        assert "avatarUrl" in body["data"]["user"]
        assert "passwordHash" not in body["data"]["user"]
        assert body["data"]["token"]

    def test_register_missing_fields(self, client):
        """Test that absent fields give MISSING_FIELDS."""
        response = client.post("/api/auth/register", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELDS"

    def test_register_blank_field(self, client):
        """Test that a whitespace-only username gives MISSING_FIELDS."""
        response = client.post(
            "/api/auth/register",
            json={"username": "   ", "email": "a@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELDS"

    def test_register_weak_password(self, client):
        """Passwords shorter than 6 characters are always rejected."""
        for password in ["", "a", "12345"]:
            response = client.post(
                "/api/auth/register",
                json={"username": "alice", "email": "alice@example.com", "password": password},
            )
            assert response.status_code == 400
            assert response.json()["error"]["code"] in ("WEAK_PASSWORD", "MISSING_FIELDS")

        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "12345"},
        )
        assert response.json()["error"]["code"] == "WEAK_PASSWORD"

    def test_register_six_characters_is_enough(self, client):
        """Test that exactly 6 characters is accepted."""
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "123456"},
        )

        assert response.status_code == 201

    def test_register_duplicate_username(self, client, register):
        """Test that a taken username is USER_EXISTS and names the field."""
        register("alice")

        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "other@example.com", "password": "secret123"},
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "USER_EXISTS"
        assert "Username" in error["message"]

    def test_register_duplicate_email_any_case(self, client, register):
        """Test that emails collide case-insensitively."""
        register("alice", email="alice@example.com")

        response = client.post(
            "/api/auth/register",
            json={"username": "alice2", "email": "ALICE@Example.com", "password": "secret123"},
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "USER_EXISTS"
        assert "Email" in error["message"]


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_email_case_insensitive(self, client, register):
        """Register with mixed case, log in with lower case."""
        data = register("alice", email="User@Example.com")
        assert data["user"]["email"] == "user@example.com"

        response = client.post(
            "/api/auth/login",
            json={"email": "user@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["user"]["email"] == "user@example.com"
        assert body["data"]["token"]

    def test_wrong_password(self, client, register):
        """Test that a wrong password is INVALID_CREDENTIALS."""
        register("alice")

        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_unknown_email_same_error(self, client, register):
        """Unknown accounts and wrong passwords are indistinguishable."""
        register("alice")

        unknown = client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )
        wrong = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json()["error"] == wrong.json()["error"]

    def test_login_missing_fields(self, client):
        """Test that an empty body gives MISSING_FIELDS."""
        response = client.post("/api/auth/login", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_FIELDS"


class TestTokenAuth:
    """Tests for bearer token handling on protected routes."""

    def test_no_token(self, client):
        response = client.get("/api/auth/verify")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NO_TOKEN"

    def test_invalid_token(self, client):
        response = client.get("/api/auth/verify", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_verify(self, client, auth_headers):
        response = client.get("/api/auth/verify", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice"

    def test_deleted_user_rejected(self, client, register):
        """A soft-deleted user can neither use their token nor log in."""
        data = register("alice")
        headers = {"Authorization": f"Bearer {data['token']}"}

        async def _soft_delete():
            from database.repositories import UserRepository

            async with client.app.state.db.session() as session:
                repo = UserRepository(session)
                await repo.soft_delete(await repo.get_by_id(data["user"]["id"]))
                await session.commit()

        client.portal.call(_soft_delete)

        response = client.get("/api/auth/verify", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_logout(self, client, auth_headers):
        response = client.post("/api/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestProfile:
    """Tests for /api/auth/profile."""

    def test_get_profile(self, client, auth_headers):
        response = client.get("/api/auth/profile", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "alice"
        assert data["settings"] == {}

    def test_update_profile(self, client, auth_headers):
        response = client.put(
            "/api/auth/profile",
            headers=auth_headers,
            json={"avatarUrl": "https://example.com/a.png", "settings": {"theme": "dark"}},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["avatarUrl"] == "https://example.com/a.png"
        assert data["settings"] == {"theme": "dark"}
        assert data["username"] == "alice"

    def test_update_username_taken(self, client, auth_headers, register):
        register("bob")

        response = client.put(
            "/api/auth/profile",
            headers=auth_headers,
            json={"username": "bob"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "USERNAME_TAKEN"

    def test_update_username(self, client, auth_headers):
        response = client.put(
            "/api/auth/profile",
            headers=auth_headers,
            json={"username": "alice2"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice2"
