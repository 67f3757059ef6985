"""Login, registration, email changes and the admin user listing."""

import asyncio

import pytest

from exam_simulator_api.app.core.exceptions import NotFoundError
from exam_simulator_api.app.core.security import hash_password, verify_password
from exam_simulator_api.app.services.user_service import USERS, UserService

from .helpers import ADMIN_EMAIL, ADMIN_PASSWORD


def register(client, api, name="Ada Obi", email="ada@example.com", password="secret1"):
    return client.post(api("/auth/register"), json={"name": name, "email": email, "password": password})


class TestPasswords:
    def test_hash_verifies_and_is_salted(self):
        first, second = hash_password("pw"), hash_password("pw")
        assert first != second
        assert verify_password("pw", first)
        assert not verify_password("other", first)

    def test_malformed_hash_never_verifies(self):
        assert not verify_password("pw", "not-a-hash")
        assert not verify_password("pw", "zz$zz")


class TestLogin:
    def test_seeded_admin_can_log_in(self, client, api):
        response = client.post(api("/auth/login"), json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"]["role"] == "admin"
        assert body["user"]["verified"] is True
        assert "password" not in body["user"]

    def test_wrong_password_is_unauthorized(self, client, api):
        response = client.post(api("/auth/login"), json={"email": ADMIN_EMAIL, "password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    def test_unknown_email_is_not_found(self, client, api):
        response = client.post(api("/auth/login"), json={"email": "ghost@example.com", "password": "x"})
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_email_match_is_case_sensitive(self, client, api):
        response = client.post(api("/auth/login"), json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD})
        assert response.status_code == 404

    def test_missing_users_file_is_not_found(self, file_store):
        with pytest.raises(NotFoundError, match="No users found"):
            asyncio.run(UserService.authenticate("a@example.com", "pw"))

    def test_corrupt_users_file_is_a_server_error(self, client, api, file_store):
        file_store.path_for(USERS).write_text("{corrupt", encoding="utf-8")
        response = client.post(api("/auth/login"), json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert response.status_code == 500
        assert response.json()["success"] is False
        assert "corrupt" in response.json()["error"]


class TestRegister:
    def test_register_creates_unverified_student(self, client, api):
        response = register(client, api)
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "ada@example.com"
        assert user["name"] == "Ada Obi"
        assert user["role"] == "student"
        assert user["verified"] is False
        assert user["id"].startswith("student_")
        assert user["createdAt"].endswith("Z")
        assert "password" not in user

        login = client.post(api("/auth/login"), json={"email": "ada@example.com", "password": "secret1"})
        assert login.status_code == 200

    def test_password_is_stored_hashed(self, client, api, file_store):
        register(client, api)
        stored = next(u for u in file_store.load(USERS) if u["email"] == "ada@example.com")
        assert stored["password"] != "secret1"
        assert verify_password("secret1", stored["password"])

    def test_duplicate_email_fails_and_keeps_one_record(self, client, api, file_store):
        assert register(client, api).status_code == 200
        second = register(client, api, name="Someone Else", password="other")
        assert second.status_code == 400
        assert second.json() == {"success": False, "error": "Email already registered"}
        matches = [u for u in file_store.load(USERS) if u["email"] == "ada@example.com"]
        assert len(matches) == 1
        assert matches[0]["name"] == "Ada Obi"

    def test_missing_fields_are_rejected(self, client, api):
        response = client.post(api("/auth/register"), json={"email": "x@example.com"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "name" in body["error"]
        assert "password" in body["error"]

    def test_blank_name_is_rejected(self, client, api):
        assert register(client, api, name="   ").status_code == 400


class TestChangeEmail:
    def test_change_email(self, client, api, file_store):
        user_id = register(client, api).json()["user"]["id"]
        response = client.post(api("/auth/change-email"), json={"userId": user_id, "newEmail": "new@example.com"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Email updated successfully"}
        stored = next(u for u in file_store.load(USERS) if u["id"] == user_id)
        assert stored["email"] == "new@example.com"

    def test_email_taken_by_someone_else(self, client, api):
        user_id = register(client, api).json()["user"]["id"]
        response = client.post(api("/auth/change-email"), json={"userId": user_id, "newEmail": ADMIN_EMAIL})
        assert response.status_code == 400
        assert response.json()["error"] == "Email already in use"

    def test_keeping_own_email_is_allowed(self, client, api):
        user_id = register(client, api).json()["user"]["id"]
        response = client.post(api("/auth/change-email"), json={"userId": user_id, "newEmail": "ada@example.com"})
        assert response.status_code == 200

    def test_unknown_user(self, client, api, file_store):
        before = file_store.path_for(USERS).read_bytes()
        response = client.post(api("/auth/change-email"), json={"userId": "student_0", "newEmail": "n@example.com"})
        assert response.status_code == 404
        assert response.json()["error"] == "User not found"
        assert file_store.path_for(USERS).read_bytes() == before


class TestAdminUsers:
    def test_lists_users_without_passwords(self, client, api):
        register(client, api)
        response = client.get(api("/admin/users"))
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert {u["email"] for u in body["users"]} == {ADMIN_EMAIL, "ada@example.com"}
        assert all("password" not in u for u in body["users"])

    def test_hand_edited_record_does_not_break_listing(self, client, api, file_store):
        users = file_store.load(USERS)
        users.append({"id": "teacher_1", "name": "No Email", "role": "teacher", "password": "x$y"})
        file_store.save(USERS, users)

        response = client.get(api("/admin/users"))
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        odd = next(u for u in body["users"] if u["id"] == "teacher_1")
        assert odd == {"id": "teacher_1", "name": "No Email", "role": "teacher"}

    def test_default_admin_is_created_once(self, memory_store):
        assert asyncio.run(UserService.ensure_default_admin()) is True
        assert asyncio.run(UserService.ensure_default_admin()) is False
        users = memory_store.load(USERS)
        assert len(users) == 1
        assert users[0]["role"] == "admin"
