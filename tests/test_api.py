"""
HTTP tests for the FastAPI app, run against in-memory services.
"""

import pytest
from fastapi.testclient import TestClient

from gatehouse.api.app import app
from gatehouse.core.models import FederatedClaim


@pytest.fixture
def client(services):
    app.state.services = services
    with TestClient(app) as test_client:
        yield test_client
    app.state.services = None


@pytest.fixture
def signup(client, transport):
    """Register, activate and log in through the API. Returns (token, account)."""

    def _signup(email, password="secret"):
        response = client.post(
            "/api/authentication/register",
            json={"account": {"email": email, "username": email.split("@")[0], "password": password}},
        )
        assert response.status_code == 200
        code = transport.sent[-1].text.split("Activation code:")[1].strip()

        assert client.get(f"/api/authentication/activate/{code}").status_code == 200

        response = client.post(
            "/api/authentication/authenticate",
            json={"credentials": {"email": email, "password": password}},
        )
        assert response.status_code == 200
        body = response.json()
        return body["session"]["token"], body["account"]

    return _signup


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


GROUP = {"name": "Acme", "ycode": "1234567-8", "address": "Main Street 1", "domains": "acme.example"}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthenticationRoutes:
    def test_register_hides_secrets(self, client, transport):
        response = client.post(
            "/api/authentication/register",
            json={"account": {"email": "a@x.com", "username": "alice", "password": "secret"}},
        )

        account = response.json()["account"]
        assert account["password"] == "<redacted>"
        assert "activation_code" not in account
        assert account["active"] is False
        assert len(transport.sent) == 1

    def test_duplicate_registration(self, client):
        payload = {"account": {"email": "a@x.com", "username": "alice", "password": "secret"}}
        client.post("/api/authentication/register", json=payload)

        response = client.post("/api/authentication/register", json=payload)
        assert response.status_code == 409
        assert response.json()["kind"] == "AccountConflict"

    def test_login_and_confirm(self, client, signup):
        token, account = signup("a@x.com")

        for header in (bearer(token), {"Authorization": token}):
            response = client.post("/api/authentication/confirm", headers=header)
            assert response.status_code == 200
            assert response.json()["account"]["id"] == account["id"]

    def test_wrong_password(self, client, signup):
        signup("a@x.com")

        response = client.post(
            "/api/authentication/authenticate",
            json={"credentials": {"email": "a@x.com", "password": "wrong"}},
        )
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidCredentials"

    def test_ambiguous_credentials(self, client):
        response = client.post(
            "/api/authentication/authenticate",
            json={"credentials": {"email": "a@x.com", "username": "alice", "password": "p"}},
        )
        assert response.status_code == 422
        assert response.json()["kind"] == "ValidationError"

    @pytest.mark.parametrize(
        "headers, kind",
        [
            ({}, "MissingToken"),
            ({"Authorization": "Bearer nope"}, "SessionNotFound"),
        ],
    )
    def test_confirm_rejects(self, client, headers, kind):
        response = client.post("/api/authentication/confirm", headers=headers)
        assert response.status_code == 401
        assert response.json()["kind"] == kind

    def test_unknown_activation_code(self, client):
        response = client.get("/api/authentication/activate/nope")
        assert response.status_code == 404


class TestGoogleRoute:
    def test_google_login(self, client, verifier):
        verifier.claims["good-id-token"] = FederatedClaim(subject="s1", email="g@x.com", given_name="Grace")

        response = client.post("/api/authentication/google", headers=bearer("good-id-token"))

        assert response.status_code == 200
        body = response.json()
        assert body["session"]["method"] == "google"
        assert body["account"]["source"] == "google"

    def test_bad_google_token(self, client):
        response = client.post("/api/authentication/google", headers=bearer("forged"))
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidCredentials"


class TestGroupRoutes:
    def test_create_and_read_own_group(self, client, signup):
        token, account = signup("a@x.com")

        response = client.post("/api/group/", json={"group": GROUP}, headers=bearer(token))
        assert response.status_code == 201
        body = response.json()
        assert body["members"][0]["account_id"] == account["id"]
        assert body["members"][0]["rights"] == "READ | WRITE | DELETE"

        response = client.get("/api/group/", headers=bearer(token))
        assert response.status_code == 200
        assert response.json()["group"]["id"] == body["group"]["id"]

    def test_own_group_without_membership(self, client, signup):
        token, _ = signup("a@x.com")

        response = client.get("/api/group/", headers=bearer(token))
        assert response.status_code == 403
        assert response.json()["kind"] == "NoMembership"

    def test_requires_session(self, client):
        response = client.post("/api/group/", json={"group": GROUP})
        assert response.status_code == 401

    def test_update_group(self, client, signup):
        token, _ = signup("a@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(token)).json()["group"]["id"]

        response = client.put(
            "/api/group/",
            json={"group": {**GROUP, "id": group_id, "name": "Acme Oy"}},
            headers=bearer(token),
        )
        assert response.status_code == 200
        assert response.json()["group"]["name"] == "Acme Oy"

    def test_outsider_cannot_delete(self, client, signup):
        owner, _ = signup("a@x.com")
        outsider, _ = signup("d@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(owner)).json()["group"]["id"]

        response = client.delete(f"/api/group/{group_id}", headers=bearer(outsider))
        assert response.status_code == 403
        assert response.json()["kind"] == "PermissionDenied"

        assert client.get(f"/api/group/{group_id}", headers=bearer(owner)).status_code == 200

    def test_delete_group_removes_memberships(self, client, signup, storage):
        token, _ = signup("a@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(token)).json()["group"]["id"]

        response = client.delete(f"/api/group/{group_id}", headers=bearer(token))
        assert response.status_code == 200
        assert len(storage.members) == 0
        assert client.get(f"/api/group/{group_id}", headers=bearer(token)).status_code == 404

    def test_group_directory(self, client, signup):
        token, _ = signup("a@x.com")
        client.post("/api/group/", json={"group": GROUP}, headers=bearer(token))

        response = client.get("/api/groups/", headers=bearer(token))
        assert [g["name"] for g in response.json()["groups"]] == ["Acme"]


class TestMemberRoutes:
    def test_member_lifecycle(self, client, signup):
        owner, _ = signup("a@x.com")
        member_token, member = signup("b@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(owner)).json()["group"]["id"]
        ref = {"group": {"id": group_id}, "account": {"id": member["id"]}}

        response = client.post("/api/members/", json={**ref, "rights": "READ"}, headers=bearer(owner))
        assert response.status_code == 200
        assert response.json()["member"]["rights"] == "READ"

        response = client.get(f"/api/members/group/{group_id}", headers=bearer(member_token))
        assert len(response.json()["members"]) == 2

        # READ is not enough to change membership
        response = client.put("/api/members/", json={**ref, "rights": "READ | WRITE"}, headers=bearer(member_token))
        assert response.status_code == 403

        response = client.put("/api/members/", json={**ref, "rights": "READ | WRITE"}, headers=bearer(owner))
        assert response.json()["member"]["rights"] == "READ | WRITE"

        response = client.request("DELETE", "/api/members/", json=ref, headers=bearer(owner))
        assert response.status_code == 200

        response = client.get(f"/api/group/{group_id}/members", headers=bearer(member_token))
        assert response.status_code == 403

    def test_unknown_account(self, client, signup):
        owner, _ = signup("a@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(owner)).json()["group"]["id"]

        response = client.post(
            "/api/members/",
            json={"group": {"id": group_id}, "account": {"id": "acct_missing"}},
            headers=bearer(owner),
        )
        assert response.status_code == 404


class TestAccountRoute:
    def test_current_account(self, client, signup):
        token, account = signup("a@x.com")

        response = client.get("/api/account/", headers=bearer(token))
        assert response.status_code == 200
        assert response.json()["account"]["id"] == account["id"]
        assert response.json()["account"]["password"] == "<redacted>"


class TestExistenceIsNotDisclosed:
    def test_unknown_and_foreign_groups_look_alike(self, client, signup):
        owner, _ = signup("a@x.com")
        outsider, _ = signup("d@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(owner)).json()["group"]["id"]

        for target in (group_id, "grp_missing"):
            response = client.put(
                "/api/group/", json={"group": {**GROUP, "id": target}}, headers=bearer(outsider)
            )
            assert response.status_code == 403
            assert response.json()["kind"] == "PermissionDenied"

            response = client.get(f"/api/members/group/{target}", headers=bearer(outsider))
            assert response.status_code == 403

    def test_account_lookup_waits_for_the_right(self, client, signup):
        owner, _ = signup("a@x.com")
        outsider, _ = signup("d@x.com")
        group_id = client.post("/api/group/", json={"group": GROUP}, headers=bearer(owner)).json()["group"]["id"]

        response = client.post(
            "/api/members/",
            json={"group": {"id": group_id}, "account": {"id": "acct_missing"}},
            headers=bearer(outsider),
        )
        assert response.status_code == 403
