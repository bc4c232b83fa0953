"""Follow / unfollow / friendship check endpoints."""

from conftest import as_user
from app.crud.friends import FriendsCRUD
from app.models.friend import Friend
from app.models.identity import IdentityContext


class TestFollow:

    def test_follow_twice_keeps_one_edge(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof", privacy="public")

        body = {"friendIdentityId": bob_prof.id, "context": "professional"}
        first = client.post("/friends/add", json=body, headers=as_user("alice"))
        second = client.post("/friends/add", json=body, headers=as_user("alice"))

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["message"] == "Friend added successfully"
        assert first.json()["friend"]["id"] == second.json()["friend"]["id"]
        assert second.json()["friend"]["friendIdentityId"] == bob_prof.id
        assert db.query(Friend).filter(Friend.user_id == "alice").count() == 1

    def test_follow_requires_fields(self, client, make_user):
        make_user("alice")
        response = client.post("/friends/add", json={"context": "personal"}, headers=as_user("alice"))
        assert response.status_code == 400
        assert response.json()["detail"] == "Friend identity ID and context are required"

    def test_follow_rejects_unknown_context(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        response = client.post(
            "/friends/add",
            json={"friendIdentityId": bob_prof.id, "context": "work"},
            headers=as_user("alice"),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid context type"

    def test_follow_is_keyed_by_requested_context(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        make_identity("alice", "personal", "alice-home")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        body = {"friendIdentityId": bob_prof.id, "context": "personal"}

        first = client.post("/friends/add", json=body, headers=as_user("alice"))
        second = client.post("/friends/add", json=body, headers=as_user("alice"))

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["friend"]["id"] == second.json()["friend"]["id"]
        assert first.json()["friend"]["context"] == "personal"
        assert FriendsCRUD.exists(db, "alice", bob_prof.id, IdentityContext.PERSONAL)
        assert not FriendsCRUD.exists(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)

    def test_follow_unknown_identity_is_not_found(self, client, make_user):
        make_user("alice")
        response = client.post(
            "/friends/add",
            json={"friendIdentityId": "no-such-identity", "context": "personal"},
            headers=as_user("alice"),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Identity not found"

    def test_follow_own_identity_is_rejected(self, client, make_user, make_identity):
        make_user("alice")
        alice_prof = make_identity("alice", "professional", "alice-prof")
        response = client.post(
            "/friends/add",
            json={"friendIdentityId": alice_prof.id, "context": "personal"},
            headers=as_user("alice"),
        )
        assert response.status_code == 400

    def test_follow_requires_authentication(self, client):
        response = client.post("/friends/add", json={"friendIdentityId": "x", "context": "personal"})
        assert response.status_code == 401


class TestUnfollow:

    def test_unfollow_missing_edge_is_not_found(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        response = client.post(
            "/friends/remove",
            json={"friendIdentityId": bob_prof.id, "context": "professional"},
            headers=as_user("alice"),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Friend relationship not found"

    def test_unfollow_removes_only_that_edge(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        make_user("carol")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        carol_prof = make_identity("carol", "professional", "carol-prof")
        FriendsCRUD.upsert_edge(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)
        FriendsCRUD.upsert_edge(db, "alice", carol_prof.id, IdentityContext.PROFESSIONAL)

        response = client.post(
            "/friends/remove",
            json={"friendIdentityId": bob_prof.id, "context": "professional"},
            headers=as_user("alice"),
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Friend removed successfully",
            "friendIdentityId": bob_prof.id,
            "context": "professional",
        }
        db.expire_all()
        assert not FriendsCRUD.exists(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)
        assert FriendsCRUD.exists(db, "alice", carol_prof.id, IdentityContext.PROFESSIONAL)


class TestFriendList:

    def test_list_is_newest_first_and_context_scoped(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        make_user("carol")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        carol_prof = make_identity("carol", "professional", "carol-prof")
        carol_personal = make_identity("carol", "personal", "carol-home")
        FriendsCRUD.upsert_edge(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)
        FriendsCRUD.upsert_edge(db, "alice", carol_prof.id, IdentityContext.PROFESSIONAL)
        FriendsCRUD.upsert_edge(db, "alice", carol_personal.id, IdentityContext.PERSONAL)

        response = client.get("/friends/professional", headers=as_user("alice"))

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [f["preferredName"] for f in data["friends"]] == ["carol-prof", "bob-prof"]
        assert data["friends"][0]["accountPrivacy"] == "private"

    def test_list_rejects_unknown_context(self, client, make_user):
        make_user("alice")
        response = client.get("/friends/school", headers=as_user("alice"))
        assert response.status_code == 400


class TestFriendshipCheck:

    def test_check_reports_edge(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        edge, _ = FriendsCRUD.upsert_edge(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)

        found = client.get(f"/friends/check/{bob_prof.id}/professional", headers=as_user("alice"))
        other_context = client.get(f"/friends/check/{bob_prof.id}/personal", headers=as_user("alice"))

        assert found.json()["isFriend"] is True
        assert found.json()["friendship"]["id"] == edge.id
        assert other_context.json() == {"isFriend": False, "friendship": None}

    def test_check_rejects_unknown_context(self, client, make_user):
        make_user("alice")
        response = client.get("/friends/check/some-id/gaming", headers=as_user("alice"))
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid context type"


class TestConnect:

    def test_connect_follows_public_identity(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_online = make_identity("bob", "online", "bob-online", privacy="public")

        response = client.post(
            "/friends/connect",
            json={"identityId": bob_online.id, "context": "online"},
            headers=as_user("alice"),
        )

        assert response.status_code == 200
        assert response.json()["action"] == "followed"
        assert response.json()["friend"]["friendIdentityId"] == bob_online.id
        assert response.json()["friendRequest"] is None

    def test_connect_requests_private_identity(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        make_identity("alice", "family", "alice-fam")
        bob_family = make_identity("bob", "family", "bob-fam")

        response = client.post(
            "/friends/connect",
            json={"identityId": bob_family.id, "context": "family"},
            headers=as_user("alice"),
        )

        assert response.status_code == 200
        assert response.json()["action"] == "requested"
        assert response.json()["friendRequest"]["status"] == "pending"
        assert response.json()["friend"] is None
