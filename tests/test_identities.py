"""Identity profile endpoints: creation rules, listing, profile visibility and deletion."""

from conftest import as_user
from app.crud.friends import FriendsCRUD
from app.crud.identity import PREFERRED_NAME_TAKEN
from app.models.favorite import Favorite
from app.models.friend import Friend
from app.models.friend_request import FriendRequest
from app.models.identity import IdentityContext
from app.services import relationship_service


def identity_body(**overrides):
    body = {
        "legalName": "Alice Liddell",
        "preferredName": "alice",
        "nickname": "Al",
        "context": "professional",
        "accountPrivacy": "public",
    }
    body.update(overrides)
    return body


class TestCreateIdentity:

    def test_create(self, client, make_user):
        make_user("alice")

        response = client.post("/identities", json=identity_body(), headers=as_user("alice"))

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Identity profile created successfully"
        assert data["identity"]["preferredName"] == "alice"
        assert data["identity"]["context"] == "professional"
        assert data["identity"]["accountPrivacy"] == "public"

    def test_privacy_is_required(self, client, make_user):
        make_user("alice")
        body = identity_body()
        del body["accountPrivacy"]

        response = client.post("/identities", json=body, headers=as_user("alice"))

        assert response.status_code == 400
        assert response.json()["detail"] == {"errors": ["Account privacy must be either private or public"]}

    def test_validation_errors_are_collected(self, client, make_user):
        make_user("alice")

        response = client.post(
            "/identities",
            json=identity_body(legalName="A", preferredName="has space", context="work", accountPrivacy="secret"),
            headers=as_user("alice"),
        )

        assert response.status_code == 400
        errors = response.json()["detail"]["errors"]
        assert "Legal name must be at least 2 characters long" in errors
        assert "Preferred name cannot contain spaces" in errors
        assert "Context must be one of: professional, personal, family, or online" in errors
        assert "Account privacy must be either private or public" in errors

    def test_one_identity_per_context(self, client, make_user):
        make_user("alice")
        client.post("/identities", json=identity_body(), headers=as_user("alice"))

        response = client.post("/identities", json=identity_body(preferredName="alice2"), headers=as_user("alice"))

        assert response.status_code == 400
        assert response.json()["detail"] == "You already have an identity for context: professional"

    def test_preferred_name_is_reserved_per_user(self, client, make_user):
        make_user("alice")
        make_user("bob")
        client.post("/identities", json=identity_body(), headers=as_user("alice"))

        taken = client.post("/identities", json=identity_body(), headers=as_user("bob"))
        reused = client.post("/identities", json=identity_body(context="personal"), headers=as_user("alice"))

        assert taken.status_code == 400
        assert taken.json()["detail"] == {"errors": [PREFERRED_NAME_TAKEN]}
        assert reused.status_code == 201

    def test_update_to_taken_name_lists_error(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        make_identity("alice", "professional", "alice-prof")
        bob_prof = make_identity("bob", "professional", "bob-prof")

        response = client.put(
            f"/identities/{bob_prof.id}",
            json=identity_body(preferredName="alice-prof"),
            headers=as_user("bob"),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == {"errors": [PREFERRED_NAME_TAKEN]}


class TestListIdentities:

    def test_own_identities(self, client, make_user, make_identity):
        make_user("alice")
        make_identity("alice", "professional", "alice-prof")
        make_identity("alice", "family", "alice-fam")

        data = client.get("/identities", headers=as_user("alice")).json()

        assert data["count"] == 2
        assert [i["preferredName"] for i in data["identities"]] == ["alice-fam", "alice-prof"]

    def test_identity_for_context(self, client, make_user, make_identity):
        make_user("alice")
        alice_prof = make_identity("alice", "professional", "alice-prof")

        found = client.get("/identities/context/professional", headers=as_user("alice"))
        missing = client.get("/identities/context/family", headers=as_user("alice"))

        assert found.json()["identity"]["id"] == alice_prof.id
        assert missing.status_code == 404
        assert missing.json()["detail"] == "No identity found for context: family"

    def test_public_and_all_listings(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        make_identity("alice", "online", "alice-web", privacy="public")
        make_identity("bob", "online", "bob-web")

        public = client.get("/identities/public/online").json()
        everyone = client.get("/identities/all/online").json()

        assert [i["preferredName"] for i in public["identities"]] == ["alice-web"]
        assert everyone["count"] == 2

    def test_get_other_users_identity_is_not_found(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")

        response = client.get(f"/identities/{bob_prof.id}", headers=as_user("alice"))

        assert response.status_code == 404


class TestProfileVisibility:

    def test_private_profile_is_limited_for_strangers(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")

        anonymous = client.get(f"/identities/profile/{bob_prof.id}").json()["identity"]
        stranger = client.get(f"/identities/profile/{bob_prof.id}", headers=as_user("alice")).json()["identity"]

        for view in (anonymous, stranger):
            assert view["isLimited"] is True
            assert view["legalName"] is None
            assert view["preferredName"] == "bob-prof"

    def test_private_profile_is_full_for_followers_and_owner(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        FriendsCRUD.upsert_edge(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)

        follower = client.get(f"/identities/profile/{bob_prof.id}", headers=as_user("alice")).json()["identity"]
        owner = client.get(f"/identities/profile/{bob_prof.id}", headers=as_user("bob")).json()["identity"]

        assert follower["isLimited"] is False
        assert follower["legalName"] == "Bob-Prof Legal"
        assert owner["isLimited"] is False

    def test_public_profile_is_full(self, client, make_user, make_identity):
        make_user("bob")
        bob_web = make_identity("bob", "online", "bob-web", privacy="public")

        view = client.get(f"/identities/profile/{bob_web.id}").json()["identity"]

        assert view["isLimited"] is False
        assert view["userId"] == "bob"


class TestUpdateAndDelete:

    def test_update(self, client, make_user, make_identity):
        make_user("alice")
        alice_prof = make_identity("alice", "professional", "alice-prof")

        response = client.put(
            f"/identities/{alice_prof.id}",
            json=identity_body(preferredName="alice-prof", nickname="", accountPrivacy="private"),
            headers=as_user("alice"),
        )

        assert response.status_code == 200
        assert response.json()["identity"]["legalName"] == "Alice Liddell"

    def test_moving_to_another_context_clears_its_relationships(self, client, db, make_user, make_identity):
        for user_id in ("alice", "bob", "carol"):
            make_user(user_id)
        make_identity("carol", "professional", "carol-prof")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        FriendsCRUD.upsert_edge(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)
        relationship_service.send_friend_request(db, "carol", bob_prof.id, IdentityContext.PROFESSIONAL)
        client.post(f"/favorites/{bob_prof.id}", json={"context": "professional"}, headers=as_user("alice"))

        response = client.put(
            f"/identities/{bob_prof.id}",
            json=identity_body(preferredName="bob-prof", context="personal", accountPrivacy="private"),
            headers=as_user("bob"),
        )

        assert response.status_code == 200
        assert response.json()["identity"]["context"] == "personal"
        assert client.get("/friends/professional", headers=as_user("alice")).json()["count"] == 0
        assert client.get("/favorites/professional", headers=as_user("alice")).json()["count"] == 0
        db.expire_all()
        assert db.query(Friend).count() == 0
        assert db.query(FriendRequest).count() == 0
        assert db.query(Favorite).count() == 0

        refollow = client.post(
            "/friends/add",
            json={"friendIdentityId": bob_prof.id, "context": "professional"},
            headers=as_user("alice"),
        )
        assert refollow.status_code == 200

    def test_update_in_place_keeps_relationships(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        FriendsCRUD.upsert_edge(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)

        response = client.put(
            f"/identities/{bob_prof.id}",
            json=identity_body(preferredName="bob-prof", context="professional", accountPrivacy="public"),
            headers=as_user("bob"),
        )

        assert response.status_code == 200
        db.expire_all()
        assert FriendsCRUD.exists(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)

    def test_update_into_occupied_context(self, client, make_user, make_identity):
        make_user("alice")
        make_identity("alice", "professional", "alice-prof")
        alice_fam = make_identity("alice", "family", "alice-fam")

        response = client.put(
            f"/identities/{alice_fam.id}",
            json=identity_body(preferredName="alice-fam", context="professional"),
            headers=as_user("alice"),
        )

        assert response.status_code == 400

    def test_delete_removes_relationships_pointing_at_identity(self, client, db, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        alice_prof = make_identity("alice", "professional", "alice-prof")
        bob_prof = make_identity("bob", "professional", "bob-prof")
        friend_request = relationship_service.send_friend_request(db, "alice", bob_prof.id, IdentityContext.PROFESSIONAL)
        relationship_service.accept_friend_request(db, friend_request.id, "bob")
        client.post(f"/favorites/{bob_prof.id}", json={"context": "professional"}, headers=as_user("alice"))

        response = client.delete(f"/identities/{bob_prof.id}", headers=as_user("bob"))

        assert response.status_code == 200
        assert response.json()["identity"] == {"id": bob_prof.id, "context": "professional"}
        db.expire_all()
        assert db.query(Friend).filter(Friend.friend_identity_id == bob_prof.id).count() == 0
        assert db.query(FriendRequest).count() == 0
        assert db.query(Favorite).count() == 0
        # Bob's own follow of Alice is kept
        assert FriendsCRUD.exists(db, "bob", alice_prof.id, IdentityContext.PROFESSIONAL)

    def test_delete_other_users_identity(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_prof = make_identity("bob", "professional", "bob-prof")

        response = client.delete(f"/identities/{bob_prof.id}", headers=as_user("alice"))

        assert response.status_code == 404
