"""Favorites endpoints."""

from conftest import as_user


class TestFavorites:

    def test_add_is_idempotent_and_listed(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_web = make_identity("bob", "online", "bob-web", privacy="public")

        first = client.post(f"/favorites/{bob_web.id}", json={"context": "online"}, headers=as_user("alice"))
        second = client.post(f"/favorites/{bob_web.id}", json={"context": "online"}, headers=as_user("alice"))

        assert first.status_code == 200
        assert first.json()["favorite"]["id"] == second.json()["favorite"]["id"]
        data = client.get("/favorites/online", headers=as_user("alice")).json()
        assert data["count"] == 1
        assert data["favorites"][0]["preferredName"] == "bob-web"
        assert client.get("/favorites/personal", headers=as_user("alice")).json()["count"] == 0

    def test_add_requires_context(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_web = make_identity("bob", "online", "bob-web")

        response = client.post(f"/favorites/{bob_web.id}", json={}, headers=as_user("alice"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Context is required"

    def test_add_identity_from_other_context(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_web = make_identity("bob", "online", "bob-web")

        response = client.post(f"/favorites/{bob_web.id}", json={"context": "family"}, headers=as_user("alice"))

        assert response.status_code == 404

    def test_remove(self, client, make_user, make_identity):
        make_user("alice")
        make_user("bob")
        bob_web = make_identity("bob", "online", "bob-web")
        client.post(f"/favorites/{bob_web.id}", json={"context": "online"}, headers=as_user("alice"))

        removed = client.delete(f"/favorites/{bob_web.id}?context=online", headers=as_user("alice"))
        again = client.delete(f"/favorites/{bob_web.id}", headers=as_user("alice"))

        assert removed.status_code == 200
        assert removed.json() == {"message": "Removed from favorites", "identityId": bob_web.id}
        assert again.status_code == 404
        assert again.json()["detail"] == "Favorite not found"
