"""Card creation, update and ownership tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.errors import ApiError
from app.main import create_app
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.services.cards import CardService
from app.services.groups import GroupService

ADMIN_SECRET = "test-admin-registration-secret"


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "LEXICARD_JWT_SECRET",
        "LEXICARD_REFRESH_TOKEN_SECRET",
        "LEXICARD_ADMIN_REGISTRATION_SECRET",
        "LEXICARD_BCRYPT_ROUNDS",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["LEXICARD_JWT_SECRET"] = "test-access-secret-0123456789abcdef"
        os.environ["LEXICARD_REFRESH_TOKEN_SECRET"] = "test-refresh-secret-0123456789abcdef"
        os.environ["LEXICARD_ADMIN_REGISTRATION_SECRET"] = ADMIN_SECRET
        os.environ["LEXICARD_BCRYPT_ROUNDS"] = "4"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


def _headers(client: TestClient, username: str, *, admin: bool = False) -> dict[str, str]:
    if admin:
        response = client.post(
            "/register-admin",
            json={"username": username, "password": "pw1", "secretKey": ADMIN_SECRET},
        )
    else:
        response = client.post("/register", json={"username": username, "password": "pw1"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _card_body(group: dict, word: str = "hola", translate: str = "hello") -> dict:
    return {"word": word, "translate": translate, "groupName": group["groupName"], "groupId": group["id"]}


class CardOwnershipApiTests(_SettingsEnvCase):
    def test_owner_creates_card_in_own_group_and_non_owner_cannot_see_it(self) -> None:
        client = TestClient(create_app())
        alice = _headers(client, "alice")
        bob = _headers(client, "bob")
        group = client.post("/groups", headers=alice, json={"groupName": "Spanish"}).json()

        created = client.post("/cards", headers=alice, json=_card_body(group))
        self.assertEqual(created.status_code, 201)
        card = created.json()
        self.assertEqual(card["word"], "hola")
        self.assertEqual(card["translate"], "hello")

        refreshed_group = client.get(f"/groups/{group['id']}", headers=alice).json()
        self.assertEqual([c["id"] for c in refreshed_group["cards"]], [card["id"]])

        self.assertEqual(client.get(f"/cards/{card['id']}", headers=bob).status_code, 404)
        self.assertEqual(client.get(f"/groups/{group['id']}", headers=bob).status_code, 404)
        self.assertEqual(client.get("/cards", headers=bob).json(), [])
        self.assertEqual([c["id"] for c in client.get("/cards", headers=alice).json()], [card["id"]])

    def test_user_cannot_add_card_to_someone_elses_group(self) -> None:
        app = create_app()
        client = TestClient(app)
        alice = _headers(client, "alice")
        bob = _headers(client, "bob")
        group = client.post("/groups", headers=alice, json={"groupName": "Spanish"}).json()

        response = client.post("/cards", headers=bob, json=_card_body(group))

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Group not found", "code": "RESOURCE_NOT_FOUND"})
        self.assertEqual(app.state.store.card_write_count, 0)
        self.assertEqual(app.state.store.get_group(group["id"]).cards, [])

    def test_user_group_is_resolved_by_name_not_id(self) -> None:
        client = TestClient(create_app())
        alice = _headers(client, "alice")
        group = client.post("/groups", headers=alice, json={"groupName": "Spanish"}).json()

        response = client.post(
            "/cards",
            headers=alice,
            json={"word": "hola", "translate": "hello", "groupName": "Spanish", "groupId": "ignored-for-users"},
        )

        self.assertEqual(response.status_code, 201)
        refreshed_group = client.get(f"/groups/{group['id']}", headers=alice).json()
        self.assertEqual(len(refreshed_group["cards"]), 1)

    def test_admin_adds_card_to_any_group_by_id(self) -> None:
        app = create_app()
        client = TestClient(app)
        alice = _headers(client, "alice")
        admin = _headers(client, "root", admin=True)
        group = client.post("/groups", headers=alice, json={"groupName": "Spanish"}).json()

        created = client.post(
            "/cards",
            headers=admin,
            json={"word": "adios", "translate": "bye", "groupName": "whatever", "groupId": group["id"]},
        )

        self.assertEqual(created.status_code, 201)
        self.assertEqual(app.state.store.get_group(group["id"]).cards, [created.json()["id"]])

        missing = client.post(
            "/cards",
            headers=admin,
            json={"word": "adios", "translate": "bye", "groupName": "Spanish", "groupId": "no-such-group"},
        )
        self.assertEqual(missing.status_code, 404)

    def test_patch_is_owner_or_admin_only(self) -> None:
        client = TestClient(create_app())
        alice = _headers(client, "alice")
        bob = _headers(client, "bob")
        admin = _headers(client, "root", admin=True)
        group = client.post("/groups", headers=alice, json={"groupName": "Spanish"}).json()
        card_id = client.post("/cards", headers=alice, json=_card_body(group)).json()["id"]

        denied = client.patch(f"/cards/{card_id}", headers=bob, json={"word": "x", "translate": "y"})
        self.assertEqual(denied.status_code, 404)
        self.assertEqual(denied.json(), {"error": "Card not found", "code": "RESOURCE_NOT_FOUND"})

        updated = client.patch(
            f"/cards/{card_id}",
            headers=alice,
            json={"word": "buenas", "translate": "good", "description": "greeting"},
        )
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["word"], "buenas")
        self.assertEqual(updated.json()["description"], "greeting")

        by_admin = client.patch(f"/cards/{card_id}", headers=admin, json={"word": "hola", "translate": "hi"})
        self.assertEqual(by_admin.status_code, 200)
        self.assertEqual(client.get(f"/cards/{card_id}", headers=alice).json()["translate"], "hi")

        missing = client.patch("/cards/no-such-card", headers=alice, json={"word": "x", "translate": "y"})
        self.assertEqual(missing.status_code, 404)

    def test_failed_group_append_leaves_no_orphan_card(self) -> None:
        app = create_app()
        client = TestClient(app)
        alice = _headers(client, "alice")
        group = client.post("/groups", headers=alice, json={"groupName": "Spanish"}).json()
        app.state.store.group_write_failure_message = "simulated group write failure"

        response = client.post("/cards", headers=alice, json=_card_body(group))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "simulated group write failure")
        self.assertEqual(app.state.store.cards, {})
        self.assertEqual(app.state.store.get_group(group["id"]).cards, [])

    def test_missing_card_fields_are_400(self) -> None:
        client = TestClient(create_app())
        alice = _headers(client, "alice")

        create = client.post("/cards", headers=alice, json={"word": "hola", "translate": "hello"})
        self.assertEqual(create.status_code, 400)
        self.assertEqual(create.json()["error"], "Word, translate, groupName, and groupId are required")

        patch = client.patch("/cards/any", headers=alice, json={"word": "hola"})
        self.assertEqual(patch.status_code, 400)
        self.assertEqual(patch.json()["error"], "Word and translate are required")


class CardOwnershipUnitTests(unittest.TestCase):
    def test_service_scopes_cards_to_creator(self) -> None:
        store = InMemoryStore()
        groups = GroupService(store)
        cards = CardService(store)
        user_a = AuthPrincipal(id="user-a", username="a")
        user_b = AuthPrincipal(id="user-b", username="b")
        group = groups.upsert_group(principal=user_a, group_name="Words")

        card = cards.create_card(
            principal=user_a,
            word="hola",
            translate="hello",
            description=None,
            group_name="Words",
            group_id=group.id,
        )

        self.assertEqual(cards.get_card(principal=user_a, card_id=card.id).id, card.id)
        self.assertEqual(cards.list_cards(principal=user_b), [])
        with self.assertRaises(ApiError) as context:
            cards.get_card(principal=user_b, card_id=card.id)
        self.assertEqual(context.exception.status_code, 404)

    def test_compensation_reraises_the_storage_failure(self) -> None:
        store = InMemoryStore()
        principal = AuthPrincipal(id="user-a", username="a")
        group = GroupService(store).upsert_group(principal=principal, group_name="Words")
        store.group_write_failure_message = "boom"

        with self.assertRaisesRegex(RuntimeError, "boom"):
            CardService(store).create_card(
                principal=principal,
                word="hola",
                translate="hello",
                description=None,
                group_name="Words",
                group_id=group.id,
            )

        self.assertEqual(store.cards, {})
        self.assertEqual(store.card_write_count, 2)
