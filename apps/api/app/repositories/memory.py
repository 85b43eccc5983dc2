"""In-memory repositories used by the API and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
import threading
from uuid import uuid4

from app.schemas.auth import Role


class DuplicateRecordError(Exception):
    """Raised when a unique field already holds the submitted value."""


@dataclass(slots=True)
class UserRecord:
    id: str
    username: str
    password_hash: str
    role: Role
    created_at: datetime


@dataclass(slots=True)
class GroupRecord:
    id: str
    group_name: str
    created_by: str
    created_at: datetime
    cards: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CardRecord:
    id: str
    word: str
    translate: str
    description: str | None
    created_by: str
    created_at: datetime


@dataclass(slots=True)
class MessageRecord:
    id: str
    title: str
    body: str
    created_at: datetime
    user_ids: frozenset[str]


@dataclass(slots=True)
class InMemoryStore:
    """Key/value persistence with field filters.

    Every public method is one atomic step; nothing spans calls, so two
    writes issued by a service can be observed half-applied.
    """

    users: dict[str, UserRecord] = field(default_factory=dict)
    groups: dict[str, GroupRecord] = field(default_factory=dict)
    cards: dict[str, CardRecord] = field(default_factory=dict)
    messages: dict[str, MessageRecord] = field(default_factory=dict)
    user_write_count: int = 0
    group_write_count: int = 0
    card_write_count: int = 0
    message_write_count: int = 0
    group_write_failure_message: str | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    # Users

    def create_user(self, *, username: str, password_hash: str, role: Role = Role.USER) -> UserRecord:
        with self._lock:
            if self._find_user_by_username(username) is not None:
                raise DuplicateRecordError(f"Username {username!r} already exists")
            user = UserRecord(
                id=str(uuid4()),
                username=username,
                password_hash=password_hash,
                role=role,
                created_at=datetime.now(UTC),
            )
            self.users[user.id] = user
            self.user_write_count += 1
            return user

    def get_user(self, user_id: str) -> UserRecord | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> UserRecord | None:
        with self._lock:
            return self._find_user_by_username(username)

    def list_user_ids(self) -> list[str]:
        with self._lock:
            return list(self.users)

    def _find_user_by_username(self, username: str) -> UserRecord | None:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    # Groups

    def get_or_create_group(self, *, group_name: str, created_by: str) -> tuple[GroupRecord, bool]:
        """Upsert keyed on ``(group_name, created_by)``; the flag tells whether a record was created."""
        with self._lock:
            existing = self.find_group_by_name(group_name=group_name, created_by=created_by)
            if existing is not None:
                return existing, False

            self._maybe_fail_group_write()
            group = GroupRecord(
                id=str(uuid4()),
                group_name=group_name,
                created_by=created_by,
                created_at=datetime.now(UTC),
            )
            self.groups[group.id] = group
            self.group_write_count += 1
            return group, True

    def get_group(self, group_id: str) -> GroupRecord | None:
        return self.groups.get(group_id)

    def find_group_by_name(self, *, group_name: str, created_by: str) -> GroupRecord | None:
        with self._lock:
            for group in self.groups.values():
                if group.group_name == group_name and group.created_by == created_by:
                    return group
            return None

    def list_groups(self, *, created_by: str | None = None) -> list[GroupRecord]:
        with self._lock:
            groups = [
                record
                for record in self.groups.values()
                if created_by is None or record.created_by == created_by
            ]
        groups.sort(key=lambda record: record.created_at)
        return groups

    def append_card_to_group(self, *, group_id: str, card_id: str) -> GroupRecord:
        with self._lock:
            group = self.groups.get(group_id)
            if group is None:
                raise LookupError(f"Group {group_id} no longer exists")
            self._maybe_fail_group_write()
            group.cards.append(card_id)
            self.group_write_count += 1
            return group

    def delete_group(self, group_id: str) -> GroupRecord | None:
        with self._lock:
            group = self.groups.pop(group_id, None)
            if group is not None:
                self.group_write_count += 1
            return group

    def _maybe_fail_group_write(self) -> None:
        if self.group_write_failure_message is None:
            return
        message = self.group_write_failure_message
        self.group_write_failure_message = None
        raise RuntimeError(message)

    # Cards

    def create_card(
        self,
        *,
        word: str,
        translate: str,
        description: str | None,
        created_by: str,
    ) -> CardRecord:
        with self._lock:
            card = CardRecord(
                id=str(uuid4()),
                word=word,
                translate=translate,
                description=description,
                created_by=created_by,
                created_at=datetime.now(UTC),
            )
            self.cards[card.id] = card
            self.card_write_count += 1
            return card

    def get_card(self, card_id: str) -> CardRecord | None:
        return self.cards.get(card_id)

    def get_cards(self, card_ids: list[str]) -> list[CardRecord]:
        """Resolve references in order, skipping ids whose card is gone."""
        with self._lock:
            return [self.cards[card_id] for card_id in card_ids if card_id in self.cards]

    def list_cards(self, *, created_by: str) -> list[CardRecord]:
        with self._lock:
            cards = [record for record in self.cards.values() if record.created_by == created_by]
        cards.sort(key=lambda record: record.created_at)
        return cards

    def update_card(
        self,
        *,
        card_id: str,
        word: str,
        translate: str,
        description: str | None,
    ) -> CardRecord:
        with self._lock:
            card = self.cards.get(card_id)
            if card is None:
                raise LookupError(f"Card {card_id} no longer exists")
            card.word = word
            card.translate = translate
            card.description = description
            self.card_write_count += 1
            return card

    def delete_card(self, card_id: str) -> CardRecord | None:
        with self._lock:
            card = self.cards.pop(card_id, None)
            if card is not None:
                self.card_write_count += 1
            return card

    # Messages

    def create_message(self, *, title: str, body: str, user_ids: list[str]) -> MessageRecord:
        with self._lock:
            message = MessageRecord(
                id=str(uuid4()),
                title=title,
                body=body,
                created_at=datetime.now(UTC),
                user_ids=frozenset(user_ids),
            )
            self.messages[message.id] = message
            self.message_write_count += 1
            return message

    def list_messages(self) -> list[MessageRecord]:
        with self._lock:
            messages = list(self.messages.values())
        messages.sort(key=lambda record: record.created_at)
        return messages
