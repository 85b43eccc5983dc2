"""Card service layer."""

import logging

from app.core.logging_safety import safe_log_identifier
from app.domain.access_policy import ensure_access, resolve_group_lookup
from app.errors import not_found_or_forbidden
from app.repositories.memory import CardRecord, InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.schemas.card import Card

logger = logging.getLogger(__name__)


def to_card(record: CardRecord) -> Card:
    return Card(
        id=record.id,
        word=record.word,
        translate=record.translate,
        description=record.description,
        created_by=record.created_by,
        created_at=record.created_at,
    )


class CardService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def create_card(
        self,
        *,
        principal: AuthPrincipal,
        word: str,
        translate: str,
        description: str | None,
        group_name: str,
        group_id: str,
    ) -> Card:
        lookup = resolve_group_lookup(principal, group_id=group_id, group_name=group_name)
        if lookup.by_id:
            group = self._store.get_group(lookup.group_id)
        else:
            group = self._store.find_group_by_name(group_name=lookup.group_name, created_by=lookup.created_by)
        if group is None:
            # The group reference came from the client and may simply not exist.
            raise not_found_or_forbidden("Group not found")

        card = self._store.create_card(
            word=word,
            translate=translate,
            description=description,
            created_by=principal.id,
        )
        try:
            self._store.append_card_to_group(group_id=group.id, card_id=card.id)
        except Exception:
            # Two independent writes: undo the first so no orphan card survives.
            self._store.delete_card(card.id)
            logger.warning(
                "card.create_compensated card_id=%s group_id=%s principal_id=%s",
                card.id,
                group.id,
                safe_log_identifier(principal.id, prefix="pid"),
            )
            raise

        logger.info(
            "card.created card_id=%s group_id=%s principal_id=%s",
            card.id,
            group.id,
            safe_log_identifier(principal.id, prefix="pid"),
        )
        return to_card(card)

    def update_card(
        self,
        *,
        principal: AuthPrincipal,
        card_id: str,
        word: str,
        translate: str,
        description: str | None,
    ) -> Card:
        record = ensure_access(principal, self._store.get_card(card_id), message="Card not found")
        updated = self._store.update_card(
            card_id=record.id,
            word=word,
            translate=translate,
            description=description,
        )
        return to_card(updated)

    def list_cards(self, *, principal: AuthPrincipal) -> list[Card]:
        return [to_card(record) for record in self._store.list_cards(created_by=principal.id)]

    def get_card(self, *, principal: AuthPrincipal, card_id: str) -> Card:
        record = ensure_access(principal, self._store.get_card(card_id), message="Card not found")
        return to_card(record)
