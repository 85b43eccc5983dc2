"""Group service layer."""

import logging

from app.core.logging_safety import safe_log_identifier
from app.domain.access_policy import ensure_access, ensure_admin, group_upsert_key
from app.errors import not_found_or_forbidden
from app.repositories.memory import GroupRecord, InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.schemas.group import Group
from app.services.cards import to_card

logger = logging.getLogger(__name__)

_DELETE_NOT_FOUND = "Group not found or you do not have permission to delete it"


class GroupService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def upsert_group(self, *, principal: AuthPrincipal, group_name: str) -> Group:
        name, owner_id = group_upsert_key(principal, group_name)
        record, created = self._store.get_or_create_group(group_name=name, created_by=owner_id)
        logger.info(
            "group.upserted group_id=%s principal_id=%s created=%s",
            record.id,
            safe_log_identifier(principal.id, prefix="pid"),
            created,
        )
        return self._to_group(record)

    def list_own_groups(self, *, principal: AuthPrincipal) -> list[Group]:
        return [self._to_group(record) for record in self._store.list_groups(created_by=principal.id)]

    def list_all_groups(self, *, principal: AuthPrincipal) -> list[Group]:
        ensure_admin(principal)
        return [self._to_group(record) for record in self._store.list_groups()]

    def get_group(self, *, principal: AuthPrincipal, group_id: str) -> Group:
        record = ensure_access(principal, self._store.get_group(group_id))
        return self._to_group(record)

    def delete_group(self, *, principal: AuthPrincipal, group_id: str) -> Group:
        record = ensure_access(principal, self._store.get_group(group_id), message=_DELETE_NOT_FOUND)
        deleted = self._store.delete_group(record.id)
        if deleted is None:
            # Lost a race with another delete.
            raise not_found_or_forbidden(_DELETE_NOT_FOUND)

        logger.info(
            "group.deleted group_id=%s principal_id=%s orphaned_cards=%s",
            deleted.id,
            safe_log_identifier(principal.id, prefix="pid"),
            len(deleted.cards),
        )
        return self._to_group(deleted)

    def _to_group(self, record: GroupRecord) -> Group:
        return Group(
            id=record.id,
            group_name=record.group_name,
            created_by=record.created_by,
            cards=[to_card(card) for card in self._store.get_cards(list(record.cards))],
            created_at=record.created_at,
        )
