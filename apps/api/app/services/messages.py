"""Broadcast message service layer."""

import logging

from app.core.logging_safety import safe_log_identifier
from app.domain.access_policy import can_read_message, ensure_can_broadcast
from app.repositories.memory import InMemoryStore
from app.schemas.auth import AuthPrincipal
from app.schemas.message import Message

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, store: InMemoryStore, *, broadcast_requires_admin: bool = False) -> None:
        self._store = store
        self._broadcast_requires_admin = broadcast_requires_admin

    def broadcast(self, *, principal: AuthPrincipal, title: str, body: str) -> int:
        """Deliver to every user that exists right now; returns the recipient count."""
        ensure_can_broadcast(principal, admin_only=self._broadcast_requires_admin)
        recipients = self._store.list_user_ids()
        record = self._store.create_message(title=title, body=body, user_ids=recipients)
        logger.info(
            "message.broadcast message_id=%s sender_id=%s recipients=%s",
            record.id,
            safe_log_identifier(principal.id, prefix="pid"),
            len(recipients),
        )
        return len(recipients)

    def list_messages(self, *, principal: AuthPrincipal) -> list[Message]:
        return [
            Message(id=record.id, title=record.title, body=record.body, created_at=record.created_at)
            for record in self._store.list_messages()
            if can_read_message(principal, record.user_ids)
        ]
