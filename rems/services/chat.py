"""Per-property chat over Supabase realtime."""

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from pydantic import ValidationError
from rems.models.message import Message
from rems.services.supabase_client import get_async_supabase_client, insert_row, select_rows
from rems.utils.errors import FormValidationError, SupabaseError
from rems.utils.logging import get_structured_logger, mask_user_id, sanitize_message_text

logger = get_structured_logger(__name__)


async def load_history(
    property_id: str,
    user_id: Optional[str] = None,
    counterpart_id: Optional[str] = None,
) -> list[Message]:
    """
    Full message history for a property, oldest first.

    With both ``user_id`` and ``counterpart_id`` the history is narrowed to
    that pair's conversation.
    """
    rows = await select_rows("messages", {"property_id": property_id}, order_by="created_at")
    messages = [Message(**row) for row in rows]
    if user_id and counterpart_id:
        messages = [m for m in messages if m.is_between(user_id, counterpart_id)]
    return messages


async def send_message(
    property_id: str,
    sender_id: str,
    receiver_id: Optional[str],
    content: str,
    message_id: Optional[str] = None,
) -> Message:
    """Validate and insert one message. The id is generated here unless given."""
    if not receiver_id:
        raise FormValidationError("A receiver is required", field="receiver_id")
    try:
        message = Message(
            id=message_id or str(uuid.uuid4()),
            property_id=property_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
    except ValidationError:
        raise FormValidationError("Message cannot be empty", field="content")

    row = await insert_row("messages", message.model_dump())
    logger.info(
        "Message sent",
        message_id=message.id,
        property_id=property_id,
        sender_id=mask_user_id(sender_id),
        receiver_id=mask_user_id(receiver_id),
        content_preview=sanitize_message_text(content, max_length=100),
    )
    return Message(**row)


def _extract_record(payload: Any) -> Optional[dict]:
    """Pull the inserted row out of a realtime postgres_changes payload."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    for key in ("new", "record"):
        if isinstance(payload.get(key), dict):
            return payload[key]
    return None


class PropertyChat:
    """
    One open chat view on a property.

    Locally sent messages are appended immediately and tagged with their
    client-generated id; the realtime echo of the same insert is dropped, so
    each message shows up exactly once in every open view.
    """

    def __init__(
        self,
        property_id: str,
        user_id: str,
        agent_id: str,
        counterpart_id: Optional[str] = None,
        scope_to_pair: bool = False,
        on_message: Optional[Callable[[Message], None]] = None,
    ):
        self.property_id = property_id
        self.user_id = user_id
        self.agent_id = agent_id
        # Customers always talk to the listing agent
        self.counterpart_id = counterpart_id if user_id == agent_id else agent_id
        self.scope_to_pair = scope_to_pair
        self.on_message = on_message
        self.messages: list[Message] = []
        self._seen: set[str] = set()
        self._channel = None
        self._realtime = None

    @property
    def channel_name(self) -> str:
        return f"chat_{self.property_id}"

    @property
    def is_open(self) -> bool:
        return self._channel is not None

    def _in_scope(self, message: Message) -> bool:
        if message.property_id != self.property_id:
            return False
        if self.scope_to_pair:
            if not self.counterpart_id:
                return False
            return message.is_between(self.user_id, self.counterpart_id)
        return True

    def _append(self, message: Message) -> bool:
        if message.id in self._seen:
            return False
        self._seen.add(message.id)
        self.messages.append(message)
        if self.on_message:
            self.on_message(message)
        return True

    def _discard(self, message_id: str) -> None:
        self._seen.discard(message_id)
        self.messages = [m for m in self.messages if m.id != message_id]

    def handle_insert(self, payload: Any) -> None:
        """Realtime callback for INSERT events on messages."""
        record = _extract_record(payload)
        if record is None:
            logger.debug("Ignoring realtime payload without a record", channel=self.channel_name)
            return
        try:
            message = Message(**record)
        except ValidationError as e:
            logger.warning("Malformed message from realtime", channel=self.channel_name, error=str(e))
            return
        if not self._in_scope(message):
            return
        if not self._append(message):
            logger.debug("Duplicate message suppressed", message_id=message.id)

    async def open(self) -> None:
        """Load history and subscribe to new inserts for this property."""
        history = await load_history(
            self.property_id,
            self.user_id if self.scope_to_pair else None,
            self.counterpart_id if self.scope_to_pair else None,
        )
        for message in history:
            self._append(message)

        try:
            self._realtime = await get_async_supabase_client()
            channel = self._realtime.channel(self.channel_name)
            channel.on_postgres_changes(
                "INSERT",
                schema="public",
                table="messages",
                filter=f"property_id=eq.{self.property_id}",
                callback=self.handle_insert,
            )
            await channel.subscribe()
        except Exception as e:
            raise SupabaseError(f"Failed to subscribe to {self.channel_name}: {e}")
        self._channel = channel
        logger.info(
            "Chat opened",
            channel=self.channel_name,
            user_id=mask_user_id(self.user_id),
            history_count=len(history),
        )

    async def send(self, content: str) -> Message:
        """Send a message, showing it locally before the store confirms."""
        if not self.counterpart_id:
            raise FormValidationError("Choose who to reply to", field="receiver_id")
        if not content or not content.strip():
            raise FormValidationError("Message cannot be empty", field="content")

        message = Message(
            id=str(uuid.uuid4()),
            property_id=self.property_id,
            sender_id=self.user_id,
            receiver_id=self.counterpart_id,
            content=content,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._append(message)
        try:
            return await send_message(
                self.property_id,
                self.user_id,
                self.counterpart_id,
                content,
                message_id=message.id,
            )
        except SupabaseError:
            self._discard(message.id)
            raise

    async def close(self) -> None:
        if self._channel is None:
            return
        try:
            await self._realtime.remove_channel(self._channel)
        except Exception as e:
            raise SupabaseError(f"Failed to leave {self.channel_name}: {e}")
        finally:
            self._channel = None
        logger.info("Chat closed", channel=self.channel_name)
