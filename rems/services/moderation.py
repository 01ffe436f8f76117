"""
Admin approval gates for listings, reviews and agent profiles.

Each gate has two actions. ``approve`` flips a boolean column to true and is
idempotent. ``reject`` deletes the row outright; nothing is archived. Acting
on an id that no longer exists raises NotFoundError.
"""

from typing import Any, Callable, Optional
from pydantic import BaseModel
from rems.models.notice import Notice
from rems.models.profile import Profile, UserRole
from rems.models.property import Property
from rems.models.review import Review
from rems.services.supabase_client import delete_row, select_rows, update_row
from rems.utils.errors import NotFoundError, SupabaseError
from rems.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)


class ApprovalGate:
    """Moderation rules for one table."""

    def __init__(
        self,
        name: str,
        table: str,
        flag: str,
        model: type[BaseModel],
        pending_filter: dict[str, Any],
        label: str,
        scope: Optional[dict[str, Any]] = None,
    ):
        self.name = name
        self.table = table
        self.flag = flag
        self.model = model
        self.pending_filter = pending_filter
        self.label = label
        # Extra match columns for approve/reject; ids outside the scope are not found
        self.scope = scope or {}

    async def list_pending(self) -> list[BaseModel]:
        with log_timing(f"{self.name}.list_pending", logger=logger):
            rows = await select_rows(
                self.table, self.pending_filter, order_by="created_at", descending=True
            )
        return [self.model(**row) for row in rows]

    async def approve(self, row_id: str) -> BaseModel:
        row = await update_row(self.table, row_id, {self.flag: True}, **self.scope)
        logger.info(f"{self.label} approved", gate=self.name, row_id=row_id)
        return self.model(**row)

    async def reject(self, row_id: str) -> None:
        await delete_row(self.table, row_id, **self.scope)
        logger.info(f"{self.label} rejected", gate=self.name, row_id=row_id)


listing_gate = ApprovalGate(
    name="listings",
    table="properties",
    flag="approved",
    model=Property,
    pending_filter={"approved": False},
    label="Listing",
)

review_gate = ApprovalGate(
    name="reviews",
    table="reviews",
    flag="approved",
    model=Review,
    pending_filter={"approved": False},
    label="Review",
)

# Lists every agent, verified or not. Rejecting deletes the profile and
# leaves any properties that reference it in place.
agent_gate = ApprovalGate(
    name="agents",
    table="profiles",
    flag="verified",
    model=Profile,
    pending_filter={"role": UserRole.AGENT.value},
    label="Agent",
    scope={"role": UserRole.AGENT.value},
)

GATES = {gate.name: gate for gate in (listing_gate, review_gate, agent_gate)}


def get_gate(name: str) -> ApprovalGate:
    try:
        return GATES[name]
    except KeyError:
        raise NotFoundError("moderation queue", name)


class ModerationQueue:
    """
    Admin moderation page state.

    Holds a local copy of the gate's pending rows. A row leaves the local list
    only after the store confirms the action; failures leave the list as it
    was and come back as a destructive notice.
    """

    def __init__(self, gate: ApprovalGate):
        self.gate = gate
        self.items: list[BaseModel] = []
        self.loaded = False

    async def load(self) -> Optional[Notice]:
        try:
            self.items = await self.gate.list_pending()
        except SupabaseError as e:
            logger.error("Moderation queue load failed", gate=self.gate.name, error=str(e))
            return Notice.error(f"Failed to load {self.gate.name}")
        self.loaded = True
        return None

    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    async def approve(self, row_id: str) -> Notice:
        return await self._act(
            self.gate.approve, row_id, f"{self.gate.label} approved", "approve"
        )

    async def reject(self, row_id: str) -> Notice:
        return await self._act(
            self.gate.reject, row_id, f"{self.gate.label} rejected", "reject"
        )

    async def _act(self, action: Callable, row_id: str, success: str, verb: str) -> Notice:
        try:
            await action(row_id)
        except NotFoundError:
            # Already gone (another admin got there first)
            self._drop(row_id)
            return Notice.error(f"{self.gate.label} no longer exists")
        except SupabaseError as e:
            logger.error(
                f"Failed to {verb} {self.gate.label.lower()}",
                gate=self.gate.name,
                row_id=row_id,
                error=str(e),
            )
            return Notice.error(f"Failed to {verb} {self.gate.label.lower()}")

        self._drop(row_id)
        return Notice.success(success)

    def _drop(self, row_id: str) -> None:
        self.items = [item for item in self.items if item.id != row_id]
