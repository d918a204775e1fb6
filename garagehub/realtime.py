"""
Row-level change feed.

Every ORM flush is turned into ``ChangeEvent`` objects which are parked on the
session. Once the transaction commits they are handed to the subscribers
registered on a ``ChangeFeed`` (cache invalidation, the loyalty trigger and
websocket clients). Events from a rolled back transaction are dropped.
"""
import enum
import inspect as pyinspect
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

PENDING_KEY = "garagehub.pending_changes"
COMMITTED_KEY = "garagehub.committed_changes"


class EventType(str, enum.Enum):
    """Kind of row change."""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def to_jsonable(value: Any) -> Any:
    """Convert column values into JSON-friendly primitives."""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


def row_to_dict(obj: Any, jsonable: bool = False) -> dict:
    """
    Plain column dict of a mapped instance.

    Only already-loaded attributes are read so this never emits SQL, which
    matters inside flush hooks and on detached instances.
    """
    state = inspect(obj)
    row = {attr.key: state.dict.get(attr.key) for attr in state.mapper.column_attrs}
    if jsonable:
        return {k: to_jsonable(v) for k, v in row.items()}
    return row


@dataclass
class ChangeEvent:
    """One inserted, updated or deleted row."""

    table: str
    event_type: EventType
    garage_id: Optional[str]
    record: dict
    old_record: Optional[dict] = None

    def to_message(self) -> dict:
        return {
            "table": self.table,
            "eventType": self.event_type.value,
            "garageId": self.garage_id,
            "new": self.record,
            "old": self.old_record,
        }


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``ChangeFeed.subscribe``."""

    feed: "ChangeFeed"
    callback: Callable[[ChangeEvent], Any]
    table: Optional[str] = None
    garage_id: Optional[str] = None
    event_type: Optional[EventType] = None

    def matches(self, change: ChangeEvent) -> bool:
        if self.table is not None and change.table != self.table:
            return False
        if self.garage_id is not None and change.garage_id != self.garage_id:
            return False
        if self.event_type is not None and change.event_type != self.event_type:
            return False
        return True

    def unsubscribe(self):
        self.feed.remove(self)


class ChangeFeed:
    """In-process publish/subscribe of ``ChangeEvent`` objects."""

    def __init__(self):
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        callback: Callable[[ChangeEvent], Any],
        table: Optional[str] = None,
        garage_id: Optional[str] = None,
        event_type: Optional[EventType] = None,
    ) -> Subscription:
        subscription = Subscription(self, callback, table, garage_id, event_type)
        self._subscriptions.append(subscription)
        return subscription

    def remove(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def clear(self):
        self._subscriptions.clear()

    def __len__(self) -> int:
        return len(self._subscriptions)

    async def publish(self, change: ChangeEvent):
        """Deliver an event to every matching subscriber, in subscription order."""
        for subscription in list(self._subscriptions):
            if not subscription.matches(change):
                continue
            try:
                result = subscription.callback(change)
                if pyinspect.isawaitable(result):
                    await result
            except Exception:
                # One broken subscriber must not fail the request that committed
                logger.exception(
                    "Change feed subscriber failed for %s %s", change.event_type.value, change.table
                )


feed = ChangeFeed()


# ==================== SESSION HOOKS ====================

def _garage_id_of(obj: Any, table: str, row: dict) -> Optional[str]:
    if table == "garages":
        return row.get("id")
    return row.get("garage_id")


def _old_row(obj: Any) -> dict:
    state = inspect(obj)
    old = {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        old[attr.key] = history.deleted[0] if history.deleted else state.dict.get(attr.key)
    return {k: to_jsonable(v) for k, v in old.items()}


def _make_event(obj: Any, event_type: EventType, old_record: Optional[dict] = None) -> ChangeEvent:
    table = obj.__table__.name
    row = row_to_dict(obj, jsonable=True)
    return ChangeEvent(table, event_type, _garage_id_of(obj, table, row), row, old_record)


def _collect_changes(session: Session, flush_context):
    pending = session.info.setdefault(PENDING_KEY, [])
    for obj in session.new:
        pending.append(_make_event(obj, EventType.INSERT))
    for obj in session.dirty:
        if not session.is_modified(obj, include_collections=False):
            continue
        pending.append(_make_event(obj, EventType.UPDATE, _old_row(obj)))
    for obj in session.deleted:
        pending.append(_make_event(obj, EventType.DELETE))


def _mark_committed(session: Session):
    pending = session.info.pop(PENDING_KEY, [])
    if pending:
        session.info.setdefault(COMMITTED_KEY, []).extend(pending)


def _discard_pending(session: Session):
    session.info.pop(PENDING_KEY, None)


def install_session_hooks():
    """Register the flush/commit/rollback listeners once per process."""
    if event.contains(Session, "after_flush", _collect_changes):
        return
    event.listen(Session, "after_flush", _collect_changes)
    event.listen(Session, "after_commit", _mark_committed)
    event.listen(Session, "after_rollback", _discard_pending)


async def commit_and_publish(session, change_feed: Optional[ChangeFeed] = None) -> list[ChangeEvent]:
    """Commit the session and publish the row changes of the transaction."""
    await session.commit()
    changes = session.info.pop(COMMITTED_KEY, [])
    target = change_feed or feed
    for change in changes:
        await target.publish(change)
    return changes


install_session_hooks()
