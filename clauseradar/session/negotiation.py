import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.exceptions import describe_failure
from clauseradar.logging.logger import Log
from clauseradar.risk.models import CounterOffer
from clauseradar.session.notices import Notice, NoticeBoard, NoticeLevel


class NegotiationStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class NegotiationEntry:
    status: NegotiationStatus = NegotiationStatus.IDLE
    offer: CounterOffer | None = None
    error: str | None = None


IDLE_ENTRY = NegotiationEntry()


@dataclass(frozen=True)
class NegotiationTicket:
    """Identifies one in-flight request; stale tickets are refused."""

    document_id: str
    clause_id: str
    seq: int


class ClauseNegotiationTracker:
    """Per-document counter-offer state, one independent entry per clause.

    ``begin``/``complete``/``fail`` are the synchronous transitions;
    ``request`` wraps them around the service call.
    """

    def __init__(
        self,
        client: BaseAnalysisClient,
        document_id: str,
        notices: NoticeBoard | None = None,
    ) -> None:
        self._client = client
        self._document_id = document_id
        self._notices = notices if notices is not None else NoticeBoard()
        self._entries: dict[str, NegotiationEntry] = {}
        self._tickets: dict[str, NegotiationTicket] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._seq = 0

    @property
    def document_id(self) -> str:
        return self._document_id

    def entry(self, clause_id: str) -> NegotiationEntry:
        return self._entries.get(clause_id, IDLE_ENTRY)

    def snapshot(self) -> Mapping[str, NegotiationEntry]:
        return dict(self._entries)

    def begin(self, clause_id: str) -> NegotiationTicket | None:
        """Mark ``clause_id`` as requesting; None if it already is."""
        if self.entry(clause_id).status is NegotiationStatus.REQUESTING:
            Log.debug(f"Counter-offer for {clause_id} already requested", component="negotiation")
            return None
        self._seq += 1
        ticket = NegotiationTicket(self._document_id, clause_id, self._seq)
        self._tickets[clause_id] = ticket
        self._entries[clause_id] = NegotiationEntry(status=NegotiationStatus.REQUESTING)
        return ticket

    def complete(self, ticket: NegotiationTicket, offer: CounterOffer) -> bool:
        """Store the offer, replacing any earlier one. False if the ticket is stale."""
        if not self._is_current(ticket):
            return False
        del self._tickets[ticket.clause_id]
        self._entries[ticket.clause_id] = NegotiationEntry(
            status=NegotiationStatus.READY, offer=offer
        )
        return True

    def fail(self, ticket: NegotiationTicket, message: str) -> bool:
        """Mark the request failed and drop any earlier offer. False if stale."""
        if not self._is_current(ticket):
            return False
        del self._tickets[ticket.clause_id]
        self._entries[ticket.clause_id] = NegotiationEntry(
            status=NegotiationStatus.FAILED, error=message
        )
        return True

    def request(self, clause_id: str) -> asyncio.Task[None] | None:
        """Issue a counter-offer request unless one is already in flight.

        Must be called inside a running loop. Returns the request task, or
        None for a duplicate request.
        """
        ticket = self.begin(clause_id)
        if ticket is None:
            return None
        task = asyncio.get_running_loop().create_task(self._run(ticket))
        self._tasks[clause_id] = task
        task.add_done_callback(lambda _t: self._forget_task(clause_id, task))
        return task

    def reset(self, clause_id: str | None = None) -> None:
        """Drop one entry, or every entry when ``clause_id`` is None."""
        clause_ids = [clause_id] if clause_id is not None else list(
            self._entries.keys() | self._tickets.keys()
        )
        for cid in clause_ids:
            self._entries.pop(cid, None)
            self._tickets.pop(cid, None)
            task = self._tasks.pop(cid, None)
            if task is not None and not task.done():
                task.cancel()

    def load_document(self, document_id: str) -> None:
        """Switch to another document, discarding every entry of the current one."""
        if document_id == self._document_id:
            return
        Log.info(
            f"Negotiations reset: {self._document_id} -> {document_id}",
            component="negotiation",
        )
        self.reset()
        self._document_id = document_id

    async def _run(self, ticket: NegotiationTicket) -> None:
        try:
            offer = await self._client.request_counter_offer(ticket.clause_id)
        except Exception as exc:
            Log.error(
                f"Counter-offer for {ticket.clause_id} failed: {exc!r}",
                component="negotiation",
            )
            if self.fail(ticket, describe_failure(exc)):
                self._notices.post(
                    Notice(
                        "Failed to Generate Counter-offer",
                        "Please try again later.",
                        NoticeLevel.ERROR,
                    )
                )
            return
        if self.complete(ticket, offer):
            Log.info(f"Counter-offer ready for {ticket.clause_id}", component="negotiation")
            self._notices.post(
                Notice(
                    "Counter-offer Generated",
                    "AI has generated a suggested counter-offer for this clause.",
                )
            )

    def _is_current(self, ticket: NegotiationTicket) -> bool:
        current = self._tickets.get(ticket.clause_id)
        return current == ticket and ticket.document_id == self._document_id

    def _forget_task(self, clause_id: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(clause_id) is task:
            del self._tasks[clause_id]
