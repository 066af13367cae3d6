"""
Query worker: drives one endpoint through a fixed number of request/response
cycles and reports every outcome to the event channel.

Per iteration a worker allocates a transaction ID, picks a random domain,
sends the query and emits ``SENT`` (or ``FAILED`` if the send itself fails).
After a successful send it waits for the reply carrying the same ID and
emits exactly one of ``SUCCESS``, ``TIMEOUT`` or ``FAILED``. Replies with a
different ID are ignored and the worker keeps waiting, bounded by the
configured MismatchPolicy. Once all iterations are done the worker emits a
single ``WORKER_DONE``.
"""

from __future__ import annotations

import random
import time
from typing import Callable, Optional

from dnsblast.domain.models import DomainPool, MismatchPolicy, Status, StatusEvent, WorkerConfig
from dnsblast.engine.abstract import Codec, Endpoint, EventSink
from dnsblast.engine.allocator import TransactionIdAllocator
from dnsblast.infrastructure.codec import DnsCodec, MalformedReplyError
from dnsblast.utils.logging import get_logger

log = get_logger(__name__)


class QueryWorker:
    def __init__(
        self,
        config: WorkerConfig,
        pool: DomainPool,
        allocator: TransactionIdAllocator,
        endpoint: Endpoint,
        events: EventSink,
        codec: Optional[Codec] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._pool = pool
        self._allocator = allocator
        self._endpoint = endpoint
        self._events = events
        self._codec = codec or DnsCodec()
        self._rng = rng or random.Random()
        self._clock = clock

    @property
    def worker_id(self) -> int:
        return self.config.worker_id

    def _emit(self, status: Status) -> None:
        self._events.put(StatusEvent(status=status, worker_id=self.worker_id))

    def run(self) -> None:
        """Run every configured iteration, then signal completion."""
        try:
            for _ in range(self.config.number):
                self.run_iteration()
        except Exception:  # noqa: BLE001
            log.exception("Worker aborted", extra={"worker": self.worker_id})
        finally:
            self._emit(Status.WORKER_DONE)

    def run_iteration(self) -> None:
        txid = self._allocator.next()
        domain = self._pool.choose(self._rng)
        log.debug("select domain: %s", domain, extra={"worker": self.worker_id, "txid": txid})

        sent = self._send(domain, txid)
        self._emit(sent)
        if sent is Status.SENT:
            self._emit(self._await_reply(txid))

    def _send(self, domain: str, txid: int) -> Status:
        try:
            payload = self._codec.encode_query(domain, self.config.record, txid)
            self._endpoint.send(payload)
        except (OSError, ValueError) as exc:
            log.debug(
                "Send failed",
                extra={"worker": self.worker_id, "txid": txid, "error": str(exc)},
            )
            return Status.FAILED
        return Status.SENT

    def _await_reply(self, txid: int) -> Status:
        """
        Block until the reply for ``txid`` arrives or the wait runs out.

        Under MismatchPolicy.DEADLINE the whole iteration shares one deadline,
        so mismatched replies only consume the time that is left. Under
        MismatchPolicy.RESET each wait after a mismatch gets the full timeout.
        """
        timeout = self.config.timeout_seconds
        deadline = self._clock() + timeout

        while True:
            if self.config.mismatch_policy is MismatchPolicy.DEADLINE:
                wait = deadline - self._clock()
                if wait <= 0:
                    return Status.TIMEOUT
            else:
                wait = timeout

            try:
                payload = self._endpoint.recv(wait, self.config.recv_buffer_size)
            except TimeoutError:
                return Status.TIMEOUT
            except OSError as exc:
                log.debug(
                    "Receive failed",
                    extra={"worker": self.worker_id, "txid": txid, "error": str(exc)},
                )
                return Status.FAILED

            try:
                reply = self._codec.decode_reply(payload)
            except MalformedReplyError as exc:
                log.debug(
                    "Malformed reply",
                    extra={"worker": self.worker_id, "txid": txid, "error": str(exc)},
                )
                return Status.FAILED

            if reply.txid == txid:
                if reply.questions:
                    log.debug(
                        "OK, %s -> %s",
                        reply.questions[0],
                        list(reply.answers),
                        extra={"worker": self.worker_id, "txid": txid},
                    )
                return Status.SUCCESS

            log.debug(
                "Ignoring reply with foreign transaction ID",
                extra={"worker": self.worker_id, "txid": txid, "reply_txid": reply.txid},
            )


__all__ = ["QueryWorker"]
