"""
In-memory document store.

Holds the authoritative full text of every open document, keyed by URI.  The
client uses full-document sync, so each change replaces the stored text
wholesale.  Every write stamps the entry with a new *generation* number taken
from a process-wide counter; analysis results carry the generation they were
computed from and are dropped if the document moved on in the meantime.

The store is shared by all in-flight handler tasks and is guarded by a single
:class:`ReadWriteLock`: reads proceed concurrently, writes are exclusive.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """asyncio reader/writer lock.

    Any number of readers may hold the lock together.  A writer waits for
    active readers to drain and then holds it alone; while a writer is
    waiting, new readers queue behind it.
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writing(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self):
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and not self._writers_waiting)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self):
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            except BaseException:
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass(frozen=True)
class DocumentSnapshot:
    uri: str
    text: str
    generation: int


class DocumentStore:
    def __init__(self):
        self._docs: dict[str, DocumentSnapshot] = {}
        self._lock = ReadWriteLock()
        self._generations = itertools.count(1)

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, uri: object) -> bool:
        return uri in self._docs

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    async def open(self, uri: str, text: str) -> int:
        """Insert or replace the entry for *uri*; return its new generation."""
        return await self._put(uri, text)

    async def update(self, uri: str, text: str) -> int:
        """Replace the text of *uri* wholesale; return its new generation."""
        return await self._put(uri, text)

    async def _put(self, uri: str, text: str) -> int:
        async with self._lock.write():
            generation = next(self._generations)
            self._docs[uri] = DocumentSnapshot(uri=uri, text=text, generation=generation)
        logger.debug('DocumentStore: %s → generation %d (%d chars)', uri, generation, len(text))
        return generation

    async def close(self, uri: str) -> None:
        async with self._lock.write():
            removed = self._docs.pop(uri, None)
        if removed is None:
            logger.debug('DocumentStore: close of unknown document %s', uri)

    async def clear(self) -> None:
        async with self._lock.write():
            self._docs.clear()

    async def get(self, uri: str) -> str | None:
        snap = await self.snapshot(uri)
        return None if snap is None else snap.text

    async def snapshot(self, uri: str) -> DocumentSnapshot | None:
        async with self._lock.read():
            return self._docs.get(uri)

    async def is_current(self, uri: str, generation: int) -> bool:
        """Whether *generation* is still the latest write for *uri*."""
        async with self._lock.read():
            snap = self._docs.get(uri)
            return snap is not None and snap.generation == generation
