"""
Transport interfaces for message control surfaces.

The button grid lives on the remote chat message, not in this process. The core
reaches it only through two small capabilities:

1. ControlSurface - the inline keyboard attached to one existing message
   (read the current grid, replace it with a new one)
2. MessageSender - posts a new message with a grid attached

Two implementations ship with the package:
- In-memory (InMemorySurfaceStore / InMemorySurface / InMemorySender) - no network,
  used by tests and the offline demo
- Telegram (listbot.telegram_transport) - python-telegram-bot backed

Usage pattern:
    store = InMemorySurfaceStore()
    sender = InMemorySender(store)
    await create_list("", sender, catalog)
    surface = store.surface(sender.sent[-1].key)
    await dispatcher.dispatch(CallbackEvent(token="d_Bo", surface=surface))
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from .errors import TransportError
from .schemas import Grid


class ControlSurface(ABC):
    """The interactive keyboard attached to one remote message.

    Implementations must treat the remote message as the source of truth. The
    dispatcher reads and writes through this interface and keeps no copy of its
    own between events.
    """

    @property
    @abstractmethod
    def key(self) -> Hashable:
        """Identity of the underlying message, used for per-message locking."""

    @abstractmethod
    async def read_grid(self) -> Grid:
        """
        Return the grid currently displayed on the message.

        Raises:
            TransportError: If the current surface cannot be obtained
        """

    @abstractmethod
    async def write_grid(self, grid: Grid) -> None:
        """
        Replace the message's whole keyboard with ``grid``.

        Raises:
            TransportError: If the edit is rejected or the network fails
        """


class MessageSender(ABC):
    """Posts new messages carrying a grid."""

    @abstractmethod
    async def send_list(self, text: str, grid: Grid) -> None:
        """
        Send ``text`` (MarkdownV2) with ``grid`` attached.

        Raises:
            TransportError: If the message cannot be sent
        """


@dataclass
class SentMessage:
    """Record of a message posted through InMemorySender."""

    key: int
    text: str
    grid: Grid


@dataclass
class InMemorySurfaceStore:
    """Dict-backed stand-in for the remote chat service.

    Reads and writes yield to the event loop before touching the store, the same
    way a network round-trip would, so interleavings between concurrent handlers
    show up in tests.
    """

    grids: Dict[Hashable, Grid] = field(default_factory=dict)
    writes: List[Hashable] = field(default_factory=list)
    fail_writes: bool = False

    def surface(self, key: Hashable) -> "InMemorySurface":
        return InMemorySurface(self, key)

    def current(self, key: Hashable) -> Optional[Grid]:
        return self.grids.get(key)


class InMemorySurface(ControlSurface):
    """ControlSurface view of one message in an InMemorySurfaceStore."""

    def __init__(self, store: InMemorySurfaceStore, key: Hashable):
        self._store = store
        self._key = key

    @property
    def key(self) -> Hashable:
        return self._key

    async def read_grid(self) -> Grid:
        await asyncio.sleep(0)
        grid = self._store.grids.get(self._key)
        if grid is None:
            raise TransportError(operation="read", message_key=self._key)
        return grid.model_copy(deep=True)

    async def write_grid(self, grid: Grid) -> None:
        await asyncio.sleep(0)
        if self._store.fail_writes:
            raise TransportError(
                operation="edit",
                message_key=self._key,
                underlying=ConnectionError("simulated network failure"),
            )
        self._store.grids[self._key] = grid.model_copy(deep=True)
        self._store.writes.append(self._key)


class InMemorySender(MessageSender):
    """MessageSender that registers each new message in an InMemorySurfaceStore."""

    def __init__(self, store: Optional[InMemorySurfaceStore] = None):
        self.store = store or InMemorySurfaceStore()
        self.sent: List[SentMessage] = []

    async def send_list(self, text: str, grid: Grid) -> None:
        await asyncio.sleep(0)
        key = len(self.sent) + 1
        self.store.grids[key] = grid.model_copy(deep=True)
        self.sent.append(SentMessage(key=key, text=text, grid=grid.model_copy(deep=True)))
