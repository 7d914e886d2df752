"""
Telegram transport built on python-telegram-bot.

Maps the core's ControlSurface / MessageSender capabilities onto the Bot API and
wires the text and callback handlers into a PTB Application.

Reading the current surface:
A CallbackQuery carries the message as it looked when the button was pressed, and
the Bot API has no call to fetch a message's current keyboard. When two presses on
the same message arrive back to back, the second one's snapshot is already stale.
SurfaceTracker remembers the last grid this process wrote to each message, and
TelegramMessageSurface.read_grid prefers that record over the snapshot.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Hashable, Optional, Tuple

from telegram import (
    Bot,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    MaybeInaccessibleMessage,
    Message,
    Update,
)
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from .commands import HelpCommand, NewListCommand, describe_commands, parse_command
from .dispatcher import CallbackDispatcher, CallbackEvent
from .errors import CommandNotFoundError, TransportError
from .lists import DEFAULT_CATALOG, DEFAULT_LIST_NAME, create_list
from .logging_utils import log_debug, log_error
from .schemas import Grid, GridButton, GridRow
from .surface import ControlSurface, MessageSender

MessageKey = Tuple[int, int]

NOT_FOUND_REPLY = "Command not found!"


# =============================
# Grid <-> InlineKeyboardMarkup
# =============================

def grid_to_markup(grid: Grid) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(button.text, callback_data=button.token) for button in row.buttons]
            for row in grid.rows
        ]
    )


def markup_to_grid(markup: InlineKeyboardMarkup, message_key: Optional[Hashable] = None) -> Grid:
    """Convert a message's inline keyboard back into a Grid.

    Raises:
        TransportError: If the keyboard was not produced by this bot (wrong row
            width or buttons without string callback data)
    """
    rows = []
    for keyboard_row in markup.inline_keyboard:
        buttons = []
        for button in keyboard_row:
            if not isinstance(button.callback_data, str):
                raise TransportError(
                    operation="read",
                    message_key=message_key,
                    underlying=ValueError(f"button {button.text!r} has no callback data"),
                )
            buttons.append(GridButton(text=button.text, token=button.callback_data))
        if len(buttons) != 2:
            raise TransportError(
                operation="read",
                message_key=message_key,
                underlying=ValueError(f"expected 2 buttons per row, got {len(buttons)}"),
            )
        rows.append(GridRow(buttons=buttons))
    return Grid(rows=rows)


# =============================
# Surface tracking
# =============================

class SurfaceTracker:
    """Bounded LRU of the last grid written to each message by this process."""

    def __init__(self, max_entries: int = 1024):
        self.max_entries = max_entries
        self._grids: "OrderedDict[Hashable, Grid]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[Grid]:
        grid = self._grids.get(key)
        if grid is None:
            return None
        self._grids.move_to_end(key)
        return grid.model_copy(deep=True)

    def record(self, key: Hashable, grid: Grid) -> None:
        self._grids[key] = grid.model_copy(deep=True)
        self._grids.move_to_end(key)
        while len(self._grids) > self.max_entries:
            self._grids.popitem(last=False)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._grids


class TelegramMessageSurface(ControlSurface):
    """ControlSurface for one Telegram message's inline keyboard."""

    def __init__(
        self,
        bot: Bot,
        chat_id: int,
        message_id: int,
        snapshot: Optional[InlineKeyboardMarkup],
        tracker: SurfaceTracker,
    ):
        self.bot = bot
        self.chat_id = chat_id
        self.message_id = message_id
        self.snapshot = snapshot
        self.tracker = tracker

    @classmethod
    def from_message(
        cls, bot: Bot, message: MaybeInaccessibleMessage, tracker: SurfaceTracker
    ) -> "TelegramMessageSurface":
        # Inaccessible (too old) messages carry no keyboard snapshot.
        snapshot = getattr(message, "reply_markup", None)
        return cls(bot, message.chat.id, message.message_id, snapshot, tracker)

    @property
    def key(self) -> MessageKey:
        return (self.chat_id, self.message_id)

    async def read_grid(self) -> Grid:
        tracked = self.tracker.get(self.key)
        if tracked is not None:
            return tracked
        if self.snapshot is None:
            raise TransportError(
                operation="read",
                message_key=self.key,
                underlying=ValueError("message has no inline keyboard"),
            )
        return markup_to_grid(self.snapshot, self.key)

    async def write_grid(self, grid: Grid) -> None:
        try:
            await self.bot.edit_message_reply_markup(
                chat_id=self.chat_id,
                message_id=self.message_id,
                reply_markup=grid_to_markup(grid),
            )
        except BadRequest as exc:
            # Deleting an item that is already gone leaves the keyboard unchanged.
            if "message is not modified" not in str(exc).lower():
                raise TransportError(operation="edit", message_key=self.key, underlying=exc) from exc
            log_debug(f"[Telegram] {self.key}: keyboard unchanged")
        except TelegramError as exc:
            raise TransportError(operation="edit", message_key=self.key, underlying=exc) from exc
        self.tracker.record(self.key, grid)


class TelegramSender(MessageSender):
    """Replies to an inbound message with a new list message."""

    def __init__(self, message: Message):
        self.message = message

    async def send_list(self, text: str, grid: Grid) -> None:
        try:
            await self.message.reply_text(
                text,
                parse_mode=ParseMode.MARKDOWN_V2,
                reply_markup=grid_to_markup(grid),
                do_quote=False,
            )
        except TelegramError as exc:
            raise TransportError(
                operation="send",
                message_key=(self.message.chat_id, self.message.message_id),
                underlying=exc,
            ) from exc


# =============================
# Handlers and application
# =============================

class ListBot:
    """PTB handler set: text commands and inline keyboard callbacks."""

    def __init__(
        self,
        bot_name: str = "buttons",
        catalog: Tuple[str, ...] = DEFAULT_CATALOG,
        default_list_name: str = DEFAULT_LIST_NAME,
        dispatcher: Optional[CallbackDispatcher] = None,
        tracker: Optional[SurfaceTracker] = None,
    ):
        self.bot_name = bot_name
        self.catalog = catalog
        self.default_list_name = default_list_name
        self.dispatcher = dispatcher or CallbackDispatcher()
        self.tracker = tracker or SurfaceTracker()

    async def on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or message.text is None:
            return

        try:
            command = parse_command(message.text, self.bot_name)
        except CommandNotFoundError as exc:
            log_debug(f"[Commands] {exc}")
            await message.reply_text(NOT_FOUND_REPLY)
            return

        if isinstance(command, HelpCommand):
            await message.reply_text(describe_commands())
        elif isinstance(command, NewListCommand):
            try:
                await create_list(
                    command.name,
                    TelegramSender(message),
                    self.catalog,
                    default_name=self.default_list_name,
                )
            except TransportError as exc:
                log_error(f"[Lists] {exc}")

    async def on_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None:
            return
        if not isinstance(query.data, str) or query.message is None:
            log_debug("[Telegram] Ignoring callback without data or message")
            return

        surface = TelegramMessageSurface.from_message(context.bot, query.message, self.tracker)
        try:
            await self.dispatcher.dispatch(CallbackEvent(token=query.data, surface=surface))
        finally:
            # Stop the client's spinner even when dispatch blows up.
            try:
                await query.answer()
            except TelegramError as exc:
                log_debug(f"[Telegram] Could not answer callback: {exc}")

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        log_error(f"[Telegram] Handler failed: {context.error!r}")

    def register(self, application: Application) -> None:
        application.add_handler(MessageHandler(filters.TEXT, self.on_message))
        application.add_handler(CallbackQueryHandler(self.on_callback))
        application.add_error_handler(self.on_error)


def build_application(
    token: str,
    bot_name: str = "buttons",
    catalog: Tuple[str, ...] = DEFAULT_CATALOG,
    default_list_name: str = DEFAULT_LIST_NAME,
) -> Application:
    """Construct a PTB Application with concurrent update handling."""

    application = Application.builder().token(token).concurrent_updates(True).build()
    ListBot(bot_name=bot_name, catalog=catalog, default_list_name=default_list_name).register(application)
    return application
