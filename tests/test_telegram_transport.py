"""Tests for the python-telegram-bot transport, with the Bot API mocked out."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from telegram.constants import ParseMode
from telegram.error import BadRequest, NetworkError

from listbot.builder import build_grid
from listbot.commands import describe_commands
from listbot.errors import TransportError
from listbot.telegram_transport import (
    NOT_FOUND_REPLY,
    ListBot,
    SurfaceTracker,
    TelegramMessageSurface,
    TelegramSender,
    grid_to_markup,
    markup_to_grid,
)


def make_text_update(text: str):
    message = MagicMock()
    message.text = text
    message.chat_id = 42
    message.message_id = 1
    message.reply_text = AsyncMock()
    return SimpleNamespace(effective_message=message), message


def make_callback_update(data, markup, chat_id=42, message_id=7):
    message = SimpleNamespace(
        chat=SimpleNamespace(id=chat_id),
        message_id=message_id,
        reply_markup=markup,
    )
    query = MagicMock()
    query.data = data
    query.message = message
    query.answer = AsyncMock()
    return SimpleNamespace(callback_query=query), query


def edited_identifiers(bot_mock, call_index=-1):
    markup = bot_mock.edit_message_reply_markup.await_args_list[call_index].kwargs["reply_markup"]
    return markup_to_grid(markup).identifiers()


# =============================
# Markup conversion
# =============================

def test_markup_round_trip_keeps_labels_and_tokens():
    grid = build_grid(["Bo", "Hamm"])

    markup = grid_to_markup(grid)

    assert [[button.callback_data for button in row] for row in markup.inline_keyboard] == [
        ["e_Bo", "d_Bo"],
        ["e_Hamm", "d_Hamm"],
    ]
    assert markup.inline_keyboard[0][0].text == "Bo"
    assert markup_to_grid(markup) == grid


def test_markup_without_callback_data_is_rejected():
    markup = InlineKeyboardMarkup(
        [[InlineKeyboardButton("site", url="https://example.org"), InlineKeyboardButton("x", callback_data="d_x")]]
    )

    with pytest.raises(TransportError):
        markup_to_grid(markup)


def test_markup_with_wrong_row_width_is_rejected():
    markup = InlineKeyboardMarkup([[InlineKeyboardButton("Bo", callback_data="e_Bo")]])

    with pytest.raises(TransportError):
        markup_to_grid(markup)


# =============================
# Surface and tracker
# =============================

def test_tracker_evicts_least_recently_used():
    tracker = SurfaceTracker(max_entries=2)
    tracker.record("a", build_grid(["1"]))
    tracker.record("b", build_grid(["2"]))
    tracker.get("a")
    tracker.record("c", build_grid(["3"]))

    assert "a" in tracker
    assert "b" not in tracker
    assert "c" in tracker


@pytest.mark.asyncio
async def test_surface_reads_snapshot_then_tracked_grid():
    bot = AsyncMock()
    tracker = SurfaceTracker()
    snapshot = grid_to_markup(build_grid(["Bo", "Hamm"]))
    surface = TelegramMessageSurface(bot, 42, 7, snapshot, tracker)

    assert (await surface.read_grid()).identifiers() == ["Bo", "Hamm"]

    await surface.write_grid(build_grid(["Hamm"]))

    bot.edit_message_reply_markup.assert_awaited_once()
    kwargs = bot.edit_message_reply_markup.await_args.kwargs
    assert kwargs["chat_id"] == 42
    assert kwargs["message_id"] == 7
    stale = TelegramMessageSurface(bot, 42, 7, snapshot, tracker)
    assert (await stale.read_grid()).identifiers() == ["Hamm"]


@pytest.mark.asyncio
async def test_surface_without_keyboard_cannot_be_read():
    surface = TelegramMessageSurface(AsyncMock(), 42, 7, None, SurfaceTracker())

    with pytest.raises(TransportError):
        await surface.read_grid()


@pytest.mark.asyncio
async def test_network_error_becomes_transport_error():
    bot = AsyncMock()
    bot.edit_message_reply_markup.side_effect = NetworkError("connection reset")
    tracker = SurfaceTracker()
    surface = TelegramMessageSurface(bot, 42, 7, None, tracker)

    with pytest.raises(TransportError) as excinfo:
        await surface.write_grid(build_grid(["Bo"]))

    assert isinstance(excinfo.value.underlying, NetworkError)
    assert excinfo.value.message_key == (42, 7)
    assert (42, 7) not in tracker


@pytest.mark.asyncio
async def test_not_modified_edit_is_treated_as_success():
    bot = AsyncMock()
    bot.edit_message_reply_markup.side_effect = BadRequest(
        "Message is not modified: specified new message content and reply markup are exactly the same"
    )
    tracker = SurfaceTracker()
    surface = TelegramMessageSurface(bot, 42, 7, None, tracker)

    await surface.write_grid(build_grid(["Bo"]))

    assert (42, 7) in tracker


@pytest.mark.asyncio
async def test_other_bad_requests_fail():
    bot = AsyncMock()
    bot.edit_message_reply_markup.side_effect = BadRequest("Message to edit not found")
    surface = TelegramMessageSurface(bot, 42, 7, None, SurfaceTracker())

    with pytest.raises(TransportError):
        await surface.write_grid(build_grid(["Bo"]))


@pytest.mark.asyncio
async def test_sender_wraps_telegram_errors():
    _, message = make_text_update("/new")
    message.reply_text.side_effect = NetworkError("timeout")

    with pytest.raises(TransportError):
        await TelegramSender(message).send_list("*List*", build_grid(["Bo"]))


# =============================
# Handlers
# =============================

@pytest.mark.asyncio
async def test_help_replies_with_descriptions():
    update, message = make_text_update("/help")

    await ListBot().on_message(update, SimpleNamespace())

    message.reply_text.assert_awaited_once_with(describe_commands())


@pytest.mark.asyncio
async def test_unknown_text_replies_command_not_found():
    update, message = make_text_update("good morning")

    await ListBot().on_message(update, SimpleNamespace())

    message.reply_text.assert_awaited_once_with(NOT_FOUND_REPLY)


@pytest.mark.asyncio
async def test_new_without_name_sends_default_list():
    update, message = make_text_update("/new")

    await ListBot().on_message(update, SimpleNamespace())

    message.reply_text.assert_awaited_once()
    args, kwargs = message.reply_text.await_args
    assert args == ("*List*",)
    assert kwargs["parse_mode"] == ParseMode.MARKDOWN_V2
    rows = kwargs["reply_markup"].inline_keyboard
    assert len(rows) == 16
    assert [button.callback_data for button in rows[0]] == [
        "e_BuzzWordBecaouseINeedSomethingLonger",
        "d_BuzzWordBecaouseINeedSomethingLonger",
    ]


@pytest.mark.asyncio
async def test_new_send_failure_is_logged_not_raised():
    update, message = make_text_update("/new Groceries")
    message.reply_text.side_effect = NetworkError("timeout")

    await ListBot(catalog=("Milk",)).on_message(update, SimpleNamespace())

    message.reply_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_callback_deletes_row_and_answers_query():
    markup = grid_to_markup(build_grid(["Bo", "Hamm", "Woody"]))
    update, query = make_callback_update("d_Hamm", markup)
    context = SimpleNamespace(bot=AsyncMock())

    await ListBot().on_callback(update, context)

    assert edited_identifiers(context.bot) == ["Bo", "Woody"]
    query.answer.assert_awaited_once()


@pytest.mark.asyncio
async def test_callback_with_invalid_token_does_not_edit():
    markup = grid_to_markup(build_grid(["Bo"]))
    update, query = make_callback_update("z_Bo", markup)
    context = SimpleNamespace(bot=AsyncMock())

    await ListBot().on_callback(update, context)

    context.bot.edit_message_reply_markup.assert_not_awaited()
    query.answer.assert_awaited_once()


@pytest.mark.asyncio
async def test_concurrent_callbacks_with_stale_snapshots_keep_both_deletes():
    markup = grid_to_markup(build_grid(["Bo", "Hamm", "Woody"]))
    context = SimpleNamespace(bot=AsyncMock())
    listbot = ListBot()
    first, _ = make_callback_update("d_Bo", markup)
    second, _ = make_callback_update("d_Woody", markup)

    await asyncio.gather(listbot.on_callback(first, context), listbot.on_callback(second, context))

    assert context.bot.edit_message_reply_markup.await_count == 2
    assert edited_identifiers(context.bot) == ["Hamm"]


@pytest.mark.asyncio
async def test_callback_without_data_is_ignored():
    update, query = make_callback_update(None, None)
    context = SimpleNamespace(bot=AsyncMock())

    await ListBot().on_callback(update, context)

    context.bot.edit_message_reply_markup.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_is_answered_even_if_dispatch_raises():
    markup = grid_to_markup(build_grid(["Bo"]))
    update, query = make_callback_update("d_Bo", markup)
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(side_effect=RuntimeError("boom"))
    context = SimpleNamespace(bot=AsyncMock())

    with pytest.raises(RuntimeError):
        await ListBot(dispatcher=dispatcher).on_callback(update, context)

    query.answer.assert_awaited_once()
