"""
Offline demo: list creation and concurrent deletes without Telegram
===================================================================

WHAT THIS SHOWS:
- /new with an empty name producing the "*List*" message
- Several delete presses on the same message handled concurrently
- A press on the reserved edit action being dropped

RUN:
    python -m examples.offline_demo.run
"""

import asyncio

from listbot import (
    ButtonAction,
    CallbackDispatcher,
    CallbackEvent,
    InMemorySender,
    create_list,
    encode_token,
)


async def main() -> None:
    sender = InMemorySender()
    await create_list("", sender)
    message = sender.sent[-1]
    print(f"Sent {message.text} with {len(message.grid.rows)} rows")

    dispatcher = CallbackDispatcher()
    surface = sender.store.surface(message.key)

    # Fire the presses the way Telegram delivers them: all at once.
    presses = [
        encode_token(ButtonAction.DELETE, "Rex"),
        encode_token(ButtonAction.DELETE, "Potato"),
        encode_token(ButtonAction.DELETE, "Squeeze"),
        encode_token(ButtonAction.EDIT, "Jessie"),
        "x_NotAnAction",
    ]
    outcomes = await asyncio.gather(
        *[dispatcher.dispatch(CallbackEvent(token=token, surface=surface)) for token in presses]
    )

    for outcome in outcomes:
        reason = f" ({outcome.reason.value})" if outcome.reason else ""
        print(f"  {outcome.token:<20} {outcome.state.value}{reason}")

    remaining = sender.store.current(message.key)
    print(f"\nRemaining items ({len(remaining.rows)}):")
    for identifier in remaining.identifiers():
        print(f"  - {identifier}")


if __name__ == "__main__":
    asyncio.run(main())
