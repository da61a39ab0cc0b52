"""Event registration table wiring host events to list commands.

Handlers are derived from configuration once at setup and keyed by
``(event, list kind)``; each host event gets one dispatcher.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .config import EngineConfig, ListOptions
from .entries import ListKind
from .host import EventName, Host

logger = logging.getLogger(__name__)

UNFOCUS_CLOSE_DELAY_SECONDS = 0.05

POST_COMMANDS = (
    "make",
    "grep",
    "grepadd",
    "vimgrep",
    "vimgrepadd",
    "cfile",
    "cgetfile",
    "caddfile",
    "cexpr",
    "cgetexpr",
    "caddexpr",
    "cbuffer",
    "cgetbuffer",
    "caddbuffer",
)


def post_commands(kind: ListKind) -> frozenset[str]:
    """Commands whose completion should auto-open ``kind``.

    The location-list variants swap a leading ``c`` for ``l`` and prefix the
    rest with ``l`` (``grep`` -> ``lgrep``).
    """
    if kind is ListKind.PRIMARY:
        return frozenset(POST_COMMANDS)
    return frozenset("l" + name[1:] if name.startswith("c") else "l" + name for name in POST_COMMANDS)


EventKey = tuple[EventName, ListKind]
KindHandler = Callable[[object], None]


@dataclass(frozen=True)
class ListCommands:
    """The engine commands event handlers are allowed to trigger."""

    follow: Callable[..., bool]
    open: Callable[..., bool]
    close: Callable[[ListKind], None]
    reopen: Callable[[ListKind], bool]
    reset_follow: Callable[[ListKind], None]


@dataclass
class EventTable:
    handlers: dict[EventKey, KindHandler] = field(default_factory=dict)

    def register(self, event: EventName, kind: ListKind, handler: KindHandler) -> None:
        self.handlers[(event, kind)] = handler

    def handler_for(self, event: EventName, kind: ListKind) -> KindHandler | None:
        return self.handlers.get((event, kind))

    def events(self) -> list[EventName]:
        seen: list[EventName] = []
        for event, _kind in self.handlers:
            if event not in seen:
                seen.append(event)
        return seen

    def dispatch(self, event: EventName, payload: object = None) -> None:
        """Run every list handler registered for ``event`` in list-kind order."""
        for kind in ListKind:
            handler = self.handlers.get((event, kind))
            if handler is None:
                continue
            logger.debug("dispatch %s to %s", event.value, kind.name)
            handler(payload)

    def attach(self, host: Host) -> None:
        """Subscribe one dispatcher per registered event with the host."""
        for event in self.events():
            host.subscribe(event, lambda payload, event=event: self.dispatch(event, payload))


def _kind_handlers(
    kind: ListKind,
    options: ListOptions,
    host: Host,
    commands: ListCommands,
) -> list[tuple[EventName, KindHandler]]:
    out: list[tuple[EventName, KindHandler]] = []

    if options.auto_follow is not None:
        strategy = options.auto_follow
        event = EventName.CURSOR_IDLE if options.follow_slow else EventName.CURSOR_MOVED
        out.append((event, lambda _payload: commands.follow(kind, strategy, True)))

    if options.unfocus_close:
        # The close always fires, even if focus came back in the meantime.
        def close_later(_payload: object) -> None:
            host.defer(UNFOCUS_CLOSE_DELAY_SECONDS, lambda: commands.close(kind))

        out.append((EventName.WINDOW_FOCUS_LOST, close_later))

    if options.focus_open:
        out.append((EventName.WINDOW_FOCUS_GAINED, lambda _payload: commands.open(kind, stay=True)))

    names = post_commands(kind)

    def after_command(payload: object) -> None:
        # The host replaced the items, so the follow memo is stale.
        if not (isinstance(payload, str) and payload in names):
            return
        commands.reset_follow(kind)
        if options.auto_open:
            commands.open(kind, stay=True, silent=True)

    out.append((EventName.COMMAND_COMPLETED, after_command))

    out.append((EventName.WINDOW_NEW, lambda _payload: commands.reopen(kind)))
    return out


def build_event_table(config: EngineConfig, host: Host, commands: ListCommands) -> EventTable:
    """Derive the ``(event, kind) -> handler`` table from ``config``."""
    table = EventTable()
    for kind in ListKind:
        for event, handler in _kind_handlers(kind, config.for_kind(kind), host, commands):
            table.register(event, kind, handler)
    return table


__all__ = [
    "EventTable",
    "ListCommands",
    "POST_COMMANDS",
    "UNFOCUS_CLOSE_DELAY_SECONDS",
    "build_event_table",
    "post_commands",
]
