"""Engine configuration and persistent JSON config helpers.

Per-list options are frozen once ``setup`` runs. Loading is defensive:
malformed or missing config falls back to defaults with a logged warning.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from pathlib import Path

from platformdirs import user_config_dir

from .entries import ListKind

logger = logging.getLogger(__name__)

APP_NAME = "qfnav"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


class FollowStrategy(Enum):
    PREV = "prev"
    NEXT = "next"
    NEAREST = "nearest"

    @classmethod
    def parse(cls, value: object) -> FollowStrategy | None:
        """Return the strategy named by ``value``, or ``None`` if unknown."""
        if isinstance(value, FollowStrategy):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ListOptions:
    """Behavior switches for one list kind.

    ``auto_follow`` is ``None`` when following is disabled.
    """

    auto_close: bool = True
    auto_follow: FollowStrategy | None = FollowStrategy.PREV
    auto_follow_limit: int = 8
    follow_slow: bool = True
    auto_open: bool = True
    auto_resize: bool = True
    max_height: int = 8
    min_height: int = 5
    wide: bool = False
    number: bool = False
    relative_number: bool = False
    unfocus_close: bool = False
    focus_open: bool = False


_OPTION_ALIASES = {
    "relativenumber": "relative_number",
    "close_on_unfocus": "unfocus_close",
    "open_on_focus": "focus_open",
}


@dataclass(frozen=True)
class EngineConfig:
    primary: ListOptions = field(default_factory=ListOptions)
    secondary: ListOptions = field(default_factory=ListOptions)
    close_other: bool = False

    def for_kind(self, kind: ListKind) -> ListOptions:
        return self.primary if kind is ListKind.PRIMARY else self.secondary

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> EngineConfig:
        """Build a config from the nested ``{"c": {...}, "l": {...}}`` shape.

        ``"primary"``/``"secondary"`` are accepted for the list sections.
        Unknown keys and values of the wrong type are dropped.
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            logger.warning("ignoring non-mapping config of type %s", type(data).__name__)
            return cls()

        sections: dict[ListKind, Mapping[str, object]] = {}
        close_other = False
        for key, value in data.items():
            if key in ("c", "primary", "l", "secondary"):
                kind = ListKind.PRIMARY if key in ("c", "primary") else ListKind.SECONDARY
                if isinstance(value, Mapping):
                    sections[kind] = value
                else:
                    logger.warning("ignoring config section %r: expected an object", key)
            elif key == "close_other":
                if isinstance(value, bool):
                    close_other = value
                else:
                    logger.warning("ignoring close_other=%r: expected a boolean", value)
            elif key == "pretty":
                # Entry formatting belongs to the host.
                continue
            else:
                logger.warning("ignoring unknown config key %r", key)

        return cls(
            primary=_parse_list_options(sections.get(ListKind.PRIMARY, {})),
            secondary=_parse_list_options(sections.get(ListKind.SECONDARY, {})),
            close_other=close_other,
        )

    def to_mapping(self) -> dict[str, object]:
        """Serialize to the same nested shape ``from_mapping`` reads."""

        def section(options: ListOptions) -> dict[str, object]:
            out = asdict(options)
            out["auto_follow"] = options.auto_follow.value if options.auto_follow else False
            return out

        return {
            "c": section(self.primary),
            "l": section(self.secondary),
            "close_other": self.close_other,
        }


def _coerce_nonnegative_int(value: object) -> int | None:
    """Accept plain non-negative ints only; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return max(0, value)


def _parse_list_options(raw: Mapping[str, object]) -> ListOptions:
    defaults = ListOptions()
    known = {f.name: f for f in fields(ListOptions)}
    changes: dict[str, object] = {}
    for raw_key, value in raw.items():
        key = _OPTION_ALIASES.get(str(raw_key), str(raw_key))
        if key not in known:
            logger.warning("ignoring unknown list option %r", raw_key)
            continue
        if key == "auto_follow":
            if value is False or value is None:
                changes[key] = None
                continue
            strategy = FollowStrategy.parse(value)
            if strategy is None:
                logger.warning("ignoring auto_follow=%r: expected prev, next, nearest or false", value)
                continue
            changes[key] = strategy
        elif key in ("auto_follow_limit", "max_height", "min_height"):
            number = _coerce_nonnegative_int(value)
            if number is None:
                logger.warning("ignoring %s=%r: expected an integer", key, value)
                continue
            changes[key] = number
        elif isinstance(value, bool):
            changes[key] = value
        else:
            logger.warning("ignoring %s=%r: expected a boolean", key, value)

    options = replace(defaults, **changes)
    if options.min_height > options.max_height:
        logger.warning(
            "min_height %d exceeds max_height %d; clamping",
            options.min_height,
            options.max_height,
        )
        options = replace(options, min_height=options.max_height)
    return options


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("could not read config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_engine_config() -> EngineConfig:
    """Read the config file and parse it into an ``EngineConfig``."""
    return EngineConfig.from_mapping(load_config())


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "EngineConfig",
    "FollowStrategy",
    "ListOptions",
    "load_config",
    "load_engine_config",
    "save_config",
]
