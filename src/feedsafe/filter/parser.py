"""Structural event source: tag soup in, flat open/close/text events out.

html5lib normalizes arbitrary markup into a well-nested tree (it never
fetches anything or expands external entities); the tree walker then
replays that tree as events for an EventHandler.
"""

from __future__ import annotations

from typing import Protocol

import html5lib

from feedsafe.core.errors import MalformedInputError

MAX_DEPTH = 256

_walker = html5lib.getTreeWalker("etree")


class EventHandler(Protocol):
    def on_open_tag(self, tag: str, attributes: dict[str, str]) -> None: ...

    def on_close_tag(self, tag: str) -> None: ...

    def on_text(self, content: str) -> None: ...


def _attributes(token: dict) -> dict[str, str]:
    # Namespaced attributes (xlink:href, xml:lang...) only occur in foreign
    # content and are dropped.
    return {name: value for (namespace, name), value in token["data"].items() if namespace is None}


def parse_events(markup: str, handler: EventHandler, max_depth: int = MAX_DEPTH) -> None:
    """Feed the events of `markup` to `handler` in document order.

    Void elements produce an open event immediately followed by a close
    event. Raises MalformedInputError when the markup cannot be parsed or
    nests deeper than `max_depth`; events already delivered stay delivered.
    """
    try:
        fragment = html5lib.parseFragment(markup, treebuilder="etree")
    except Exception as exc:
        raise MalformedInputError(f"Cannot parse markup: {exc}") from exc

    depth = 0
    for token in _walker(fragment):
        kind = token["type"]
        if kind in ("Characters", "SpaceCharacters"):
            handler.on_text(token["data"])
        elif kind == "StartTag":
            depth += 1
            if depth > max_depth:
                raise MalformedInputError(f"Markup nests deeper than {max_depth} elements")
            handler.on_open_tag(token["name"], _attributes(token))
        elif kind == "EmptyTag":
            handler.on_open_tag(token["name"], _attributes(token))
            handler.on_close_tag(token["name"])
        elif kind == "EndTag":
            depth -= 1
            handler.on_close_tag(token["name"])
        # Comments and doctypes are not content.
