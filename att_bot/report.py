from __future__ import annotations

import logging
from typing import List

from .steam import Found, NotFound, ServerQueryResult, ServerSnapshot, TransportError

GREETING = "Sure!"

LOGGER = logging.getLogger(__name__)


def format_found(snapshot: ServerSnapshot) -> List[str]:
    return [
        f"Server Status for {snapshot.name}:",
        f"Map: {snapshot.map}",
        f"Players: {snapshot.players}/{snapshot.max_players}",
        f"Connect: {snapshot.connect_url}",
    ]


def format_not_found(target: str) -> List[str]:
    return [f"no server found at {target} or the server is down, sorry!"]


def format_transport_error(target: str, message: str) -> List[str]:
    return [f"Error grabbing details for {target}: {message}"]


def format_section(target: str, result: ServerQueryResult) -> List[str]:
    if isinstance(result, Found):
        LOGGER.debug("Adding server details for %s: %s", target, result.snapshot)
        return format_found(result.snapshot)
    if isinstance(result, NotFound):
        return format_not_found(target)
    if isinstance(result, TransportError):
        return format_transport_error(target, result.message)
    raise TypeError(f"Unsupported query result: {result!r}")


class StatusReportBuilder:
    """Collects one text section per queried server, in query order."""

    def __init__(self):
        self._sections: List[List[str]] = []

    @classmethod
    def begin(cls) -> "StatusReportBuilder":
        return cls()

    @property
    def sections(self) -> List[List[str]]:
        return [list(section) for section in self._sections]

    def append(self, target: str, result: ServerQueryResult) -> None:
        self._sections.append(format_section(target, result))

    def finish(self) -> str:
        lines = [GREETING]
        for section in self._sections:
            lines.extend(section)
        return "\n".join(lines)
