from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Union

import aiohttp

STEAM_API_BASE = "https://api.steampowered.com"
GET_SERVER_LIST_PATH = "/IGameServersService/GetServerList/v1"

LOGGER = logging.getLogger(__name__)

# Wire fields that are informational only; a record parses without them.
EXTRA_FIELDS = (
    "steamid",
    "appid",
    "gamedir",
    "version",
    "product",
    "region",
    "bots",
    "secure",
    "dedicated",
    "os",
    "gametype",
)


class SteamError(Exception):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class ServerSnapshot:
    name: str
    map: str
    players: int
    max_players: int
    addr: str
    gameport: int
    extras: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def host(self) -> str:
        return self.addr.split(":", 1)[0]

    @property
    def connect_url(self) -> str:
        return f"steam://connect/{self.host}:{self.gameport}"

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ServerSnapshot":
        """Project a GetServerList record onto a snapshot.

        Raises ``SteamError`` when a required field is missing or has the wrong
        shape, so callers can treat it like any other decode failure.
        """
        try:
            return cls(
                name=str(record["name"]),
                map=str(record["map"]),
                players=int(record["players"]),
                max_players=int(record["max_players"]),
                addr=str(record["addr"]),
                gameport=int(record["gameport"]),
                extras={k: record[k] for k in EXTRA_FIELDS if k in record},
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SteamError(f"Malformed server record: {exc!r}") from exc


@dataclass(frozen=True)
class Found:
    snapshot: ServerSnapshot


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class TransportError:
    message: str


ServerQueryResult = Union[Found, NotFound, TransportError]


def parse_server_list(payload: Any) -> ServerQueryResult:
    if not isinstance(payload, dict) or not isinstance(
        payload.get("response"), dict
    ):
        raise SteamError("Unexpected response envelope")
    servers = payload["response"].get("servers")
    if servers is None:
        return NotFound()
    if not isinstance(servers, list):
        raise SteamError("Unexpected 'servers' value")
    if not servers:
        return NotFound()
    if len(servers) > 1:
        LOGGER.debug("Ignoring %d extra server records", len(servers) - 1)
    return Found(ServerSnapshot.from_record(servers[0]))


def describe_failure(path: str, exc: Exception) -> str:
    """Summarise a request failure without the query string, which holds the key."""
    if isinstance(exc, aiohttp.ClientResponseError):
        return f"Failed request {path}: HTTP {exc.status} {exc.message}"
    if isinstance(exc, ValueError):
        return f"Failed request {path}: invalid JSON response"
    return f"Failed request {path}: {type(exc).__name__}"


class SteamClient:
    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        base_url: str = STEAM_API_BASE,
    ):
        self._session = session
        self._owns_session = session is None
        self.base_url = base_url

    async def close(self):
        if self._owns_session and self._session:
            await self._session.close()

    async def _request(self, path: str, params: Dict[str, str]) -> Any:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        url = f"{self.base_url}{path}"
        try:
            async with self._session.get(url, params=params) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except Exception as exc:
            status = getattr(exc, "status", None)
            raise SteamError(describe_failure(path, exc), status=status) from exc

    async def fetch_server_list(self, api_key: str, target: str) -> Any:
        params = {"key": api_key, "filter": f"addr\\{target}"}
        return await self._request(GET_SERVER_LIST_PATH, params)

    async def lookup(self, api_key: str, target: str) -> ServerQueryResult:
        try:
            payload = await self.fetch_server_list(api_key, target)
            result = parse_server_list(payload)
        except SteamError as exc:
            LOGGER.warning("Lookup failed for %s: %s", target, exc)
            return TransportError(str(exc))
        if isinstance(result, NotFound):
            LOGGER.info("No server listed at %s", target)
        return result
