"""
Gigaverse HTTP Client — GameAPI over the game's REST endpoints.

Requests are made with `requests` on a worker thread so the event loop
stays free for timers and other orchestrators.
"""

import asyncio
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import requests

from teraverse.clients.base import ActionResponse, parse_item_deltas
from teraverse.exceptions import APIError, ConfigurationError
from teraverse.observability import get_logger
from teraverse.schemas import ClaimableObject, DungeonInfo, EnergyState, RunState
from teraverse.state.token import ActionToken
from teraverse.vocabulary import ClaimCategory, Move

logger = get_logger("clients.http")

T = TypeVar("T")


@dataclass
class GigaverseConfig:
    """Configuration for the HTTP client."""
    bearer_token: str | None = None  # Falls back to TERAVERSE_TOKEN env var
    base_url: str = "https://gigaverse.io"
    timeout: float = 15.0
    max_retries: int = 3
    retry_delay: float = 1.0


class GigaverseClient:
    """
    HTTP implementation of the GameAPI protocol.

    Usage:
        client = GigaverseClient(GigaverseConfig(bearer_token=jwt))
        energy = await client.get_energy(address)
    """

    ACTION_PATH = "/api/game/dungeon/action"
    STATE_PATH = "/api/game/dungeon/state"
    TODAY_PATH = "/api/game/dungeon/today"
    ENERGY_PATH = "/api/offchain/player/energy/{address}"
    ROMS_PATH = "/api/roms/player/{address}"
    CLAIM_PATH = "/api/roms/factory/claim"

    def __init__(
        self,
        config: GigaverseConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or GigaverseConfig()

        token = self.config.bearer_token or os.environ.get("TERAVERSE_TOKEN")
        if not token:
            raise ConfigurationError(
                "Bearer token not found. "
                "Set TERAVERSE_TOKEN environment variable or pass bearer_token in config.",
                config_key="bearer_token",
            )

        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Perform one HTTP call with retries.

        Rate limiting (429) backs off exponentially; server errors and
        connection failures are retried after a fixed delay; any other
        non-2xx status raises immediately.
        """
        url = f"{self.config.base_url.rstrip('/')}{path}"
        last_error: APIError | None = None

        for attempt in range(self.config.max_retries):
            try:
                response = self._session.request(
                    method,
                    url,
                    json=payload,
                    timeout=self.config.timeout,
                )
            except requests.RequestException as e:
                last_error = APIError(f"Request to {path} failed: {e}", endpoint=path)
                logger.warning(f"{method} {path} attempt {attempt + 1} failed: {e}")
                time.sleep(self.config.retry_delay)
                continue

            if response.status_code == 429:
                last_error = APIError("Rate limited", status_code=429, endpoint=path)
                wait_time = self.config.retry_delay * (2 ** attempt)
                logger.warning(f"{method} {path} rate limited, retrying in {wait_time:.1f}s")
                time.sleep(wait_time)
                continue

            if response.status_code >= 500:
                last_error = APIError(
                    f"Server error {response.status_code}",
                    status_code=response.status_code,
                    endpoint=path,
                )
                if attempt < self.config.max_retries - 1:
                    time.sleep(self.config.retry_delay)
                    continue
                raise last_error

            if not response.ok:
                raise APIError(
                    _error_message(response),
                    status_code=response.status_code,
                    endpoint=path,
                )

            try:
                return response.json()
            except ValueError as e:
                raise APIError(
                    f"Invalid JSON from {path}",
                    status_code=response.status_code,
                    endpoint=path,
                ) from e

        raise last_error or APIError("Max retries exceeded", endpoint=path)

    async def _call(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await asyncio.to_thread(self._request, method, path, payload)

    async def _action(
        self,
        action: str,
        dungeon_id: int,
        action_token: ActionToken,
        data: dict[str, Any],
    ) -> ActionResponse:
        body = await self._call("POST", self.ACTION_PATH, {
            "action": action,
            "actionToken": action_token,
            "dungeonId": dungeon_id,
            "data": data,
        })
        if isinstance(body, dict) and body.get("success") is False:
            raise APIError(
                body.get("message") or f"Action '{action}' rejected",
                endpoint=self.ACTION_PATH,
            )
        return _parse(self.ACTION_PATH, lambda: ActionResponse(
            run_state=RunState.from_dungeon_data(body.get("data")),
            action_token=body.get("actionToken"),
            item_deltas=parse_item_deltas(body.get("gameItemBalanceChanges")),
            message=body.get("message"),
        ))

    # -------------------------------------------------------------------------
    # GameAPI
    # -------------------------------------------------------------------------

    async def start_run(
        self,
        dungeon_id: int,
        juiced: bool,
        action_token: ActionToken,
    ) -> ActionResponse:
        logger.info(f"Starting run in dungeon {dungeon_id} (juiced={juiced})")
        return await self._action("start_run", dungeon_id, action_token, {
            "isJuiced": juiced,
            "consumables": [],
            "itemId": 0,
            "index": 0,
        })

    async def submit_move(
        self,
        move: Move,
        dungeon_id: int,
        action_token: ActionToken,
    ) -> ActionResponse:
        return await self._action(move.value, dungeon_id, action_token, {
            "consumables": [],
            "itemId": 0,
            "index": 0,
            "gearInstanceIds": [],
        })

    async def fetch_run_state(self) -> RunState | None:
        body = await self._call("GET", self.STATE_PATH)
        return _parse(self.STATE_PATH, lambda: RunState.from_dungeon_data(body.get("data")))

    async def get_energy(self, address: str) -> EnergyState:
        path = self.ENERGY_PATH.format(address=address)
        body = await self._call("GET", path)
        return _parse(path, lambda: EnergyState.from_api(body))

    async def get_claimables(self, address: str) -> list[ClaimableObject]:
        logger.info(f"Fetching ROMs for {address}")
        path = self.ROMS_PATH.format(address=address)
        body = await self._call("GET", path)
        return _parse(path, lambda: [
            ClaimableObject.from_api(entity) for entity in body.get("entities") or []
        ])

    async def claim(self, object_id: str, category: ClaimCategory) -> bool:
        logger.info(f"Claiming {category.value} from ROM {object_id}")
        body = await self._call("POST", self.CLAIM_PATH, {
            "romId": object_id,
            "claimId": category.value,
        })
        return _parse(self.CLAIM_PATH, lambda: bool(body.get("success")))

    async def get_today_dungeons(self) -> list[DungeonInfo]:
        body = await self._call("GET", self.TODAY_PATH)
        return _parse(self.TODAY_PATH, lambda: [
            DungeonInfo.from_api(entry) for entry in body.get("dungeonDataEntities") or []
        ])

    async def get_day_progress(self) -> dict[int, int]:
        body = await self._call("GET", self.TODAY_PATH)
        return _parse(self.TODAY_PATH, lambda: {
            int(entry["ID_CID"]): int(entry.get("UINT256_CID") or 0)
            for entry in body.get("dayProgressEntities") or []
        })


def _parse(path: str, parse: Callable[[], T]) -> T:
    """Run a payload parser, mapping malformed bodies to APIError."""
    try:
        return parse()
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise APIError(f"Malformed response from {path}: {e}", endpoint=path) from e


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"HTTP {response.status_code}"


def create_gigaverse_client(
    bearer_token: str | None = None,
    **kwargs: Any,
) -> GigaverseClient:
    """Factory for the HTTP client."""
    config = GigaverseConfig(bearer_token=bearer_token, **kwargs)
    return GigaverseClient(config)
