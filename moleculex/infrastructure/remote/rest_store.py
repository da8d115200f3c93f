"""
PostgREST (Supabase-style) implementation of the remote relational store.

Talks to ``{base_url}/rest/v1/{relation}`` with equality filters of the
form ``column=eq.value``. Transport failures are retried with exponential
backoff; HTTP error responses are not.
"""

from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from moleculex.config import get_logger, get_settings
from moleculex.core.exceptions import DatabaseError, RemoteReadError
from moleculex.core.interfaces import IRemoteStore, Relation, Row

logger = get_logger(__name__)


def _eq(value: Any) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class RestRemoteStore(IRemoteStore):
    """Remote store speaking the PostgREST protocol over httpx."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        schema_name: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings().remote
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.retry_delay
        self._retry_multiplier = settings.retry_multiplier

        key = api_key if api_key is not None else settings.api_key
        schema = schema_name or settings.schema_name
        headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept-Profile": schema,
            "Content-Profile": schema,
            "Prefer": "return=representation",
        }
        self._client = client or httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            timeout=timeout if timeout is not None else settings.timeout,
        )
        self._client.headers.update(headers)

    def _get_retry_decorator(self) -> Any:
        return retry(
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(
                multiplier=self.retry_delay,
                min=self.retry_delay,
                max=self.retry_delay * (self._retry_multiplier**3),
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "remote_store_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _request(
        self,
        method: str,
        relation: Relation,
        params: dict[str, str] | None = None,
        json: Row | None = None,
    ) -> Any:
        async def send() -> httpx.Response:
            response = await self._client.request(method, f"/{relation.value}", params=params, json=json)
            response.raise_for_status()
            return response

        response = await self._get_retry_decorator()(send)()
        if not response.content:
            return None
        return response.json()

    async def _write(
        self,
        method: str,
        relation: Relation,
        operation: str,
        params: dict[str, str] | None = None,
        json: Row | None = None,
    ) -> Any:
        try:
            return await self._request(method, relation, params=params, json=json)
        except httpx.HTTPStatusError as e:
            logger.error(
                "remote_store_http_error",
                relation=relation.value,
                operation=operation,
                status=e.response.status_code,
            )
            raise DatabaseError(
                f"{operation} {relation.value}", f"HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.RequestError as e:
            logger.error("remote_store_network_error", relation=relation.value, error=str(e))
            raise DatabaseError(f"{operation} {relation.value}", str(e)) from e
        except ValueError as e:
            logger.error("remote_store_bad_body", relation=relation.value, operation=operation, error=str(e))
            raise DatabaseError(f"{operation} {relation.value}", f"response is not JSON: {e}") from e

    async def _read(self, relation: Relation, params: dict[str, str]) -> list[Row]:
        try:
            data = await self._request("GET", relation, params=params)
        except httpx.HTTPStatusError as e:
            raise RemoteReadError(
                relation.value, f"HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.RequestError as e:
            raise RemoteReadError(relation.value, str(e)) from e
        except ValueError as e:
            raise RemoteReadError(relation.value, f"response is not JSON: {e}") from e
        if not isinstance(data, list):
            raise RemoteReadError(relation.value, "unexpected response shape")
        return data

    @staticmethod
    def _single(data: Any, relation: Relation, operation: str) -> Row:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        raise DatabaseError(f"{operation} {relation.value}", "no row returned")

    async def insert(self, relation: Relation, row: Row) -> Row:
        data = await self._write("POST", relation, "insert into", json=row)
        return self._single(data, relation, "insert into")

    async def update(self, relation: Relation, row_id: str, row: Row) -> Row:
        body = {k: v for k, v in row.items() if k not in ("id", "created_at")}
        data = await self._write("PATCH", relation, "update", params={"id": _eq(row_id)}, json=body)
        return self._single(data, relation, "update")

    async def delete(self, relation: Relation, row_id: str) -> None:
        await self._write("DELETE", relation, "delete from", params={"id": _eq(row_id)})

    async def select(self, relation: Relation, filters: Row | None = None) -> list[Row]:
        params = {"select": "*", "order": "created_at.asc"}
        params.update({column: _eq(value) for column, value in (filters or {}).items()})
        return await self._read(relation, params)

    async def find_first(self, relation: Relation, column: str, value: Any) -> Row | None:
        rows = await self._read(
            relation,
            {"select": "*", column: _eq(value), "order": "created_at.asc", "limit": "1"},
        )
        return rows[0] if rows else None

    async def close(self) -> None:
        await self._client.aclose()
