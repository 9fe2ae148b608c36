"""GraphQL fetch client for the members and planning services."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from attendance_sync.core.contracts.config import SyncServiceConfig
from attendance_sync.core.contracts.entity import ENTITY_MODELS, Entity, EntityType
from attendance_sync.core.contracts.exceptions import FetchError
from attendance_sync.core.contracts.fetcher import EntityFetcher
from attendance_sync.core.upstream._retrying_transport import RetryingTransport
from attendance_sync.core.upstream.queries import QUERIES

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-Id"


class GraphQLEntityFetcher(EntityFetcher):
    """Fetches replicated entities from the owning services over GraphQL.

    Retries and circuit breaking happen in the transport wrapped around the
    HTTP client; this class performs exactly one logical request per call.
    """

    def __init__(
        self,
        config: SyncServiceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._inner_transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GraphQLEntityFetcher:
        await self._open_transport()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_all(self, entity_type: EntityType) -> list[Entity]:
        queries = QUERIES[entity_type]
        data = await self._graphql(entity_type, queries.fetch_all, queries.fetch_all_operation, {})
        root = self._require_root(entity_type, data, queries.root)

        nodes = root.get("all")
        if nodes is None:
            return []
        if not isinstance(nodes, list):
            raise FetchError(f"{entity_type} list payload is not a list", entity_type=entity_type)

        entities = [self._parse_entity(entity_type, node) for node in nodes]
        logger.debug("Fetched %d %s entities", len(entities), entity_type)
        return entities

    async def fetch_one(
        self,
        entity_type: EntityType,
        entity_id: int,
        *,
        correlation_id: str | None = None,
    ) -> Entity | None:
        if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id <= 0:
            raise ValueError(f"entity id must be a positive integer, got {entity_id!r}")

        queries = QUERIES[entity_type]
        data = await self._graphql(
            entity_type,
            queries.fetch_one,
            queries.fetch_one_operation,
            {"id": entity_id},
            correlation_id=correlation_id,
        )
        root = self._require_root(entity_type, data, queries.root)

        node = root.get(queries.single)
        if node is None:
            return None

        entity = self._parse_entity(entity_type, node)
        if entity.id != entity_id:
            raise FetchError(
                f"{entity_type} query for id {entity_id} returned id {entity.id}",
                entity_type=entity_type,
            )
        return entity

    async def _open_transport(self) -> None:
        transport_config = self._config.transport
        self._client = httpx.AsyncClient(
            transport=RetryingTransport(
                transport=self._inner_transport,
                max_retries=transport_config.max_retries,
                breaker_threshold=transport_config.circuit_breaker_threshold,
                breaker_reset=transport_config.circuit_breaker_reset,
            ),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            timeout=httpx.Timeout(transport_config.timeout),
        )

    async def _graphql(
        self,
        entity_type: EntityType,
        query: str,
        operation_name: str,
        variables: dict[str, Any],
        *,
        correlation_id: str | None = None,
    ) -> dict[str, Any]:
        if self._client is None:
            raise FetchError("Fetcher is not initialized. Use 'async with'.", entity_type=entity_type)

        headers = {CORRELATION_HEADER: correlation_id} if correlation_id else None
        url = self._config.graphql_url_for(entity_type)
        try:
            response = await self._client.post(
                url,
                json={"query": query, "operationName": operation_name, "variables": variables},
                headers=headers,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise FetchError(f"{entity_type} query failed: {exc}", entity_type=entity_type) from exc
        except ValueError as exc:
            raise FetchError(f"{entity_type} query returned invalid JSON", entity_type=entity_type) from exc

        if not isinstance(payload, dict):
            raise FetchError(f"{entity_type} query returned a non-object payload", entity_type=entity_type)
        errors = payload.get("errors") or []
        if errors:
            raise FetchError(f"GraphQL returned errors: {errors}", entity_type=entity_type)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise FetchError("GraphQL response missing data payload", entity_type=entity_type)
        return data

    @staticmethod
    def _require_root(entity_type: EntityType, data: dict[str, Any], root_name: str) -> dict[str, Any]:
        root = data.get(root_name)
        if not isinstance(root, dict):
            raise FetchError(f"GraphQL response missing {root_name!r}", entity_type=entity_type)
        return root

    @staticmethod
    def _parse_entity(entity_type: EntityType, node: Any) -> Entity:
        try:
            return ENTITY_MODELS[entity_type].model_validate(node)
        except ValidationError as exc:
            raise FetchError(f"invalid {entity_type} payload: {exc}", entity_type=entity_type) from exc
