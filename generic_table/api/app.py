"""
HTTP surface for generic tables.

Routes, per registered collection:
    POST   /{collection}                  -> Create (JSON item body)
    GET    /{collection}?<params>         -> Read (primary lookup, index lookup or scan)
    PUT    /{collection}?<primaryKey>=id  -> Update (JSON single-field patch)
    DELETE /{collection}?<primaryKey>=id  -> Delete
    GET    /health

Handlers are synchronous; each route awaits its handler on the worker threadpool,
so a slow store call suspends the request without blocking the event loop.
"""

import logging
from typing import Dict, Iterable, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool

from ..config import DynamoDBConfig, configure_logging
from ..exceptions import OperationNotEnabledError
from ..models import Operation, OperationResult
from ..table import GenericTable

logger = logging.getLogger(__name__)

_METHOD_OPERATIONS = {
    'POST': Operation.CREATE,
    'GET': Operation.READ,
    'PUT': Operation.UPDATE,
    'DELETE': Operation.DELETE,
}


def _to_response(result: OperationResult) -> Response:
    return Response(content=result.body, status_code=result.status_code, media_type="text/plain")


def create_app(tables: Iterable[GenericTable], config: Optional[DynamoDBConfig] = None) -> FastAPI:
    """
    Build the FastAPI application serving the given collections.

    Args:
        tables: Wired collections; their collection names become the URL paths
        config: Connection configuration, used for the log level

    Raises:
        ValueError: If two tables share a collection name
    """
    configure_logging(config or DynamoDBConfig.from_env())

    registry: Dict[str, GenericTable] = {}
    for table in tables:
        if table.collection in registry:
            raise ValueError(f"Duplicate collection name: {table.collection}")
        registry[table.collection] = table

    app = FastAPI(
        title="Generic Table Service",
        description="CRUD over keyed DynamoDB collections",
    )
    app.state.tables = registry

    def _resolve(collection: str, method: str):
        table = registry.get(collection)
        if table is None:
            raise HTTPException(status_code=404, detail=f"Unknown collection: {collection}")
        try:
            return table.handler(_METHOD_OPERATIONS[method])
        except OperationNotEnabledError as e:
            raise HTTPException(status_code=e.http_status, detail=e.message) from e

    @app.get("/health")
    def health():
        return {"status": "ok", "collections": sorted(registry)}

    @app.post("/{collection}")
    async def create_item(collection: str, request: Request) -> Response:
        handler = _resolve(collection, 'POST')
        body = await request.body()
        result = await run_in_threadpool(handler.create, body or None)
        return _to_response(result)

    @app.get("/{collection}")
    async def read_items(collection: str, request: Request) -> Response:
        handler = _resolve(collection, 'GET')
        # QueryParams keeps request order; the first value wins for repeated keys
        params = {}
        for key, value in request.query_params.multi_items():
            params.setdefault(key, value)
        result = await run_in_threadpool(handler.read, params or None)
        return _to_response(result)

    @app.put("/{collection}")
    async def update_item(collection: str, request: Request) -> Response:
        handler = _resolve(collection, 'PUT')
        key_value = request.query_params.get(handler.primary_key)
        body = await request.body()
        result = await run_in_threadpool(handler.update, key_value, body or None)
        return _to_response(result)

    @app.delete("/{collection}")
    async def delete_item(collection: str, request: Request) -> Response:
        handler = _resolve(collection, 'DELETE')
        key_value = request.query_params.get(handler.primary_key)
        result = await run_in_threadpool(handler.delete, key_value)
        return _to_response(result)

    logger.info(f"API ready for collections: {sorted(registry)}")
    return app


def create_app_from_env() -> FastAPI:
    """Single-collection app configured from the environment (TABLE_NAME, PRIMARY_KEY, ...)."""
    config = DynamoDBConfig.from_env()
    return create_app([GenericTable.from_env(config)], config)
