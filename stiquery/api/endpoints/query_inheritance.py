from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from stiquery.api.schemas.query_inheritance import (
    GenerateRequest,
    GenerateResponse,
    ResolveRequest,
    ResolveResponse,
)
from stiquery.core.config import GeneratorSettings
from stiquery.core.generators import BuildError, InheritanceGraph, QueryInheritanceBuilder
from stiquery.core.schema import Database, SchemaError, Table, parse_database

router = APIRouter(prefix="/query-inheritance", tags=["query-inheritance"])

log = logging.getLogger("stiquery.api")


def _database(raw: dict) -> Database:
    try:
        return parse_database(raw)
    except SchemaError as e:
        raise HTTPException(status_code=422, detail={"error": "SchemaError", "message": str(e)})


def _inheritance_table(database: Database, name: str) -> Table:
    table = database.get_table(name)
    if table is None:
        raise HTTPException(status_code=404, detail=f"Unknown table: {name}")
    if not table.has_children_column:
        raise HTTPException(
            status_code=422,
            detail={"error": "BuildError", "message": f"Table '{name}' has no single inheritance column"},
        )
    return table


def _build_error(e: BuildError) -> HTTPException:
    log.warning("Generation failed: %s", e)
    return HTTPException(status_code=422, detail={"error": type(e).__name__, "message": str(e)})


@router.post("/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest):
    try:
        settings = GeneratorSettings.from_env().with_payload(req.settings)
    except ValueError as e:
        raise HTTPException(status_code=422, detail={"error": "ValueError", "message": str(e)})

    database = _database(req.database)
    builder = QueryInheritanceBuilder(settings)

    try:
        if req.table:
            units = builder.build_table(_inheritance_table(database, req.table))
        else:
            units = builder.build_database(database)
    except BuildError as e:
        raise _build_error(e)

    return {"units": [u.as_dict() for u in units]}


@router.post("/resolve", response_model=ResolveResponse)
def resolve(req: ResolveRequest):
    database = _database(req.database)
    table = _inheritance_table(database, req.table)

    try:
        graph = InheritanceGraph(table)
    except BuildError as e:
        raise _build_error(e)

    children = graph.topological_order()
    return {
        "table": table.name,
        "order": [c.class_name for c in children],
        "parents": {c.class_name: graph.parent_class_name(c) for c in children},
        "lineage": {c.class_name: graph.lineage(c) for c in children},
        "unresolved": dict(graph.unresolved),
    }
