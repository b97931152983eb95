from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    database: Dict[str, Any] = Field(description="Schema document (same shape as the YAML schema file).")
    table: Optional[str] = Field(default=None, description="Only generate the subtypes of this table.")
    settings: Dict[str, Any] = Field(default_factory=dict, description="Generator setting overrides.")


class GeneratedUnitModel(BaseModel):
    class_name: str
    parent_class_name: str
    namespace: str
    package: str
    language: str
    table_name: str
    key: str
    relative_path: str
    source: str


class GenerateResponse(BaseModel):
    units: List[GeneratedUnitModel]


class ResolveRequest(BaseModel):
    database: Dict[str, Any]
    table: str


class ResolveResponse(BaseModel):
    table: str
    order: List[str]
    parents: Dict[str, Optional[str]]
    lineage: Dict[str, List[str]]
    unresolved: Dict[str, str] = Field(default_factory=dict)
