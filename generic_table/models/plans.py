"""
Query plans produced by the QueryPlanner.

A plan is one of three frozen variants, discriminated by ``kind``:

- PrimaryLookup: point query on the primary key
- IndexLookup: equality query on a named secondary index
- FullScan: unbounded scan of the collection

Callers dispatch on the variant with ``isinstance`` (or on ``kind``) and must
handle all three.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PrimaryLookup(BaseModel):
    """Query for the single item whose primary key equals ``key``."""

    kind: Literal["primary_lookup"] = "primary_lookup"
    key: str = Field(..., description="Primary key value to match")

    model_config = ConfigDict(frozen=True)


class IndexLookup(BaseModel):
    """Query the secondary index ``index_name`` for items whose field equals ``value``."""

    kind: Literal["index_lookup"] = "index_lookup"
    index_name: str = Field(..., description="Secondary index (and field) name")
    value: str = Field(..., description="Value the indexed field must equal")

    model_config = ConfigDict(frozen=True)


class FullScan(BaseModel):
    """Read every item of the collection."""

    kind: Literal["full_scan"] = "full_scan"

    model_config = ConfigDict(frozen=True)


QueryPlan = Union[PrimaryLookup, IndexLookup, FullScan]
