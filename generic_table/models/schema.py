from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TableSchema(BaseModel):
    """Primary key and declared secondary indexes of a keyed collection.

    Immutable once built; shared read-only by every handler of the collection.
    Each secondary index is named after, and partitioned on, the field it indexes.
    """

    primary_key: str = Field(..., min_length=1, description="Name of the primary (partition) key field")
    secondary_indexes: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Field names declared queryable through a secondary index"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator('primary_key', mode='before')
    @classmethod
    def strip_primary_key(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('secondary_indexes', mode='before')
    @classmethod
    def normalize_indexes(cls, v):
        """Accept any iterable of names, dropping blanks."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(name.strip() for name in v if name and name.strip())

    @model_validator(mode='after')
    def check_primary_key_not_indexed(self):
        """A secondary index may not share the primary key's name."""
        if self.primary_key in self.secondary_indexes:
            raise ValueError(
                f"Secondary index '{self.primary_key}' has the same name as the primary key"
            )
        return self

    def is_secondary_index(self, name: str) -> bool:
        return name in self.secondary_indexes
