import logging
import os
from typing import FrozenSet, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import ConfigurationError
from ..models import (
    ErrorStatusPolicy,
    IndexPolicy,
    Operation,
    TableSchema,
    UpdateFieldPolicy,
)

# .env values fill in variables that are not already set
load_dotenv()

DEFAULT_REQUIRED_FIELDS = ("name", "location")


def _split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated environment value, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _env(name: str, default: Optional[str] = None):
    """Default factory reading an environment variable at construction time."""
    return lambda: os.getenv(name, default)


class DynamoDBConfig(BaseModel):
    """How to reach DynamoDB: credentials, region, endpoint, table prefix and client tuning.

    Every field defaults from the environment (AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY, AWS_REGION, DYNAMODB_ENDPOINT_URL,
    DYNAMODB_TABLE_PREFIX, DYNAMODB_DEBUG_LOGGING) when not passed explicitly.
    """

    aws_access_key_id: Optional[str] = Field(
        default_factory=_env("AWS_ACCESS_KEY_ID"),
        description="Access key; unset means the boto3 credential chain"
    )
    aws_secret_access_key: Optional[str] = Field(
        default_factory=_env("AWS_SECRET_ACCESS_KEY"),
        description="Secret key paired with aws_access_key_id"
    )
    region_name: str = Field(default_factory=_env("AWS_REGION", "us-east-1"))
    endpoint_url: Optional[str] = Field(
        default_factory=_env("DYNAMODB_ENDPOINT_URL"),
        description="Override endpoint, e.g. DynamoDB Local or LocalStack"
    )
    table_prefix: str = Field(
        default_factory=_env("DYNAMODB_TABLE_PREFIX", ""),
        description="Joined to every table name as '<prefix>_<name>'"
    )

    # botocore client tuning
    max_pool_connections: int = Field(50, gt=0)
    retries: int = Field(3, ge=0, description="botocore max_attempts")
    timeout_seconds: float = Field(30.0, gt=0, description="Connect and read timeout")

    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DYNAMODB_DEBUG_LOGGING", "false").lower() == "true",
        description="Log generic_table at DEBUG instead of INFO"
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('region_name')
    @classmethod
    def region_must_be_set(cls, v):
        if not v:
            raise ValueError("region_name must not be empty")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Physical table name for ``base_name`` under the configured prefix."""
        return f"{self.table_prefix}_{base_name}" if self.table_prefix else base_name

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Configuration taken entirely from the environment (and a .env file)."""
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Configuration for DynamoDB Local on localhost:8000 with debug logging."""
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            enable_debug_logging=True
        )


class TableSettings(BaseModel):
    """Wiring for one keyed collection.

    Names the backing table, its key layout, which CRUD operations are exposed
    and which behavior policies the handlers follow. An operation that is not
    listed in ``operations`` is not wired at all.
    """

    table_name: str = Field(..., min_length=1, description="Backing table identifier (TABLE_NAME)")
    primary_key: str = Field(..., min_length=1, description="Primary key field name (PRIMARY_KEY)")
    secondary_indexes: List[str] = Field(default_factory=list, description="Declared secondary index names")
    collection: Optional[str] = Field(None, description="URL path segment; defaults to the table name")

    operations: FrozenSet[Operation] = Field(
        default_factory=lambda: frozenset(Operation),
        description="Operations this collection exposes"
    )
    required_fields: List[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_FIELDS),
        description="Fields every created item must carry"
    )

    error_status_policy: ErrorStatusPolicy = Field(ErrorStatusPolicy.LEGACY)
    update_field_policy: UpdateFieldPolicy = Field(UpdateFieldPolicy.FIRST_FIELD)
    index_policy: IndexPolicy = Field(IndexPolicy.DEFER_TO_STORE)

    model_config = ConfigDict(frozen=True)

    @field_validator('secondary_indexes', 'required_fields', mode='before')
    @classmethod
    def split_names(cls, v):
        """Accept comma-separated strings as well as lists."""
        if isinstance(v, str):
            return _split_csv(v)
        return v

    @field_validator('operations', mode='before')
    @classmethod
    def parse_operations(cls, v):
        if isinstance(v, str):
            v = _split_csv(v)
        return frozenset(Operation(op.lower()) if isinstance(op, str) else op for op in v)

    @property
    def collection_name(self) -> str:
        return self.collection or self.table_name

    def exposes(self, operation: Operation) -> bool:
        return operation in self.operations

    def to_schema(self) -> TableSchema:
        """Build the immutable TableSchema shared by the collection's handlers."""
        try:
            return TableSchema(
                primary_key=self.primary_key,
                secondary_indexes=self.secondary_indexes
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid schema for table '{self.table_name}': {e}", e) from e

    @classmethod
    def from_env(cls) -> 'TableSettings':
        """Create settings from environment variables.

        Required: TABLE_NAME, PRIMARY_KEY.
        Optional: SECONDARY_INDEXES, COLLECTION_NAME, ENABLED_OPERATIONS,
        REQUIRED_FIELDS, ERROR_STATUS_POLICY, UPDATE_FIELD_POLICY, INDEX_POLICY.

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        table_name = os.getenv("TABLE_NAME")
        primary_key = os.getenv("PRIMARY_KEY")
        missing = [name for name, value in (("TABLE_NAME", table_name), ("PRIMARY_KEY", primary_key)) if not value]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        kwargs = {
            'table_name': table_name,
            'primary_key': primary_key,
            'secondary_indexes': os.getenv("SECONDARY_INDEXES", ""),
            'collection': os.getenv("COLLECTION_NAME") or None,
        }
        optional = {
            'operations': "ENABLED_OPERATIONS",
            'required_fields': "REQUIRED_FIELDS",
            'error_status_policy': "ERROR_STATUS_POLICY",
            'update_field_policy': "UPDATE_FIELD_POLICY",
            'index_policy': "INDEX_POLICY",
        }
        for field_name, env_name in optional.items():
            value = os.getenv(env_name)
            if value is not None:
                kwargs[field_name] = value.lower() if field_name.endswith('_policy') else value

        try:
            return cls(**kwargs)
        except ValueError as e:
            raise ConfigurationError(f"Invalid table settings: {e}", e) from e


def configure_logging(config: DynamoDBConfig) -> None:
    """Set the package log level from the connection configuration."""
    level = logging.DEBUG if config.enable_debug_logging else logging.INFO
    logging.getLogger("generic_table").setLevel(level)
