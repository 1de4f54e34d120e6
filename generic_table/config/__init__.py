from .config import (
    DEFAULT_REQUIRED_FIELDS,
    DynamoDBConfig,
    TableSettings,
    configure_logging,
)

__all__ = [
    "DEFAULT_REQUIRED_FIELDS",
    "DynamoDBConfig",
    "TableSettings",
    "configure_logging",
]
