import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class DynamoDBConfig(BaseModel):
    """Configuration for the DynamoDB connection shared by all models."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # DynamoDB specific settings
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_TABLE_PREFIX", ""),
        description="Prefix to add to all model table names"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="Retry attempts made by the boto3 client transport"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Connect and read timeout in seconds"
    )

    # Codec settings
    wrap_numbers: bool = Field(
        default_factory=lambda: _env_flag("DYNAMODB_WRAP_NUMBERS"),
        description="Return DynamoDB numbers as Decimal instead of int/float"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: _env_flag("DYNAMODB_DEBUG_LOGGING"),
        description="Enable debug logging for DynamoDB operations"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('max_pool_connections', 'timeout_seconds')
    @classmethod
    def validate_positive(cls, v, info):
        """Connection pool size and timeouts must be positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than zero")
        return v

    @field_validator('retries')
    @classmethod
    def validate_retries(cls, v):
        if v < 0:
            raise ValueError("retries cannot be negative")
        return v

    def get_table_name(self, base_name: str) -> str:
        """Get the full table name with the configured prefix.

        Args:
            base_name: Table name declared on the model

        Returns:
            Prefixed table name, or the base name when no prefix is set
        """
        if self.table_prefix:
            return f"{self.table_prefix}_{base_name}"
        return base_name

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Create configuration from environment variables.

        Returns:
            DynamoDBConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Create configuration for DynamoDB Local.

        Returns:
            DynamoDBConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            enable_debug_logging=True
        )

    model_config = ConfigDict(
        validate_assignment=True
    )
