"""Sample models and helpers shared by the test suite."""

from botocore.exceptions import ClientError

from dynamodb_orm import DynamoDbModel, ModelMeta


class User(DynamoDbModel):
    """Single primary key model with two index keys."""

    class Meta(ModelMeta):
        table_name = "users"
        primary_key = "id"
        index_keys = {
            "email": "email_index",
            "age": "age_index",
        }
        fillable = ["id", "name", "email", "age"]


class RunLog(DynamoDbModel):
    """Composite key model."""

    class Meta(ModelMeta):
        table_name = "run_logs"
        composite_key = ["pipeline_id", "run_id"]
        fillable = ["pipeline_id", "run_id", "status"]


def create_client_error(error_code: str, message: str = "Test error", operation: str = "TestOperation") -> ClientError:
    """Helper to create ClientError for testing."""
    return ClientError(
        error_response={
            'Error': {
                'Code': error_code,
                'Message': message
            }
        },
        operation_name=operation
    )


def response_with_status(status_code: int, **extra) -> dict:
    """Build a raw DynamoDB response carrying the given HTTP status."""
    return {'ResponseMetadata': {'HTTPStatusCode': status_code}, **extra}
