from typing import Any, Dict, Optional


class DynamoDbOrmError(Exception):
    """Base exception for dynamodb_orm.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error (if any)
        context: Values identifying what failed, such as the model, key,
            operator, operation or table name. None values are dropped.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = {name: value for name, value in (context or {}).items() if value is not None}
        super().__init__(message)

    @property
    def error_code(self) -> Optional[str]:
        """DynamoDB error code of the underlying botocore ClientError, if any."""
        response = getattr(self.original_error, 'response', None)
        if isinstance(response, dict):
            return response.get('Error', {}).get('Code')
        return None

    def __str__(self) -> str:
        details = [f"{name}={value!r}" for name, value in self.context.items()]
        if self.error_code:
            details.append(f"code={self.error_code}")
        if not details:
            return self.message
        return f"{self.message} [{', '.join(details)}]"

    def __repr__(self) -> str:
        fields = [repr(self.message)] + [f"{name}={value!r}" for name, value in self.context.items()]
        return f"{type(self).__name__}({', '.join(fields)})"
