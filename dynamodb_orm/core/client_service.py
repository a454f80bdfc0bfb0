"""
DynamoDB Client Service

One configured boto3 client plus the attribute codec, constructed once by
the application's composition root and shared by every model.

Requests use DynamoDB's legacy parameter shape (Key, Item, AttributesToGet,
KeyConditions, ScanFilter, ...) because that is what the model layer
builds; this service passes them straight through to the low-level client
and maps botocore failures to StoreError subclasses.
"""

import logging
from typing import Any, Dict, Iterator, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DynamoDBConfig
from ..exceptions import (
    ConflictError,
    ConnectionError,
    NotFoundError,
    RequestValidationError,
    RetryableError,
    StoreError,
)
from .marshaler import Marshaler

logger = logging.getLogger(__name__)


_CONFLICT_CODES = {
    'ConditionalCheckFailedException',
    'TransactionConflictException',
    'ResourceInUseException',
}

_NOT_FOUND_CODES = {
    'ResourceNotFoundException',
    'TableNotFoundException',
    'IndexNotFoundException',
}

_RETRYABLE_CODES = {
    'ProvisionedThroughputExceededException',
    'RequestLimitExceeded',
    'ThrottlingException',
    'InternalServerError',
    'ServiceUnavailable',
    'TransactionInProgressException',
    'RequestTimeoutException',
}

_VALIDATION_CODES = {
    'ValidationException',
    'ItemCollectionSizeLimitExceededException',
    'SerializationException',
}

_AUTH_CODES = {
    'UnrecognizedClientException',
    'AccessDeniedException',
    'ExpiredTokenException',
    'InvalidSignatureException',
    'IncompleteSignatureException',
    'MissingAuthenticationTokenException',
}


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: Optional[str] = None
) -> StoreError:
    """Map a botocore ClientError to a StoreError subclass.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "GetItem", "Scan")
        table_name: The DynamoDB table name

    Returns:
        ConflictError, NotFoundError, RetryableError, RequestValidationError
        or ConnectionError depending on the error code
    """
    error_info = error.response.get('Error', {})
    error_code = error_info.get('Code', 'Unknown')
    error_message = error_info.get('Message', str(error))

    context = f"{operation} on {table_name}" if table_name else operation
    full_message = f"{context}: {error_message}"

    if error_code in _CONFLICT_CODES:
        return ConflictError(f"Conflict - {full_message}", operation, table_name, error)

    if error_code in _NOT_FOUND_CODES:
        return NotFoundError(f"Resource not found - {full_message}", operation, table_name, error)

    if error_code in _RETRYABLE_CODES:
        return RetryableError(f"Throttled or unavailable - {full_message}", operation, table_name, error)

    if error_code in _VALIDATION_CODES:
        return RequestValidationError(f"Request rejected - {full_message}", operation, table_name, error)

    if error_code in _AUTH_CODES:
        return ConnectionError(f"Authentication/authorization failed - {full_message}", operation, table_name, error)

    logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to ConnectionError")
    return ConnectionError(f"DynamoDB operation failed - {full_message}", operation, table_name, error)


class DynamoDbClientService:
    """
    Store client shared by all DynamoDbModel classes.

    Exposes the boto3 low-level client, the attribute codec, and the four
    store primitives the models need: get_item, put_item, delete_item and
    get_iterator (paged Scan/Query). No retries happen here; the botocore
    transport retries according to DynamoDBConfig.retries.
    """

    def __init__(
        self,
        config: Optional[DynamoDBConfig] = None,
        client: Any = None,
        marshaler: Optional[Marshaler] = None
    ):
        """Initialize client service.

        Args:
            config: DynamoDB configuration, read from the environment if omitted
            client: Pre-built boto3 DynamoDB client, created lazily if omitted
            marshaler: Attribute codec, built from config.wrap_numbers if omitted
        """
        self.config = config or DynamoDBConfig.from_env()
        self._client = client
        self._marshaler = marshaler

        if self.config.enable_debug_logging:
            logging.getLogger('dynamodb_orm').setLevel(logging.DEBUG)

    @property
    def client(self):
        """Lazy initialization of the boto3 DynamoDB client."""
        if self._client is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                client_kwargs = {
                    'region_name': self.config.region_name,
                    'config': Config(
                        retries={'max_attempts': self.config.retries},
                        max_pool_connections=self.config.max_pool_connections,
                        read_timeout=self.config.timeout_seconds,
                        connect_timeout=self.config.timeout_seconds
                    )
                }
                if self.config.endpoint_url:
                    client_kwargs['endpoint_url'] = self.config.endpoint_url

                self._client = session.client('dynamodb', **client_kwargs)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB client: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", original_error=e) from e
        return self._client

    @property
    def marshaler(self) -> Marshaler:
        """Lazy initialization of the attribute codec."""
        if self._marshaler is None:
            self._marshaler = Marshaler(wrap_numbers=self.config.wrap_numbers)
        return self._marshaler

    def get_table_name(self, base_name: str) -> str:
        """Resolve a model's table name against the configured prefix."""
        return self.config.get_table_name(base_name)

    def get_item(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute GetItem.

        Args:
            query: TableName, Key, and optionally ConsistentRead/AttributesToGet

        Returns:
            Raw DynamoDB response; 'Item' is absent when nothing matched
        """
        logger.debug(f"GetItem on {query.get('TableName')}: {query.get('Key')}")
        return self._call('get_item', 'GetItem', query)

    def put_item(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute PutItem (unconditional overwrite).

        Args:
            query: TableName and marshaled Item

        Returns:
            Raw DynamoDB response
        """
        response = self._call('put_item', 'PutItem', query)
        logger.info(f"Put item in {query.get('TableName')}")
        return response

    def delete_item(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute DeleteItem.

        Args:
            query: TableName and marshaled Key

        Returns:
            Raw DynamoDB response including ResponseMetadata
        """
        response = self._call('delete_item', 'DeleteItem', query)
        logger.info(f"Deleted item from {query.get('TableName')}: {query.get('Key')}")
        return response

    def get_iterator(self, operation: str, query: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        """
        Lazily iterate raw items of a Scan or Query across all pages.

        Pages are fetched one at a time, following LastEvaluatedKey. Limit
        caps the total number of items yielded rather than the page size.
        On Query, ScanFilter is sent as QueryFilter without the attributes
        already covered by KeyConditions.

        Args:
            operation: "Scan" or "Query"
            query: Legacy request parameters

        Yields:
            Raw DynamoDB items

        Raises:
            ValueError: For an operation other than Scan or Query
            StoreError: If a page request fails
        """
        operation = str(getattr(operation, 'value', operation))
        if operation not in ('Scan', 'Query'):
            raise ValueError(f"Unsupported iterator operation: {operation}")

        request = dict(query)
        limit = request.pop('Limit', None)
        if operation == 'Query' and 'ScanFilter' in request:
            scan_filter = request.pop('ScanFilter')
            key_conditions = request.get('KeyConditions', {})
            query_filter = {
                name: condition for name, condition in scan_filter.items()
                if name not in key_conditions
            }
            if query_filter:
                request['QueryFilter'] = query_filter

        remaining = limit if limit is not None and limit > -1 else None
        if remaining == 0:
            return

        table_name = request.get('TableName')
        logger.debug(f"{operation} on {table_name}: {request}")
        try:
            fetch_page = getattr(self.client, operation.lower())
            while True:
                response = fetch_page(**request)
                for item in response.get('Items', []):
                    yield item
                    if remaining is not None:
                        remaining -= 1
                        if remaining == 0:
                            return

                if 'LastEvaluatedKey' not in response:
                    break
                request['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except ClientError as e:
            raise map_dynamodb_error(e, operation, table_name) from e
        except BotoCoreError as e:
            raise ConnectionError(f"{operation} on {table_name} failed: {e}", operation, table_name, e) from e

    def _call(self, method: str, operation: str, query: Dict[str, Any]) -> Dict[str, Any]:
        table_name = query.get('TableName')
        try:
            return getattr(self.client, method)(**query)
        except ClientError as e:
            raise map_dynamodb_error(e, operation, table_name) from e
        except BotoCoreError as e:
            raise ConnectionError(f"{operation} on {table_name} failed: {e}", operation, table_name, e) from e
