"""
Test configuration and fixtures.

Unit tests run the real client service over a mocked boto3 client, so the
model, planner and codec are exercised together without network access.
Integration tests use moto's in-memory DynamoDB.
"""

from unittest.mock import Mock

import boto3
import pytest
from moto import mock_aws

from dynamodb_orm import DynamoDBConfig, DynamoDbClientService, DynamoDbModel


@pytest.fixture(autouse=True)
def reset_client_service():
    """Every test starts without a shared client service installed."""
    DynamoDbModel.reset_client_service()
    yield
    DynamoDbModel.reset_client_service()


def _model_classes(cls=DynamoDbModel):
    for subclass in cls.__subclasses__():
        yield subclass
        yield from _model_classes(subclass)


@pytest.fixture(autouse=True)
def flush_event_observers():
    """Observers registered by a test do not leak into the next one."""
    yield
    for model_class in _model_classes():
        model_class.flush_event_observers()


@pytest.fixture
def dynamodb_config():
    """DynamoDB configuration for testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,
        table_prefix="",
        wrap_numbers=False,
        enable_debug_logging=False
    )


@pytest.fixture
def mock_client():
    """Mock boto3 DynamoDB low-level client."""
    client = Mock()
    client.get_item.return_value = {'ResponseMetadata': {'HTTPStatusCode': 200}}
    client.put_item.return_value = {'ResponseMetadata': {'HTTPStatusCode': 200}}
    client.delete_item.return_value = {'ResponseMetadata': {'HTTPStatusCode': 200}}
    client.scan.return_value = {'Items': []}
    client.query.return_value = {'Items': []}
    return client


@pytest.fixture
def client_service(dynamodb_config, mock_client):
    """Client service over the mocked boto3 client, installed for all models."""
    service = DynamoDbClientService(config=dynamodb_config, client=mock_client)
    DynamoDbModel.set_client_service(service)
    return service


def set_pages(mock_client, *pages):
    """Make the mocked scan/query return the given lists of raw items as pages.

    Every page but the last carries a LastEvaluatedKey.
    """
    responses = []
    for number, items in enumerate(pages, start=1):
        response = {'Items': list(items)}
        if number < len(pages):
            response['LastEvaluatedKey'] = {'page': {'N': str(number)}}
        responses.append(response)
    mock_client.scan.side_effect = list(responses)
    mock_client.query.side_effect = list(responses)


@pytest.fixture
def pages(mock_client):
    """Callable fixture: pages(items1, items2, ...) sets the scan/query pages."""
    return lambda *page_items: set_pages(mock_client, *page_items)


# ===== moto fixtures =====

@pytest.fixture
def moto_dynamodb():
    """In-memory DynamoDB with the sample tables created."""
    with mock_aws():
        client = boto3.client(
            'dynamodb',
            region_name='us-east-1',
            aws_access_key_id='test_key',
            aws_secret_access_key='test_secret'
        )
        client.create_table(
            TableName='users',
            KeySchema=[
                {'AttributeName': 'id', 'KeyType': 'HASH'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'id', 'AttributeType': 'S'},
                {'AttributeName': 'email', 'AttributeType': 'S'}
            ],
            GlobalSecondaryIndexes=[
                {
                    'IndexName': 'email_index',
                    'KeySchema': [
                        {'AttributeName': 'email', 'KeyType': 'HASH'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'},
                    'ProvisionedThroughput': {'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
                }
            ],
            BillingMode='PROVISIONED',
            ProvisionedThroughput={'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
        )
        client.create_table(
            TableName='run_logs',
            KeySchema=[
                {'AttributeName': 'pipeline_id', 'KeyType': 'HASH'},
                {'AttributeName': 'run_id', 'KeyType': 'RANGE'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'pipeline_id', 'AttributeType': 'S'},
                {'AttributeName': 'run_id', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST'
        )
        yield client


@pytest.fixture
def moto_service(moto_dynamodb, dynamodb_config):
    """Client service talking to moto, installed for all models."""
    service = DynamoDbClientService(config=dynamodb_config)
    DynamoDbModel.set_client_service(service)
    return service
