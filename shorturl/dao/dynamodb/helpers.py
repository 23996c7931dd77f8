import functools
from typing import TypeVar, Any
from collections.abc import Callable

from botocore.exceptions import BotoCoreError, ClientError

from shorturl.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])

CONDITIONAL_CHECK_FAILED = 'ConditionalCheckFailedException'
RESOURCE_NOT_FOUND = 'ResourceNotFoundException'
RESOURCE_IN_USE = 'ResourceInUseException'


def client_error_code(error: ClientError) -> str:
    """Extract the AWS error code from a botocore ClientError"""
    return error.response.get('Error', {}).get('Code', '')


def handle_dynamodb_errors[F](method: F) -> F:
    """Wrap DynamoDB-interacting DAO methods to translate botocore errors

    The wrapped method is expected to handle the client errors it understands
    (e.g. ConditionalCheckFailedException) itself. Everything that escapes is
    an infrastructure failure.

    Args:
        method (Callable[..., Any]):
            DAO method performing DynamoDB operations which may raise
            botocore.exceptions.ClientError or BotoCoreError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on DynamoDB failures.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ClientError as e:
            raise DataStoreError(f"DynamoDB request on table '{self.table_name}' failed ({client_error_code(e)}).") from e
        except BotoCoreError as e:
            raise DataStoreError(f"Can't reach DynamoDB table '{self.table_name}'.") from e

    return wrapper
