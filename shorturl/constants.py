import string
from enum import IntEnum, StrEnum


# Short code alphabet: 26 lowercase + 26 uppercase + 10 digits
ALPHABET = string.ascii_letters + string.digits

# Length of generated short codes and upper bound for caller-supplied ones
SHORT_CODE_MAX_LENGTH = 8

# Prepended to every short code to form the externally visible short URL
SHORT_URL_PREFIX = 'http://localhost:3000/'

# Random short code generation attempts before giving up
MAX_ALLOCATION_ATTEMPTS = 5


class StatusCode(IntEnum):
    """Result status reported to the transport layer."""

    SUCCESS = 0
    ERROR = 1


class Backend(StrEnum):
    """Supported data store and cache backends."""

    REDIS = 'redis'
    DYNAMODB = 'dynamodb'
    MEMORY = 'memory'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        CONFIG_DIR = 'CONFIG_DIR'
        LOG_LEVEL = 'LOG_LEVEL'

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


class Event(StrEnum):
    """Structured log event names (logged under `extra={'event': ...}`)."""

    SHORT_URL_CREATED = 'short_url_created'
    SHORT_URL_REUSED = 'short_url_reused'
    SHORT_URL_RESOLVED = 'short_url_resolved'
    SHORT_URL_NOT_FOUND = 'short_url_not_found'
    SHORT_CODE_TAKEN = 'short_code_taken'
    SHORT_CODE_COLLISION = 'short_code_collision'
    ALLOCATION_EXHAUSTED = 'allocation_exhausted'
    INVALID_INPUT = 'invalid_input'
    CACHE_HIT = 'cache_hit'
    CACHE_UNAVAILABLE = 'cache_unavailable'
    DATA_STORE_FAILURE = 'data_store_failure'
