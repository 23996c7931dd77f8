"""Short code allocation and resolution

The allocator orchestrates validation, code generation, the mapping store
and the resolution cache. It never raises for expected failures: every
application error and every data store outage is reported as an error result.

Classes:
    ShortURLAllocator:
        Implements `create_short_url()` and `read_short_url()`.

Example:
    >>> from shorturl.dao.memory import ShortURLMemoryDAO
    >>> from shorturl.dao.cache import ResolutionCacheMemoryDAO
    >>> allocator = ShortURLAllocator(dao=ShortURLMemoryDAO(), cache=ResolutionCacheMemoryDAO())
    >>> allocator.create_short_url('https://example.com/a', shortcode='abc123').to_dict()
    {'code': 0, 'shortUrl': 'http://localhost:3000/abc123'}
    >>> allocator.read_short_url('abc123').to_dict()
    {'code': 0, 'longUrl': 'https://example.com/a'}
"""

import logging
from collections.abc import Callable
from typing import Optional

from shorturl.constants import Event, MAX_ALLOCATION_ATTEMPTS, SHORT_CODE_MAX_LENGTH, SHORT_URL_PREFIX
from shorturl.dao.base import ResolutionCacheBaseDAO, ShortURLBaseDAO
from shorturl.dao.exceptions import (
    CacheMissError,
    CachePutError,
    DataStoreError,
    ShortURLAlreadyExistsError,
    ShortURLNotFoundError,
)
from shorturl.exceptions import (
    AllocationExhaustedError,
    InfrastructureError,
    ShortCodeAlreadyExistsError,
    ShortCodeNotFoundError,
    ShortURLError,
    ValidationError,
)
from shorturl.models import CreateShortURLResult, ReadShortURLResult, ShortURLModel
from shorturl.utils.helpers import get_short_url
from shorturl.utils.shortener import generate_shortcode
from shorturl.validators import validate_long_url, validate_short_code


logger = logging.getLogger(__name__)


class ShortURLAllocator:
    """Create and resolve short URLs on top of a mapping store and a resolution cache

    Attributes:
        dao (ShortURLBaseDAO):
            Mapping store. Its `insert()` is the only uniqueness guarantee.
        cache (ResolutionCacheBaseDAO):
            Best-effort resolution cache. Failures are logged and bypassed.
        short_url_prefix (str):
            Prepended to short codes to form short URLs.
        max_attempts (int):
            Random code generation attempts before giving up.
        generator (Callable[[int], str]):
            Random short code generator taking the code length.

    NOTE:
        - Requests share no state besides the store and the cache, so one
          allocator may serve concurrent threads.
        - Two concurrent creates without a shortcode for the same new URL may
          both allocate a code. Both succeed; the store's target index keeps
          the first one and later creates converge on it.
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO,
        cache: ResolutionCacheBaseDAO,
        short_url_prefix: str = SHORT_URL_PREFIX,
        max_attempts: int = MAX_ALLOCATION_ATTEMPTS,
        generator: Callable[[int], str] = generate_shortcode,
    ):
        if max_attempts < 1:
            raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts}).')

        self.dao = dao
        self.cache = cache
        self.short_url_prefix = short_url_prefix
        self.max_attempts = max_attempts
        self.generator = generator

    def short_url(self, shortcode: str) -> str:
        return get_short_url(shortcode, prefix=self.short_url_prefix)

    def create_short_url(self, long_url: str, shortcode: Optional[str] = None) -> CreateShortURLResult:
        """Map `long_url` to a short code and return the short URL

        Procedure:
        - Step 1: Validate the long URL (and the shortcode, if supplied)
        - Step 2: Supplied shortcode: insert it, failing if it's taken
        - Step 3: No shortcode: reuse the existing mapping for `long_url`, if any
        - Step 4: No shortcode: insert a random code, retrying on collision

        Args:
            long_url (str):
                Absolute URL to shorten.
            shortcode (Optional[str]):
                Caller-chosen code. An empty string counts as supplied (and is
                rejected as too short).

        Returns:
            CreateShortURLResult:
                Success with `short_url`, or error with `msg` and `error_code`.
        """
        try:
            shortcode = self._create(long_url, shortcode)
        except ValidationError as e:
            logger.info(
                'Rejected create request: %s',
                e.message,
                extra={'event': Event.INVALID_INPUT, 'errorCode': e.error_code},
            )
            return CreateShortURLResult.error(e)
        except ShortURLError as e:
            return CreateShortURLResult.error(e)
        except DataStoreError:
            logger.exception('Data store failed while creating short URL.', extra={'event': Event.DATA_STORE_FAILURE})
            return CreateShortURLResult.error(InfrastructureError())

        return CreateShortURLResult.success(self.short_url(shortcode))

    def read_short_url(self, shortcode: str) -> ReadShortURLResult:
        """Resolve `shortcode` to its long URL

        Procedure:
        - Step 1: Validate the shortcode (no cache or store access on failure)
        - Step 2: Serve from the resolution cache when possible
        - Step 3: Fall back to the mapping store and fill the cache

        Returns:
            ReadShortURLResult:
                Success with `long_url`, or error with `msg` and `error_code`.
        """
        try:
            long_url = self._read(shortcode)
        except ValidationError as e:
            logger.info(
                'Rejected read request: %s',
                e.message,
                extra={'event': Event.INVALID_INPUT, 'errorCode': e.error_code},
            )
            return ReadShortURLResult.error(e)
        except ShortURLError as e:
            return ReadShortURLResult.error(e)
        except DataStoreError:
            logger.exception(
                'Data store failed while reading short URL.',
                extra={'shortcode': shortcode, 'event': Event.DATA_STORE_FAILURE},
            )
            return ReadShortURLResult.error(InfrastructureError())

        return ReadShortURLResult.success(long_url)

    def _create(self, long_url: str, shortcode: Optional[str]) -> str:
        # 1- Validate input
        validate_long_url(long_url)
        if shortcode is not None:
            validate_short_code(shortcode, max_length=SHORT_CODE_MAX_LENGTH)

        # 2- Caller-supplied shortcode: insert or fail, never remap
        if shortcode is not None:
            try:
                self.dao.insert(ShortURLModel(target=long_url, shortcode=shortcode))
            except ShortURLAlreadyExistsError:
                logger.info(
                    'Requested short code is already taken.',
                    extra={'shortcode': shortcode, 'event': Event.SHORT_CODE_TAKEN},
                )
                raise ShortCodeAlreadyExistsError(f"Short code '{shortcode}' already exists.") from None

            self._cache_put(self.cache.keys.shortcode_key(shortcode), long_url)
            logger.info('Created short URL.', extra={'shortcode': shortcode, 'event': Event.SHORT_URL_CREATED})
            return shortcode

        # 3- Reuse existing mapping for the same long URL
        existing = self._find_existing(long_url)
        if existing is not None:
            logger.info('Reusing existing short URL.', extra={'shortcode': existing, 'event': Event.SHORT_URL_REUSED})
            return existing

        # 4- Allocate a fresh random shortcode
        # NOTE: Only the shortcode entry is cached here. Whether this code won the
        #       target index slot is decided by the store, so the target entry is
        #       cached from `find_by_target()` on the next create.
        shortcode = self._allocate(long_url)
        self._cache_put(self.cache.keys.shortcode_key(shortcode), long_url)
        logger.info('Created short URL.', extra={'shortcode': shortcode, 'event': Event.SHORT_URL_CREATED})
        return shortcode

    def _read(self, shortcode: str) -> str:
        # 1- Validate input
        validate_short_code(shortcode, max_length=SHORT_CODE_MAX_LENGTH)

        # 2- Try the resolution cache
        key = self.cache.keys.shortcode_key(shortcode)
        long_url = self._cache_get(key)
        if long_url is not None:
            logger.debug('Resolved short code from cache.', extra={'shortcode': shortcode, 'event': Event.CACHE_HIT})
            return long_url

        # 3- Fall back to the mapping store
        try:
            short_url = self.dao.get(shortcode)
        except ShortURLNotFoundError:
            logger.info('Short code not found.', extra={'shortcode': shortcode, 'event': Event.SHORT_URL_NOT_FOUND})
            raise ShortCodeNotFoundError(f"Short code '{shortcode}' does not exist.") from None

        self._cache_put(key, short_url.target)
        logger.info('Resolved short code.', extra={'shortcode': shortcode, 'event': Event.SHORT_URL_RESOLVED})
        return short_url.target

    def _find_existing(self, long_url: str) -> Optional[str]:
        cached = self._cache_get(self.cache.keys.target_key(long_url))
        if cached is not None:
            return cached

        try:
            short_url = self.dao.find_by_target(long_url)
        except ShortURLNotFoundError:
            return None

        self._remember(short_url)
        return short_url.shortcode

    def _allocate(self, long_url: str) -> str:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generator(SHORT_CODE_MAX_LENGTH)
            try:
                self.dao.insert(ShortURLModel(target=long_url, shortcode=candidate))
            except ShortURLAlreadyExistsError:
                logger.warning(
                    'Generated short code collided with an existing one. Retrying.',
                    extra={'shortcode': candidate, 'attempt': attempt, 'event': Event.SHORT_CODE_COLLISION},
                )
                continue
            return candidate

        logger.error(
            'Exhausted short code allocation attempts.',
            extra={'attempts': self.max_attempts, 'event': Event.ALLOCATION_EXHAUSTED},
        )
        raise AllocationExhaustedError(f'Could not allocate a unique short code after {self.max_attempts} attempts.')

    def _remember(self, short_url: ShortURLModel) -> None:
        self._cache_put(self.cache.keys.shortcode_key(short_url.shortcode), short_url.target)
        self._cache_put(self.cache.keys.target_key(short_url.target), short_url.shortcode)

    def _cache_get(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except CacheMissError:
            return None
        except DataStoreError:
            logger.warning(
                'Resolution cache unavailable. Falling back to data store.',
                exc_info=True,
                extra={'key': key, 'event': Event.CACHE_UNAVAILABLE},
            )
            return None

    def _cache_put(self, key: str, value: str) -> None:
        try:
            self.cache.put(key, value)
        except (CachePutError, DataStoreError):
            logger.warning(
                'Failed to update resolution cache.',
                exc_info=True,
                extra={'key': key, 'event': Event.CACHE_UNAVAILABLE},
            )
