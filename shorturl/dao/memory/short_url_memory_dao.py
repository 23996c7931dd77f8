"""In-process implementation of ShortURLBaseDAO.

Mappings live in two dictionaries guarded by a single lock, which makes
`insert()` an atomic check-and-write among the threads of one process.
Useful for tests, local experiments and single-process deployments; the
data is lost when the process exits.

Example:
    >>> dao = ShortURLMemoryDAO()
    >>> dao.insert(ShortURLModel(target='https://example.com', shortcode='abc123'))
    <ShortURLMemoryDAO>
    >>> dao.find_by_target('https://example.com').shortcode
    'abc123'
"""

import threading

from beartype import beartype

from shorturl.models import ShortURLModel
from shorturl.dao.base import ShortURLBaseDAO
from shorturl.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


class ShortURLMemoryDAO(ShortURLBaseDAO):
    def __init__(self):
        self._lock = threading.Lock()
        self._targets: dict[str, str] = {}  # shortcode -> target
        self._shortcodes: dict[str, str] = {}  # target -> first shortcode

    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMemoryDAO':
        with self._lock:
            if short_url.shortcode in self._targets:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
            self._targets[short_url.shortcode] = short_url.target
            self._shortcodes.setdefault(short_url.target, short_url.shortcode)
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        with self._lock:
            target = self._targets.get(shortcode)
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return ShortURLModel(target=target, shortcode=shortcode)

    @beartype
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel:
        with self._lock:
            shortcode = self._shortcodes.get(target)
        if shortcode is None:
            raise ShortURLNotFoundError(f"No short URL targets '{target}'.")
        return ShortURLModel(target=target, shortcode=shortcode)

    def create_table(self, **kwargs) -> None:
        pass

    def drop_table(self, **kwargs) -> None:
        with self._lock:
            self._targets.clear()
            self._shortcodes.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)
