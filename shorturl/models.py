from dataclasses import dataclass
from typing import Any, Optional

from shorturl.constants import StatusCode
from shorturl.exceptions import ShortURLError


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a short code to long URL mapping.

    Attributes:
        target (str):
            The original long URL that the short code resolves to.
        shortcode (str):
            The unique short identifier of the mapping.

    Example:
        >>> url = ShortURLModel(target='https://example.com/article/123', shortcode='abc123')
        >>> url.target
        'https://example.com/article/123'
        >>> url.shortcode
        'abc123'
    """

    target: str
    shortcode: str


@dataclass(frozen=True)
class CreateShortURLResult:
    """Outcome of a create request.

    On success `short_url` is set; on error `msg` and `error_code` are set
    and `short_url` is None.
    """

    code: StatusCode
    short_url: Optional[str] = None
    msg: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def success(cls, short_url: str) -> 'CreateShortURLResult':
        return cls(code=StatusCode.SUCCESS, short_url=short_url)

    @classmethod
    def error(cls, error: ShortURLError) -> 'CreateShortURLResult':
        return cls(code=StatusCode.ERROR, msg=error.message, error_code=error.error_code)

    @property
    def ok(self) -> bool:
        return self.code == StatusCode.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Render the wire representation, omitting absent fields.

        Example:
            >>> CreateShortURLResult.success('http://localhost:3000/abc123').to_dict()
            {'code': 0, 'shortUrl': 'http://localhost:3000/abc123'}
        """
        body = {
            'code': int(self.code),
            'shortUrl': self.short_url,
            'msg': self.msg,
            'errorCode': self.error_code,
        }
        return {k: v for k, v in body.items() if v is not None}


@dataclass(frozen=True)
class ReadShortURLResult:
    """Outcome of a read request.

    On success `long_url` is set; on error `msg` and `error_code` are set
    and `long_url` is None.
    """

    code: StatusCode
    long_url: Optional[str] = None
    msg: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def success(cls, long_url: str) -> 'ReadShortURLResult':
        return cls(code=StatusCode.SUCCESS, long_url=long_url)

    @classmethod
    def error(cls, error: ShortURLError) -> 'ReadShortURLResult':
        return cls(code=StatusCode.ERROR, msg=error.message, error_code=error.error_code)

    @property
    def ok(self) -> bool:
        return self.code == StatusCode.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        body = {
            'code': int(self.code),
            'longUrl': self.long_url,
            'msg': self.msg,
            'errorCode': self.error_code,
        }
        return {k: v for k, v in body.items() if v is not None}
