"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, in-memory).

Responsibilities:
    - Provide an interface for inserting and retrieving ShortURLModel objects.
    - Provide a secondary lookup of mappings by target (long) URL.
    - Enforce short code uniqueness atomically inside the data store.
    - Standardize error handling across multiple data store implementations.
    - Expose table lifecycle operations for the surrounding process.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shorturl.models import ShortURLModel
        >>> from shorturl.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3",
        ... )
        >>> dao.insert(short_url)

        >>> dao.get("a1b2c3").target
        'https://example.com/blog/article-123'

        >>> dao.find_by_target("https://example.com/blog/article-123").shortcode
        'a1b2c3'
"""

from abc import ABC, abstractmethod

from shorturl.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Insert a new ShortURLModel into the data store.
            Raises ShortURLAlreadyExistsError if the short code already exists.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel from the data store by short code.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        find_by_target(target: str, **kwargs) -> ShortURLModel:
            Retrieve the first ShortURLModel stored for a target URL.
            Raises ShortURLNotFoundError if no mapping targets the URL.
            Raises DataStoreError on connection or read failure.

        create_table(**kwargs) -> None:
            Provision the backing table. Idempotent.

        drop_table(**kwargs) -> None:
            Remove the backing table and every mapping in it.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLRedisDAO or
        ShortURLDynamoDBDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Uniqueness of short codes must be enforced by the data store's own
          conditional write primitive inside `insert()`. A separate
          existence check followed by a write leaves a race window between
          concurrent writers.
        - Mappings are immutable. The DAO does not provide an interface to
          update or delete individual entries.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same short code already exists

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its short code.

        Args:
            shortcode (str):
                The short code of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The ShortURLModel instance.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its target URL.

        Args:
            target (str):
                The long URL to look up.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The first ShortURLModel stored for the target.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel targets the given URL.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def create_table(self, **kwargs) -> None:
        """Provision the backing table (no-op if it already exists).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def drop_table(self, **kwargs) -> None:
        """Remove the backing table together with all stored mappings.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
