"""URL shortener facade

Shorty validates targets, drives identifier generation through a storage
backend and reclaims expired records in the background.

Classes:
    Shorty:
        Facade over a RecordBaseDAO: generate / resolve / iterate / purge.
    Reaper:
        Background worker running periodic reclamation sweeps, with an explicit stop signal.

Example:
    >>> from shorty import Shorty
    >>> from shorty.dao import RecordMemoryDAO
    >>> with Shorty(RecordMemoryDAO(), origin_tag=0x1337) as shorty:
    ...     identifier = shorty.generate('https://example.com', max_age=3600)
    ...     shorty.resolve(str(identifier))
    'https://example.com'
"""

import logging
import threading
from datetime import timedelta
from collections.abc import Callable
from typing import Any, Optional

from shorty.models import Identifier, Record
from shorty.constants import Interval, ReaperPolicy, UINT32_MAX
from shorty.dao import RecordBaseDAO, open_dao
from shorty.dao.exceptions import DAOError
from shorty.exceptions import MalformedIdentifierError, InvalidTargetError
from shorty.utils.config import load_config
from shorty.utils.helpers import is_valid_url, utcnow


logger = logging.getLogger(__name__)


class Reaper:
    """Run a purge callable every `interval` seconds on a daemon thread.

    The first sweep runs as soon as the worker starts. A failed sweep is
    logged and retried on the next tick; after `max_failures` consecutive
    failures the worker gives up and exits.

    Attributes:
        purge (Callable[[], int]):
            Sweep to run, returning the number of purged records.
        interval (float):
            Seconds between two sweeps.
        max_failures (int):
            Consecutive failed sweeps tolerated before the worker stops.
    """

    def __init__(self, purge: Callable[[], int], interval: float = Interval.PURGE, max_failures: int = ReaperPolicy.MAX_FAILURES):
        if interval <= 0:
            raise ValueError(f'Interval must be positive (given value: {interval}).')
        if max_failures < 1:
            raise ValueError(f'max_failures must be at least 1 (given value: {max_failures}).')

        self.purge = purge
        self.interval = interval
        self.max_failures = max_failures
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> 'Reaper':
        if self.running:
            return self
        # Fresh event per run: a worker outliving stop(timeout) keeps its own, already set
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop_event,), name='shorty-reaper', daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = ReaperPolicy.STOP_TIMEOUT) -> None:
        """Signal the worker to stop and wait up to `timeout` seconds for it."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _run(self, stop_event: threading.Event) -> None:
        failures = 0
        while not stop_event.is_set():
            try:
                purged = self.purge()
            except Exception:
                failures += 1
                logger.exception('Reclamation sweep failed.', extra={'failures': failures, 'maxFailures': self.max_failures})
                if failures >= self.max_failures:
                    logger.error('Giving up on reclamation after repeated failures.', extra={'failures': failures})
                    return
            else:
                failures = 0
                logger.debug('Reclamation sweep done.', extra={'purged': purged})

            stop_event.wait(self.interval)


class Shorty:
    """Generate, resolve and reclaim short identifiers for URLs.

    Attributes:
        dao (RecordBaseDAO):
            Storage backend. Any conforming implementation can be used.
        origin_tag (int):
            32-bit tag embedded in every identifier generated by this instance.
        reaper (Reaper):
            Background reclamation worker, started on construction unless
            start_reaper=False.

    Methods:
        generate(url, max_age=None) -> Identifier
        resolve(key) -> str
        get(key) -> Record | None
        for_each(visitor) -> None
        delete(*keys) -> int
        purge_expired() -> int
        close() -> None
    """

    def __init__(
        self,
        dao: RecordBaseDAO,
        origin_tag: int,
        purge_interval: float = Interval.PURGE,
        start_reaper: bool = True,
        max_failures: int = ReaperPolicy.MAX_FAILURES,
    ):
        if not isinstance(origin_tag, int) or not 0 <= origin_tag <= UINT32_MAX:
            raise ValueError(f'Origin tag must fit in 32 unsigned bits (given value: {origin_tag!r}).')

        self.dao = dao
        self.origin_tag = origin_tag
        self.reaper = Reaper(self.purge_expired, interval=purge_interval, max_failures=max_failures)
        if start_reaper:
            self.reaper.start()

    @classmethod
    def from_config(cls, config: Optional[dict[str, Any]] = None, **kwargs) -> 'Shorty':
        """Build a Shorty from load_config() output (loaded from the environment if omitted)."""
        config = config if config is not None else load_config()
        dao = open_dao(config['backend'], **config.get('options', {}))
        kwargs.setdefault('purge_interval', config.get('purge_interval', Interval.PURGE))
        return cls(dao, config['origin_tag'], **kwargs)

    def generate(self, url: str, max_age: Optional[timedelta | int | float] = None) -> Identifier:
        """Store url under a fresh identifier

        Args:
            url (str):
                Target URL. Must have a scheme and a network location.
            max_age (Optional[timedelta | int | float]):
                Lifetime as a timedelta or in seconds. None or <= 0 means the
                record never expires.

        Returns:
            Identifier: the identifier assigned by the backend.

        Raises:
            InvalidTargetError:
                If url is not a well-formed URL. Nothing is stored.
            DAOError:
                If the backend fails; propagated unmodified.
        """
        if not is_valid_url(url):
            raise InvalidTargetError(f'{url!r} is not a valid URL.')

        if max_age is not None and not isinstance(max_age, timedelta):
            max_age = timedelta(seconds=max_age)
        if max_age is not None and max_age <= timedelta(0):
            max_age = None

        record = self.dao.put(self._generate_id, Record(url=url, max_age=max_age))
        logger.debug('Generated identifier.', extra={'recordId': str(record.id), 'url': url})
        return record.id

    def get(self, key: str) -> Optional[Record]:
        """Return the record stored under key, or None on a miss or malformed key."""
        try:
            return self.dao.get(str(Identifier.parse(key)))
        except (MalformedIdentifierError, DAOError) as e:
            logger.debug('Failed to resolve identifier.', extra={'recordId': key, 'reason': type(e).__name__})
            return None

    def resolve(self, key: str) -> str:
        """Return the URL stored under key, or '' if it can't be resolved."""
        record = self.get(key)
        return record.url if record is not None else ''

    def for_each(self, visitor: Callable[[Record], None]) -> None:
        """Visit every stored record in identifier text order."""
        self.dao.for_each(lambda key, record: visitor(record))

    def delete(self, *keys: str) -> int:
        """Delete records by identifier text form. Returns the number removed."""
        return self.dao.delete(*keys)

    def purge_expired(self) -> int:
        """Delete every record expired at the time of the call

        Performs one full scan and one batch delete.

        Returns:
            int: number of records removed.
        """
        now = utcnow()
        expired: list[str] = []

        def collect(key: str, record: Record) -> None:
            if record.expired(now):
                expired.append(key)

        self.dao.for_each(collect)
        if not expired:
            return 0

        purged = self.dao.delete(*expired)
        logger.info('Purged expired records.', extra={'purged': purged, 'expired': len(expired)})
        return purged

    def close(self) -> None:
        """Stop the reaper, then close the backend."""
        self.reaper.stop()
        self.dao.close()

    def __enter__(self) -> 'Shorty':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _generate_id(self, counter: int) -> Identifier:
        return Identifier.new(self.origin_tag, utcnow(), counter)
