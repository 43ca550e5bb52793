from dataclasses import dataclass
from datetime import datetime

from django.db import DEFAULT_DB_ALIAS, Error as DatabaseError, connections
from django.utils import timezone


class StorageUnavailable(Exception):
    """The database could not be reached before a run started."""


@dataclass(frozen=True)
class RunContext:
    """
    Everything one scheduled run needs from its surroundings.

    - now:   the run's clock reading (injectable for tests)
    - using: the database alias every query and transaction goes through

    A context is created per run and never shared between runs.
    """

    now: datetime
    using: str = DEFAULT_DB_ALIAS

    @property
    def today(self):
        return timezone.localdate(self.now)

    @classmethod
    def open(cls, *, now=None, using=DEFAULT_DB_ALIAS):
        """
        Build a context after proving the database is reachable.

        Raises StorageUnavailable before anything is written.
        """
        try:
            connections[using].ensure_connection()
        except DatabaseError as exc:
            raise StorageUnavailable(
                f"Database '{using}' is unreachable: {exc}"
            ) from exc

        return cls(now=now or timezone.now(), using=using)
