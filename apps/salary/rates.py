import logging
from decimal import Decimal

from apps.catalog.models import PART_LEVEL_JOB_NAME, PART_TYPES
from forgetrack.exceptions import ConfigurationError

from .records import to_decimal

logger = logging.getLogger(__name__)


class RateResolver:
    """
    Maps (part type, job name) to a per-part rate.

    Entries without a job name use the part-level ``Standard`` job type.
    Jobs missing from the catalog pay 0 so an incomplete catalog still
    yields a report; an unknown part type is a configuration error.
    Lookups are cached for the lifetime of the resolver (one request).
    """

    def __init__(self, source=None):
        if source is None:
            from .sources import DjangoLedgerSource
            source = DjangoLedgerSource()
        self.source = source
        self._cache = {}

    def resolve(self, part_type, job_name=None, year=None, month=None) -> Decimal:
        if part_type not in PART_TYPES:
            raise ConfigurationError(f"Unknown part type '{part_type}'.")
        name = (job_name or "").strip() or PART_LEVEL_JOB_NAME
        key = (part_type, name.casefold(), year, month)
        if key not in self._cache:
            rate = self.source.get_rate(part_type, name, year, month)
            if rate is None:
                logger.debug("No rate configured for %s:%s; using 0", part_type, name)
                rate = Decimal("0")
            rate = to_decimal(rate)
            self._cache[key] = rate if rate > 0 else Decimal("0")
        return self._cache[key]
