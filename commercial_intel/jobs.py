"""
Scheduled job entry point.

Intended for a monthly cron (``0 8 1 * *``):
    commercial-intel-patterns
"""

import asyncio
import logging
import sys

from commercial_intel.core.config import get_settings
from commercial_intel.core.database import get_document_store
from commercial_intel.core.logs import setup_logging
from commercial_intel.models import PatternJobResult
from commercial_intel.services import PatternAggregator

logger = logging.getLogger(__name__)


async def identify_cross_project_patterns() -> PatternJobResult:
    """Run pattern detection over every active tenant."""
    aggregator = PatternAggregator(get_document_store(), settings=get_settings())
    return await aggregator.run()


def main() -> int:
    """Console script: run the job once and report the outcome."""
    setup_logging()

    result = asyncio.run(identify_cross_project_patterns())
    logger.info(f"Job result: {result.model_dump()}")
    return 1 if result.failed_orgs else 0


if __name__ == "__main__":
    sys.exit(main())
