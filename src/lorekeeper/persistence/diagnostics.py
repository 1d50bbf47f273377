# ABOUTME: Connectivity check for a dialogue database location
# ABOUTME: The one place where store failures collapse into a plain boolean

from __future__ import annotations

from lorekeeper.persistence.connection import ConnectionSource
from lorekeeper.utils.logging import get_logger

logger = get_logger(__name__)


async def test_connection(location: str) -> bool:
    """Tests the connection to the database at ``location``.

    Returns True if a connection could be opened and queried, False otherwise.
    """
    source: ConnectionSource | None = None
    try:
        source = ConnectionSource(location)
        await source.ping()
    except Exception as e:
        logger.warning("Database connection test failed", location=location, error=str(e), error_type=type(e).__name__)
        return False
    finally:
        if source is not None:
            await source.close()

    logger.info("Database connection test succeeded", location=location)
    return True


# Not a pytest test despite the name
test_connection.__test__ = False  # type: ignore[attr-defined]
