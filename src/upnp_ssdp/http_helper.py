# HTTP Helper for device description fetches
# Session configuration for plain-HTTP connections to devices on the local network

import logging

import aiohttp

logger = logging.getLogger(__name__)


def create_description_session(timeout_seconds: float = 10, limit: int = 10) -> aiohttp.ClientSession:
    """
    Create aiohttp session for fetching UPnP description documents.
    Devices serve descriptions over plain HTTP on the LAN.
    """
    connector = aiohttp.TCPConnector(
        limit=limit,
        limit_per_host=2,           # Embedded HTTP servers handle few connections
        ssl=False,
        force_close=True            # No keep-alive between one-shot fetches
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )


async def fetch_bytes(session: aiohttp.ClientSession, url: str) -> bytes:
    """GET url and return the body; non-2xx statuses raise ClientResponseError"""
    async with session.get(url) as response:
        response.raise_for_status()
        return await response.read()
