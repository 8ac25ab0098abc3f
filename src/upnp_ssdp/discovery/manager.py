"""
Main discovery manager: multicast fan-out, notification parsing and
description retrieval
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

import aiohttp
from yarl import URL

from ..http_helper import create_description_session, fetch_bytes
from .description import format_device_urn, parse_description
from .models import (
    DescriptionError,
    DescriptionResult,
    Device,
    DeviceNotification,
    DiscoveryResult,
    SearchResult,
    SearchStatus,
)
from .network_discovery import NetworkDiscovery, get_local_addresses
from .notification_parser import parse_notifications

logger = logging.getLogger(__name__)

DESCRIPTION_SCHEMES = ("http", "https")


def description_url(location: str) -> URL:
    """Validate a Location header as an absolute http(s) URL with a host"""
    try:
        url = URL(location)
        valid = url.scheme in DESCRIPTION_SCHEMES and bool(url.host)
    except (TypeError, ValueError) as e:
        raise DescriptionError(f"Invalid location {location!r}: {e}") from e
    if not valid:
        raise DescriptionError(f"Location {location!r} is not an absolute http(s) URL")
    return url


class SsdpDiscovery:
    """Discovery service for SSDP notifications and UPnP devices"""

    def __init__(self, config: Optional[Dict] = None):
        config = config or {}
        http_config = config.get("http", {})
        self.network = NetworkDiscovery(config.get("ssdp", {}))
        self.request_timeout = http_config.get("request_timeout", 10)
        self.max_concurrent_fetches = http_config.get("max_concurrent_fetches", 10)
        self.last_result: Optional[DiscoveryResult] = None

    async def search_addresses(self, search_target: str) -> List[SearchResult]:
        """
        Search every eligible local address concurrently; returns once all
        searches have reached their deadline
        """
        local_addresses = get_local_addresses()
        if not local_addresses:
            logger.info("No local addresses with a gateway; nothing to search")
            return []

        results = await asyncio.gather(
            *(self.network.search(address, search_target) for address in local_addresses)
        )
        failed = sum(1 for r in results if r.status == SearchStatus.FAILED)
        logger.info(f"SSDP search for {search_target}: {sum(len(r.responses) for r in results)} responses "
                    f"from {len(results)} addresses ({failed} failed)")
        return list(results)

    async def get_responses(self, search_target: str) -> List[str]:
        """Merged raw responses from all local addresses"""
        responses = []
        for result in await self.search_addresses(search_target):
            responses.extend(result.responses)
        return responses

    async def search_devices(self, device_type: str) -> List[DeviceNotification]:
        """
        Search for devices answering to device_type.
        Returns notifications deduplicated by USN, first seen wins.
        """
        start_time = time.time()
        results = await self.search_addresses(device_type)
        responses = [response for result in results for response in result.responses]
        notifications = parse_notifications(responses)

        duration = time.time() - start_time
        self.last_result = DiscoveryResult(
            notifications=notifications,
            devices=[],
            method="ssdp",
            duration_seconds=duration,
            addresses_searched=sum(1 for r in results if r.status != SearchStatus.SKIPPED),
            success_count=len(notifications),
        )
        logger.info(f"[PASS] SSDP discovery: {len(notifications)} notifications in {duration:.1f}s")
        return notifications

    async def search_upnp_devices(self, device_type: str, device_version: int = 1) -> List[Device]:
        """
        Search for urn:schemas-upnp-org:device:{device_type}:{device_version}
        and build a Device tree from each responder's description document.
        Notifications whose description cannot be fetched or parsed are left out.
        """
        start_time = time.time()
        notifications = await self.search_devices(format_device_urn(device_type, device_version))

        devices: List[Device] = []
        semaphore = asyncio.Semaphore(self.max_concurrent_fetches)

        async with create_description_session(self.request_timeout, self.max_concurrent_fetches) as session:
            async def fetch_one(notification: DeviceNotification) -> DescriptionResult:
                async with semaphore:
                    result = await self.fetch_description(session, notification)
                devices.extend(result.devices)
                return result

            results = await asyncio.gather(*(fetch_one(n) for n in notifications), return_exceptions=True)

        failed = 0
        for notification, result in zip(notifications, results):
            if isinstance(result, BaseException):
                logger.error(f"Description fetch for {notification.usn} aborted: {result!r}")
                failed += 1
            elif result.status == SearchStatus.FAILED:
                failed += 1
        duration = time.time() - start_time
        self.last_result = DiscoveryResult(
            notifications=notifications,
            devices=devices,
            method="upnp",
            duration_seconds=duration,
            addresses_searched=self.last_result.addresses_searched if self.last_result else 0,
            success_count=len(results) - failed,
        )
        logger.info(f"[PASS] UPnP discovery: {len(devices)} devices from "
                    f"{len(notifications)} notifications ({failed} descriptions failed) in {duration:.1f}s")
        return devices

    async def fetch_description(self, session: aiohttp.ClientSession,
                                notification: DeviceNotification) -> DescriptionResult:
        """Fetch and parse one notification's description document"""
        result = DescriptionResult(notification)
        try:
            description_url(notification.location)
            content = await fetch_bytes(session, notification.location)
            result.devices = parse_description(content, notification.location)
        except (aiohttp.ClientError, asyncio.TimeoutError, DescriptionError) as e:
            logger.warning(f"Description for {notification.usn} at {notification.location} unavailable: {e}")
            result.status = SearchStatus.FAILED
            result.error = str(e) or type(e).__name__
        return result
