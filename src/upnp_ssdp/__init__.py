"""
SSDP device discovery and UPnP description retrieval
"""

from typing import List

from .config_loader import load_config, setup_logging
from .discovery import (
    AddressType,
    DescriptionError,
    Device,
    DeviceNotification,
    DiscoveryResult,
    Icon,
    LocalAddress,
    MissingHeaderError,
    NotificationParseError,
    Service,
    SsdpDiscovery,
    SsdpError,
    format_device_urn,
)


async def search_devices(device_type: str) -> List[DeviceNotification]:
    """Search with default settings; see SsdpDiscovery.search_devices"""
    return await SsdpDiscovery().search_devices(device_type)


async def search_upnp_devices(device_type: str, device_version: int = 1) -> List[Device]:
    """Search with default settings; see SsdpDiscovery.search_upnp_devices"""
    return await SsdpDiscovery().search_upnp_devices(device_type, device_version)


__all__ = [
    'search_devices', 'search_upnp_devices', 'SsdpDiscovery', 'AddressType', 'LocalAddress',
    'DeviceNotification', 'Device', 'Service', 'Icon', 'DiscoveryResult', 'SsdpError',
    'NotificationParseError', 'MissingHeaderError', 'DescriptionError', 'format_device_urn',
    'load_config', 'setup_logging',
]
