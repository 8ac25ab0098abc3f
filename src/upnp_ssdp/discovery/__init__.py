"""
Discovery module for SSDP notifications and UPnP device descriptions
"""

from .description import format_device_urn, parse_description
from .manager import SsdpDiscovery
from .models import (
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
    SsdpError,
)
from .network_discovery import NetworkDiscovery, classify_address, get_local_addresses
from .notification_parser import parse_notification, parse_notifications

__all__ = [
    'SsdpDiscovery', 'NetworkDiscovery', 'AddressType', 'LocalAddress', 'DeviceNotification',
    'Device', 'Service', 'Icon', 'DiscoveryResult', 'SsdpError', 'NotificationParseError',
    'MissingHeaderError', 'DescriptionError', 'classify_address', 'get_local_addresses',
    'format_device_urn', 'parse_description', 'parse_notification', 'parse_notifications',
]
