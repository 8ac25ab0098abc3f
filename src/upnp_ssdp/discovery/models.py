"""
Discovery data structures and models
"""

import ipaddress
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union
from urllib.parse import urljoin


class SsdpError(Exception):
    """Base error for SSDP discovery"""


class NotificationParseError(SsdpError):
    """A raw SSDP response could not be turned into a notification"""


class MissingHeaderError(NotificationParseError):
    """A header required by the notification record is absent"""

    def __init__(self, header: str):
        super().__init__(f"Missing required header: {header}")
        self.header = header


class DescriptionError(SsdpError):
    """A device description document could not be parsed"""


class AddressType(Enum):
    """Scope classification of a local address"""
    IPV4 = "ipv4"
    IPV6_LINK_LOCAL = "ipv6_link_local"
    IPV6_SITE_LOCAL = "ipv6_site_local"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LocalAddress:
    """An IP address bound to a network interface that has a gateway"""
    address: Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
    interface: str = ""

    @property
    def family(self) -> int:
        return self.address.version

    def __str__(self) -> str:
        return str(self.address)


# (record attribute, header name) - every header listed here is required
NOTIFICATION_HEADERS: Tuple[Tuple[str, str], ...] = (
    ("usn", "usn"),
    ("location", "location"),
    ("st", "st"),
    ("cache_control", "cache-control"),
    ("server", "server"),
)

_MAX_AGE_RE = re.compile(r"max-age\s*=\s*(\d+)", re.IGNORECASE)


@dataclass
class DeviceNotification:
    """A parsed SSDP search response"""
    usn: str
    location: str
    st: str
    cache_control: str
    server: str
    headers: Dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @property
    def uuid(self) -> str:
        """USN prefix identifying the device, e.g. ``uuid:abc``"""
        return self.usn.split("::", 1)[0]

    @property
    def max_age(self) -> Optional[int]:
        match = _MAX_AGE_RE.search(self.cache_control)
        return int(match.group(1)) if match else None


# Element local name -> attribute name, for the UPnP device-1-0 schema
ICON_FIELDS: Dict[str, str] = {
    "mimetype": "mimetype",
    "width": "width",
    "height": "height",
    "depth": "depth",
    "url": "url",
}

SERVICE_FIELDS: Dict[str, str] = {
    "serviceType": "service_type",
    "serviceId": "service_id",
    "SCPDURL": "scpd_url",
    "controlURL": "control_url",
    "eventSubURL": "event_sub_url",
}

DEVICE_FIELDS: Dict[str, str] = {
    "deviceType": "device_type",
    "friendlyName": "friendly_name",
    "manufacturer": "manufacturer",
    "manufacturerURL": "manufacturer_url",
    "modelDescription": "model_description",
    "modelName": "model_name",
    "modelNumber": "model_number",
    "modelURL": "model_url",
    "serialNumber": "serial_number",
    "UDN": "udn",
    "UPC": "upc",
    "presentationURL": "presentation_url",
}


@dataclass
class Icon:
    """Icon entry from a device iconList"""
    mimetype: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    depth: Optional[int] = None
    url: Optional[str] = None


@dataclass
class Service:
    """Service entry from a device serviceList"""
    service_type: Optional[str] = None
    service_id: Optional[str] = None
    scpd_url: Optional[str] = None
    control_url: Optional[str] = None
    event_sub_url: Optional[str] = None


@dataclass
class Device:
    """A UPnP device and its embedded devices and services"""
    device_type: Optional[str] = None
    friendly_name: Optional[str] = None
    manufacturer: Optional[str] = None
    manufacturer_url: Optional[str] = None
    model_description: Optional[str] = None
    model_name: Optional[str] = None
    model_number: Optional[str] = None
    model_url: Optional[str] = None
    serial_number: Optional[str] = None
    udn: Optional[str] = None
    upc: Optional[str] = None
    presentation_url: Optional[str] = None
    url_base: Optional[str] = None
    icons: List[Icon] = field(default_factory=list)
    services: List[Service] = field(default_factory=list)
    devices: List["Device"] = field(default_factory=list)

    def set_url_base(self, url_base: str) -> None:
        """Set URLBase on this device and every embedded device"""
        for device in self.iter_devices():
            device.url_base = url_base

    def absolute_url(self, url: str) -> str:
        """Resolve a service, icon or control URL against URLBase"""
        if not self.url_base:
            return url
        return urljoin(self.url_base, url)

    def iter_devices(self) -> Iterator["Device"]:
        """Yield this device and all embedded devices, depth first"""
        yield self
        for child in self.devices:
            yield from child.iter_devices()

    def find_service(self, service_type: str) -> Optional[Service]:
        for device in self.iter_devices():
            for service in device.services:
                if service.service_type == service_type:
                    return service
        return None


class SearchStatus(Enum):
    """Outcome of one per-address search or one descriptor fetch"""
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SearchResult:
    """Raw responses collected on one local address"""
    local_address: LocalAddress
    responses: List[str] = field(default_factory=list)
    status: SearchStatus = SearchStatus.COMPLETED
    error: Optional[str] = None


@dataclass
class DescriptionResult:
    """Devices built from one notification's description document"""
    notification: DeviceNotification
    devices: List[Device] = field(default_factory=list)
    status: SearchStatus = SearchStatus.COMPLETED
    error: Optional[str] = None


@dataclass
class DiscoveryResult:
    """Results from discovery operations"""
    notifications: List[DeviceNotification]
    devices: List[Device]
    method: str
    duration_seconds: float
    addresses_searched: int
    success_count: int
