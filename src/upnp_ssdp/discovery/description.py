"""
UPnP device description parsing
"""

import logging
from typing import Dict, List, Optional
from xml.etree import ElementTree

from .models import DEVICE_FIELDS, ICON_FIELDS, SERVICE_FIELDS, DescriptionError, Device, Icon, Service

logger = logging.getLogger(__name__)

_INT_ICON_FIELDS = {"width", "height", "depth"}


def format_device_urn(device_type: str, device_version: int = 1) -> str:
    return f"urn:schemas-upnp-org:device:{device_type}:{device_version}"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ElementTree.Element, name: str) -> Optional[ElementTree.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _text(element: ElementTree.Element) -> Optional[str]:
    return element.text.strip() if element.text else None


def _to_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def _mapped_fields(element: ElementTree.Element, mapping: Dict[str, str]) -> Dict[str, Optional[str]]:
    values = {}
    for child in element:
        attribute = mapping.get(_local_name(child.tag))
        if attribute:
            values[attribute] = _text(child)
    return values


def _parse_icon(element: ElementTree.Element) -> Icon:
    values = _mapped_fields(element, ICON_FIELDS)
    for key in _INT_ICON_FIELDS & values.keys():
        values[key] = _to_int(values[key])
    return Icon(**values)


def _parse_service(element: ElementTree.Element) -> Service:
    return Service(**_mapped_fields(element, SERVICE_FIELDS))


def parse_device(element: ElementTree.Element) -> Device:
    """Build a Device from a <device> element, recursing into deviceList"""
    device = Device(**_mapped_fields(element, DEVICE_FIELDS))

    icon_list = _child(element, "iconList")
    if icon_list is not None:
        device.icons = [_parse_icon(e) for e in icon_list if _local_name(e.tag) == "icon"]

    service_list = _child(element, "serviceList")
    if service_list is not None:
        device.services = [_parse_service(e) for e in service_list if _local_name(e.tag) == "service"]

    device_list = _child(element, "deviceList")
    if device_list is not None:
        device.devices = [parse_device(e) for e in device_list if _local_name(e.tag) == "device"]

    return device


def parse_description(content: bytes, location: str) -> List[Device]:
    """
    Stream-parse a description document into its top-level devices.

    Every outermost <device> is matched at any depth; its embedded devices
    stay in its tree. A <URLBase> outside any device and read before it
    becomes that device's URL base, otherwise the location the document
    was fetched from is used.
    Raises DescriptionError for malformed XML.
    """
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    devices = []
    url_base = None
    depth = 0
    device_depth = None

    try:
        parser.feed(content)
        parser.close()
        # Parse errors raised by feed() surface from read_events()
        for event, element in parser.read_events():
            name = _local_name(element.tag)
            if event == "start":
                depth += 1
                if name == "device" and device_depth is None:
                    device_depth = depth
                continue

            if device_depth is None:
                if name == "URLBase":
                    url_base = _text(element)
            elif depth == device_depth:
                device = parse_device(element)
                device.set_url_base(url_base or location)
                devices.append(device)
                device_depth = None
            depth -= 1
    except ElementTree.ParseError as e:
        raise DescriptionError(f"Malformed description from {location}: {e}") from e

    if not devices:
        logger.debug(f"No device element in description from {location}")
    return devices
