"""
SSDP response parsing and USN deduplication
"""

import logging
import re
from typing import Dict, Iterable, List

from .models import NOTIFICATION_HEADERS, DeviceNotification, MissingHeaderError, NotificationParseError

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r\n|\n")


def parse_headers(response: str) -> Dict[str, str]:
    """
    Map lowercased header names to raw values. The value is everything after
    the first colon, so the space that normally follows it is kept.
    Later duplicates overwrite earlier ones.
    """
    headers = {}
    for line in _LINE_SPLIT.split(response):
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        headers[name.lower()] = value
    return headers


def parse_notification(response: str) -> DeviceNotification:
    """
    Build a DeviceNotification from a raw response.
    Raises MissingHeaderError when any mapped header is absent.
    """
    headers = parse_headers(response)
    values = {}
    for attribute, header in NOTIFICATION_HEADERS:
        if header not in headers:
            raise MissingHeaderError(header)
        values[attribute] = headers[header].strip()
    return DeviceNotification(headers=headers, **values)


def parse_notifications(responses: Iterable[str]) -> List[DeviceNotification]:
    """Parse responses in order, dropping unusable ones and repeated USNs"""
    notifications = []
    seen_usns = set()
    dropped = 0

    for response in responses:
        try:
            notification = parse_notification(response)
        except NotificationParseError as e:
            dropped += 1
            logger.debug(f"Dropping SSDP response: {e}")
            continue

        if notification.usn in seen_usns:
            continue
        seen_usns.add(notification.usn)
        notifications.append(notification)

    if dropped:
        logger.info(f"Dropped {dropped} SSDP responses with missing headers")
    return notifications
