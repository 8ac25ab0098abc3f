"""
Network discovery methods: interface selection and SSDP multicast search
"""

import asyncio
import ipaddress
import logging
import socket
from typing import Dict, List, Optional, Tuple

import netifaces

from .models import AddressType, LocalAddress, SearchResult, SearchStatus

logger = logging.getLogger(__name__)

UPNP_MULTICAST_PORT = 1900
RECEIVE_TIMEOUT_MS = 3000
SEND_COUNT = 3
BUFFER_SIZE = 4096
SEARCH_MX = 3

MULTICAST_ADDRESSES: Dict[AddressType, str] = {
    AddressType.IPV4: "239.255.255.250",
    AddressType.IPV6_LINK_LOCAL: "FF02::C",
    AddressType.IPV6_SITE_LOCAL: "FF05::C",
}


def get_local_addresses() -> List[LocalAddress]:
    """
    Collect IPv4/IPv6 addresses of every interface that has a gateway
    """
    gateway_interfaces = set()
    for family, entries in netifaces.gateways().items():
        if family == "default":
            continue
        for entry in entries:
            gateway_interfaces.add(entry[1])

    addresses = []
    for interface in netifaces.interfaces():
        if interface not in gateway_interfaces:
            continue
        if_addresses = netifaces.ifaddresses(interface)
        for family in (netifaces.AF_INET, netifaces.AF_INET6):
            for entry in if_addresses.get(family, []):
                raw = entry.get("addr")
                if not raw:
                    continue
                try:
                    address = ipaddress.ip_address(raw.split("%", 1)[0])
                except ValueError:
                    logger.debug(f"Ignoring unparsable address {raw} on {interface}")
                    continue
                addresses.append(LocalAddress(address, interface))

    logger.debug(f"Local addresses eligible for search: {', '.join(str(a) for a in addresses) or 'none'}")
    return addresses


def classify_address(local_address: LocalAddress) -> AddressType:
    address = local_address.address
    if address.version == 4:
        return AddressType.IPV4
    if address.is_link_local:
        return AddressType.IPV6_LINK_LOCAL
    if address.is_site_local:
        return AddressType.IPV6_SITE_LOCAL
    return AddressType.UNKNOWN


def format_host(group: str, port: int = UPNP_MULTICAST_PORT) -> str:
    if ":" in group:
        return f"[{group}]:{port}"
    return f"{group}:{port}"


def build_search_request(group: str, search_target: str) -> bytes:
    """Build the M-SEARCH datagram for a multicast group and search target"""
    request = (
        "M-SEARCH * HTTP/1.1\r\n"
        f"HOST: {format_host(group)}\r\n"
        f"ST: {search_target}\r\n"
        "MAN: \"ssdp:discover\"\r\n"
        f"MX: {SEARCH_MX}\r\n"
        "\r\n"
    )
    return request.encode("utf-8")


def _scope_id(local_address: LocalAddress, address_type: AddressType) -> int:
    if address_type != AddressType.IPV6_LINK_LOCAL or not local_address.interface:
        return 0
    return socket.if_nametoindex(local_address.interface)


class NetworkDiscovery:
    """Runs the SSDP M-SEARCH exchange on a single local address"""

    def __init__(self, config: Optional[dict] = None):
        config = config or {}
        # Deadline and send count are fixed by the search protocol
        self.receive_timeout = RECEIVE_TIMEOUT_MS / 1000
        self.send_count = SEND_COUNT
        self.buffer_size = config.get("buffer_size", BUFFER_SIZE)

    async def search(self, local_address: LocalAddress, search_target: str) -> SearchResult:
        """
        Send the search request from local_address and collect responses
        until the receive deadline. Transport errors end the search with
        whatever was received so far.
        """
        result = SearchResult(local_address)
        address_type = classify_address(local_address)
        if address_type == AddressType.UNKNOWN:
            logger.debug(f"Skipping {local_address}: no SSDP multicast group for this scope")
            result.status = SearchStatus.SKIPPED
            return result

        group = MULTICAST_ADDRESSES[address_type]
        family = socket.AF_INET if address_type == AddressType.IPV4 else socket.AF_INET6
        loop = asyncio.get_running_loop()

        try:
            scope_id = _scope_id(local_address, address_type)
            with socket.socket(family, socket.SOCK_DGRAM, socket.IPPROTO_UDP) as sock:
                self._configure_socket(sock, local_address, address_type, scope_id)

                destination: Tuple = (group, UPNP_MULTICAST_PORT)
                if family == socket.AF_INET6:
                    destination = (group, UPNP_MULTICAST_PORT, 0, scope_id)

                request = build_search_request(group, search_target)
                for _ in range(self.send_count):
                    await loop.sock_sendto(sock, request, destination)
                logger.debug(f"Sent {self.send_count} M-SEARCH for {search_target} from {local_address}")

                await self.collect_responses(sock, result.responses, self.receive_timeout)
        except OSError as e:
            logger.warning(f"SSDP search on {local_address} failed: {e}")
            result.status = SearchStatus.FAILED
            result.error = str(e)

        logger.debug(f"{len(result.responses)} SSDP responses on {local_address}")
        return result

    def _configure_socket(self, sock: socket.socket, local_address: LocalAddress,
                          address_type: AddressType, scope_id: int) -> None:
        # Only Windows has an explicit exclusive-bind option; elsewhere a
        # socket without SO_REUSEADDR already owns its port exclusively
        if hasattr(socket, "SO_EXCLUSIVEADDRUSE"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_EXCLUSIVEADDRUSE, 1)
        sock.setblocking(False)

        if address_type == AddressType.IPV4:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF,
                            socket.inet_aton(str(local_address.address)))
            sock.bind((str(local_address.address), 0))
        else:
            if scope_id:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_MULTICAST_IF, scope_id)
            sock.bind((str(local_address.address), 0, 0, scope_id))

    async def collect_responses(self, sock: socket.socket, responses: List[str], timeout: float) -> None:
        """
        Receive into responses until timeout elapses or the socket is closed.
        The list is filled in place so a timeout keeps what already arrived.
        """
        buffer = bytearray(self.buffer_size)
        try:
            await asyncio.wait_for(self._receive(sock, buffer, responses), timeout)
        except asyncio.TimeoutError:
            pass
        except OSError as e:
            # Socket closed underneath an in-flight receive
            logger.debug(f"Receive loop ended: {e}")

    async def _receive(self, sock: socket.socket, buffer: bytearray, responses: List[str]) -> None:
        loop = asyncio.get_running_loop()
        view = memoryview(buffer)
        while True:
            try:
                count = await loop.sock_recv_into(sock, view)
            except ConnectionResetError:
                # ICMP port-unreachable from an earlier send (Windows)
                continue
            if count > 0:
                responses.append(bytes(view[:count]).decode("utf-8", errors="replace"))
