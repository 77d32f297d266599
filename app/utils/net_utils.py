import logging
import socket
from typing import List

logger = logging.getLogger("net_utils")

def local_ipv4_addresses() -> List[str]:
    """
    List the non-loopback IPv4 addresses this host can be reached on.

    Falls back to ["127.0.0.1"] when no other address can be found.
    """
    addresses = set()
    try:
        for info in socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET):
            ip = info[4][0]
            if ip and not ip.startswith("127."):
                addresses.add(ip)
    except OSError as e:
        logger.debug(f"Hostname lookup failed: {e}")

    # Doesn't have to be reachable; no packets are sent.
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("10.255.255.255", 1))
            ip = s.getsockname()[0]
            if ip and not ip.startswith("127."):
                addresses.add(ip)
    except OSError as e:
        logger.debug(f"Route lookup failed: {e}")

    return sorted(addresses) or ["127.0.0.1"]
