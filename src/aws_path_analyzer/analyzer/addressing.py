"""Private/external address classification."""

from ipaddress import ip_address, ip_network

PRIVATE_NETWORKS = [
    ip_network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "100.64.0.0/10",  # shared address space (CGNAT)
        "127.0.0.0/8",
        "169.254.0.0/16",
        "fc00::/7",
        "fe80::/10",
        "::1/128",
    )
]


def is_private_ip(ip: str) -> bool:
    """True if ip falls in RFC1918/ULA/CGNAT/loopback/link-local space.

    Empty or unparseable input is not private.
    """
    if not ip:
        return False
    try:
        addr = ip_address(ip.strip())
    except ValueError:
        return False
    return any(
        addr.version == net.version and addr in net for net in PRIVATE_NETWORKS
    )


def is_external_destination(ip: str) -> bool:
    """True only for a parseable address outside the private ranges."""
    if not ip:
        return False
    try:
        ip_address(ip.strip())
    except ValueError:
        return False
    return not is_private_ip(ip)
