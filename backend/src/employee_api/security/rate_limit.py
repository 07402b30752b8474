"""Request rate limits for the employee API.

Only login carries its own limit; every other route falls under the
default. Clients are keyed by IP. Behind a reverse proxy the address is
taken from X-Forwarded-For, skipping hops that belong to trusted proxies.
"""

from functools import lru_cache
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from employee_api.config import Settings, get_settings

# Loopback and private ranges are trusted in development when none are configured
DEVELOPMENT_PROXIES = ("127.0.0.1/32", "::1/128", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")


@lru_cache
def trusted_networks() -> tuple[IPv4Network | IPv6Network, ...]:
    settings = get_settings()
    proxies = settings.trusted_proxies_list
    if not proxies and settings.environment == "development":
        proxies = list(DEVELOPMENT_PROXIES)
    return tuple(ip_network(proxy, strict=False) for proxy in proxies)


def _is_trusted(address: str, networks: tuple[IPv4Network | IPv6Network, ...]) -> bool:
    try:
        addr = ip_address(address)
    except ValueError:
        return False
    return any(addr in network for network in networks)


def client_ip(request: Request) -> str:
    """Key function: the address of the client that sent the request.

    The forwarded chain is read right to left and the first hop that is
    not a trusted proxy wins. Malformed entries stop the walk so a client
    cannot spoof its address by prepending garbage.
    """
    peer = get_remote_address(request)
    networks = trusted_networks()
    if not _is_trusted(peer, networks):
        return peer

    forwarded = request.headers.get("X-Forwarded-For", "")
    for hop in reversed([part.strip() for part in forwarded.split(",") if part.strip()]):
        try:
            ip_address(hop)
        except ValueError:
            break
        if not _is_trusted(hop, networks):
            return hop
    return peer


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=client_ip,
        default_limits=[f"{settings.rate_limit_default}/minute"],
        storage_uri=settings.rate_limit_storage_uri,
    )


limiter = build_limiter(get_settings())

LOGIN_LIMIT = f"{get_settings().rate_limit_auth_login}/minute"
