"""A helper to create asynchronous HTTP client (via `httpx.AsyncClient`)
with common configurations.
"""

from httpx import AsyncClient, Limits, Timeout


def create_http_client(
    max_connections: int = 1024,
    connect_timeout: float = 3.0,
    request_timeout: float = 5.0,
    pool_timeout: float = 1.0,
    user_agent: str | None = None,
    verify: bool = True,
) -> AsyncClient:
    """Create a new `httpx.AsyncClient` with common configurations.

    Redirects are always followed, favicon services tend to bounce requests to a CDN.

    Args:
      - `max_connections` {int}: Max connections of the connection pool.
      - `connect_timeout` {float}: The timeout for establishing a connection to the host.
      - `request_timeout` {float}: The timeout for handling a request to the host.
      - `pool_timeout` {float}: The timeout for acquiring a connection from the pool.
      - `user_agent` {str | None}: The User-Agent header sent with every request.
      - `verify` {bool}: Whether TLS certificates of the upstream are validated.
    Returns:
      - {AsyncClient}: An async HTTP client.
    """
    headers = {"User-Agent": user_agent} if user_agent else None
    return AsyncClient(
        limits=Limits(max_connections=max_connections),
        timeout=Timeout(request_timeout, connect=connect_timeout, pool=pool_timeout),
        follow_redirects=True,
        verify=verify,
        headers=headers,
    )
