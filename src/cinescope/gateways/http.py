from functools import wraps

import httpx

from cinescope.exceptions import RemoteLogicalFailure, TransportFailure


def with_client(func):
    """Inject an ``httpx.AsyncClient`` into a gateway classmethod.

    A caller may pass its own ``client=``; otherwise a short-lived client is
    built from the gateway's ``new_client()`` and closed after the call.
    """

    @wraps(func)
    async def wrapper(cls, *args, **kwargs):
        if kwargs.get("client"):
            return await func(cls, *args, **kwargs)
        async with cls.new_client() as client:
            kwargs["client"] = client
            return await func(cls, *args, **kwargs)

    return wrapper


async def request_json(client: httpx.AsyncClient, method: str, url: str, **kwargs) -> dict | list:
    """Send a request and decode its JSON body, mapping failures to CatalogError."""
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TransportError as e:
        raise TransportFailure(f"{method} {url} failed: {e}")

    if not response.is_success:
        raise RemoteLogicalFailure(f"{method} {url} returned HTTP {response.status_code}", response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise RemoteLogicalFailure(f"{method} {url} returned invalid JSON: {e}", response.status_code)
