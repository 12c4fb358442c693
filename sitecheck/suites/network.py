"""HTTP and TLS helpers used by the suites."""

import asyncio
import ssl
from datetime import UTC, datetime

import httpx
from pydantic import BaseModel, Field

from sitecheck.core.exceptions import ConnectivityError

DEFAULT_TIMEOUT_S = 10.0

CONNECTIVITY_HINTS = [
    "Verify DNS settings point to GitHub Pages",
    "Check GitHub Pages settings in repository",
    "Ensure CNAME file is in repository root",
    "Wait for DNS propagation (up to 24 hours)",
]


class CertificateInfo(BaseModel):
    """The parts of a TLS peer certificate the checks care about."""

    subject_cn: str | None = None
    issuer_org: str | None = None
    valid_from: datetime
    valid_to: datetime

    def is_valid_at(self, moment: datetime | None = None) -> bool:
        """Whether ``moment`` (default: now) lies in the validity window."""
        moment = moment or datetime.now(UTC)
        return self.valid_from <= moment <= self.valid_to


class SiteResponse(BaseModel):
    """Response of an HTTPS check against a domain."""

    url: str
    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    certificate: CertificateInfo | None = None


def _first_attribute(name: tuple, key: str) -> str | None:
    for rdn in name:
        for attr_key, value in rdn:
            if attr_key == key:
                return value
    return None


def parse_certificate(cert: dict) -> CertificateInfo:
    """Convert ``SSLSocket.getpeercert()`` output into CertificateInfo."""
    return CertificateInfo(
        subject_cn=_first_attribute(cert.get("subject", ()), "commonName"),
        issuer_org=_first_attribute(cert.get("issuer", ()), "organizationName"),
        valid_from=datetime.fromtimestamp(
            ssl.cert_time_to_seconds(cert["notBefore"]), UTC
        ),
        valid_to=datetime.fromtimestamp(
            ssl.cert_time_to_seconds(cert["notAfter"]), UTC
        ),
    )


async def fetch_certificate(
    host: str, port: int = 443, timeout: float = DEFAULT_TIMEOUT_S
) -> CertificateInfo:
    """Open a TLS connection and read the peer certificate.

    Raises:
        ConnectivityError: On DNS, TCP, TLS failure or timeout.
    """
    context = ssl.create_default_context()
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(
                host, port, ssl=context, server_hostname=host
            ),
            timeout=timeout,
        )
    except TimeoutError as e:
        raise ConnectivityError(
            f"Request timeout after {timeout}s", endpoint=host, cause=e
        ) from e
    except (OSError, ssl.SSLError) as e:
        raise ConnectivityError(
            f"TLS connection to {host} failed: {e}", endpoint=host, cause=e
        ) from e

    try:
        cert = writer.get_extra_info("peercert")
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except (OSError, ssl.SSLError):
            pass

    if not cert:
        raise ConnectivityError(f"No certificate presented by {host}", endpoint=host)
    return parse_certificate(cert)


async def check_https(
    domain: str,
    timeout: float = DEFAULT_TIMEOUT_S,
    client: httpx.AsyncClient | None = None,
    with_certificate: bool = True,
) -> SiteResponse:
    """GET ``https://<domain>/`` and collect status, headers, body and cert.

    Args:
        domain: Host name to check.
        timeout: Connection deadline in seconds.
        client: Optional client (injected by tests).
        with_certificate: Also read the TLS certificate.

    Returns:
        SiteResponse for the request.

    Raises:
        ConnectivityError: On network failure or timeout.
    """
    url = f"https://{domain}/"
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), follow_redirects=True, max_redirects=5
        )

    try:
        response = await client.get(url)
    except httpx.TimeoutException as e:
        raise ConnectivityError(
            f"Request timeout after {timeout}s",
            endpoint=url,
            hints=CONNECTIVITY_HINTS,
            cause=e,
        ) from e
    except httpx.HTTPError as e:
        raise ConnectivityError(
            f"Connection to {url} failed: {e}",
            endpoint=url,
            hints=CONNECTIVITY_HINTS,
            cause=e,
        ) from e
    finally:
        if owns_client:
            await client.aclose()

    certificate = None
    if with_certificate:
        certificate = await fetch_certificate(domain, timeout=timeout)

    return SiteResponse(
        url=url,
        status_code=response.status_code,
        headers=dict(response.headers),
        body=response.text,
        certificate=certificate,
    )


async def is_reachable(
    url: str,
    timeout: float = 5.0,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Return True if ``url`` answers an HTTP GET with any status."""
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
    try:
        await client.get(url)
    except httpx.HTTPError:
        return False
    finally:
        if owns_client:
            await client.aclose()
    return True
