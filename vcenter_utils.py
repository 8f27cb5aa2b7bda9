# vcenter_utils.py
"""vCenter connection utility functions."""

import logging
import os
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from managers.vcenter import VCenter
from constants import (
    ENV_URL, ENV_USER, ENV_PASS, ENV_PORT, ENV_DISABLE_SSL_VERIFY,
    ENV_TASK_TIMEOUT, DEFAULT_PORT
)

load_dotenv()
logger = logging.getLogger('vcdelete.vcenter')


def env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 't')


def env_timeout() -> Optional[float]:
    """Reads VC_TASK_TIMEOUT; empty or unset means wait without limit."""
    raw = os.getenv(ENV_TASK_TIMEOUT, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {ENV_TASK_TIMEOUT}={raw!r}.")
        return None
    return value if value > 0 else None


def parse_service_url(url: str, port: Optional[int] = None):
    """
    Splits a web service URL into (host, port).

    Accepts a bare host name ("vc01.lab.local") as well as a full SDK URL
    ("https://vc01.lab.local:8443/sdk"). An explicit ``port`` wins over the
    one in the URL.
    """
    if not url:
        raise ValueError("A web service URL or host name is required.")
    parsed = urlparse(url if "://" in url else f"https://{url}")
    if not parsed.hostname:
        raise ValueError(f"Cannot determine the host from URL '{url}'.")
    if port is None:
        port = parsed.port or int(os.getenv(ENV_PORT, DEFAULT_PORT))
    return parsed.hostname, port


def get_vcenter_instance(url: Optional[str], user: Optional[str], password: Optional[str],
                         port: Optional[int] = None,
                         disable_ssl_verification: Optional[bool] = None,
                         task_timeout: Optional[float] = None) -> Optional[VCenter]:
    """Create and connect a VCenter service instance."""
    url = url or os.getenv(ENV_URL)
    user = user or os.getenv(ENV_USER)
    password = password or os.getenv(ENV_PASS)
    if disable_ssl_verification is None:
        disable_ssl_verification = env_flag(ENV_DISABLE_SSL_VERIFY)

    if not user or not password:
        logger.error(f"vCenter credentials missing (--username/--password or {ENV_USER}/{ENV_PASS}).")
        return None
    try:
        host, port = parse_service_url(url, port)
    except ValueError as e:
        logger.error(str(e))
        return None

    service_instance = VCenter(
        host,
        user,
        password,
        port=port,
        disable_ssl_verification=disable_ssl_verification,
        task_timeout=task_timeout
    )
    service_instance.connect()

    if not service_instance.is_connected():
        logger.error(f"get_vcenter_instance: Failed to establish a session with {host}")
        return None
    return service_instance
