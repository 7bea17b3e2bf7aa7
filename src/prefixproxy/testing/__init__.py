"""Test utilities for prefixproxy.

Drive a ``ProxyApp`` through ASGI directly::

    from prefixproxy.testing import TestClient
"""

from prefixproxy.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
