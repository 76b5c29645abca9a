"""
Automation client backends.

The page objects only depend on the ``AutomationClient`` protocol; the
Playwright implementation is imported lazily so the core can be used (and
tested) with any other client without Playwright installed at import time.

    from workbench_driver.backends import PlaywrightClient

    client = PlaywrightClient(page)
"""

from .protocol import AutomationClient

__all__ = [
    "AutomationClient",
    "PlaywrightClient",
]


def __getattr__(name: str):
    if name == "PlaywrightClient":
        from .playwright_backend import PlaywrightClient

        return PlaywrightClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
