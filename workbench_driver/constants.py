"""Workbench driver constants."""

# Shared wait policy defaults (milliseconds).
DEFAULT_TIMEOUT_MS = 20_000
DEFAULT_INTERVAL_MS = 100

# Key sent after every key so the workbench flushes the press before the next one.
NULL_KEY = "NULL"

# Debug console line announcing the debuggee's inspector port.
DEBUG_PORT_PREFIX = "Port: "
DEFAULT_DEBUG_PORT = 3000

# Quick outline placeholder shown while the symbol provider is still loading.
NO_SYMBOLS_SENTINEL = "No symbol information for the file"
RETRY_CEILING = 10
RETRY_DELAY_MS = 250
