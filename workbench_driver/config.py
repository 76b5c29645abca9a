from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .commands import DEFAULT_KEYBINDINGS, load_keybindings
from .constants import DEFAULT_INTERVAL_MS, DEFAULT_TIMEOUT_MS, RETRY_CEILING, RETRY_DELAY_MS
from .locators import WorkbenchLocators
from .poller import WaitPolicy

ENV_TIMEOUT_MS = "WORKBENCH_DRIVER_TIMEOUT_MS"
ENV_INTERVAL_MS = "WORKBENCH_DRIVER_INTERVAL_MS"
ENV_KEYBINDINGS = "WORKBENCH_DRIVER_KEYBINDINGS"
ENV_LOCATORS = "WORKBENCH_DRIVER_LOCATORS"


@dataclass
class DriverConfig:
    """
    Everything that binds the page objects to one workbench build.

    Attributes:
        policy: wait policy shared by every page object
        locators: selector table for the workbench DOM
        keybindings: command id -> keybinding, used before the command palette
        retry_ceiling: attempts for whole-procedure retries (quick outline)
        retry_delay_ms: pause between those attempts
    """

    policy: WaitPolicy = field(default_factory=WaitPolicy)
    locators: WorkbenchLocators = field(default_factory=WorkbenchLocators)
    keybindings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_KEYBINDINGS))
    retry_ceiling: int = RETRY_CEILING
    retry_delay_ms: int = RETRY_DELAY_MS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DriverConfig:
        """
        Build a config from environment variables, falling back to defaults.

        - WORKBENCH_DRIVER_TIMEOUT_MS / WORKBENCH_DRIVER_INTERVAL_MS: wait policy
        - WORKBENCH_DRIVER_KEYBINDINGS: path to a keybindings JSON file,
          merged over the defaults
        - WORKBENCH_DRIVER_LOCATORS: path to a locator override JSON file
        """
        env = os.environ if environ is None else environ

        policy = WaitPolicy(
            timeout_ms=_int_env(env, ENV_TIMEOUT_MS, DEFAULT_TIMEOUT_MS),
            interval_ms=_int_env(env, ENV_INTERVAL_MS, DEFAULT_INTERVAL_MS),
        )

        keybindings = dict(DEFAULT_KEYBINDINGS)
        keybindings_path = (env.get(ENV_KEYBINDINGS) or "").strip()
        if keybindings_path:
            keybindings.update(load_keybindings(keybindings_path))

        locators_path = (env.get(ENV_LOCATORS) or "").strip()
        locators = WorkbenchLocators.from_file(locators_path) if locators_path else WorkbenchLocators()

        return cls(policy=policy, locators=locators, keybindings=keybindings)


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
