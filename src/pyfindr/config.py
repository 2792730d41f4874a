"""Client configuration for pyfindr."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyfindr._constants import DEFAULT_POLLER_URL
from pyfindr.exceptions import FindrConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class Accessory:
    """A tracked accessory and its provisioned key.

    Parameters
    ----------
    id : str
        Caller-chosen identifier.
    private_key : str
        Base64 encoding of the 28-byte P-224 private scalar.
    name : str
        Display name.
    """

    id: str
    private_key: str = dataclasses.field(repr=False)
    name: str = ""


@dataclasses.dataclass(frozen=True)
class FindrConfig:
    """Client configuration.

    Parameters
    ----------
    api_url : str
        Report server endpoint. A URL containing ``sample.json`` is
        treated as a static demo file and fetched with GET.
    username : str
        HTTP basic auth user for the report server. Empty disables auth.
    password : str
        HTTP basic auth password.
    days : int
        How many days of reports to request from the report server.
    use_poller : bool
        Fetch from the hosted poller service instead of ``api_url``.
    poller_api_key : str
        API key for the poller service.
    poller_url : str
        Poller reports endpoint; the advertisement key is appended.
    request_timeout : float
        Total HTTP timeout in seconds.
    decrypt_workers : int or None
        Thread pool size for batch decryption. ``None`` decrypts
        sequentially.
    """

    api_url: str = ""
    username: str = ""
    password: str = dataclasses.field(default="", repr=False)
    days: int = 7
    use_poller: bool = False
    poller_api_key: str = dataclasses.field(default="", repr=False)
    poller_url: str = DEFAULT_POLLER_URL
    request_timeout: float = 30.0
    decrypt_workers: int | None = None

    @property
    def poller_enabled(self) -> bool:
        return self.use_poller and bool(self.poller_api_key)

    @property
    def basic_auth_enabled(self) -> bool:
        return bool(self.username) and bool(self.password)

    def validate(self) -> None:
        """Check that at least one report source is usable.

        Raises
        ------
        FindrConfigError
            If neither ``api_url`` nor poller credentials are configured,
            or a numeric field is out of range.
        """
        if not self.api_url and not self.poller_enabled:
            raise FindrConfigError("Configure api_url or enable the poller with an API key")
        if self.days < 1:
            raise FindrConfigError(f"days must be positive (got {self.days})")
        if self.request_timeout <= 0:
            raise FindrConfigError(f"request_timeout must be positive (got {self.request_timeout})")
        if self.decrypt_workers is not None and self.decrypt_workers < 1:
            raise FindrConfigError(f"decrypt_workers must be at least 1 (got {self.decrypt_workers})")

    @classmethod
    def from_env(cls, **overrides: Any) -> FindrConfig:
        """Create configuration from environment variables.

        Reads ``FINDR_API_URL``, ``FINDR_USERNAME``, ``FINDR_PASSWORD``,
        ``FINDR_DAYS``, ``FINDR_USE_POLLER``, ``FINDR_POLLER_API_KEY``,
        ``FINDR_POLLER_URL``, ``FINDR_REQUEST_TIMEOUT`` and
        ``FINDR_DECRYPT_WORKERS``. Explicit keyword arguments override
        environment values.

        Raises
        ------
        FindrConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FINDR_API_URL": "api_url",
            "FINDR_USERNAME": "username",
            "FINDR_PASSWORD": "password",
            "FINDR_POLLER_API_KEY": "poller_api_key",
            "FINDR_POLLER_URL": "poller_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            days_env = env.get("FINDR_DAYS")
            if days_env is not None and "days" not in overrides:
                config_kwargs["days"] = int(days_env)

            timeout_env = env.get("FINDR_REQUEST_TIMEOUT")
            if timeout_env is not None and "request_timeout" not in overrides:
                config_kwargs["request_timeout"] = float(timeout_env)

            workers_env = env.get("FINDR_DECRYPT_WORKERS")
            if workers_env is not None and "decrypt_workers" not in overrides:
                config_kwargs["decrypt_workers"] = int(workers_env)
        except ValueError as exc:
            raise FindrConfigError(f"Invalid numeric environment value: {exc}") from exc

        if "use_poller" not in overrides:
            config_kwargs["use_poller"] = _env_bool(env.get("FINDR_USE_POLLER"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
