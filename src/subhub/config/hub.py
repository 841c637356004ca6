"""Connection settings for the hub API server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, env_float, optional_env_var, require_env_var

DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0
DEFAULT_COMPONENT: Final[str] = "subscription-hub"


@dataclass(frozen=True, slots=True)
class HubConfig:
    """Holds the API server endpoint and credentials used by the resource store."""

    api_server: str
    token: str | None = None
    ca_bundle: str | None = None
    insecure_skip_verify: bool = False
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    component: str = DEFAULT_COMPONENT

    @property
    def verify(self) -> bool | str:
        if self.insecure_skip_verify:
            return False
        return self.ca_bundle or True

    @classmethod
    def from_environment(cls) -> HubConfig:
        return cls(
            api_server=require_env_var("SUBHUB_API_SERVER").rstrip("/"),
            token=optional_env_var("SUBHUB_API_TOKEN"),
            ca_bundle=optional_env_var("SUBHUB_CA_BUNDLE"),
            insecure_skip_verify=env_flag("SUBHUB_INSECURE_SKIP_VERIFY"),
            timeout_seconds=env_float("SUBHUB_TIMEOUT_SECONDS", default=DEFAULT_TIMEOUT_SECONDS),
            component=optional_env_var("SUBHUB_COMPONENT") or DEFAULT_COMPONENT,
        )


def get_hub_config() -> HubConfig:
    return HubConfig.from_environment()
