"""
Connection settings for the call client.

Settings come either from explicit arguments or from the environment. A ``.env``
file in the working directory is loaded first if it exists, the same way the
server entry point of a deployment would load it.
"""

import os
import re
from pathlib import Path
from typing import Optional

import dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from vapi_client.config.constants import DEFAULT_HOST, LOCALHOST, LOCALHOST_PORT
from vapi_client.errors import InvalidConfiguration

HOST_PATTERN = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9\-\.]*[A-Za-z0-9])?(:[0-9]{1,5})?$")


class Configuration(BaseModel):
    """Host and public key used to provision web calls."""

    model_config = ConfigDict(frozen=True)

    public_key: str = Field(..., description="Public API key sent as a bearer token")
    host: str = Field(DEFAULT_HOST, description="Backend host name, without scheme")

    @field_validator("public_key")
    def validate_public_key(cls, v):
        """Validate that the public key is not blank."""
        if not v.strip():
            raise ValueError("Public key cannot be empty")
        return v

    @field_validator("host")
    def validate_host(cls, v):
        """Validate that the host is not blank."""
        if not v.strip():
            raise ValueError("Host cannot be empty")
        return v.strip()

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Configuration":
        """
        Build a configuration from VAPI_PUBLIC_KEY and VAPI_HOST.

        Args:
            env_file: Optional path of a .env file to load first

        Returns:
            The configuration read from the environment
        """
        env_path = env_file or Path(".") / ".env"
        if env_path.exists():
            dotenv.load_dotenv(env_path)

        return cls(
            public_key=os.getenv("VAPI_PUBLIC_KEY", ""),
            host=os.getenv("VAPI_HOST", DEFAULT_HOST),
        )

    def make_url(self, path: str) -> str:
        """
        Build an absolute backend URL for ``path``.

        ``localhost`` is served over plain HTTP on the development port,
        every other host over HTTPS.

        Raises:
            InvalidConfiguration: If the host is not a bare host name
        """
        if not HOST_PATTERN.match(self.host):
            raise InvalidConfiguration(f"URL is invalid: host {self.host!r}")
        if not path.startswith("/"):
            path = f"/{path}"

        if self.host == LOCALHOST:
            return f"http://{LOCALHOST}:{LOCALHOST_PORT}{path}"
        return f"https://{self.host}{path}"
