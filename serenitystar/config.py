"""
Client configuration for Serenity Star.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .validation import InputValidationError, validate_required

DEFAULT_BASE_URL = "https://api.serenitystar.ai"
DEFAULT_TIMEOUT = 30.0


@dataclass
class ClientConfig:
    """Configuration for the Serenity Star clients."""

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    assistant_agent: Optional[str] = None
    activity_agent: Optional[str] = None

    def validate(self) -> None:
        validate_required(self.api_key, "api_key")
        validate_required(self.base_url, "base_url")
        if self.timeout <= 0:
            raise InputValidationError(
                "timeout must be greater than zero", field="timeout", value=self.timeout
            )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create configuration from environment variables."""
        return cls(
            api_key=os.environ.get("SERENITY_API_KEY", ""),
            base_url=os.environ.get("SERENITY_BASE_URL", DEFAULT_BASE_URL),
            timeout=float(os.environ.get("SERENITY_TIMEOUT", str(DEFAULT_TIMEOUT))),
            assistant_agent=os.environ.get("SERENITY_ASSISTANT_AGENT"),
            activity_agent=os.environ.get("SERENITY_ACTIVITY_AGENT"),
        )
