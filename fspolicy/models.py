from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class SecurityParams(BaseModel):
    """
    The two strings a signed request carries (`policy=...&signature=...`).

    Building the request URL is left to the HTTP client.
    """

    model_config = ConfigDict(frozen=True)

    policy: str = Field(min_length=4)
    signature: str = Field(pattern=r"^[0-9a-f]{64}$")

    def as_params(self) -> Dict[str, str]:
        return {"policy": self.policy, "signature": self.signature}
