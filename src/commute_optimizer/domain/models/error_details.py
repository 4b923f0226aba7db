"""Error details domain model."""

from pydantic import BaseModel, ConfigDict


class ErrorDetails(BaseModel):
    """What a provider said when a request failed."""

    model_config = ConfigDict(frozen=True)

    provider: str | None = None  # e.g. "google_routes"
    status_code: int | None = None
    reason: str

    def describe(self) -> str:
        """One-line summary such as "google_routes HTTP 403: API key not valid"."""
        prefix = self.provider or "provider"
        if self.status_code is not None:
            prefix = f"{prefix} HTTP {self.status_code}"
        return f"{prefix}: {self.reason}"
