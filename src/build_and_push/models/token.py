"""Bearer token obtained from the identity provider."""

from dataclasses import dataclass

from pydantic import SecretStr


@dataclass(frozen=True)
class BearerToken:
    """Access token plus the tenant it was issued for."""

    access_token: SecretStr
    organization_id: str

    @property
    def authorization(self) -> str:
        """Value for an ``Authorization``-style header."""
        return f"Bearer {self.access_token.get_secret_value()}"
