"""Client for the OAuth2 token endpoint."""

import httpx
import jwt
import structlog
from pydantic import BaseModel, SecretStr, ValidationError

from ..exceptions import TokenError
from ..models.token import BearerToken

ORGANIZATION_CLAIM = "organization_id"


class _TokenResponse(BaseModel):
    access_token: str


class OAuthClient:
    """Obtain bearer tokens with the client credentials grant.

    The token is a JWT whose ``organization_id`` claim names the tenant
    subsequent API requests are made for.  The claim is read without
    verifying the signature: the token came straight from the issuer
    over TLS, and it is only ever handed back to services that do verify
    it.
    """

    def __init__(self, http_client: httpx.Client, token_url: str) -> None:
        self._http_client = http_client
        self._token_url = token_url
        self._logger = structlog.get_logger(__name__)

    def get_bearer_token(
        self, client_id: str, secret: SecretStr
    ) -> BearerToken:
        self._logger.info("Getting bearer token...")
        form = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": secret.get_secret_value(),
        }
        try:
            r = self._http_client.post(self._token_url, data=form)
        except httpx.HTTPError as exc:
            raise TokenError(f"failed to get token: {exc}") from exc
        if r.status_code != httpx.codes.OK:
            raise TokenError(
                f"failed to get token: {r.status_code} {r.reason_phrase}"
            )
        try:
            access_token = _TokenResponse.model_validate_json(
                r.content
            ).access_token
        except ValidationError as exc:
            raise TokenError(f"failed to get token: {exc}") from exc

        organization_id = self._organization_id(access_token)
        self._logger.info("Bearer token obtained.")
        return BearerToken(
            access_token=SecretStr(access_token),
            organization_id=organization_id,
        )

    def _organization_id(self, token: str) -> str:
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.DecodeError as exc:
            raise TokenError("invalid token format") from exc
        org = claims.get(ORGANIZATION_CLAIM)
        if not isinstance(org, str):
            raise TokenError(f"{ORGANIZATION_CLAIM} not found in token")
        return org
