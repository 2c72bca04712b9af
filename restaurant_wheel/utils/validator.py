# restaurant_wheel/utils/validator.py
import requests
from authlib.jose import JsonWebKey
from authlib.oauth2.rfc7523 import JWTBearerTokenValidator


class Auth0JWTBearerTokenValidator(JWTBearerTokenValidator):
    """Validates RS256 access tokens issued by an Auth0 tenant."""

    def __init__(self, domain, audience):
        issuer = f"https://{domain}/"
        resp = requests.get(f"{issuer}.well-known/jwks.json", timeout=5)
        resp.raise_for_status()
        public_key = JsonWebKey.import_key_set(resp.json())
        super().__init__(public_key)
        self.claims_options = {
            "exp": {"essential": True},
            "sub": {"essential": True},
            "aud": {"essential": True, "value": audience},
            "iss": {"essential": True, "value": issuer},
        }


class SharedSecretJWTBearerTokenValidator(JWTBearerTokenValidator):
    """Validates HS256 tokens signed with JWT_SECRET (self-hosted and tests)."""

    def __init__(self, secret, issuer=None):
        super().__init__(secret)
        self.claims_options = {
            "exp": {"essential": True},
            "sub": {"essential": True},
        }
        if issuer:
            self.claims_options["iss"] = {"essential": True, "value": issuer}
