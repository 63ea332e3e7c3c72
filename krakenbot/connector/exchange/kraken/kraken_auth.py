import base64
import binascii
import hashlib
import hmac
import time
from typing import Any, Dict, Mapping, Optional, Tuple

from krakenbot.connector.exchange.kraken import kraken_constants as CONSTANTS, kraken_utils
from krakenbot.connector.exchange.kraken.kraken_errors import KrakenConfigurationError, KrakenSignatureError
from krakenbot.core.web_assistant.auth import AuthBase
from krakenbot.core.web_assistant.connections.data_types import RESTRequest


class KrakenNonceProvider:
    """
    Millisecond timestamps used as request nonces.

    Two calls within the same millisecond return the same value. No sequencing is added on top of the clock.
    """

    def __init__(self, time_provider=None):
        self._time_provider = time_provider or time

    def next(self) -> int:
        return int(self._time_provider.time() * 1e3)


class KrakenAuth(AuthBase):
    def __init__(self,
                 api_key: str,
                 secret_key: str,
                 api_key_2fa: str = "",
                 secret_key_2fa: str = "",
                 passphrase: str = "",
                 passphrase_required: Optional[str] = None,
                 time_provider=None):
        self.api_key = api_key
        self.secret_key = secret_key
        self.api_key_2fa = api_key_2fa
        self.secret_key_2fa = secret_key_2fa
        self.passphrase = passphrase
        self._passphrase_required = passphrase_required
        self._two_factor_required: Optional[bool] = None
        self._nonce_provider = KrakenNonceProvider(time_provider=time_provider)

    @property
    def nonce_provider(self) -> KrakenNonceProvider:
        return self._nonce_provider

    def requires_two_factor(self) -> bool:
        """
        Resolved from the passphrase-required flag on first use and cached until invalidated.
        """
        if self._two_factor_required is None:
            self._two_factor_required = kraken_utils.resolve_two_factor_flag(self._passphrase_required)
        return self._two_factor_required

    def invalidate_two_factor_requirement(self):
        self._two_factor_required = None

    def active_pair(self) -> Tuple[str, str]:
        if self.requires_two_factor():
            return self.api_key_2fa, self.secret_key_2fa
        return self.api_key, self.secret_key

    def ensure_two_factor_ready(self):
        """
        Checks that the 2FA key pair and the passphrase are present when two-factor signing is on.

        :raises KrakenConfigurationError: when a required value is empty
        """
        if not self.requires_two_factor():
            return
        required = (("2FA API key", self.api_key_2fa),
                    ("2FA API secret", self.secret_key_2fa),
                    ("API passphrase", self.passphrase))
        missing = [name for name, value in required if not value]
        if missing:
            raise KrakenConfigurationError(
                f"Two-factor signing is required but {', '.join(missing)} is missing.")

    async def rest_authenticate(self, request: RESTRequest) -> RESTRequest:
        """
        Adds the API-Key and API-Sign headers. Requests without payload are left untouched.

        :param request: the request to be configured for authenticated interaction
        """
        payload = request.payload
        if payload:
            if CONSTANTS.NONCE_KEY in payload:
                nonce = payload[CONSTANTS.NONCE_KEY]
            else:
                nonce = self._nonce_provider.next()
            headers = {}
            if request.headers is not None:
                headers.update(request.headers)
            headers.update(self.header_for_authentication(
                path_url=request.endpoint_url,
                nonce=nonce,
                payload=payload,
            ))
            request.headers = headers
        return request

    def header_for_authentication(self, path_url: str, nonce: Any, payload: Mapping[str, Any]) -> Dict[str, str]:
        api_key, secret_key = self.active_pair()
        return {
            CONSTANTS.API_KEY_HEADER: api_key,
            CONSTANTS.API_SIGN_HEADER: self.generate_signature(
                secret=secret_key, path_url=path_url, nonce=nonce, payload=payload),
        }

    @staticmethod
    def generate_signature(secret: str, path_url: str, nonce: Any, payload: Mapping[str, Any]) -> str:
        """
        Computes API-Sign: base64(HMAC-SHA512(base64decode(secret), "/0" + path + SHA256(nonce + postdata))).

        :param secret: the base64 encoded API secret
        :param path_url: the endpoint path without the version segment (e.g. /private/OpenOrders)
        :param nonce: the nonce sent with the request
        :param payload: the request parameters, in the order they are sent
        :return: the base64 encoded signature
        """
        signed_path = f"{CONSTANTS.API_VERSION_PATH}{path_url}"
        encoded_payload = kraken_utils.encode_signing_payload(nonce=nonce, payload=payload)

        sha256 = hashlib.sha256()
        sha256.update(str(nonce).encode("utf8"))
        sha256.update(encoded_payload.encode("utf8"))

        mac = hmac.new(KrakenAuth._decode_secret(secret), signed_path.encode("utf8"), hashlib.sha512)
        mac.update(sha256.digest())
        return base64.b64encode(mac.digest()).decode("utf8")

    @staticmethod
    def verify_signature(secret: str, path_url: str, nonce: Any, payload: Mapping[str, Any], signature: str) -> bool:
        expected = KrakenAuth.generate_signature(secret=secret, path_url=path_url, nonce=nonce, payload=payload)
        return hmac.compare_digest(expected.encode("utf8"), signature.encode("utf8"))

    @staticmethod
    def _decode_secret(secret: str) -> bytes:
        try:
            return base64.b64decode(secret, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KrakenSignatureError("The API secret is not valid base64.") from e
