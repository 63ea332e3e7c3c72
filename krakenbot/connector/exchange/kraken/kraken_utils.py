import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union
from urllib.parse import quote

from bidict import bidict
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from krakenbot.connector.exchange.kraken import kraken_constants as CONSTANTS
from krakenbot.connector.exchange.kraken.kraken_errors import KrakenConfigurationError

if TYPE_CHECKING:
    from krakenbot.connector.exchange.kraken.kraken_responses import TradingPair

EXAMPLE_PAIR = "XBTUSD"


class KrakenConfigMap(BaseModel):
    """
    Settings needed to build a Kraken client. Loaded once at startup and never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    kraken_api_key: SecretStr = Field(default=SecretStr(""), description="Kraken API key")
    kraken_api_secret: SecretStr = Field(default=SecretStr(""), description="Kraken API secret (base64)")
    kraken_api_key_2fa: SecretStr = Field(default=SecretStr(""), description="API key of the 2FA protected key pair")
    kraken_api_secret_2fa: SecretStr = Field(default=SecretStr(""), description="API secret of the 2FA protected key pair")
    kraken_api_passphrase: SecretStr = Field(default=SecretStr(""), description="2FA password or OTP value")
    kraken_api_passphrase_required: Optional[str] = Field(
        default=None,
        description=f"Set to '{CONSTANTS.PASSPHRASE_REQUIRED_SENTINEL}' to sign with the 2FA key pair",
    )
    base_url: str = CONSTANTS.REST_URL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("base_url is required for a Kraken client")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) url, got '{v}'")
        return v.rstrip("/")


def load_config_from_env(environ: Optional[Mapping[str, str]] = None,
                         dotenv_path: Optional[Union[str, Path]] = None) -> KrakenConfigMap:
    """
    Builds the client settings from environment variables.

    :param environ: the mapping to read from, defaults to `os.environ`
    :param dotenv_path: optional .env file loaded into `os.environ` before reading
    :return: the validated settings
    """
    if dotenv_path is not None:
        load_dotenv(dotenv_path)
    env = os.environ if environ is None else environ
    try:
        return KrakenConfigMap(
            kraken_api_key=env.get(CONSTANTS.ENV_API_KEY, ""),
            kraken_api_secret=env.get(CONSTANTS.ENV_API_SECRET, ""),
            kraken_api_key_2fa=env.get(CONSTANTS.ENV_API_KEY_2FA, ""),
            kraken_api_secret_2fa=env.get(CONSTANTS.ENV_API_SECRET_2FA, ""),
            kraken_api_passphrase=env.get(CONSTANTS.ENV_API_PASSPHRASE, ""),
            kraken_api_passphrase_required=env.get(CONSTANTS.ENV_API_PASSPHRASE_REQUIRED),
            base_url=env.get(CONSTANTS.ENV_BASE_URL, CONSTANTS.REST_URL),
        )
    except ValidationError as e:
        raise KrakenConfigurationError(f"Invalid Kraken configuration: {e}") from e


def resolve_two_factor_flag(raw_flag: Optional[str]) -> bool:
    """
    Missing or empty means no 2FA, only the exact sentinel value turns it on.
    """
    if not raw_flag:
        return False
    return raw_flag == CONSTANTS.PASSPHRASE_REQUIRED_SENTINEL


def encode_signing_payload(nonce: Any, payload: Mapping[str, Any]) -> str:
    """
    Builds the string the signature is computed over: `nonce=<nonce>` first, then every other payload entry
    in the payload's own order with url-encoded values. Keys are not sorted, reordering the payload changes
    the signature.
    """
    arguments = [f"{CONSTANTS.NONCE_KEY}={nonce}"]
    for key, value in payload.items():
        if key != CONSTANTS.NONCE_KEY:
            arguments.append(f"{key}={quote(str(value), safe='')}")
    return "&".join(arguments)


def pair_symbol_map(pairs: Mapping[str, "TradingPair"]) -> bidict:
    """
    Maps the exchange pair names (e.g. XXBTZUSD) to their alternate names (e.g. XBTUSD).
    """
    mapping = bidict()
    for exchange_symbol, pair in pairs.items():
        if pair.altname is not None:
            mapping[exchange_symbol] = pair.altname
    return mapping
