import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

import aiohttp
from bidict import bidict

from krakenbot.connector.exchange.kraken import (
    kraken_constants as CONSTANTS,
    kraken_responses,
    kraken_utils,
    kraken_web_utils as web_utils,
)
from krakenbot.connector.exchange.kraken.kraken_auth import KrakenAuth
from krakenbot.connector.exchange.kraken.kraken_errors import KrakenConfigurationError, KrakenRequestError
from krakenbot.connector.exchange.kraken.kraken_responses import KrakenResponse
from krakenbot.connector.exchange.kraken.kraken_utils import KrakenConfigMap
from krakenbot.core.network_iterator import NetworkStatus
from krakenbot.core.web_assistant.connections.data_types import RESTMethod
from krakenbot.core.web_assistant.web_assistants_factory import WebAssistantsFactory
from krakenbot.logger import KrakenbotLogger


class KrakenExchange:
    """
    REST client for the Kraken spot API.

    Every call goes through `execute`, which picks the URL, decides whether the request is signed and turns
    the HTTP outcome into either a typed `KrakenResponse` or a `KrakenRequestError`.
    """

    _logger: Optional[KrakenbotLogger] = None

    def __init__(self,
                 kraken_api_key: str,
                 kraken_api_secret: str,
                 kraken_api_key_2fa: str = "",
                 kraken_api_secret_2fa: str = "",
                 kraken_api_passphrase: str = "",
                 kraken_api_passphrase_required: Optional[str] = None,
                 base_url: str = CONSTANTS.REST_URL,
                 api_factory: Optional[WebAssistantsFactory] = None,
                 time_provider=None,
                 timeout: Optional[aiohttp.ClientTimeout] = None):
        self._api_passphrase = kraken_api_passphrase
        self._base_url = base_url.rstrip("/")
        self._auth = KrakenAuth(
            api_key=kraken_api_key,
            secret_key=kraken_api_secret,
            api_key_2fa=kraken_api_key_2fa,
            secret_key_2fa=kraken_api_secret_2fa,
            passphrase=kraken_api_passphrase,
            passphrase_required=kraken_api_passphrase_required,
            time_provider=time_provider,
        )
        # a factory without auth would send private requests unsigned
        if api_factory is None or api_factory.auth is None:
            api_factory = web_utils.build_api_factory(auth=self._auth, timeout=timeout)
        self._web_assistants_factory = api_factory

    @classmethod
    def logger(cls) -> KrakenbotLogger:
        if cls._logger is None:
            cls._logger = logging.getLogger(KrakenbotLogger.logger_name_for_class(cls))
        return cls._logger

    @classmethod
    def from_config(cls, config: KrakenConfigMap, **kwargs) -> "KrakenExchange":
        return cls(
            kraken_api_key=config.kraken_api_key.get_secret_value(),
            kraken_api_secret=config.kraken_api_secret.get_secret_value(),
            kraken_api_key_2fa=config.kraken_api_key_2fa.get_secret_value(),
            kraken_api_secret_2fa=config.kraken_api_secret_2fa.get_secret_value(),
            kraken_api_passphrase=config.kraken_api_passphrase.get_secret_value(),
            kraken_api_passphrase_required=config.kraken_api_passphrase_required,
            base_url=config.base_url,
            **kwargs,
        )

    @property
    def name(self) -> str:
        return CONSTANTS.EXCHANGE_NAME

    @property
    def authenticator(self) -> KrakenAuth:
        return self._auth

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "KrakenExchange":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._web_assistants_factory.close()

    async def execute(self,
                      path_url: str,
                      method: Union[RESTMethod, str] = RESTMethod.GET,
                      payload: Optional[Dict[str, Any]] = None,
                      result_model: Any = None) -> KrakenResponse:
        """
        Sends one request to the exchange.

        :param path_url: the endpoint path, without the version segment (e.g. /public/Time)
        :param method: GET sends the payload as query string, POST as form body
        :param payload: the request parameters, in the order they are sent and signed
        :param result_model: the type `result` is validated against, looked up from the path when omitted
        :return: the decoded response, exchange reported errors included
        :raises KrakenConfigurationError: when the request can not be built, nothing is sent in that case
        :raises KrakenRequestError: when no 200 OK response is received
        """
        method = self._rest_method(method)
        if result_model is None:
            result_model = kraken_responses.result_model_for(path_url)
        payload = dict(payload or {})

        is_auth_required = web_utils.is_private_path(path_url)
        if is_auth_required:
            if self._auth.requires_two_factor():
                self._auth.ensure_two_factor_ready()
            else:
                payload.pop(CONSTANTS.OTP_KEY, None)
            url = web_utils.private_rest_url(path_url=path_url, base_url=self._base_url)
        else:
            url = web_utils.public_rest_url(path_url=path_url, base_url=self._base_url)

        rest_assistant = await self._web_assistants_factory.get_rest_assistant()
        self.logger().debug(f"Sending {method} request to {path_url} (signed: {is_auth_required}).")
        try:
            response = await rest_assistant.execute_request_and_get_response(
                url=url,
                endpoint_url=path_url,
                params=payload if method == RESTMethod.GET and payload else None,
                data=payload if method == RESTMethod.POST and payload else None,
                method=method,
                is_auth_required=is_auth_required,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger().network(
                f"Error sending {method} request to {path_url}.",
                exc_info=True,
                app_warning_msg=f"Could not reach Kraken at {self._base_url}. Check your network connection.",
            )
            raise kraken_responses.transport_error(e) from e

        try:
            return await kraken_responses.classify_response(response, result_model)
        except KrakenRequestError as e:
            self.logger().warning(f"{method} request to {path_url} failed with HTTP status {int(e.status)}.")
            raise

    async def get_server_time(self) -> KrakenResponse:
        return await self.execute(path_url=CONSTANTS.SERVER_TIME_PATH_URL)

    async def get_system_status(self) -> KrakenResponse:
        return await self.execute(path_url=CONSTANTS.SYSTEM_STATUS_PATH_URL)

    async def get_tradable_asset_pairs(self, pairs: List[str], info: Optional[str] = None) -> KrakenResponse:
        """
        :param pairs: exchange or alternate pair names, e.g. ["XBTUSD", "ETHUSD"]
        :param info: one of info, leverage, fees or margin, the exchange default is info
        """
        payload = {"pair": ",".join(pairs)}
        if info is not None:
            payload["info"] = info
        return await self.execute(path_url=CONSTANTS.ASSET_PAIRS_PATH_URL, payload=payload)

    async def get_open_orders(self) -> KrakenResponse:
        payload = {CONSTANTS.NONCE_KEY: str(self._auth.nonce_provider.next())}
        if self._api_passphrase:
            payload[CONSTANTS.OTP_KEY] = self._api_passphrase
        return await self.execute(
            path_url=CONSTANTS.OPEN_ORDERS_PATH_URL,
            method=RESTMethod.POST,
            payload=payload,
        )

    async def get_pair_symbol_map(self, pairs: List[str]) -> bidict:
        response = await self.get_tradable_asset_pairs(pairs)
        return kraken_utils.pair_symbol_map(response.result or {})

    async def check_network(self) -> NetworkStatus:
        try:
            response = await self.get_server_time()
        except KrakenRequestError:
            return NetworkStatus.NOT_CONNECTED
        if response.error or response.result is None:
            return NetworkStatus.NOT_CONNECTED
        return NetworkStatus.CONNECTED

    @staticmethod
    def _rest_method(method: Union[RESTMethod, str]) -> RESTMethod:
        if isinstance(method, RESTMethod):
            return method
        try:
            return RESTMethod(str(method).upper())
        except ValueError:
            raise KrakenConfigurationError(f"Unsupported HTTP method {method}, only GET and POST are allowed.")
