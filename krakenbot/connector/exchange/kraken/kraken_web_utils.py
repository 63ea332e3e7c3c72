import asyncio
from typing import Optional

import aiohttp

from krakenbot.connector.exchange.kraken import kraken_constants as CONSTANTS, kraken_responses
from krakenbot.connector.exchange.kraken.kraken_auth import KrakenAuth
from krakenbot.connector.exchange.kraken.kraken_errors import KrakenResponseDecodeError
from krakenbot.core.web_assistant.connections.data_types import RESTMethod
from krakenbot.core.web_assistant.web_assistants_factory import WebAssistantsFactory


def public_rest_url(path_url: str, base_url: str = CONSTANTS.REST_URL) -> str:
    """
    Creates a full URL for provided public REST endpoint
    :param path_url: a public REST endpoint
    :param base_url: the scheme and host of the API
    :return: the full URL to the endpoint
    """
    return f"{base_url}{CONSTANTS.API_VERSION_PATH}{path_url}"


def private_rest_url(path_url: str, base_url: str = CONSTANTS.REST_URL) -> str:
    return public_rest_url(path_url=path_url, base_url=base_url)


def is_private_path(path_url: str) -> bool:
    return CONSTANTS.PRIVATE_PATH_MARKER in path_url


def build_api_factory(auth: Optional[KrakenAuth] = None,
                      timeout: Optional[aiohttp.ClientTimeout] = None) -> WebAssistantsFactory:
    api_factory = WebAssistantsFactory(auth=auth, timeout=timeout)
    return api_factory


async def get_current_server_time(base_url: str = CONSTANTS.REST_URL,
                                  api_factory: Optional[WebAssistantsFactory] = None) -> float:
    """
    Returns the exchange time in seconds. A temporary factory is used (and closed) when none is given.
    """
    owns_factory = api_factory is None
    api_factory = api_factory or build_api_factory()
    try:
        rest_assistant = await api_factory.get_rest_assistant()
        try:
            response = await rest_assistant.execute_request_and_get_response(
                url=public_rest_url(path_url=CONSTANTS.SERVER_TIME_PATH_URL, base_url=base_url),
                endpoint_url=CONSTANTS.SERVER_TIME_PATH_URL,
                method=RESTMethod.GET,
            )
            server_time = await kraken_responses.classify_response(response, kraken_responses.ServerTime)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise kraken_responses.transport_error(e) from e
    finally:
        if owns_factory:
            await api_factory.close()
    if server_time.result is None:
        raise KrakenResponseDecodeError(f"Server time missing from response, errors: {server_time.error}")
    return float(server_time.result.unixtime)
