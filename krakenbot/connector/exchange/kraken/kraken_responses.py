from decimal import Decimal
from http import HTTPStatus
from typing import Any, Dict, Generic, List, Optional, TypeVar

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from krakenbot.connector.exchange.kraken import kraken_constants as CONSTANTS
from krakenbot.connector.exchange.kraken.kraken_errors import (
    KrakenConfigurationError,
    KrakenRequestError,
    KrakenResponseDecodeError,
)
from krakenbot.core.web_assistant.connections.data_types import RESTResponse

ResultT = TypeVar("ResultT")


class ServerTime(BaseModel):
    unixtime: int
    rfc1123: str


class SystemStatus(BaseModel):
    status: str
    timestamp: str


class TradingPair(BaseModel):
    # /public/AssetPairs only returns a subset of the fields when an `info` level other than "info" is asked for
    altname: Optional[str] = None
    wsname: Optional[str] = None
    aclass_base: Optional[str] = None
    base: Optional[str] = None
    aclass_quote: Optional[str] = None
    quote: Optional[str] = None
    lot: Optional[str] = None
    pair_decimals: Optional[int] = None
    lot_decimals: Optional[int] = None
    lot_multiplier: Optional[int] = None
    leverage_buy: List[int] = Field(default_factory=list)
    leverage_sell: List[int] = Field(default_factory=list)
    fees: List[List[Decimal]] = Field(default_factory=list)
    fees_maker: List[List[Decimal]] = Field(default_factory=list)
    fee_volume_currency: Optional[str] = None
    margin_call: Optional[int] = None
    margin_stop: Optional[int] = None
    ordermin: Optional[Decimal] = None


class OrderDescription(BaseModel):
    pair: str
    type: str
    ordertype: str
    price: Decimal
    price2: Decimal
    leverage: str
    order: str
    close: Optional[str] = None


class Order(BaseModel):
    refid: Optional[str] = None
    userref: Optional[int] = None
    status: str
    opentm: float
    starttm: float = 0
    expiretm: float = 0
    descr: OrderDescription
    vol: Decimal
    vol_exec: Decimal
    cost: Decimal
    fee: Decimal
    price: Decimal
    stopprice: Decimal = Decimal("0")
    limitprice: Decimal = Decimal("0")
    trigger: Optional[str] = None
    misc: str = ""
    oflags: str = ""
    trades: List[str] = Field(default_factory=list)


class OpenOrders(BaseModel):
    open: Dict[str, Order] = Field(default_factory=dict)


class KrakenResponse(BaseModel, Generic[ResultT]):
    """
    Envelope of every Kraken REST response. A non-empty `error` list is an exchange reported problem, it is
    handed back to the caller as is. `result` is missing from most error responses.
    """
    error: List[str] = Field(default_factory=list)
    result: Optional[ResultT] = None


# The result shape is chosen by the endpoint that was called, never guessed from the body
RESULT_MODELS: Dict[str, Any] = {
    CONSTANTS.SERVER_TIME_PATH_URL: ServerTime,
    CONSTANTS.SYSTEM_STATUS_PATH_URL: SystemStatus,
    CONSTANTS.ASSET_PAIRS_PATH_URL: Dict[str, TradingPair],
    CONSTANTS.OPEN_ORDERS_PATH_URL: OpenOrders,
}


def result_model_for(path_url: str) -> Any:
    try:
        return RESULT_MODELS[path_url]
    except KeyError:
        raise KrakenConfigurationError(f"No result model registered for {path_url}, pass one explicitly.")


async def classify_response(response: RESTResponse, result_model: Any) -> KrakenResponse:
    """
    Turns a received HTTP response into the typed result of the endpoint.

    :param response: the response received from the exchange
    :param result_model: the type the `result` member has to validate against
    :return: the decoded response, including any exchange reported errors
    :raises KrakenRequestError: when the status is not 200 OK
    :raises KrakenResponseDecodeError: when the body does not match the expected shape
    """
    if response.status != HTTPStatus.OK:
        # error pages from proxies are not always utf8
        body = (await response.read()).decode("utf8", errors="replace")
        raise KrakenRequestError(
            status=response.status,
            message=f"Error executing request {response.method} {response.url}. "
                    f"HTTP status is {response.status}. Error: {body}")
    try:
        body = await response.json()
    except ValueError as e:
        raise KrakenResponseDecodeError(f"Response from {response.url} is not valid JSON.") from e
    return decode_response(body, result_model)


def decode_response(body: Any, result_model: Any) -> KrakenResponse:
    try:
        return KrakenResponse[result_model].model_validate(body)
    except ValidationError as e:
        raise KrakenResponseDecodeError(f"Unexpected response shape: {e}") from e


def transport_error(exception: Exception) -> KrakenRequestError:
    """
    Maps a failure raised while sending the request or receiving the response to a status coded error.
    """
    if isinstance(exception, aiohttp.ClientResponseError) and exception.status:
        return KrakenRequestError(status=exception.status, message=str(exception))
    return KrakenRequestError(
        status=HTTPStatus.BAD_REQUEST,
        message=f"Request failed before a response status was received: {exception!r}")
