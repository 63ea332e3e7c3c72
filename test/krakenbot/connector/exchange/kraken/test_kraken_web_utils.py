import asyncio
import json
from http import HTTPStatus
from test.isolated_asyncio_wrapper_test_case import IsolatedAsyncioWrapperTestCase

from aioresponses import aioresponses

from krakenbot.connector.exchange.kraken import kraken_constants as CONSTANTS, kraken_web_utils as web_utils
from krakenbot.connector.exchange.kraken.kraken_errors import KrakenRequestError, KrakenResponseDecodeError


class KrakenWebUtilsTests(IsolatedAsyncioWrapperTestCase):

    def test_public_rest_url(self):
        url = web_utils.public_rest_url(path_url=CONSTANTS.SERVER_TIME_PATH_URL)
        self.assertEqual("https://api.kraken.com/0/public/Time", url)

    def test_private_rest_url(self):
        url = web_utils.private_rest_url(path_url=CONSTANTS.OPEN_ORDERS_PATH_URL, base_url="http://localhost:8080")
        self.assertEqual("http://localhost:8080/0/private/OpenOrders", url)

    def test_is_private_path(self):
        self.assertTrue(web_utils.is_private_path(CONSTANTS.OPEN_ORDERS_PATH_URL))
        self.assertFalse(web_utils.is_private_path(CONSTANTS.ASSET_PAIRS_PATH_URL))

    def test_build_api_factory(self):
        factory = web_utils.build_api_factory()
        self.assertIsNotNone(factory)
        self.assertIsNone(factory.auth)

    @aioresponses()
    async def test_get_current_server_time(self, mock_api):
        url = web_utils.public_rest_url(path_url=CONSTANTS.SERVER_TIME_PATH_URL)
        response = {"error": [], "result": {"unixtime": 1616492376, "rfc1123": "Tue, 23 Mar 21 09:39:36 +0000"}}
        mock_api.get(url, body=json.dumps(response))

        result = await web_utils.get_current_server_time()

        self.assertEqual(1616492376.0, result)

    @aioresponses()
    async def test_get_current_server_time_with_given_factory(self, mock_api):
        url = web_utils.public_rest_url(path_url=CONSTANTS.SERVER_TIME_PATH_URL)
        response = {"error": [], "result": {"unixtime": 1616492376, "rfc1123": "Tue, 23 Mar 21 09:39:36 +0000"}}
        mock_api.get(url, body=json.dumps(response))
        factory = web_utils.build_api_factory()

        result = await web_utils.get_current_server_time(api_factory=factory)
        await factory.close()

        self.assertEqual(1616492376.0, result)

    @aioresponses()
    async def test_get_current_server_time_without_result(self, mock_api):
        url = web_utils.public_rest_url(path_url=CONSTANTS.SERVER_TIME_PATH_URL)
        mock_api.get(url, body=json.dumps({"error": ["EService:Unavailable"]}))

        with self.assertRaises(KrakenResponseDecodeError):
            await web_utils.get_current_server_time()

    @aioresponses()
    async def test_get_current_server_time_timeout(self, mock_api):
        url = web_utils.public_rest_url(path_url=CONSTANTS.SERVER_TIME_PATH_URL)
        mock_api.get(url, exception=asyncio.TimeoutError())

        with self.assertRaises(KrakenRequestError) as context:
            await web_utils.get_current_server_time()

        self.assertEqual(HTTPStatus.BAD_REQUEST, context.exception.status)
