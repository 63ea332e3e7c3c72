"""
Kraken live API checks.

Skipped unless the credentials are available, either exported or in a `.env` file at the repository root:

    BASE_URL=https://api.kraken.com
    API_KEY=your_key
    API_SECRET=your_secret
    # only for keys protected by a 2FA password:
    API_KEY_2FA=...
    API_SECRET_2FA=...
    API_PASSPHRASE=...
    API_PASSPHRASE_REQUIRED=1
"""
import os
import time
import unittest
from pathlib import Path
from test.isolated_asyncio_wrapper_test_case import IsolatedAsyncioWrapperTestCase

from dotenv import load_dotenv

from krakenbot.connector.exchange.kraken import kraken_constants as CONSTANTS, kraken_utils
from krakenbot.connector.exchange.kraken.kraken_exchange import KrakenExchange
from krakenbot.core.network_iterator import NetworkStatus


def find_repo_root() -> Path:
    """Walk up from this file to the directory holding .env or .git."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / ".env").exists() or (current / ".git").exists():
            return current
        current = current.parent
    return Path(__file__).resolve().parent


load_dotenv(find_repo_root() / ".env")

LIVE_CREDENTIALS = all(
    os.environ.get(name) for name in (CONSTANTS.ENV_BASE_URL, CONSTANTS.ENV_API_KEY, CONSTANTS.ENV_API_SECRET))


@unittest.skipUnless(LIVE_CREDENTIALS, "BASE_URL, API_KEY and API_SECRET are required for live API checks")
class KrakenLiveAPITests(IsolatedAsyncioWrapperTestCase):

    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.exchange = KrakenExchange.from_config(kraken_utils.load_config_from_env())

    async def asyncTearDown(self) -> None:
        await self.exchange.close()
        await super().asyncTearDown()

    async def test_server_time_is_current(self):
        response = await self.exchange.get_server_time()

        self.assertEqual([], response.error)
        self.assertLess(abs(response.result.unixtime - time.time()), 60)

    async def test_network_is_reachable(self):
        self.assertEqual(NetworkStatus.CONNECTED, await self.exchange.check_network())

    async def test_xbt_usd_pair(self):
        response = await self.exchange.get_tradable_asset_pairs([kraken_utils.EXAMPLE_PAIR])

        self.assertEqual([], response.error)
        pair = response.result["XXBTZUSD"]
        self.assertEqual(kraken_utils.EXAMPLE_PAIR, pair.altname)
        self.assertEqual("XBT/USD", pair.wsname)

    async def test_open_orders_without_errors(self):
        response = await self.exchange.get_open_orders()

        self.assertEqual([], response.error)
        self.assertIsNotNone(response.result)
