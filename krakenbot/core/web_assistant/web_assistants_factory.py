from typing import Optional

import aiohttp

from krakenbot.core.web_assistant.auth import AuthBase
from krakenbot.core.web_assistant.connections.rest_connection import RESTConnection
from krakenbot.core.web_assistant.rest_assistant import RESTAssistant


class WebAssistantsFactory:
    """Creates the REST assistants used by a connector.

    All the assistants built by one factory share a single `aiohttp.ClientSession`, created lazily on the
    first request so that it is bound to the running event loop.
    """

    def __init__(self,
                 auth: Optional[AuthBase] = None,
                 timeout: Optional[aiohttp.ClientTimeout] = None):
        self._auth = auth
        self._timeout = timeout
        self._shared_client: Optional[aiohttp.ClientSession] = None

    @property
    def auth(self) -> Optional[AuthBase]:
        return self._auth

    async def get_rest_assistant(self) -> RESTAssistant:
        connection = RESTConnection(aiohttp_client_session=await self._get_shared_client())
        assistant = RESTAssistant(connection=connection, auth=self._auth)
        return assistant

    async def close(self):
        if self._shared_client is not None and not self._shared_client.closed:
            await self._shared_client.close()
        self._shared_client = None

    async def _get_shared_client(self) -> aiohttp.ClientSession:
        if self._shared_client is None or self._shared_client.closed:
            if self._timeout is not None:
                self._shared_client = aiohttp.ClientSession(timeout=self._timeout)
            else:
                self._shared_client = aiohttp.ClientSession()
        return self._shared_client
