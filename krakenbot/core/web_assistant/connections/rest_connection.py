import aiohttp

from krakenbot.core.web_assistant.connections.data_types import RESTMethod, RESTRequest, RESTResponse


class RESTConnection:
    def __init__(self, aiohttp_client_session: aiohttp.ClientSession):
        self._client_session = aiohttp_client_session

    async def call(self, request: RESTRequest) -> RESTResponse:
        data = request.data if request.method == RESTMethod.POST and request.data else None
        aiohttp_resp = await self._client_session.request(
            method=request.method.value,
            url=request.query_url,
            data=data,
            headers=request.headers,
        )

        resp = await self._build_resp(aiohttp_resp)
        return resp

    @staticmethod
    async def _build_resp(aiohttp_resp: aiohttp.ClientResponse) -> RESTResponse:
        await aiohttp_resp.read()
        resp = RESTResponse(aiohttp_resp)
        return resp
