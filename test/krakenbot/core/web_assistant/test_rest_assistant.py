import json
from test.isolated_asyncio_wrapper_test_case import IsolatedAsyncioWrapperTestCase

from aioresponses import aioresponses

from krakenbot.core.web_assistant.auth import AuthBase
from krakenbot.core.web_assistant.connections.data_types import RESTMethod, RESTRequest
from krakenbot.core.web_assistant.web_assistants_factory import WebAssistantsFactory


class AuthMock(AuthBase):
    async def rest_authenticate(self, request: RESTRequest) -> RESTRequest:
        request.headers = {**(request.headers or {}), "authenticated": "true"}
        return request


class RESTAssistantTest(IsolatedAsyncioWrapperTestCase):

    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.factory = WebAssistantsFactory(auth=AuthMock())

    async def asyncTearDown(self) -> None:
        await self.factory.close()
        await super().asyncTearDown()

    @aioresponses()
    async def test_execute_request_authenticates_when_required(self, mock_api):
        url = "https://www.test.com/url"
        mock_api.post(url, body=json.dumps({"result": "ok"}))
        rest_assistant = await self.factory.get_rest_assistant()

        response = await rest_assistant.execute_request_and_get_response(
            url=url, data={"a": "b"}, method=RESTMethod.POST, is_auth_required=True)

        self.assertEqual(200, response.status)
        self.assertEqual({"result": "ok"}, await response.json())
        call = next(iter(mock_api.requests.values()))[0]
        self.assertEqual("true", call.kwargs["headers"]["authenticated"])
        self.assertEqual({"a": "b"}, call.kwargs["data"])

    @aioresponses()
    async def test_execute_request_without_auth(self, mock_api):
        url = "https://www.test.com/url"
        mock_api.get(url, body=json.dumps({"result": "ok"}))
        rest_assistant = await self.factory.get_rest_assistant()

        await rest_assistant.execute_request_and_get_response(url=url)

        call = next(iter(mock_api.requests.values()))[0]
        self.assertNotIn("authenticated", call.kwargs["headers"])

    async def test_call_does_not_modify_original_request(self):
        rest_assistant = await self.factory.get_rest_assistant()
        request = RESTRequest(method=RESTMethod.GET, url="https://www.test.com/url", is_auth_required=True)

        with aioresponses() as mock_api:
            mock_api.get("https://www.test.com/url", body="{}")
            await rest_assistant.call(request)

        self.assertIsNone(request.headers)

    async def test_factory_shares_and_recreates_session(self):
        first = await self.factory._get_shared_client()
        self.assertIs(first, await self.factory._get_shared_client())

        await self.factory.close()

        self.assertTrue(first.closed)
        second = await self.factory._get_shared_client()
        self.assertIsNot(first, second)
