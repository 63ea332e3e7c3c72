from copy import deepcopy
from typing import Any, Dict, Optional

from krakenbot.core.web_assistant.auth import AuthBase
from krakenbot.core.web_assistant.connections.data_types import RESTMethod, RESTRequest, RESTResponse
from krakenbot.core.web_assistant.connections.rest_connection import RESTConnection


class RESTAssistant:
    """A helper to interact with the REST connection.

    Authenticates the requests flagged as requiring it and hands them to the shared connection.
    Exactly one HTTP call is issued per request, the response status is not interpreted here.
    """

    def __init__(self, connection: RESTConnection, auth: Optional[AuthBase] = None):
        self._connection = connection
        self._auth = auth

    async def execute_request_and_get_response(
            self,
            url: str,
            endpoint_url: Optional[str] = None,
            params: Optional[Dict[str, Any]] = None,
            data: Optional[Dict[str, Any]] = None,
            method: RESTMethod = RESTMethod.GET,
            is_auth_required: bool = False,
            headers: Optional[Dict[str, Any]] = None) -> RESTResponse:

        request = RESTRequest(
            method=method,
            url=url,
            endpoint_url=endpoint_url,
            params=params,
            data=data,
            headers=dict(headers or {}),
            is_auth_required=is_auth_required,
        )
        response = await self.call(request=request)
        return response

    async def call(self, request: RESTRequest) -> RESTResponse:
        request = deepcopy(request)
        request = await self._authenticate(request)
        resp = await self._connection.call(request)
        return resp

    async def _authenticate(self, request: RESTRequest) -> RESTRequest:
        if self._auth is not None and request.is_auth_required:
            request = await self._auth.rest_authenticate(request)
        return request
