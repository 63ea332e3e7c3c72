from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import aiohttp


class RESTMethod(Enum):
    GET = "GET"
    POST = "POST"

    def __str__(self):
        obj_str = repr(self)
        return obj_str

    def __repr__(self):
        return self.value


@dataclass
class RESTRequest:
    """
    A single REST call. `params` carries the GET payload and `data` the POST form payload; both are
    plain dicts so the insertion order chosen by the caller is the order used on the wire and for signing.
    """
    method: RESTMethod
    url: Optional[str] = None
    endpoint_url: Optional[str] = None
    params: Optional[Dict[str, str]] = None
    data: Optional[Dict[str, str]] = None
    headers: Optional[Mapping[str, str]] = None
    is_auth_required: bool = False

    @property
    def payload(self) -> Dict[str, str]:
        if self.method == RESTMethod.GET:
            return self.params or {}
        return self.data or {}

    @property
    def query_url(self) -> str:
        # values are sent as given, encoding only happens inside the signing string
        if self.method == RESTMethod.GET and self.params:
            query = "&".join(f"{key}={value}" for key, value in self.params.items())
            return f"{self.url}?{query}"
        return self.url


class RESTResponse:
    def __init__(self, aiohttp_response: aiohttp.ClientResponse):
        self._aiohttp_response = aiohttp_response

    @property
    def url(self) -> str:
        url_str = str(self._aiohttp_response.url)
        return url_str

    @property
    def method(self) -> RESTMethod:
        method_ = RESTMethod[self._aiohttp_response.method.upper()]
        return method_

    @property
    def status(self) -> int:
        status_ = int(self._aiohttp_response.status)
        return status_

    @property
    def headers(self) -> Optional[Mapping[str, str]]:
        headers_ = self._aiohttp_response.headers
        return headers_

    async def json(self) -> Any:
        json_ = await self._aiohttp_response.json(content_type=None)
        return json_

    async def read(self) -> bytes:
        body_ = await self._aiohttp_response.read()
        return body_

    async def text(self) -> str:
        text_ = await self._aiohttp_response.text()
        return text_
