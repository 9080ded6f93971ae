import os
from collections.abc import Mapping
from typing import Optional, Self, Any, TypeVar

import httpx

from .rpc import RPCClient, RPCResult, Invocation
from .soap import SOAPClient, SOAPEnvelope, SOAPResponse
from ..exceptions import ConfigurationError, EmptyBodyError
from ..postprocess import PostProcessorRegistry
from ..wsdl import DefinitionModel, load_definitions

T = TypeVar("T")


def _parse_endpoint(endpoint: str | httpx.URL) -> str:
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid endpoint {endpoint!r}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid endpoint {endpoint!r}: expected an absolute http(s) URL")

    if url.username or url.password:
        raise ConfigurationError("Please use auth=httpx.BasicAuth for basic auth")

    # keep the caller's spelling, the SOAPAction header is derived from it
    return str(endpoint)


class Client:
    """
    High-level SOAP client.

    The client remembers the result of its most recent call in ``result`` so that ``text`` and ``decode`` can be used
    after ``call``. That state is not synchronized: concurrent calls on one instance race on it and must be serialized
    by the caller, e.g. with one client per logical call or an ``asyncio.Lock``. Use ``invoke`` (or ``RPCClient``
    directly) to get a result object back without touching the shared state.
    """

    rpc: RPCClient
    result: Optional[RPCResult]

    def __init__(
        self,
        definitions: DefinitionModel,
        endpoint: str | httpx.URL,
        *,
        http: Optional[httpx.AsyncClient] = None,
        auth: Optional[httpx.Auth] = None,
        verify: bool = True,
        timeout: Optional[float] = 60,
        headers: Optional[Mapping[str, str]] = None,
        post_processors: Optional[PostProcessorRegistry] = None,
    ):
        """
        :param definitions: The parsed service description.
        :param endpoint: The absolute http(s) URL of the service. Also the prefix of every SOAPAction header.
        :param http: An optional pre-configured client. When given, auth, verify, timeout and headers are ignored and
                     the client is not closed by ``close``.
        :param auth: The authentication strategy to use, see ``asyncsoap.auth``.
        :param verify: Whether to verify the authenticity of the remote host's TLS certificate. Defaults to true.
        :param timeout: The optional timeout in seconds for requests. Defaults to 60.
        :param headers: Additional headers to send with every request.
        :param post_processors: Text post-processors by operation name. Defaults to the built-in registry.
        """
        if not isinstance(definitions, DefinitionModel):
            raise ConfigurationError("definitions must provide target_namespace and has_operation()")
        if not definitions.target_namespace:
            raise ConfigurationError("Service description has no target namespace")

        endpoint = _parse_endpoint(endpoint)

        self._owns_http = http is None
        if http is None:
            http = httpx.AsyncClient(auth=auth, verify=verify, timeout=timeout, headers=headers)

        self.rpc = RPCClient(http, definitions, endpoint, post_processors=post_processors)
        self.result = None

    @classmethod
    async def from_wsdl(
        cls,
        wsdl: str | os.PathLike,
        endpoint: Optional[str | httpx.URL] = None,
        **kwargs: Any,
    ) -> Self:
        """
        Loads a service description and creates a client for it.

        :param wsdl: An http(s) URL or local path of the WSDL document.
        :param endpoint: The service endpoint. Defaults to the first port address in the description.
        :param kwargs: Passed on to the constructor.
        :raises ConfigurationError: If the description cannot be loaded or names no endpoint.
        """
        definitions = await load_definitions(wsdl, http=kwargs.get("http"))
        if endpoint is None:
            endpoint = definitions.address
            if endpoint is None:
                raise ConfigurationError("No endpoint given and the service description declares no address")
        return cls(definitions, endpoint, **kwargs)

    @property
    def definitions(self) -> DefinitionModel:
        return self.rpc.definitions

    @property
    def endpoint(self) -> str:
        return self.rpc.endpoint

    async def close(self) -> None:
        """Closes the underlying HTTP client if this client created it."""
        if self._owns_http:
            await self.rpc.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def invoke(
        self,
        operation: str,
        title: Optional[str] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> RPCResult:
        """Calls an operation and returns its result without storing it."""
        return await self.rpc.invoke(operation, title, params)

    async def call(
        self,
        operation: str,
        title: Optional[str] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> RPCResult:
        """
        Calls an operation and stores its result in ``result``.

        Any failure, including a fault, clears the stored result before the error propagates.
        """
        self.result = None
        self.result = await self.rpc.invoke(operation, title, params)
        return self.result

    def text(self) -> str:
        """Returns the post-processed ``response`` text of the last call. See ``RPCResult.text``."""
        if self.result is None:
            raise EmptyBodyError()
        return self.result.text()

    def decode(self, target: type[T]) -> T:
        """Decodes the result of the last call into ``target``. See ``RPCResult.decode``."""
        if self.result is None:
            raise EmptyBodyError()
        return self.result.decode(target)


__all__ = [
    "Client",
    "RPCClient",
    "RPCResult",
    "Invocation",
    "SOAPClient",
    "SOAPEnvelope",
    "SOAPResponse",
]
