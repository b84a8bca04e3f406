# qa_engine/tools/api_probe.py

import time
from typing import Any, Optional

import httpx

from qa_engine.core import BaseTool
from qa_engine.config import settings
from qa_engine.config.constants import JSON_HEADERS
from qa_engine.common.token_store import (
    InMemoryTokenStore,
    TokenStoreInterface,
    resolve_token,
)
from qa_engine.schemas.tools.api_probe import (
    ApiProbeInput,
    ApiProbeOutput,
    ProbeRequest,
    ProbeResult,
)


class ApiProbeTool(BaseTool):
    """
    Issues one HTTP call against the API under test and normalizes the
    outcome. Every failure mode (transport error, timeout, unexpected status)
    comes back as a ProbeResult with success=False; nothing is raised.
    """

    def __init__(
        self,
        *,
        name: str = "api_probe",
        description: str = "Calls the API under test using httpx.AsyncClient",
        base_url: Optional[str] = None,
        token_store: Optional[TokenStoreInterface] = None,
        token_key: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        config: Optional[dict] = None,
        verbose: bool = False,
    ):
        super().__init__(
            name=name,
            description=description,
            input_schema=ApiProbeInput,
            output_schema=ApiProbeOutput,
            config=config,
            verbose=verbose,
        )

        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token_store = token_store if token_store is not None else InMemoryTokenStore()
        self.token_key = token_key or settings.TOKEN_KEY
        self._token_override = token
        self._transport = transport
        self._default_timeout_ms = (
            config.get("timeout_ms", settings.PROBE_TIMEOUT_MS)
            if config
            else settings.PROBE_TIMEOUT_MS
        )

    def current_token(self) -> Optional[str]:
        return resolve_token(self.token_store, self.token_key, self._token_override)

    def with_token(self, token: Optional[str]) -> "ApiProbeTool":
        """Same target and transport, authenticating with ``token`` instead."""
        if not token or token == self._token_override:
            return self
        return ApiProbeTool(
            name=self.name,
            description=self.description,
            base_url=self.base_url,
            token_store=self.token_store,
            token_key=self.token_key,
            token=token,
            transport=self._transport,
            config={**self.config, "timeout_ms": self._default_timeout_ms},
            verbose=self.verbose,
        )

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    async def _execute(self, inp: ApiProbeInput) -> ApiProbeOutput:
        result = await self.send(inp.request)
        return ApiProbeOutput(
            success=result.success,
            error_message=result.error,
            execution_time=result.duration_ms / 1000,
            result=result,
        )

    async def probe(
        self,
        method: str,
        path: str,
        requires_auth: bool = True,
        body: Optional[Any] = None,
        expected_status: int = 200,
        timeout_ms: Optional[int] = None,
    ) -> ProbeResult:
        """Convenience wrapper around send() taking plain arguments.

        Args:
            method: HTTP method
            path: Path relative to the base URL, query string included
            requires_auth: Attach the bearer token when one is available
            body: JSON body
            expected_status: Status treated as success (200 accepts any 2xx)
            timeout_ms: Per-call timeout; defaults to the configured one

        Returns:
            ProbeResult describing the call
        """
        request = ProbeRequest(
            method=method,
            path=path,
            requires_auth=requires_auth,
            body=body,
            expected_status=expected_status,
            timeout_ms=timeout_ms or self._default_timeout_ms,
        )
        return await self.send(request)

    async def send(self, req: ProbeRequest) -> ProbeResult:
        url = self.url_for(req.path)
        headers = dict(JSON_HEADERS)
        if req.requires_auth:
            token = self.current_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        self.logger.debug(f"Probing {req.method} {url}")
        start = time.perf_counter()

        try:
            async with httpx.AsyncClient(
                timeout=req.timeout_ms / 1000, transport=self._transport
            ) as client:
                response = await client.request(
                    method=req.method,
                    url=url,
                    headers=headers,
                    json=req.body,
                )
        except httpx.TimeoutException as e:
            duration_ms = self._elapsed_ms(start)
            self.logger.warning(f"{req.method} {req.path} timed out after {req.timeout_ms}ms")
            return ProbeResult(
                success=False,
                status=0,
                error=str(e) or f"Request timed out after {req.timeout_ms}ms",
                duration_ms=duration_ms,
            )
        except Exception as e:
            duration_ms = self._elapsed_ms(start)
            self.logger.warning(f"{req.method} {req.path} failed: {e!r}")
            return ProbeResult(
                success=False,
                status=0,
                error=str(e) or type(e).__name__,
                duration_ms=duration_ms,
            )

        duration_ms = self._elapsed_ms(start)
        status = response.status_code
        success = status == req.expected_status or (
            req.expected_status == 200 and 200 <= status < 300
        )

        self.logger.debug(f"{req.method} {req.path} -> {status} in {duration_ms}ms")

        return ProbeResult(
            success=success,
            status=status,
            data=self._parse_body(response),
            error=None if success else f"Expected {req.expected_status}, got {status}",
            duration_ms=duration_ms,
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        if "application/json" in response.headers.get("content-type", ""):
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)
