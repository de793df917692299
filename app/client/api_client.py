"""
Async HTTP client for the timetable admin API.

Unwraps the ``{success, data}`` envelope, validates ``data`` against a
pydantic model and turns every failure into a typed exception. Only
transport failures (connection errors, timeouts) are retried; any HTTP
response, 4xx or 5xx, is final.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRY_DELAY = 1.0
MAX_RETRY_DELAY = 5.0


class ApiError(Exception):
    """Non-2xx response, unreadable body or transport failure."""

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, code={self.code!r}, message={self.message!r})"


class ApiTimeoutError(ApiError):
    def __init__(self, timeout: float) -> None:
        super().__init__(408, "TIMEOUT", f"Request timed out after {timeout:g}s")


class ApiNetworkError(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(0, "NETWORK_ERROR", message or "Network error")


class ResponseValidationError(Exception):
    """A 2xx response whose ``data`` does not match the expected model."""

    def __init__(self, issues: List[Dict[str, Any]], data: Any) -> None:
        super().__init__(f"Response validation failed with {len(issues)} issue(s)")
        self.issues = issues
        self.data = data


def _issues(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_count: int = 1,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        refresh_token: Optional[Callable[[], Awaitable[Optional[str]]]] = None,
    ) -> None:
        self.token = token
        self.timeout = timeout
        self.retry_count = max(0, retry_count)
        self.retry_delay = retry_delay
        # Called once on a 401 to obtain a new token before giving up
        self.refresh_token = refresh_token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _send(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        effective_timeout = timeout if timeout is not None else self.timeout
        # httpx.TimeoutException subclasses TransportError
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.retry_count + 1),
            wait=wait_exponential(multiplier=self.retry_delay, max=MAX_RETRY_DELAY),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            return await retrying(
                self._client.request,
                method,
                endpoint,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=effective_timeout,
            )
        except httpx.TimeoutException as exc:
            raise ApiTimeoutError(effective_timeout) from exc
        except httpx.TransportError as exc:
            raise ApiNetworkError(str(exc)) from exc

    @staticmethod
    def _parse(response: httpx.Response, response_model: Any) -> Any:
        try:
            payload = response.json() if response.content else {}
        except ValueError:
            raise ApiError(response.status_code, "INVALID_JSON", "Response body is not valid JSON")

        if response.is_error:
            if (
                isinstance(payload, dict)
                and isinstance(payload.get("error"), str)
                and isinstance(payload.get("message"), str)
            ):
                raise ApiError(
                    response.status_code,
                    payload["error"],
                    payload["message"],
                    payload.get("details"),
                )
            raise ApiError(
                response.status_code,
                "UNKNOWN_ERROR",
                f"HTTP error {response.status_code}: {response.reason_phrase}",
                {"originalData": payload},
            )

        if isinstance(payload, dict) and "success" in payload and "data" in payload:
            data = payload["data"]
        else:
            data = payload
        if response_model is None:
            return data
        try:
            return TypeAdapter(response_model).validate_python(data)
        except ValidationError as exc:
            raise ResponseValidationError(_issues(exc), data)

    async def request(
        self,
        method: str,
        endpoint: str,
        response_model: Any = None,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        request_model: Optional[Type[BaseModel]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        if request_model is not None and json is not None:
            try:
                request_model.model_validate(json)
            except ValidationError as exc:
                raise ApiError(
                    400,
                    "VALIDATION_ERROR",
                    "Invalid request data",
                    {"validationErrors": _issues(exc)},
                )

        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = await self._send(method, endpoint, json=json, params=params, timeout=timeout)

        if response.status_code == 401 and self.refresh_token is not None:
            fresh = await self.refresh_token()
            if fresh:
                logger.info("Retrying %s %s with a refreshed token", method, endpoint)
                self.token = fresh
                response = await self._send(method, endpoint, json=json, params=params, timeout=timeout)

        return self._parse(response, response_model)

    async def get(self, endpoint: str, response_model: Any = None, **kwargs) -> Any:
        return await self.request("GET", endpoint, response_model, **kwargs)

    async def post(self, endpoint: str, response_model: Any = None, **kwargs) -> Any:
        return await self.request("POST", endpoint, response_model, **kwargs)

    async def put(self, endpoint: str, response_model: Any = None, **kwargs) -> Any:
        return await self.request("PUT", endpoint, response_model, **kwargs)

    async def delete(self, endpoint: str, response_model: Any = None, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, response_model, **kwargs)
