"""
Automana Asana Client — Authenticated HTTP access to the Asana REST API.

Pipeline (per call):
    1. Build request against the configured base_url (bearer token auth)
    2. Wrap request bodies as {"data": ...}
    3. Execute via a shared, connection-pooled httpx.Client
    4. Raise AutomanaIntegrationError on transport failure or non-2xx status
    5. Unwrap {"data": ...} and follow next_page offsets for list endpoints
    6. Log every call to the structured integrations log (never bodies)

No retry happens here: a failed call fails the current rule iteration, and
the scheduler's loop is the retry.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from automana.client.models import Workspace
from automana.engine.config import AsanaConfig, get_platform_config
from automana.engine.errors import AutomanaConfigError, AutomanaIntegrationError
from automana.engine.logging import log, log_integration_call

logger = logging.getLogger("automana.client")


class Client:
    """
    Asana API client bound to one access token.

    Usage:
        client = Client.from_config(config.asana)
        wc = client.in_workspace("My Company")
        me = wc.get_me()
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://app.asana.com/api/1.0",
        timeout: int = 30,
        page_size: int = 100,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.page_size = page_size
        self._http = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: AsanaConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "Client":
        if not config.token:
            raise AutomanaConfigError("Asana token is not configured (set ASANA_TOKEN)")
        return cls(
            token=config.token,
            base_url=config.base_url,
            timeout=config.timeout,
            page_size=config.page_size,
            transport=transport,
        )

    # -----------------------------------------------------------------------
    # HTTP
    # -----------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        start_time = time.monotonic()
        body = {"data": data} if data is not None else None

        try:
            response = self._http.request(method, path, params=params, json=body)
        except httpx.HTTPError as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            log(log_integration_call(method, path, None, duration_ms, error=str(e)))
            raise AutomanaIntegrationError(
                f"{method} {path} failed: {e}",
                method=method,
                path=path,
            ) from e

        duration_ms = (time.monotonic() - start_time) * 1000

        if response.is_error:
            message = _error_message(response)
            log(log_integration_call(method, path, response.status_code, duration_ms, error=message))
            raise AutomanaIntegrationError(
                f"{method} {path} returned {response.status_code}: {message}",
                method=method,
                path=path,
                status_code=response.status_code,
                response_body=response.text,
            )

        log(log_integration_call(method, path, response.status_code, duration_ms))
        logger.debug(f"{method} {path} -> {response.status_code} ({duration_ms:.0f}ms)")

        try:
            return response.json()
        except ValueError as e:
            raise AutomanaIntegrationError(
                f"{method} {path} returned invalid JSON",
                method=method,
                path=path,
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params).get("data")

    def get_paginated(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        """GET a list endpoint, following next_page offsets to the end."""
        values = dict(params or {})
        values["limit"] = self.page_size
        ret: List[Any] = []

        while True:
            resp = self._request("GET", path, params=values)
            ret.extend(resp.get("data") or [])

            next_page = resp.get("next_page")
            if not next_page:
                break

            values["offset"] = next_page["offset"]

        return ret

    def post(self, path: str, data: Dict[str, Any]) -> Any:
        return self._request("POST", path, data=data).get("data")

    def put(self, path: str, data: Dict[str, Any]) -> Any:
        return self._request("PUT", path, data=data).get("data")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Workspaces
    # -----------------------------------------------------------------------

    def get_workspaces(self) -> List[Workspace]:
        return [Workspace(**w) for w in self.get_paginated("workspaces")]

    def get_workspace_by_name(self, name: str) -> Workspace:
        for workspace in self.get_workspaces():
            if workspace.name == name:
                return workspace
        raise AutomanaConfigError(f"Workspace '{name}' not found", name=name)

    def in_workspace(self, name: str) -> "WorkspaceClient":
        from automana.client.workspace import WorkspaceClient

        return WorkspaceClient(self, self.get_workspace_by_name(name))


def _error_message(response: httpx.Response) -> str:
    """Pull the first message out of an Asana {"errors": [...]} body."""
    try:
        errors = response.json().get("errors") or []
    except ValueError:
        return response.reason_phrase
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return errors[0]["message"]
    return response.reason_phrase


def new_client_from_env() -> Client:
    """Default connection: automana.yaml plus ASANA_TOKEN."""
    return Client.from_config(get_platform_config().asana)
