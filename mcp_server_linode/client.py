"""Thin asynchronous client for the Linode API v4."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .errors import UpstreamError

logger = logging.getLogger("mcp-server-linode.client")

DEFAULT_API_URL = "https://api.linode.com/v4"
DEFAULT_USER_AGENT = "mcp-server-linode"
PAGE_SIZE = 500

JSONObject = Dict[str, Any]


def _error_reasons(response: httpx.Response) -> List[str]:
    """Extract Linode's ``errors[].reason`` strings from a failed response."""

    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        text = response.text.strip()
        return [text or response.reason_phrase or "request failed"]

    reasons: List[str] = []
    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list):
        for entry in errors:
            if not isinstance(entry, dict):
                continue
            reason = str(entry.get("reason", "")).strip()
            field = entry.get("field")
            if not reason:
                continue
            reasons.append(f"{field}: {reason}" if field else reason)
    if not reasons:
        reasons.append(response.reason_phrase or "request failed")
    return reasons


class LinodeClient:
    """Bearer-token client bound to one Linode account.

    A single ``httpx.AsyncClient`` is shared by every caller; requests are not
    retried. Cancellation of the awaiting task aborts the in-flight request.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not isinstance(token, str) or not token.strip():
            raise ValueError("token must be a non-empty string")
        if any(char.isspace() for char in token):
            raise ValueError("token must not contain whitespace")
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
        )

    def __repr__(self) -> str:
        return f"LinodeClient(base_url={self.base_url!r})"

    @property
    def closed(self) -> bool:
        return self._http.is_closed

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, params=params, json=body)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise UpstreamError(None, [f"{type(exc).__name__}: {exc}"]) from exc

        if response.status_code >= 400:
            reasons = _error_reasons(response)
            logger.debug("%s %s returned %d: %s", method, path, response.status_code, reasons)
            raise UpstreamError(response.status_code, reasons)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise UpstreamError(response.status_code, ["response body is not valid JSON"]) from exc

    async def _list(self, path: str) -> List[JSONObject]:
        """Collect every page of a paginated collection, preserving order."""

        items: List[JSONObject] = []
        page = 1
        while True:
            data = await self._request("GET", path, params={"page": page, "page_size": PAGE_SIZE})
            if not isinstance(data, dict):
                raise UpstreamError(None, [f"unexpected payload for {path}"])
            batch = data.get("data", [])
            if isinstance(batch, list):
                items.extend(item for item in batch if isinstance(item, dict))
            pages = data.get("pages", 1)
            if not isinstance(pages, int) or page >= pages:
                return items
            page += 1

    async def _get(self, path: str) -> JSONObject:
        data = await self._request("GET", path)
        if not isinstance(data, dict):
            raise UpstreamError(None, [f"unexpected payload for {path}"])
        return data

    async def _post(self, path: str, body: Optional[Mapping[str, Any]] = None) -> JSONObject:
        data = await self._request("POST", path, body=body or {})
        return data if isinstance(data, dict) else {}

    async def _put(self, path: str, body: Mapping[str, Any]) -> JSONObject:
        data = await self._request("PUT", path, body=body)
        return data if isinstance(data, dict) else {}

    async def _delete(self, path: str) -> None:
        await self._request("DELETE", path)

    # profile

    async def get_profile(self) -> JSONObject:
        return await self._get("/profile")

    # reference data

    async def list_regions(self) -> List[JSONObject]:
        return await self._list("/regions")

    async def list_types(self) -> List[JSONObject]:
        return await self._list("/linode/types")

    async def list_kernels(self) -> List[JSONObject]:
        return await self._list("/linode/kernels")

    # instances

    async def list_instances(self) -> List[JSONObject]:
        return await self._list("/linode/instances")

    async def get_instance(self, instance_id: int) -> JSONObject:
        return await self._get(f"/linode/instances/{instance_id}")

    async def create_instance(self, options: Mapping[str, Any]) -> JSONObject:
        return await self._post("/linode/instances", options)

    async def delete_instance(self, instance_id: int) -> None:
        await self._delete(f"/linode/instances/{instance_id}")

    async def boot_instance(self, instance_id: int, config_id: int = 0) -> None:
        body = {"config_id": config_id} if config_id else {}
        await self._post(f"/linode/instances/{instance_id}/boot", body)

    async def reboot_instance(self, instance_id: int, config_id: int = 0) -> None:
        body = {"config_id": config_id} if config_id else {}
        await self._post(f"/linode/instances/{instance_id}/reboot", body)

    async def shutdown_instance(self, instance_id: int) -> None:
        await self._post(f"/linode/instances/{instance_id}/shutdown")

    # managed databases

    async def list_databases(self) -> List[JSONObject]:
        return await self._list("/databases/instances")

    async def list_database_engines(self) -> List[JSONObject]:
        return await self._list("/databases/engines")

    async def list_database_types(self) -> List[JSONObject]:
        return await self._list("/databases/types")

    async def list_engine_databases(self, engine: str) -> List[JSONObject]:
        return await self._list(f"/databases/{engine}/instances")

    async def get_engine_database(self, engine: str, database_id: int) -> JSONObject:
        return await self._get(f"/databases/{engine}/instances/{database_id}")

    async def create_engine_database(self, engine: str, options: Mapping[str, Any]) -> JSONObject:
        return await self._post(f"/databases/{engine}/instances", options)

    async def update_engine_database(self, engine: str, database_id: int, options: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/databases/{engine}/instances/{database_id}", options)

    async def delete_engine_database(self, engine: str, database_id: int) -> None:
        await self._delete(f"/databases/{engine}/instances/{database_id}")

    async def get_engine_database_credentials(self, engine: str, database_id: int) -> JSONObject:
        return await self._get(f"/databases/{engine}/instances/{database_id}/credentials")

    async def reset_engine_database_credentials(self, engine: str, database_id: int) -> None:
        await self._post(f"/databases/{engine}/instances/{database_id}/credentials/reset")

    # domains

    async def list_domains(self) -> List[JSONObject]:
        return await self._list("/domains")

    async def get_domain(self, domain_id: int) -> JSONObject:
        return await self._get(f"/domains/{domain_id}")

    async def create_domain(self, options: Mapping[str, Any]) -> JSONObject:
        return await self._post("/domains", options)

    async def update_domain(self, domain_id: int, options: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/domains/{domain_id}", options)

    async def delete_domain(self, domain_id: int) -> None:
        await self._delete(f"/domains/{domain_id}")

    async def list_domain_records(self, domain_id: int) -> List[JSONObject]:
        return await self._list(f"/domains/{domain_id}/records")

    async def get_domain_record(self, domain_id: int, record_id: int) -> JSONObject:
        return await self._get(f"/domains/{domain_id}/records/{record_id}")

    async def create_domain_record(self, domain_id: int, options: Mapping[str, Any]) -> JSONObject:
        return await self._post(f"/domains/{domain_id}/records", options)

    async def update_domain_record(self, domain_id: int, record_id: int, options: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/domains/{domain_id}/records/{record_id}", options)

    async def delete_domain_record(self, domain_id: int, record_id: int) -> None:
        await self._delete(f"/domains/{domain_id}/records/{record_id}")

    # firewalls

    async def list_firewalls(self) -> List[JSONObject]:
        return await self._list("/networking/firewalls")

    async def get_firewall(self, firewall_id: int) -> JSONObject:
        return await self._get(f"/networking/firewalls/{firewall_id}")

    async def create_firewall(self, options: Mapping[str, Any]) -> JSONObject:
        return await self._post("/networking/firewalls", options)

    async def update_firewall(self, firewall_id: int, options: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/networking/firewalls/{firewall_id}", options)

    async def delete_firewall(self, firewall_id: int) -> None:
        await self._delete(f"/networking/firewalls/{firewall_id}")

    async def update_firewall_rules(self, firewall_id: int, rules: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/networking/firewalls/{firewall_id}/rules", rules)

    async def list_firewall_devices(self, firewall_id: int) -> List[JSONObject]:
        return await self._list(f"/networking/firewalls/{firewall_id}/devices")

    async def create_firewall_device(self, firewall_id: int, device_id: int, device_type: str) -> JSONObject:
        return await self._post(
            f"/networking/firewalls/{firewall_id}/devices",
            {"id": device_id, "type": device_type},
        )

    async def delete_firewall_device(self, firewall_id: int, device_id: int) -> None:
        await self._delete(f"/networking/firewalls/{firewall_id}/devices/{device_id}")

    # networking

    async def list_ip_addresses(self) -> List[JSONObject]:
        return await self._list("/networking/ips")

    async def get_ip_address(self, address: str) -> JSONObject:
        return await self._get(f"/networking/ips/{address}")

    async def update_ip_address(self, address: str, options: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/networking/ips/{address}", options)

    async def allocate_reserved_ip(self, options: Mapping[str, Any]) -> JSONObject:
        body = dict(options)
        body["reserved"] = True
        return await self._post("/networking/ips", body)

    async def assign_ips(self, region: str, assignments: List[Mapping[str, Any]]) -> None:
        await self._post(
            "/networking/ips/assign",
            {"region": region, "assignments": [dict(item) for item in assignments]},
        )

    async def list_vlans(self) -> List[JSONObject]:
        return await self._list("/networking/vlans")

    async def list_ipv6_pools(self) -> List[JSONObject]:
        return await self._list("/networking/ipv6/pools")

    async def list_ipv6_ranges(self) -> List[JSONObject]:
        return await self._list("/networking/ipv6/ranges")

    # StackScripts

    async def list_stackscripts(self) -> List[JSONObject]:
        return await self._list("/linode/stackscripts")

    async def get_stackscript(self, stackscript_id: int) -> JSONObject:
        return await self._get(f"/linode/stackscripts/{stackscript_id}")

    async def create_stackscript(self, options: Mapping[str, Any]) -> JSONObject:
        return await self._post("/linode/stackscripts", options)

    async def update_stackscript(self, stackscript_id: int, options: Mapping[str, Any]) -> JSONObject:
        return await self._put(f"/linode/stackscripts/{stackscript_id}", options)

    async def delete_stackscript(self, stackscript_id: int) -> None:
        await self._delete(f"/linode/stackscripts/{stackscript_id}")
