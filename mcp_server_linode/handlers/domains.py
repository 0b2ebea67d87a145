"""DNS domain and domain record tools."""

from __future__ import annotations

from typing import Any, Mapping

from ..accounts import AccountRecord
from ..arguments import (
    DOMAIN_STATUSES,
    DOMAIN_TYPES,
    RECORD_TYPES,
    DomainCreateParams,
    DomainIdParams,
    DomainRecordCreateParams,
    DomainRecordIdParams,
    DomainRecordUpdateParams,
    DomainUpdateParams,
    as_mapping,
)
from ..registry import ToolRegistry, ToolSpec, integer, object_schema, string, string_array
from ..rendering import ToolResult, join, render_confirmation, render_detail, render_list

_DOMAIN_ID = {"domain_id": integer("ID of the domain", minimum=1)}
_RECORD_ID = {"record_id": integer("ID of the domain record", minimum=1)}


def _seconds(value: Any) -> Any:
    return f"{value} seconds" if value else None


def format_domain(domain: Mapping[str, Any]) -> str:
    lines = [
        f"ID: {domain.get('id', 0)} | {domain.get('domain', '')} ({domain.get('type', '')})",
        f"  Status: {domain.get('status', '')}",
    ]
    if domain.get("description"):
        lines.append(f"  Description: {domain['description']}")
    lines.append(f"  SOA Email: {domain.get('soa_email', '')}")
    if domain.get("master_ips"):
        lines.append(f"  Master IPs: {join(domain['master_ips'])}")
    if domain.get("tags"):
        lines.append(f"  Tags: {join(domain['tags'])}")
    return "\n".join(lines)


def render_domain(domain: Mapping[str, Any]) -> str:
    return render_detail(
        "Domain",
        [
            ("ID", domain.get("id")),
            ("Domain", domain.get("domain")),
            ("Type", domain.get("type")),
            ("Status", domain.get("status")),
            ("Description", domain.get("description")),
            ("SOA Email", domain.get("soa_email")),
            ("TTL", _seconds(domain.get("ttl_sec"))),
            ("Refresh", _seconds(domain.get("refresh_sec"))),
            ("Retry", _seconds(domain.get("retry_sec"))),
            ("Expire", _seconds(domain.get("expire_sec"))),
            ("Master IPs", join(domain.get("master_ips"))),
            ("AXFR IPs", join(domain.get("axfr_ips"))),
            ("Tags", join(domain.get("tags"))),
            ("Created", domain.get("created")),
            ("Updated", domain.get("updated")),
        ],
    )


def format_record(record: Mapping[str, Any]) -> str:
    name = record.get("name") or "@"
    line = f"ID: {record.get('id', 0)} | {record.get('type', '')} {name} -> {record.get('target', '')}"
    extras = []
    for key, label in (("priority", "Priority"), ("weight", "Weight"), ("port", "Port")):
        if record.get(key):
            extras.append(f"{label}: {record[key]}")
    if record.get("ttl_sec"):
        extras.append(f"TTL: {record['ttl_sec']}s")
    if extras:
        return f"{line}\n  {' | '.join(extras)}"
    return line


def render_record(record: Mapping[str, Any]) -> str:
    return render_detail(
        "Domain Record",
        [
            ("ID", record.get("id")),
            ("Type", record.get("type")),
            ("Name", record.get("name")),
            ("Target", record.get("target")),
            ("Priority", record.get("priority") or None),
            ("Weight", record.get("weight") or None),
            ("Port", record.get("port") or None),
            ("Service", record.get("service")),
            ("Protocol", record.get("protocol")),
            ("Tag", record.get("tag")),
            ("TTL", _seconds(record.get("ttl_sec"))),
            ("Created", record.get("created")),
            ("Updated", record.get("updated")),
        ],
    )


def _domain_receipt(message: str, domain: Mapping[str, Any]) -> str:
    return render_confirmation(
        message,
        [
            ("ID", domain.get("id")),
            ("Domain", domain.get("domain")),
            ("Type", domain.get("type")),
            ("Status", domain.get("status")),
        ],
    )


async def domains_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    domains = await account.client.list_domains()
    return ToolResult(render_list("domains", domains, format_domain))


async def domain_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainIdParams.from_arguments(arguments)
    domain = await account.client.get_domain(params.domain_id)
    return ToolResult(render_domain(domain))


async def domain_create(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainCreateParams.from_arguments(arguments)
    domain = await account.client.create_domain(params.to_request())
    return ToolResult(_domain_receipt("Domain created successfully", domain))


async def domain_update(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainUpdateParams.from_arguments(arguments)
    domain = await account.client.update_domain(params.domain_id, params.to_request())
    return ToolResult(_domain_receipt("Domain updated successfully", domain))


async def domain_delete(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainIdParams.from_arguments(arguments)
    await account.client.delete_domain(params.domain_id)
    return ToolResult(f"Domain {params.domain_id} deleted successfully")


async def records_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainIdParams.from_arguments(arguments)
    records = await account.client.list_domain_records(params.domain_id)
    return ToolResult(render_list("domain records", records, format_record))


async def record_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainRecordIdParams.from_arguments(arguments)
    record = await account.client.get_domain_record(params.domain_id, params.record_id)
    return ToolResult(render_record(record))


def _record_receipt(message: str, record: Mapping[str, Any]) -> str:
    return render_confirmation(
        message,
        [
            ("ID", record.get("id")),
            ("Type", record.get("type")),
            ("Name", record.get("name")),
            ("Target", record.get("target")),
        ],
    )


async def record_create(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainRecordCreateParams.from_arguments(arguments)
    record = await account.client.create_domain_record(params.domain_id, params.to_request())
    return ToolResult(_record_receipt("Domain record created successfully", record))


async def record_update(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainRecordUpdateParams.from_arguments(arguments)
    record = await account.client.update_domain_record(params.domain_id, params.record_id, params.to_request())
    return ToolResult(_record_receipt("Domain record updated successfully", record))


async def record_delete(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DomainRecordIdParams.from_arguments(arguments)
    await account.client.delete_domain_record(params.domain_id, params.record_id)
    return ToolResult(f"Domain record {params.record_id} deleted successfully from domain {params.domain_id}")


_SECONDS_FIELDS = {
    "ttl_sec": integer("Default TTL in seconds", minimum=0),
    "refresh_sec": integer("Refresh interval in seconds", minimum=0),
    "retry_sec": integer("Retry interval in seconds", minimum=0),
    "expire_sec": integer("Expire time in seconds", minimum=0),
}

_CREATE_SCHEMA = object_schema(
    {
        "domain": string("Domain name, e.g. example.com"),
        "type": string("Zone type", enum=DOMAIN_TYPES),
        "soa_email": string("Start of authority email; required for master zones"),
        "description": string("Description of the domain"),
        "master_ips": string_array("Master IPs for slave zones"),
        "axfr_ips": string_array("IPs allowed to AXFR the zone"),
        "tags": string_array("Tags to apply"),
        **_SECONDS_FIELDS,
    },
    required=["domain"],
)

_UPDATE_SCHEMA = object_schema(
    {
        **_DOMAIN_ID,
        "domain": string("New domain name"),
        "type": string("New zone type", enum=DOMAIN_TYPES),
        "status": string("New zone status", enum=DOMAIN_STATUSES),
        "soa_email": string("New SOA email"),
        "description": string("New description"),
        "master_ips": string_array("New master IPs"),
        "axfr_ips": string_array("New AXFR IPs"),
        "tags": string_array("New tags"),
        **_SECONDS_FIELDS,
    },
    required=["domain_id"],
)

_RECORD_FIELDS = {
    "priority": integer("Priority for MX and SRV records", minimum=0, maximum=255),
    "weight": integer("Weight for SRV records", minimum=0, maximum=65535),
    "port": integer("Port for SRV records", minimum=0, maximum=65535),
    "service": string("Service name for SRV records"),
    "protocol": string("Protocol for SRV records"),
    "ttl_sec": integer("TTL in seconds", minimum=0),
    "tag": string("Tag for CAA records"),
}

_RECORD_CREATE_SCHEMA = object_schema(
    {
        **_DOMAIN_ID,
        "type": string("Record type", enum=RECORD_TYPES),
        "target": string("Record target: IP, hostname or text"),
        "name": string("Record name (subdomain)"),
        **_RECORD_FIELDS,
    },
    required=["domain_id", "type", "target"],
)

_RECORD_UPDATE_SCHEMA = object_schema(
    {
        **_DOMAIN_ID,
        **_RECORD_ID,
        "type": string("New record type", enum=RECORD_TYPES),
        "target": string("New record target"),
        "name": string("New record name"),
        **_RECORD_FIELDS,
    },
    required=["domain_id", "record_id"],
)


def register_tools(registry: ToolRegistry) -> None:
    domain_id = object_schema(_DOMAIN_ID, required=["domain_id"])
    record_id = object_schema({**_DOMAIN_ID, **_RECORD_ID}, required=["domain_id", "record_id"])

    registry.add(ToolSpec("linode.domains.list", "List DNS domains.", domains_list))
    registry.add(ToolSpec("linode.domains.get", "Show details of a DNS domain.", domain_get, domain_id))
    registry.add(ToolSpec("linode.domains.create", "Create a DNS domain.", domain_create, _CREATE_SCHEMA))
    registry.add(ToolSpec("linode.domains.update", "Update a DNS domain.", domain_update, _UPDATE_SCHEMA))
    registry.add(ToolSpec("linode.domains.delete", "Delete a DNS domain.", domain_delete, domain_id))
    registry.add(ToolSpec("linode.domains.records.list", "List records of a DNS domain.", records_list, domain_id))
    registry.add(ToolSpec("linode.domains.records.get", "Show one DNS record.", record_get, record_id))
    registry.add(
        ToolSpec("linode.domains.records.create", "Create a DNS record.", record_create, _RECORD_CREATE_SCHEMA)
    )
    registry.add(
        ToolSpec("linode.domains.records.update", "Update a DNS record.", record_update, _RECORD_UPDATE_SCHEMA)
    )
    registry.add(ToolSpec("linode.domains.records.delete", "Delete a DNS record.", record_delete, record_id))
