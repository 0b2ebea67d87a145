"""Cloud Firewall tools."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..accounts import AccountRecord
from ..arguments import (
    FIREWALL_ACTIONS,
    FIREWALL_DEVICE_TYPES,
    FIREWALL_PROTOCOLS,
    FIREWALL_STATUSES,
    FirewallCreateParams,
    FirewallDeviceCreateParams,
    FirewallDeviceDeleteParams,
    FirewallIdParams,
    FirewallRulesUpdateParams,
    FirewallUpdateParams,
    as_mapping,
)
from ..registry import (
    ToolRegistry,
    ToolSpec,
    integer,
    nested_object,
    object_array,
    object_schema,
    string,
    string_array,
)
from ..rendering import ToolResult, join, render_confirmation, render_detail, render_list

_FIREWALL_ID = {"firewall_id": integer("ID of the firewall", minimum=1)}


def format_firewall(firewall: Mapping[str, Any]) -> str:
    rules = firewall.get("rules") or {}
    lines = [
        f"ID: {firewall.get('id', 0)} | {firewall.get('label', '')} ({firewall.get('status', '')})",
        f"  Rules: {len(rules.get('inbound') or [])} inbound, {len(rules.get('outbound') or [])} outbound",
    ]
    if firewall.get("tags"):
        lines.append(f"  Tags: {join(firewall['tags'])}")
    return "\n".join(lines)


def _rule_lines(rules: List[Mapping[str, Any]]) -> List[str]:
    lines = []
    for index, rule in enumerate(rules, start=1):
        addresses = rule.get("addresses") or {}
        targets = join(list(addresses.get("ipv4") or []) + list(addresses.get("ipv6") or []), "any")
        ports = rule.get("ports") or "all"
        lines.append(f"  {index}. {rule.get('action', '')} {rule.get('protocol', '')}:{ports} -> {targets}")
        if rule.get("label"):
            lines.append(f"     Label: {rule['label']}")
        if rule.get("description"):
            lines.append(f"     Description: {rule['description']}")
    return lines


def render_firewall(firewall: Mapping[str, Any], devices: List[Mapping[str, Any]]) -> str:
    text = render_detail(
        "Firewall",
        [
            ("ID", firewall.get("id")),
            ("Label", firewall.get("label")),
            ("Status", firewall.get("status")),
            ("Tags", join(firewall.get("tags"))),
            ("Created", firewall.get("created")),
            ("Updated", firewall.get("updated")),
        ],
    )
    rules = firewall.get("rules") or {}
    lines = [text, ""]
    lines.append(f"Inbound Rules (Policy: {rules.get('inbound_policy', '')}):")
    lines.extend(_rule_lines(rules.get("inbound") or []) or ["  (none)"])
    lines.append("")
    lines.append(f"Outbound Rules (Policy: {rules.get('outbound_policy', '')}):")
    lines.extend(_rule_lines(rules.get("outbound") or []) or ["  (none)"])
    if devices:
        lines.append("")
        lines.append("Assigned Devices:")
        for device in devices:
            entity = device.get("entity") or {}
            lines.append(
                f"  - {entity.get('type', '')}: {entity.get('label', '')}"
                f" (ID: {entity.get('id', 0)}, device {device.get('id', 0)})"
            )
    return "\n".join(lines)


def _firewall_receipt(message: str, firewall: Mapping[str, Any]) -> str:
    return render_confirmation(
        message,
        [("ID", firewall.get("id")), ("Label", firewall.get("label")), ("Status", firewall.get("status"))],
    )


async def firewalls_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    firewalls = await account.client.list_firewalls()
    return ToolResult(render_list("firewalls", firewalls, format_firewall))


async def firewall_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallIdParams.from_arguments(arguments)
    firewall = await account.client.get_firewall(params.firewall_id)
    devices = await account.client.list_firewall_devices(params.firewall_id)
    return ToolResult(render_firewall(firewall, devices))


async def firewall_create(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallCreateParams.from_arguments(arguments)
    firewall = await account.client.create_firewall(params.to_request())
    return ToolResult(_firewall_receipt("Firewall created successfully", firewall))


async def firewall_update(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallUpdateParams.from_arguments(arguments)
    firewall = await account.client.update_firewall(params.firewall_id, params.to_request())
    return ToolResult(_firewall_receipt("Firewall updated successfully", firewall))


async def firewall_delete(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallIdParams.from_arguments(arguments)
    await account.client.delete_firewall(params.firewall_id)
    return ToolResult(f"Firewall {params.firewall_id} deleted successfully")


async def rules_update(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallRulesUpdateParams.from_arguments(arguments)
    await account.client.update_firewall_rules(params.firewall_id, params.rules.to_request())
    text = render_confirmation(
        f"Firewall rules updated successfully for firewall {params.firewall_id}",
        [
            ("Inbound", f"{len(params.rules.inbound)} rules (policy {params.rules.inbound_policy})"),
            ("Outbound", f"{len(params.rules.outbound)} rules (policy {params.rules.outbound_policy})"),
        ],
    )
    return ToolResult(text)


async def device_create(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallDeviceCreateParams.from_arguments(arguments)
    device = await account.client.create_firewall_device(params.firewall_id, params.device_id, params.device_type)
    text = render_confirmation(
        "Device assigned successfully",
        [
            ("Device ID", device.get("id")),
            ("Entity", f"{params.device_type} {params.device_id}"),
            ("Firewall ID", params.firewall_id),
        ],
    )
    return ToolResult(text)


async def device_delete(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = FirewallDeviceDeleteParams.from_arguments(arguments)
    await account.client.delete_firewall_device(params.firewall_id, params.device_id)
    return ToolResult(f"Device {params.device_id} removed successfully from firewall {params.firewall_id}")


_RULE_ITEM = {
    "type": "object",
    "properties": {
        "protocol": string("Protocol", enum=FIREWALL_PROTOCOLS),
        "action": string("Action", enum=FIREWALL_ACTIONS),
        "ports": string("Ports, e.g. 22 or 80,443 or 8000-9000"),
        "label": string("Rule label"),
        "description": string("Rule description"),
        "addresses": nested_object(
            "Source (inbound) or destination (outbound) addresses",
            {"ipv4": string_array("IPv4 CIDRs"), "ipv6": string_array("IPv6 CIDRs")},
        ),
    },
    "required": ["protocol", "action"],
}

_RULES = nested_object(
    "Rule set with inbound/outbound policies and rules",
    {
        "inbound_policy": string("Default inbound action", enum=FIREWALL_ACTIONS),
        "outbound_policy": string("Default outbound action", enum=FIREWALL_ACTIONS),
        "inbound": object_array("Inbound rules", _RULE_ITEM),
        "outbound": object_array("Outbound rules", _RULE_ITEM),
    },
)


def _schemas() -> Dict[str, Dict[str, Any]]:
    return {
        "id": object_schema(_FIREWALL_ID, required=["firewall_id"]),
        "create": object_schema(
            {"label": string("Display label"), "rules": _RULES, "tags": string_array("Tags to apply")},
            required=["label"],
        ),
        "update": object_schema(
            {
                **_FIREWALL_ID,
                "label": string("New label"),
                "status": string("New status", enum=FIREWALL_STATUSES),
                "tags": string_array("Replacement tags"),
            },
            required=["firewall_id"],
        ),
        "rules": object_schema({**_FIREWALL_ID, "rules": _RULES}, required=["firewall_id", "rules"]),
        "device_create": object_schema(
            {
                **_FIREWALL_ID,
                "device_id": integer("ID of the Linode or NodeBalancer", minimum=1),
                "device_type": string("Kind of device", enum=FIREWALL_DEVICE_TYPES),
            },
            required=["firewall_id", "device_id"],
        ),
        "device_delete": object_schema(
            {**_FIREWALL_ID, "device_id": integer("Firewall device ID to remove", minimum=1)},
            required=["firewall_id", "device_id"],
        ),
    }


def register_tools(registry: ToolRegistry) -> None:
    schemas = _schemas()
    registry.add(ToolSpec("linode.firewalls.list", "List Cloud Firewalls.", firewalls_list))
    registry.add(
        ToolSpec("linode.firewalls.get", "Show a firewall with its rules and devices.", firewall_get, schemas["id"])
    )
    registry.add(ToolSpec("linode.firewalls.create", "Create a Cloud Firewall.", firewall_create, schemas["create"]))
    registry.add(
        ToolSpec("linode.firewalls.update", "Update a firewall label, status or tags.", firewall_update, schemas["update"])
    )
    registry.add(ToolSpec("linode.firewalls.delete", "Delete a Cloud Firewall.", firewall_delete, schemas["id"]))
    registry.add(
        ToolSpec("linode.firewalls.rules.update", "Replace the rule set of a firewall.", rules_update, schemas["rules"])
    )
    registry.add(
        ToolSpec(
            "linode.firewalls.devices.create",
            "Attach a Linode or NodeBalancer to a firewall.",
            device_create,
            schemas["device_create"],
        )
    )
    registry.add(
        ToolSpec(
            "linode.firewalls.devices.delete",
            "Detach a device from a firewall.",
            device_delete,
            schemas["device_delete"],
        )
    )
