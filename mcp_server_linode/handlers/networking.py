"""IP address, reserved IP, IPv6 and VLAN tools."""

from __future__ import annotations

from typing import Any, Mapping

from ..accounts import AccountRecord
from ..arguments import (
    IPAddressParams,
    ReservedIPAllocateParams,
    ReservedIPAssignParams,
    ReservedIPUpdateParams,
    as_mapping,
)
from ..registry import ToolRegistry, ToolSpec, integer, object_schema, string
from ..rendering import ToolResult, assignment, join, render_confirmation, render_detail, render_list, visibility


def format_address(address: Mapping[str, Any]) -> str:
    lines = [
        f"Address: {address.get('address', '')} ({address.get('type', '')} {visibility(address.get('public'))})",
        f"  Gateway: {address.get('gateway') or 'none'} | Prefix: {address.get('prefix', 0)}",
        f"  Region: {address.get('region', '')} | {assignment(address.get('linode_id'))}",
    ]
    if address.get("rdns"):
        lines.append(f"  RDNS: {address['rdns']}")
    return "\n".join(lines)


def render_address(address: Mapping[str, Any]) -> str:
    return render_detail(
        "IP Address",
        [
            ("Address", address.get("address")),
            ("Type", address.get("type")),
            ("Gateway", address.get("gateway")),
            ("Subnet Mask", address.get("subnet_mask")),
            ("Prefix", address.get("prefix")),
            ("Region", address.get("region")),
            ("Visibility", visibility(address.get("public"))),
            ("Reserved", "yes" if address.get("reserved") else None),
            ("Assignment", assignment(address.get("linode_id"))),
            ("Reverse DNS", address.get("rdns")),
        ],
    )


def format_vlan(vlan: Mapping[str, Any]) -> str:
    return "\n".join(
        [
            f"Label: {vlan.get('label', '')} ({vlan.get('region', '')})",
            f"  Attached Linodes: {join(vlan.get('linodes'), 'None')}",
            f"  Created: {vlan.get('created', '')}",
        ]
    )


def format_ipv6_pool(pool: Mapping[str, Any]) -> str:
    return f"Range: {pool.get('range', '')}\n  Region: {pool.get('region', '')}"


def format_ipv6_range(ipv6_range: Mapping[str, Any]) -> str:
    return "\n".join(
        [
            f"Range: {ipv6_range.get('range', '')}/{ipv6_range.get('prefix', 0)}",
            f"  Region: {ipv6_range.get('region', '')}",
            f"  Route Target: {ipv6_range.get('route_target') or 'none'}",
        ]
    )


def is_reserved(address: Mapping[str, Any]) -> bool:
    if "reserved" in address:
        return bool(address["reserved"])
    return not address.get("linode_id")


async def ips_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    addresses = await account.client.list_ip_addresses()
    return ToolResult(render_list("IP addresses", addresses, format_address))


async def ip_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = IPAddressParams.from_arguments(arguments)
    address = await account.client.get_ip_address(params.address)
    return ToolResult(render_address(address))


async def reserved_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    addresses = [address for address in await account.client.list_ip_addresses() if is_reserved(address)]
    return ToolResult(render_list("reserved IP addresses", addresses, format_address))


async def reserved_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = IPAddressParams.from_arguments(arguments)
    address = await account.client.get_ip_address(params.address)
    return ToolResult(render_address(address))


async def reserved_allocate(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = ReservedIPAllocateParams.from_arguments(arguments)
    address = await account.client.allocate_reserved_ip(params.to_request())
    text = render_confirmation(
        "Reserved IP allocated successfully",
        [
            ("Address", address.get("address")),
            ("Type", f"{address.get('type', '')} ({visibility(address.get('public'))})"),
            ("Region", address.get("region")),
            ("Assignment", assignment(address.get("linode_id"))),
        ],
    )
    return ToolResult(text)


async def reserved_assign(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = ReservedIPAssignParams.from_arguments(arguments)
    await account.client.assign_ips(
        params.region,
        [{"address": params.address, "linode_id": params.linode_id or None}],
    )
    text = render_confirmation(
        "IP address assignment updated",
        [("Address", params.address), ("Assignment", assignment(params.linode_id))],
    )
    return ToolResult(text)


async def reserved_update(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = ReservedIPUpdateParams.from_arguments(arguments)
    address = await account.client.update_ip_address(params.address, params.to_request())
    text = render_confirmation(
        "IP address updated successfully",
        [
            ("Address", address.get("address") or params.address),
            ("Reverse DNS", address.get("rdns") or "default"),
        ],
    )
    return ToolResult(text)


async def vlans_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    vlans = await account.client.list_vlans()
    return ToolResult(render_list("VLANs", vlans, format_vlan))


async def ipv6_pools_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    pools = await account.client.list_ipv6_pools()
    return ToolResult(render_list("IPv6 pools", pools, format_ipv6_pool))


async def ipv6_ranges_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    ranges = await account.client.list_ipv6_ranges()
    return ToolResult(render_list("IPv6 ranges", ranges, format_ipv6_range))


def register_tools(registry: ToolRegistry) -> None:
    address = object_schema({"address": string("IPv4 or IPv6 address")}, required=["address"])
    registry.add(ToolSpec("linode.ips.list", "List IP addresses on the account.", ips_list))
    registry.add(ToolSpec("linode.ips.get", "Show details of one IP address.", ip_get, address))
    registry.add(ToolSpec("linode.reserved_ips.list", "List reserved IPv4 addresses.", reserved_list))
    registry.add(ToolSpec("linode.reserved_ips.get", "Show details of a reserved IP address.", reserved_get, address))
    registry.add(
        ToolSpec(
            "linode.reserved_ips.allocate",
            "Allocate a reserved public IPv4 address.",
            reserved_allocate,
            object_schema(
                {
                    "region": string("Region to reserve the address in"),
                    "linode_id": integer("Linode to assign the address to", minimum=1),
                }
            ),
        )
    )
    registry.add(
        ToolSpec(
            "linode.reserved_ips.assign",
            "Assign a reserved IP to a Linode, or unassign it when linode_id is omitted.",
            reserved_assign,
            object_schema(
                {
                    "address": string("Reserved IPv4 address"),
                    "region": string("Region of the address"),
                    "linode_id": integer("Target Linode; omit to unassign", minimum=1),
                },
                required=["address", "region"],
            ),
        )
    )
    registry.add(
        ToolSpec(
            "linode.reserved_ips.update",
            "Set or reset the reverse DNS of an IP address.",
            reserved_update,
            object_schema(
                {
                    "address": string("IPv4 or IPv6 address"),
                    "rdns": string("Reverse DNS hostname; omit to restore the default"),
                },
                required=["address"],
            ),
        )
    )
    registry.add(ToolSpec("linode.vlans.list", "List VLANs.", vlans_list))
    registry.add(ToolSpec("linode.ipv6.pools.list", "List IPv6 pools.", ipv6_pools_list))
    registry.add(ToolSpec("linode.ipv6.ranges.list", "List IPv6 ranges.", ipv6_ranges_list))
