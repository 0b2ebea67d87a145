"""Regions, instance types and kernels, served through the per-account cache."""

from __future__ import annotations

from typing import Any, Mapping

from ..accounts import AccountRecord
from ..arguments import CacheInvalidateParams, as_mapping
from ..cache import ReferenceCategory
from ..registry import ToolRegistry, ToolSpec, object_schema, string
from ..rendering import ToolResult, join, render_detail, render_list


def format_region(region: Mapping[str, Any]) -> str:
    lines = [f"ID: {region.get('id', '')} | {region.get('label', '')} ({region.get('country', '')})"]
    lines.append(f"  Status: {region.get('status', '')}")
    capabilities = region.get("capabilities")
    if capabilities:
        lines.append(f"  Capabilities: {join(capabilities)}")
    return "\n".join(lines)


def format_type(linode_type: Mapping[str, Any]) -> str:
    price = linode_type.get("price") or {}
    lines = [f"ID: {linode_type.get('id', '')} | {linode_type.get('label', '')}"]
    lines.append(
        f"  Class: {linode_type.get('class', '')} | vCPUs: {linode_type.get('vcpus', 0)}"
        f" | Memory: {linode_type.get('memory', 0)} MB | Disk: {linode_type.get('disk', 0)} MB"
    )
    if price:
        lines.append(f"  Price: ${price.get('monthly', 0)}/month (${price.get('hourly', 0)}/hour)")
    return "\n".join(lines)


def format_kernel(kernel: Mapping[str, Any]) -> str:
    lines = [f"ID: {kernel.get('id', '')} | {kernel.get('label', '')}"]
    lines.append(
        f"  Version: {kernel.get('version', '')} | Architecture: {kernel.get('architecture', '')}"
        f" | Deprecated: {'yes' if kernel.get('deprecated') else 'no'}"
    )
    return "\n".join(lines)


async def regions_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    regions = await account.reference_cache.get_regions(account.client)
    return ToolResult(render_list("regions", regions, format_region))


async def types_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    types = await account.reference_cache.get_types(account.client)
    return ToolResult(render_list("instance types", types, format_type))


async def kernels_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    kernels = await account.reference_cache.get_kernels(account.client)
    return ToolResult(render_list("kernels", kernels, format_kernel))


async def cache_stats(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    stats = account.reference_cache.stats()
    pairs = [("Account", account.name), ("TTL", f"{stats.ttl:g} seconds")]
    for category in ReferenceCategory:
        slot = stats.slots[category.value]
        if not slot.present:
            state = "empty"
        else:
            state = f"{slot.count} items, {'expired' if slot.expired else 'fresh'}"
        pairs.append((category.value.capitalize(), state))
    return ToolResult(render_detail("Reference Cache", pairs), structured=stats.to_dict())


async def cache_invalidate(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = CacheInvalidateParams.from_arguments(arguments)
    cache = account.reference_cache
    if params.category is None:
        cache.invalidate_all()
        return ToolResult("Invalidated all cached reference data")
    cache.invalidate(params.category)
    return ToolResult(f"Invalidated cached {params.category.value}")


def register_tools(registry: ToolRegistry) -> None:
    registry.add(ToolSpec("linode.regions.list", "List Linode regions (cached).", regions_list))
    registry.add(ToolSpec("linode.types.list", "List Linode instance types with pricing (cached).", types_list))
    registry.add(ToolSpec("linode.kernels.list", "List available Linode kernels (cached).", kernels_list))
    registry.add(ToolSpec("linode.cache.stats", "Show the state of the reference-data cache.", cache_stats))
    registry.add(
        ToolSpec(
            "linode.cache.invalidate",
            "Drop cached reference data so the next read refetches it.",
            cache_invalidate,
            object_schema(
                {
                    "category": string(
                        "Which slot to drop; omit for all",
                        enum=[category.value for category in ReferenceCategory] + ["all"],
                    )
                }
            ),
        )
    )
