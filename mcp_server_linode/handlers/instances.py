"""Linode compute instance tools."""

from __future__ import annotations

from typing import Any, Mapping

from ..accounts import AccountRecord
from ..arguments import InstanceCreateParams, InstanceIdParams, InstancePowerParams, as_mapping
from ..registry import (
    ToolRegistry,
    ToolSpec,
    boolean,
    integer,
    nested_object,
    object_schema,
    string,
    string_array,
)
from ..rendering import ToolResult, join, render_confirmation, render_detail, render_list

_INSTANCE_ID = {"instance_id": integer("ID of the Linode instance", minimum=1)}
_CONFIG_ID = {"config_id": integer("Configuration profile ID; omit for the default", minimum=1)}


def format_instance(instance: Mapping[str, Any]) -> str:
    lines = [f"ID: {instance.get('id', 0)} | {instance.get('label', '')}"]
    lines.append(
        f"  Status: {instance.get('status', '')} | Region: {instance.get('region', '')}"
        f" | Type: {instance.get('type', '')}"
    )
    if instance.get("ipv4"):
        lines.append(f"  IPv4: {join(instance['ipv4'])}")
    if instance.get("tags"):
        lines.append(f"  Tags: {join(instance['tags'])}")
    return "\n".join(lines)


def render_instance(instance: Mapping[str, Any]) -> str:
    specs = instance.get("specs") or {}
    backups = instance.get("backups") or {}
    spec_lines = [
        f"- CPUs: {specs.get('vcpus', 0)}",
        f"- Memory: {specs.get('memory', 0)} MB",
        f"- Disk: {specs.get('disk', 0)} MB",
        f"- Transfer: {specs.get('transfer', 0)} GB",
    ] if specs else []
    network_lines = []
    if instance.get("ipv4"):
        network_lines.append(f"- IPv4: {join(instance['ipv4'])}")
    if instance.get("ipv6"):
        network_lines.append(f"- IPv6: {instance['ipv6']}")
    return render_detail(
        "Instance",
        [
            ("ID", instance.get("id")),
            ("Label", instance.get("label")),
            ("Status", instance.get("status")),
            ("Region", instance.get("region")),
            ("Type", instance.get("type")),
            ("Image", instance.get("image")),
            ("Hypervisor", instance.get("hypervisor")),
            ("Tags", join(instance.get("tags"))),
            ("Created", instance.get("created")),
            ("Updated", instance.get("updated")),
            ("Backups", "enabled" if backups.get("enabled") else "disabled"),
            ("Watchdog", "enabled" if instance.get("watchdog_enabled") else "disabled"),
        ],
        sections=[("Specifications", spec_lines), ("Network", network_lines)],
    )


async def instances_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    instances = await account.client.list_instances()
    return ToolResult(render_list("instances", instances, format_instance))


async def instance_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = InstanceIdParams.from_arguments(arguments)
    instance = await account.client.get_instance(params.instance_id)
    return ToolResult(render_instance(instance))


async def instance_create(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = InstanceCreateParams.from_arguments(arguments)
    instance = await account.client.create_instance(params.to_request())
    text = render_confirmation(
        "Instance created successfully",
        [
            ("ID", instance.get("id")),
            ("Label", instance.get("label")),
            ("Status", instance.get("status")),
            ("Region", instance.get("region")),
            ("Type", instance.get("type")),
            ("IPv4", join(instance.get("ipv4"))),
            ("IPv6", instance.get("ipv6")),
        ],
    )
    return ToolResult(text)


async def instance_delete(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = InstanceIdParams.from_arguments(arguments)
    await account.client.delete_instance(params.instance_id)
    return ToolResult(f"Instance {params.instance_id} deleted successfully")


async def instance_boot(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = InstancePowerParams.from_arguments(arguments)
    await account.client.boot_instance(params.instance_id, params.config_id)
    return ToolResult(f"Instance {params.instance_id} boot initiated successfully")


async def instance_shutdown(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = InstanceIdParams.from_arguments(arguments)
    await account.client.shutdown_instance(params.instance_id)
    return ToolResult(f"Instance {params.instance_id} shutdown initiated successfully")


async def instance_reboot(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = InstancePowerParams.from_arguments(arguments)
    await account.client.reboot_instance(params.instance_id, params.config_id)
    return ToolResult(f"Instance {params.instance_id} reboot initiated successfully")


_CREATE_SCHEMA = object_schema(
    {
        "region": string("Region ID, e.g. us-east"),
        "type": string("Linode type ID, e.g. g6-nanode-1"),
        "label": string("Display label for the instance"),
        "image": string("Image ID to deploy, e.g. linode/ubuntu22.04"),
        "root_pass": string("Root password"),
        "authorized_keys": string_array("SSH public keys for root"),
        "stackscript_id": integer("StackScript to run on first boot", minimum=1),
        "stackscript_data": nested_object("StackScript user-defined field values"),
        "backups_enabled": boolean("Enable automatic backups"),
        "private_ip": boolean("Add a private IPv4 address"),
        "booted": boolean("Boot the instance after creation"),
        "tags": string_array("Tags to apply"),
    },
    required=["region", "type", "label"],
)


def register_tools(registry: ToolRegistry) -> None:
    registry.add(ToolSpec("linode.instances.list", "List Linode instances.", instances_list))
    registry.add(
        ToolSpec(
            "linode.instances.get",
            "Show details of one Linode instance.",
            instance_get,
            object_schema(_INSTANCE_ID, required=["instance_id"]),
        )
    )
    registry.add(ToolSpec("linode.instances.create", "Create a Linode instance.", instance_create, _CREATE_SCHEMA))
    registry.add(
        ToolSpec(
            "linode.instances.delete",
            "Delete a Linode instance and all of its disks.",
            instance_delete,
            object_schema(_INSTANCE_ID, required=["instance_id"]),
        )
    )
    registry.add(
        ToolSpec(
            "linode.instances.boot",
            "Boot a Linode instance.",
            instance_boot,
            object_schema({**_INSTANCE_ID, **_CONFIG_ID}, required=["instance_id"]),
        )
    )
    registry.add(
        ToolSpec(
            "linode.instances.shutdown",
            "Shut down a Linode instance.",
            instance_shutdown,
            object_schema(_INSTANCE_ID, required=["instance_id"]),
        )
    )
    registry.add(
        ToolSpec(
            "linode.instances.reboot",
            "Reboot a Linode instance.",
            instance_reboot,
            object_schema({**_INSTANCE_ID, **_CONFIG_ID}, required=["instance_id"]),
        )
    )
