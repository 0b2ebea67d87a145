"""StackScript tools."""

from __future__ import annotations

from typing import Any, Mapping

from ..accounts import AccountRecord
from ..arguments import StackScriptCreateParams, StackScriptIdParams, StackScriptUpdateParams, as_mapping
from ..registry import ToolRegistry, ToolSpec, boolean, integer, object_schema, string, string_array
from ..rendering import ToolResult, join, render_confirmation, render_detail, render_list, truncate, visibility

_STACKSCRIPT_ID = {"stackscript_id": integer("ID of the StackScript", minimum=1)}


def format_stackscript(script: Mapping[str, Any]) -> str:
    lines = [
        f"ID: {script.get('id', 0)} | {script.get('label', '')} ({visibility(script.get('is_public'))})",
        f"  Author: {script.get('username', '')}",
    ]
    description = (script.get("description") or "").strip()
    if description:
        lines.append(f"  Description: {truncate(description)}")
    lines.append(f"  Compatible Images: {join(script.get('images'))}")
    lines.append(
        f"  Deployments: {script.get('deployments_total', 0)} total, {script.get('deployments_active', 0)} active"
    )
    lines.append(f"  Updated: {script.get('updated', '')}")
    return "\n".join(lines)


def render_stackscript(script: Mapping[str, Any]) -> str:
    ownership = " (mine)" if script.get("mine") else ""
    fields = []
    for udf in script.get("user_defined_fields") or []:
        fields.append(f"  - {udf.get('name', '')} ({udf.get('label', '')})")
        for key, label in (("default", "Default"), ("example", "Example"), ("oneof", "Options"), ("manyof", "Multiple Options")):
            if udf.get(key):
                fields.append(f"    {label}: {udf[key]}")
    text = render_detail(
        "StackScript",
        [
            ("ID", script.get("id")),
            ("Label", script.get("label")),
            ("Author", script.get("username")),
            ("Visibility", visibility(script.get("is_public")) + ownership),
            ("Description", script.get("description")),
            ("Revision Note", script.get("rev_note")),
            ("Compatible Images", join(script.get("images"))),
            (
                "Deployments",
                f"{script.get('deployments_total', 0)} total, {script.get('deployments_active', 0)} active",
            ),
            ("Created", script.get("created")),
            ("Updated", script.get("updated")),
        ],
        sections=[("User-Defined Fields", fields)],
    )
    if script.get("script"):
        text += f"\n\nScript Content:\n```bash\n{script['script']}\n```"
    return text


def _receipt(message: str, script: Mapping[str, Any]) -> str:
    return render_confirmation(
        message,
        [
            ("ID", script.get("id")),
            ("Label", script.get("label")),
            ("Visibility", visibility(script.get("is_public"))),
            ("Compatible Images", join(script.get("images"))),
        ],
    )


async def stackscripts_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    scripts = await account.client.list_stackscripts()
    return ToolResult(render_list("StackScripts", scripts, format_stackscript))


async def stackscript_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = StackScriptIdParams.from_arguments(arguments)
    script = await account.client.get_stackscript(params.stackscript_id)
    return ToolResult(render_stackscript(script))


async def stackscript_create(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = StackScriptCreateParams.from_arguments(arguments)
    script = await account.client.create_stackscript(params.to_request())
    return ToolResult(_receipt("StackScript created successfully", script))


async def stackscript_update(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = StackScriptUpdateParams.from_arguments(arguments)
    script = await account.client.update_stackscript(params.stackscript_id, params.to_request())
    return ToolResult(_receipt("StackScript updated successfully", script))


async def stackscript_delete(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = StackScriptIdParams.from_arguments(arguments)
    await account.client.delete_stackscript(params.stackscript_id)
    return ToolResult(f"StackScript {params.stackscript_id} deleted successfully")


_BODY = {
    "label": string("Display label"),
    "script": string("Script body, starting with a shebang"),
    "images": string_array("Compatible image IDs"),
    "description": string("Description"),
    "is_public": boolean("Publish the StackScript; public scripts cannot be made private again"),
    "rev_note": string("Revision note"),
}


def register_tools(registry: ToolRegistry) -> None:
    id_schema = object_schema(_STACKSCRIPT_ID, required=["stackscript_id"])
    registry.add(ToolSpec("linode.stackscripts.list", "List StackScripts visible to the account.", stackscripts_list))
    registry.add(ToolSpec("linode.stackscripts.get", "Show a StackScript and its source.", stackscript_get, id_schema))
    registry.add(
        ToolSpec(
            "linode.stackscripts.create",
            "Create a StackScript.",
            stackscript_create,
            object_schema(_BODY, required=["label", "script", "images"]),
        )
    )
    registry.add(
        ToolSpec(
            "linode.stackscripts.update",
            "Update a StackScript.",
            stackscript_update,
            object_schema({**_STACKSCRIPT_ID, **_BODY}, required=["stackscript_id"]),
        )
    )
    registry.add(ToolSpec("linode.stackscripts.delete", "Delete a StackScript.", stackscript_delete, id_schema))
