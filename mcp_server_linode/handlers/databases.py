"""Managed database tools for the MySQL and PostgreSQL engines."""

from __future__ import annotations

from functools import partial
from typing import Any, Dict, Mapping

from ..accounts import AccountRecord
from ..arguments import DatabaseCreateParams, DatabaseIdParams, DatabaseUpdateParams, as_mapping
from ..errors import ArgumentError, ArgumentReason
from ..registry import ToolRegistry, ToolSpec, boolean, integer, object_schema, string, string_array
from ..rendering import ToolResult, join, render_confirmation, render_detail, render_list

# tool segment -> (API path segment, display name)
ENGINES = {
    "mysql": ("mysql", "MySQL"),
    "postgres": ("postgresql", "PostgreSQL"),
}

_DATABASE_ID = {"database_id": integer("ID of the managed database", minimum=1)}


def format_database(database: Mapping[str, Any]) -> str:
    lines = [
        f"ID: {database.get('id', 0)} | {database.get('label', '')}"
        f" ({database.get('engine', '')} {database.get('version', '')})",
        f"  Region: {database.get('region', '')} | Type: {database.get('type', '')}"
        f" | Status: {database.get('status', '')}",
    ]
    hosts = database.get("hosts") or {}
    if hosts.get("primary"):
        lines.append(f"  Primary Host: {hosts['primary']} | Port: {database.get('port', 0)}")
    lines.append(f"  Cluster Size: {database.get('cluster_size', 0)} nodes")
    if database.get("updated"):
        lines.append(f"  Updated: {database['updated']}")
    return "\n".join(lines)


def format_engine(engine: Mapping[str, Any]) -> str:
    return "\n".join(
        [
            f"Engine: {engine.get('engine', '')}",
            f"  ID: {engine.get('id', '')}",
            f"  Version: {engine.get('version', '')}",
        ]
    )


def format_database_type(database_type: Mapping[str, Any]) -> str:
    return "\n".join(
        [
            f"Type: {database_type.get('id', '')}",
            f"  Label: {database_type.get('label', '')}",
            f"  Class: {database_type.get('class', '')}",
            f"  vCPUs: {database_type.get('vcpus', 0)} | Memory: {database_type.get('memory', 0)} MB"
            f" | Disk: {database_type.get('disk', 0)} MB",
        ]
    )


def render_database(display: str, database: Mapping[str, Any]) -> str:
    hosts = database.get("hosts") or {}
    allow_list = database.get("allow_list") or []
    return render_detail(
        f"{display} Database",
        [
            ("ID", database.get("id")),
            ("Label", database.get("label")),
            ("Engine", f"{database.get('engine', '')} {database.get('version', '')}".strip()),
            ("Region", database.get("region")),
            ("Type", database.get("type")),
            ("Status", database.get("status")),
            ("Cluster Size", f"{database.get('cluster_size', 0)} nodes"),
            ("Primary Host", hosts.get("primary")),
            ("Secondary Host", hosts.get("secondary")),
            ("Port", database.get("port")),
            ("SSL Connection", "required" if database.get("ssl_connection") else None),
            ("Encrypted", "yes" if database.get("encrypted") else None),
            ("Created", database.get("created")),
            ("Updated", database.get("updated")),
        ],
        sections=[("Allow List", [f"  - {entry}" for entry in allow_list])],
    )


async def databases_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    databases = await account.client.list_databases()
    return ToolResult(render_list("databases", databases, format_database))


async def engines_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    engines = await account.client.list_database_engines()
    return ToolResult(render_list("database engines", engines, format_engine))


async def types_list(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    database_types = await account.client.list_database_types()
    return ToolResult(render_list("database types", database_types, format_database_type))


async def engine_list(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    path, display = ENGINES[engine]
    databases = await account.client.list_engine_databases(path)
    return ToolResult(render_list(f"{display} databases", databases, format_database))


async def engine_get(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DatabaseIdParams.from_arguments(arguments)
    path, display = ENGINES[engine]
    database = await account.client.get_engine_database(path, params.database_id)
    return ToolResult(render_database(display, database))


async def engine_create(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DatabaseCreateParams.from_arguments(arguments)
    path, display = ENGINES[engine]
    if not params.engine.startswith(f"{path}/"):
        raise ArgumentError("engine", ArgumentReason.OUT_OF_RANGE, f"expected a {path}/<version> engine ID")
    database = await account.client.create_engine_database(path, params.to_request())
    text = render_confirmation(
        f"{display} database created successfully",
        [
            ("ID", database.get("id")),
            ("Label", database.get("label")),
            ("Engine", f"{database.get('engine', '')} {database.get('version', '')}".strip()),
            ("Region", database.get("region")),
            ("Status", database.get("status")),
            ("Allow List", join(database.get("allow_list"))),
        ],
    )
    return ToolResult(text)


async def engine_update(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DatabaseUpdateParams.from_arguments(arguments)
    path, display = ENGINES[engine]
    database = await account.client.update_engine_database(path, params.database_id, params.to_request())
    hosts = database.get("hosts") or {}
    text = render_confirmation(
        f"{display} database updated successfully",
        [
            ("ID", database.get("id")),
            ("Label", database.get("label")),
            ("Status", database.get("status")),
            ("Primary Host", hosts.get("primary")),
            ("Allow List", join(database.get("allow_list"))),
        ],
    )
    return ToolResult(text)


async def engine_delete(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DatabaseIdParams.from_arguments(arguments)
    path, display = ENGINES[engine]
    await account.client.delete_engine_database(path, params.database_id)
    return ToolResult(f"{display} database {params.database_id} deleted successfully")


async def engine_credentials(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DatabaseIdParams.from_arguments(arguments)
    path, display = ENGINES[engine]
    credentials = await account.client.get_engine_database_credentials(path, params.database_id)
    text = "\n".join(
        [
            f"{display} Database Credentials:",
            f"Database ID: {params.database_id}",
            f"Username: {credentials.get('username', '')}",
            f"Password: {credentials.get('password', '')}",
        ]
    )
    return ToolResult(text)


async def engine_credentials_reset(engine: str, arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    params = DatabaseIdParams.from_arguments(arguments)
    path, display = ENGINES[engine]
    await account.client.reset_engine_database_credentials(path, params.database_id)
    return ToolResult(
        f"{display} database {params.database_id} root password reset successfully.\n"
        "Retrieve the new credentials with the credentials tool."
    )


def _create_schema(path: str) -> Dict[str, Any]:
    return object_schema(
        {
            "label": string("Display label for the database"),
            "region": string("Region ID"),
            "type": string("Database plan type, e.g. g6-dedicated-2"),
            "engine": string(f"Engine ID, e.g. {path}/8"),
            "cluster_size": integer("Number of nodes (1 or 3)", minimum=1, maximum=3),
            "encrypted": boolean("Encrypt data at rest"),
            "ssl_connection": boolean("Require SSL connections"),
            "allow_list": string_array("IP ranges allowed to connect"),
            "replication_type": string("Replication mode for multi-node clusters"),
        },
        required=["label", "region", "type", "engine"],
    )


def register_tools(registry: ToolRegistry) -> None:
    registry.add(ToolSpec("linode.databases.list", "List managed databases of every engine.", databases_list))
    registry.add(ToolSpec("linode.databases.engines.list", "List available database engines.", engines_list))
    registry.add(ToolSpec("linode.databases.types.list", "List managed database plan types.", types_list))

    id_schema = object_schema(_DATABASE_ID, required=["database_id"])
    for engine, (path, display) in ENGINES.items():
        prefix = f"linode.databases.{engine}"
        registry.add(ToolSpec(f"{prefix}.list", f"List {display} databases.", partial(engine_list, engine)))
        registry.add(
            ToolSpec(f"{prefix}.get", f"Show details of a {display} database.", partial(engine_get, engine), id_schema)
        )
        registry.add(
            ToolSpec(
                f"{prefix}.create",
                f"Create a {display} database.",
                partial(engine_create, engine),
                _create_schema(path),
            )
        )
        registry.add(
            ToolSpec(
                f"{prefix}.update",
                f"Change the label or allow list of a {display} database.",
                partial(engine_update, engine),
                object_schema(
                    {
                        **_DATABASE_ID,
                        "label": string("New display label"),
                        "allow_list": string_array("Replacement list of IP ranges allowed to connect"),
                    },
                    required=["database_id"],
                ),
            )
        )
        registry.add(
            ToolSpec(f"{prefix}.delete", f"Delete a {display} database.", partial(engine_delete, engine), id_schema)
        )
        registry.add(
            ToolSpec(
                f"{prefix}.credentials",
                f"Show the root credentials of a {display} database.",
                partial(engine_credentials, engine),
                id_schema,
            )
        )
        registry.add(
            ToolSpec(
                f"{prefix}.credentials.reset",
                f"Reset the root password of a {display} database.",
                partial(engine_credentials_reset, engine),
                id_schema,
            )
        )
