"""Account tools: inspect, list, switch, add, remove and relabel accounts.

Accounts added or changed here live in memory only; the account files are
never rewritten.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..accounts import AccountManager, AccountRecord
from ..arguments import (
    AccountAddParams,
    AccountRemoveParams,
    AccountSwitchParams,
    AccountUpdateParams,
    as_mapping,
)
from ..errors import InvalidCredentialError, UpstreamError
from ..registry import ToolRegistry, ToolScope, ToolSpec, object_schema, string
from ..rendering import ToolResult, render_detail


async def account_get(arguments: Mapping[str, Any], account: AccountRecord) -> ToolResult:
    as_mapping(arguments)
    profile = await account.client.get_profile()
    text = render_detail(
        "Account",
        [
            ("Name", account.name),
            ("Label", account.label),
            ("Username", profile.get("username")),
            ("Email", profile.get("email")),
            ("UID", profile.get("uid")),
            ("Restricted", "yes" if profile.get("restricted") else "no"),
        ],
    )
    return ToolResult(text)


async def account_list(arguments: Mapping[str, Any], manager: AccountManager) -> ToolResult:
    as_mapping(arguments)
    summaries = manager.list()
    current = next((summary.name for summary in summaries if summary.is_current), None)
    lines = [f"Current account: {current or 'none'}", "", "Configured accounts:"]
    for summary in summaries:
        marker = "*" if summary.is_current else " "
        suffix = " (current)" if summary.is_current else ""
        lines.append(f"{marker} {summary.name}: {summary.label}{suffix}")
    if not summaries:
        lines.append("  (none)")
    structured = {
        "currentAccount": current,
        "accounts": [
            {"name": summary.name, "label": summary.label, "isCurrent": summary.is_current}
            for summary in summaries
        ],
    }
    return ToolResult("\n".join(lines), structured=structured)


async def account_switch(arguments: Mapping[str, Any], manager: AccountManager) -> ToolResult:
    params = AccountSwitchParams.from_arguments(arguments)
    record = manager.get(params.name)
    # Only bind accounts whose credential the API accepts.
    profile = await record.client.get_profile()
    manager.set_current(record.name)
    text = f"Successfully switched to account: {record.name} ({record.label})"
    username = profile.get("username")
    if username:
        text += f"\nUsername: {username}"
    return ToolResult(text)


async def account_add(arguments: Mapping[str, Any], manager: AccountManager) -> ToolResult:
    params = AccountAddParams.from_arguments(arguments)
    record = manager.register(params.name, params.label, params.token, api_url=params.api_url)
    try:
        profile = await record.client.get_profile()
    except UpstreamError as exc:
        manager.remove(record.name)
        raise InvalidCredentialError(record.name, f"the API rejected the token or API URL: {exc}") from exc
    text = f"Account '{record.name}' ({record.label}) added successfully."
    username = profile.get("username")
    if username:
        text += f"\nUsername: {username}"
    text += "\nThe account is now available for use."
    return ToolResult(text)


async def account_remove(arguments: Mapping[str, Any], manager: AccountManager) -> ToolResult:
    params = AccountRemoveParams.from_arguments(arguments)
    was_current = manager.current_name == params.name
    manager.remove(params.name)
    text = f"Account '{params.name}' removed successfully."
    if was_current:
        text += "\nNo account is current now; switch to another account before using account tools."
    return ToolResult(text)


async def account_update(arguments: Mapping[str, Any], manager: AccountManager) -> ToolResult:
    params = AccountUpdateParams.from_arguments(arguments)
    record = manager.relabel(params.name, params.label)
    return ToolResult(f"Account '{record.name}' updated successfully.\nLabel: {record.label}")


def register_tools(registry: ToolRegistry) -> None:
    registry.add(
        ToolSpec(
            name="linode.account.get",
            description="Show the profile behind the current Linode account.",
            handler=account_get,
        )
    )
    registry.add(
        ToolSpec(
            name="linode.account.list",
            description="List configured Linode accounts and mark the current one.",
            handler=account_list,
            scope=ToolScope.MANAGER,
        )
    )
    registry.add(
        ToolSpec(
            name="linode.account.switch",
            description="Verify a configured account against the API and make it current.",
            handler=account_switch,
            input_schema=object_schema({"name": string("Name of the configured account")}, required=["name"]),
            scope=ToolScope.MANAGER,
        )
    )
    registry.add(
        ToolSpec(
            name="linode.account.add",
            description="Add a Linode account for this session after checking its token against the API.",
            handler=account_add,
            input_schema=object_schema(
                {
                    "name": string("Account name, without whitespace"),
                    "label": string("Display label"),
                    "token": string("Linode personal access token"),
                    "api_url": string("API base URL; defaults to the server setting"),
                },
                required=["name", "label", "token"],
            ),
            scope=ToolScope.MANAGER,
        )
    )
    registry.add(
        ToolSpec(
            name="linode.account.remove",
            description="Remove an account from this session.",
            handler=account_remove,
            input_schema=object_schema({"name": string("Name of the account")}, required=["name"]),
            scope=ToolScope.MANAGER,
        )
    )
    registry.add(
        ToolSpec(
            name="linode.account.update",
            description="Change the display label of an account.",
            handler=account_update,
            input_schema=object_schema(
                {"name": string("Name of the account"), "label": string("New display label")},
                required=["name", "label"],
            ),
            scope=ToolScope.MANAGER,
        )
    )
