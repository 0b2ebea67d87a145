"""Environment settings and account discovery."""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .accounts import AccountManager
from .errors import AccountError

logger = logging.getLogger("mcp-server-linode.config")


def positive_seconds(environ: Mapping[str, str], variable: str, default: float) -> float:
    """Read a positive number of seconds, falling back to ``default`` when unusable."""

    raw = environ.get(variable)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", variable, raw, default)
        return default
    if not math.isfinite(value) or value <= 0:
        logger.warning("Ignoring %s=%r: must be a positive number, using %s", variable, raw, default)
        return default
    return value


LOG_LEVEL = os.environ.get("MCP_LINODE_LOG_LEVEL", "INFO")
CACHE_TTL = positive_seconds(os.environ, "MCP_LINODE_CACHE_TTL", 300.0)
TIMEOUT = positive_seconds(os.environ, "MCP_LINODE_TIMEOUT", 30.0)
API_URL = os.environ.get("MCP_LINODE_API_URL")

ENV_ACCOUNT_NAME = "default"
TOKEN_VARIABLES = ("MCP_LINODE_TOKEN", "LINODE_TOKEN")

CONFIG_PATHS = [
    Path.home() / ".config" / "mcp-linode" / "accounts.json",
    Path.cwd() / "mcp-linode.json",
]


@dataclass(frozen=True)
class AccountConfig:
    name: str
    token: str
    label: str
    api_url: Optional[str] = None
    source: str = "environment"


@dataclass
class ServerConfig:
    accounts: Dict[str, AccountConfig] = field(default_factory=dict)
    default_account: Optional[str] = None

    def add(self, account: AccountConfig) -> bool:
        """Keep the first definition of each name."""

        if account.name in self.accounts:
            logger.debug("Ignoring account %s from %s; already defined", account.name, account.source)
            return False
        self.accounts[account.name] = account
        return True


def config_paths(environ: Optional[Mapping[str, str]] = None) -> List[Path]:
    environ = os.environ if environ is None else environ
    paths = list(CONFIG_PATHS)
    explicit = environ.get("MCP_LINODE_CONFIG")
    if explicit:
        paths.insert(0, Path(explicit).expanduser())
    return paths


def _parse_accounts_file(path: Path, config: ServerConfig) -> None:
    with path.open() as fh:
        raw = json.load(fh)
    if not isinstance(raw, dict):
        raise ValueError("top level must be an object")
    accounts = raw.get("accounts", {})
    if not isinstance(accounts, dict):
        raise ValueError("'accounts' must be an object")
    for name, value in accounts.items():
        if not isinstance(value, dict) or not isinstance(value.get("token"), str):
            logger.warning("Skipping account %s in %s: missing token", name, path)
            continue
        label = value.get("label")
        api_url = value.get("apiUrl")
        added = config.add(
            AccountConfig(
                name=str(name),
                token=value["token"],
                label=label if isinstance(label, str) and label else str(name),
                api_url=api_url if isinstance(api_url, str) and api_url else None,
                source=str(path),
            )
        )
        if added:
            logger.info("Found Linode account %s in %s", name, path)
    default = raw.get("defaultAccount")
    if config.default_account is None and isinstance(default, str) and default:
        config.default_account = default


def discover(
    environ: Optional[Mapping[str, str]] = None,
    paths: Optional[List[Path]] = None,
) -> ServerConfig:
    """Collect accounts from the environment and JSON account files."""

    environ = os.environ if environ is None else environ
    config = ServerConfig(default_account=environ.get("MCP_LINODE_DEFAULT_ACCOUNT") or None)

    for variable in TOKEN_VARIABLES:
        token = environ.get(variable)
        if token:
            config.add(
                AccountConfig(
                    name=ENV_ACCOUNT_NAME,
                    token=token,
                    label="Environment token",
                    api_url=environ.get("MCP_LINODE_API_URL") or None,
                    source=variable,
                )
            )
            break

    for path in config_paths(environ) if paths is None else paths:
        if not path.exists():
            continue
        try:
            _parse_accounts_file(path, config)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read %s: %s", path, exc)

    logger.info("Discovered %d Linode accounts", len(config.accounts))
    return config


def load_accounts(manager: AccountManager, config: ServerConfig) -> Optional[str]:
    """Register discovered accounts and bind the initial current account.

    Returns the name of the current account, or None when nothing could be
    registered.
    """

    for name in sorted(config.accounts):
        account = config.accounts[name]
        try:
            manager.register(account.name, account.label, account.token, api_url=account.api_url)
        except AccountError as exc:
            logger.warning("Skipping account %s from %s: %s", name, account.source, exc)

    if not len(manager):
        logger.warning("No Linode accounts configured; set LINODE_TOKEN or MCP_LINODE_CONFIG")
        return None

    target = config.default_account
    if target is None or target not in manager:
        if target is not None:
            logger.warning("Default account %s is not configured", target)
        target = manager.list()[0].name
    manager.set_current(target)
    logger.info("Current Linode account: %s", target)
    return target
