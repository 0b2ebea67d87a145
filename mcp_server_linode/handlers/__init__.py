"""Tool handlers, one module per Linode resource family."""

from __future__ import annotations

from ..registry import ToolRegistry
from . import accounts, databases, domains, firewalls, instances, networking, reference, stackscripts, system

FAMILIES = (accounts, reference, instances, databases, domains, firewalls, networking, stackscripts, system)


def register_all(registry: ToolRegistry) -> ToolRegistry:
    for family in FAMILIES:
        family.register_tools(registry)
    return registry
