"""Decode loosely typed tool arguments into typed, immutable request records.

Every ``from_arguments`` constructor is total: it returns a record or raises
exactly one :class:`~mcp_server_linode.errors.ArgumentError` naming the first
offending field. Nothing here performs I/O.
"""

from __future__ import annotations

import ipaddress
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .cache import ReferenceCategory
from .errors import ArgumentError, ArgumentReason

Arguments = Mapping[str, Any]

_MISSING = object()


def as_mapping(arguments: object, field_name: str = "arguments") -> Arguments:
    """Accept ``None`` as an empty map; reject anything that is not a mapping."""

    if arguments is None:
        return {}
    if not isinstance(arguments, Mapping):
        raise ArgumentError(field_name, ArgumentReason.WRONG_KIND, "expected an object")
    return arguments


def _lookup(arguments: Arguments, name: str) -> Any:
    value = arguments.get(name, _MISSING)
    return _MISSING if value is None else value


def _coerce_int(name: str, value: Any) -> int:
    # bool is a subclass of int; JSON true is never an integer here.
    if isinstance(value, bool):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an integer")


def require_id(arguments: Arguments, name: str) -> int:
    value = _lookup(arguments, name)
    if value is _MISSING:
        raise ArgumentError(name, ArgumentReason.MISSING)
    number = _coerce_int(name, value)
    if number <= 0:
        raise ArgumentError(name, ArgumentReason.OUT_OF_RANGE, "must be a positive integer")
    return number


def optional_id(arguments: Arguments, name: str) -> int:
    """Return the identity, or ``0`` when it was not supplied."""

    value = _lookup(arguments, name)
    if value is _MISSING:
        return 0
    number = _coerce_int(name, value)
    if number < 0:
        raise ArgumentError(name, ArgumentReason.OUT_OF_RANGE, "must not be negative")
    return number


def optional_int(
    arguments: Arguments,
    name: str,
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    value = _lookup(arguments, name)
    if value is _MISSING:
        return None
    number = _coerce_int(name, value)
    if minimum is not None and number < minimum:
        raise ArgumentError(name, ArgumentReason.OUT_OF_RANGE, f"must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ArgumentError(name, ArgumentReason.OUT_OF_RANGE, f"must be at most {maximum}")
    return number


def require_string(arguments: Arguments, name: str) -> str:
    value = _lookup(arguments, name)
    if value is _MISSING:
        raise ArgumentError(name, ArgumentReason.MISSING)
    if not isinstance(value, str):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected a string")
    if not value.strip():
        raise ArgumentError(name, ArgumentReason.EMPTY)
    return value


def optional_string(arguments: Arguments, name: str) -> Optional[str]:
    """Absent and ``""`` both mean "not supplied"."""

    value = _lookup(arguments, name)
    if value is _MISSING:
        return None
    if not isinstance(value, str):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected a string")
    return value or None


def optional_bool(arguments: Arguments, name: str) -> Optional[bool]:
    value = _lookup(arguments, name)
    if value is _MISSING:
        return None
    if not isinstance(value, bool):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected a boolean")
    return value


def choice(arguments: Arguments, name: str, options: Sequence[str], *, required: bool = False) -> Optional[str]:
    value = require_string(arguments, name) if required else optional_string(arguments, name)
    if value is None:
        return None
    if value not in options:
        raise ArgumentError(name, ArgumentReason.OUT_OF_RANGE, f"expected one of {', '.join(options)}")
    return value


def _sequence(arguments: Arguments, name: str) -> Tuple[Any, ...]:
    value = _lookup(arguments, name)
    if value is _MISSING:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an array")
    return tuple(value)


def string_list(arguments: Arguments, name: str, *, required: bool = False) -> Tuple[str, ...]:
    if required and _lookup(arguments, name) is _MISSING:
        raise ArgumentError(name, ArgumentReason.MISSING)
    items = _sequence(arguments, name)
    if any(not isinstance(item, str) for item in items):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an array of strings")
    if required and not items:
        raise ArgumentError(name, ArgumentReason.EMPTY)
    return items


def object_list(arguments: Arguments, name: str) -> Tuple[Arguments, ...]:
    items = _sequence(arguments, name)
    if any(not isinstance(item, Mapping) for item in items):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an array of objects")
    return items


def optional_object(arguments: Arguments, name: str) -> Optional[Arguments]:
    value = _lookup(arguments, name)
    if value is _MISSING:
        return None
    if not isinstance(value, Mapping):
        raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an object")
    return value


def string_map(arguments: Arguments, name: str) -> Tuple[Tuple[str, str], ...]:
    """Decode a flat ``{str: str}`` object into sorted key/value pairs."""

    value = optional_object(arguments, name)
    if value is None:
        return ()
    pairs = []
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise ArgumentError(name, ArgumentReason.WRONG_KIND, "expected an object of strings")
        pairs.append((key, item))
    return tuple(sorted(pairs))


def ip_address(arguments: Arguments, name: str) -> str:
    """Require a literal IPv4 or IPv6 address, returned in canonical form."""

    value = require_string(arguments, name).strip()
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        raise ArgumentError(name, ArgumentReason.OUT_OF_RANGE, "expected an IPv4 or IPv6 address") from None


def _nested(error: ArgumentError, prefix: str) -> ArgumentError:
    return ArgumentError(f"{prefix}.{error.field}", error.reason, error.detail)


# accounts


@dataclass(frozen=True)
class AccountSwitchParams:
    name: str

    @classmethod
    def from_arguments(cls, arguments: object) -> "AccountSwitchParams":
        args = as_mapping(arguments)
        return cls(name=require_string(args, "name"))


@dataclass(frozen=True)
class AccountAddParams:
    name: str
    label: str
    token: str
    api_url: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "AccountAddParams":
        args = as_mapping(arguments)
        return cls(
            name=require_string(args, "name"),
            label=require_string(args, "label"),
            token=require_string(args, "token"),
            api_url=optional_string(args, "api_url"),
        )

    def __repr__(self) -> str:
        return f"AccountAddParams(name={self.name!r}, label={self.label!r}, api_url={self.api_url!r})"


@dataclass(frozen=True)
class AccountRemoveParams:
    name: str

    @classmethod
    def from_arguments(cls, arguments: object) -> "AccountRemoveParams":
        args = as_mapping(arguments)
        return cls(name=require_string(args, "name"))


@dataclass(frozen=True)
class AccountUpdateParams:
    name: str
    label: str

    @classmethod
    def from_arguments(cls, arguments: object) -> "AccountUpdateParams":
        args = as_mapping(arguments)
        return cls(name=require_string(args, "name"), label=require_string(args, "label"))


# reference data


@dataclass(frozen=True)
class CacheInvalidateParams:
    category: Optional[ReferenceCategory] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "CacheInvalidateParams":
        args = as_mapping(arguments)
        options = [category.value for category in ReferenceCategory] + ["all"]
        value = choice(args, "category", options)
        if value is None or value == "all":
            return cls()
        return cls(category=ReferenceCategory(value))


# instances


@dataclass(frozen=True)
class InstanceIdParams:
    instance_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "InstanceIdParams":
        args = as_mapping(arguments)
        return cls(instance_id=require_id(args, "instance_id"))


@dataclass(frozen=True)
class InstancePowerParams:
    instance_id: int
    config_id: int = 0

    @classmethod
    def from_arguments(cls, arguments: object) -> "InstancePowerParams":
        args = as_mapping(arguments)
        return cls(
            instance_id=require_id(args, "instance_id"),
            config_id=optional_id(args, "config_id"),
        )


@dataclass(frozen=True)
class InstanceCreateParams:
    region: str
    type: str
    label: str
    image: Optional[str] = None
    root_pass: Optional[str] = None
    authorized_keys: Tuple[str, ...] = ()
    stackscript_id: int = 0
    stackscript_data: Tuple[Tuple[str, str], ...] = ()
    backups_enabled: Optional[bool] = None
    private_ip: Optional[bool] = None
    booted: Optional[bool] = None
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: object) -> "InstanceCreateParams":
        args = as_mapping(arguments)
        return cls(
            region=require_string(args, "region"),
            type=require_string(args, "type"),
            label=require_string(args, "label"),
            image=optional_string(args, "image"),
            root_pass=optional_string(args, "root_pass"),
            authorized_keys=string_list(args, "authorized_keys"),
            stackscript_id=optional_id(args, "stackscript_id"),
            stackscript_data=string_map(args, "stackscript_data"),
            backups_enabled=optional_bool(args, "backups_enabled"),
            private_ip=optional_bool(args, "private_ip"),
            booted=optional_bool(args, "booted"),
            tags=string_list(args, "tags"),
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"region": self.region, "type": self.type, "label": self.label}
        if self.image:
            body["image"] = self.image
        if self.root_pass:
            body["root_pass"] = self.root_pass
        if self.authorized_keys:
            body["authorized_keys"] = list(self.authorized_keys)
        if self.stackscript_id:
            body["stackscript_id"] = self.stackscript_id
        if self.stackscript_data:
            body["stackscript_data"] = dict(self.stackscript_data)
        for name in ("backups_enabled", "private_ip", "booted"):
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        if self.tags:
            body["tags"] = list(self.tags)
        return body


# managed databases


@dataclass(frozen=True)
class DatabaseIdParams:
    database_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "DatabaseIdParams":
        args = as_mapping(arguments)
        return cls(database_id=require_id(args, "database_id"))


@dataclass(frozen=True)
class DatabaseCreateParams:
    label: str
    region: str
    type: str
    engine: str
    cluster_size: Optional[int] = None
    encrypted: Optional[bool] = None
    ssl_connection: Optional[bool] = None
    allow_list: Tuple[str, ...] = ()
    replication_type: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "DatabaseCreateParams":
        args = as_mapping(arguments)
        cluster_size = optional_int(args, "cluster_size", minimum=1, maximum=3)
        if cluster_size == 2:
            raise ArgumentError("cluster_size", ArgumentReason.OUT_OF_RANGE, "expected 1 or 3")
        return cls(
            label=require_string(args, "label"),
            region=require_string(args, "region"),
            type=require_string(args, "type"),
            engine=require_string(args, "engine"),
            cluster_size=cluster_size,
            encrypted=optional_bool(args, "encrypted"),
            ssl_connection=optional_bool(args, "ssl_connection"),
            allow_list=string_list(args, "allow_list"),
            replication_type=optional_string(args, "replication_type"),
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "label": self.label,
            "region": self.region,
            "type": self.type,
            "engine": self.engine,
        }
        if self.cluster_size is not None:
            body["cluster_size"] = self.cluster_size
        if self.encrypted is not None:
            body["encrypted"] = self.encrypted
        if self.ssl_connection is not None:
            body["ssl_connection"] = self.ssl_connection
        if self.allow_list:
            body["allow_list"] = list(self.allow_list)
        if self.replication_type:
            body["replication_type"] = self.replication_type
        return body


@dataclass(frozen=True)
class DatabaseUpdateParams:
    database_id: int
    label: Optional[str] = None
    allow_list: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "DatabaseUpdateParams":
        args = as_mapping(arguments)
        database_id = require_id(args, "database_id")
        label = optional_string(args, "label")
        # An explicit empty allow_list closes the database to every address.
        allow_list = string_list(args, "allow_list") if _lookup(args, "allow_list") is not _MISSING else None
        if label is None and allow_list is None:
            raise ArgumentError("label", ArgumentReason.MISSING, "label or allow_list is required")
        return cls(database_id=database_id, label=label, allow_list=allow_list)

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.label is not None:
            body["label"] = self.label
        if self.allow_list is not None:
            body["allow_list"] = list(self.allow_list)
        return body


# domains

DOMAIN_TYPES = ("master", "slave")
DOMAIN_STATUSES = ("active", "disabled", "edit_mode")
RECORD_TYPES = ("A", "AAAA", "NS", "MX", "CNAME", "TXT", "SRV", "PTR", "CAA")


@dataclass(frozen=True)
class DomainIdParams:
    domain_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "DomainIdParams":
        args = as_mapping(arguments)
        return cls(domain_id=require_id(args, "domain_id"))


_DOMAIN_SECONDS = ("ttl_sec", "refresh_sec", "retry_sec", "expire_sec")


@dataclass(frozen=True)
class DomainCreateParams:
    domain: str
    type: str = "master"
    soa_email: Optional[str] = None
    description: Optional[str] = None
    ttl_sec: Optional[int] = None
    refresh_sec: Optional[int] = None
    retry_sec: Optional[int] = None
    expire_sec: Optional[int] = None
    master_ips: Tuple[str, ...] = ()
    axfr_ips: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: object) -> "DomainCreateParams":
        args = as_mapping(arguments)
        domain = require_string(args, "domain")
        domain_type = choice(args, "type", DOMAIN_TYPES) or "master"
        soa_email = optional_string(args, "soa_email")
        if domain_type == "master" and soa_email is None:
            raise ArgumentError("soa_email", ArgumentReason.MISSING, "required for master domains")
        seconds = {name: optional_int(args, name, minimum=0) for name in _DOMAIN_SECONDS}
        return cls(
            domain=domain,
            type=domain_type,
            soa_email=soa_email,
            description=optional_string(args, "description"),
            master_ips=string_list(args, "master_ips"),
            axfr_ips=string_list(args, "axfr_ips"),
            tags=string_list(args, "tags"),
            **seconds,
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"domain": self.domain, "type": self.type}
        for name in ("soa_email", "description") + _DOMAIN_SECONDS:
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        for name in ("master_ips", "axfr_ips", "tags"):
            value = getattr(self, name)
            if value:
                body[name] = list(value)
        return body


@dataclass(frozen=True)
class DomainUpdateParams:
    domain_id: int
    domain: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    soa_email: Optional[str] = None
    description: Optional[str] = None
    ttl_sec: Optional[int] = None
    refresh_sec: Optional[int] = None
    retry_sec: Optional[int] = None
    expire_sec: Optional[int] = None
    master_ips: Tuple[str, ...] = ()
    axfr_ips: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: object) -> "DomainUpdateParams":
        args = as_mapping(arguments)
        domain_id = require_id(args, "domain_id")
        seconds = {name: optional_int(args, name, minimum=0) for name in _DOMAIN_SECONDS}
        return cls(
            domain_id=domain_id,
            domain=optional_string(args, "domain"),
            type=choice(args, "type", DOMAIN_TYPES),
            status=choice(args, "status", DOMAIN_STATUSES),
            soa_email=optional_string(args, "soa_email"),
            description=optional_string(args, "description"),
            master_ips=string_list(args, "master_ips"),
            axfr_ips=string_list(args, "axfr_ips"),
            tags=string_list(args, "tags"),
            **seconds,
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for name in ("domain", "type", "status", "soa_email", "description") + _DOMAIN_SECONDS:
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        for name in ("master_ips", "axfr_ips", "tags"):
            value = getattr(self, name)
            if value:
                body[name] = list(value)
        return body


@dataclass(frozen=True)
class DomainRecordIdParams:
    domain_id: int
    record_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "DomainRecordIdParams":
        args = as_mapping(arguments)
        return cls(domain_id=require_id(args, "domain_id"), record_id=require_id(args, "record_id"))


_RECORD_FIELDS = ("name", "priority", "weight", "port", "service", "protocol", "ttl_sec", "tag")


@dataclass(frozen=True)
class DomainRecordCreateParams:
    domain_id: int
    type: str
    target: str
    name: Optional[str] = None
    priority: Optional[int] = None
    weight: Optional[int] = None
    port: Optional[int] = None
    service: Optional[str] = None
    protocol: Optional[str] = None
    ttl_sec: Optional[int] = None
    tag: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "DomainRecordCreateParams":
        args = as_mapping(arguments)
        return cls(
            domain_id=require_id(args, "domain_id"),
            type=choice(args, "type", RECORD_TYPES, required=True) or "",
            target=require_string(args, "target"),
            name=optional_string(args, "name"),
            priority=optional_int(args, "priority", minimum=0, maximum=255),
            weight=optional_int(args, "weight", minimum=0, maximum=65535),
            port=optional_int(args, "port", minimum=0, maximum=65535),
            service=optional_string(args, "service"),
            protocol=optional_string(args, "protocol"),
            ttl_sec=optional_int(args, "ttl_sec", minimum=0),
            tag=optional_string(args, "tag"),
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"type": self.type, "target": self.target}
        for name in _RECORD_FIELDS:
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        return body


@dataclass(frozen=True)
class DomainRecordUpdateParams:
    domain_id: int
    record_id: int
    type: Optional[str] = None
    target: Optional[str] = None
    name: Optional[str] = None
    priority: Optional[int] = None
    weight: Optional[int] = None
    port: Optional[int] = None
    service: Optional[str] = None
    protocol: Optional[str] = None
    ttl_sec: Optional[int] = None
    tag: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "DomainRecordUpdateParams":
        args = as_mapping(arguments)
        return cls(
            domain_id=require_id(args, "domain_id"),
            record_id=require_id(args, "record_id"),
            type=choice(args, "type", RECORD_TYPES),
            target=optional_string(args, "target"),
            name=optional_string(args, "name"),
            priority=optional_int(args, "priority", minimum=0, maximum=255),
            weight=optional_int(args, "weight", minimum=0, maximum=65535),
            port=optional_int(args, "port", minimum=0, maximum=65535),
            service=optional_string(args, "service"),
            protocol=optional_string(args, "protocol"),
            ttl_sec=optional_int(args, "ttl_sec", minimum=0),
            tag=optional_string(args, "tag"),
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for name in ("type", "target") + _RECORD_FIELDS:
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        return body


# firewalls

FIREWALL_PROTOCOLS = ("TCP", "UDP", "ICMP", "IPENCAP")
FIREWALL_ACTIONS = ("ACCEPT", "DROP")
FIREWALL_STATUSES = ("enabled", "disabled")
FIREWALL_DEVICE_TYPES = ("linode", "nodebalancer")


@dataclass(frozen=True)
class FirewallRule:
    protocol: str
    action: str
    ports: Optional[str] = None
    label: Optional[str] = None
    description: Optional[str] = None
    ipv4: Tuple[str, ...] = ()
    ipv6: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: Arguments) -> "FirewallRule":
        addresses = optional_object(arguments, "addresses") or {}
        try:
            ipv4 = string_list(addresses, "ipv4")
            ipv6 = string_list(addresses, "ipv6")
        except ArgumentError as exc:
            raise _nested(exc, "addresses") from None
        return cls(
            protocol=choice(arguments, "protocol", FIREWALL_PROTOCOLS, required=True) or "",
            action=choice(arguments, "action", FIREWALL_ACTIONS, required=True) or "",
            ports=optional_string(arguments, "ports"),
            label=optional_string(arguments, "label"),
            description=optional_string(arguments, "description"),
            ipv4=ipv4,
            ipv6=ipv6,
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "protocol": self.protocol,
            "action": self.action,
            "addresses": {"ipv4": list(self.ipv4), "ipv6": list(self.ipv6)},
        }
        for name in ("ports", "label", "description"):
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        return body


@dataclass(frozen=True)
class FirewallRuleSet:
    inbound_policy: str
    outbound_policy: str
    inbound: Tuple[FirewallRule, ...] = ()
    outbound: Tuple[FirewallRule, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: Arguments) -> "FirewallRuleSet":
        inbound_policy = choice(arguments, "inbound_policy", FIREWALL_ACTIONS, required=True) or ""
        outbound_policy = choice(arguments, "outbound_policy", FIREWALL_ACTIONS, required=True) or ""
        return cls(
            inbound_policy=inbound_policy,
            outbound_policy=outbound_policy,
            inbound=cls._rules(arguments, "inbound"),
            outbound=cls._rules(arguments, "outbound"),
        )

    @staticmethod
    def _rules(arguments: Arguments, direction: str) -> Tuple[FirewallRule, ...]:
        rules = []
        for index, item in enumerate(object_list(arguments, direction)):
            try:
                rules.append(FirewallRule.from_arguments(item))
            except ArgumentError as exc:
                raise _nested(exc, f"{direction}[{index}]") from None
        return tuple(rules)

    def to_request(self) -> Dict[str, Any]:
        return {
            "inbound_policy": self.inbound_policy,
            "outbound_policy": self.outbound_policy,
            "inbound": [rule.to_request() for rule in self.inbound],
            "outbound": [rule.to_request() for rule in self.outbound],
        }


def _optional_rule_set(arguments: Arguments, name: str) -> Optional[FirewallRuleSet]:
    value = optional_object(arguments, name)
    if value is None:
        return None
    try:
        return FirewallRuleSet.from_arguments(value)
    except ArgumentError as exc:
        raise _nested(exc, name) from None


def _require_rule_set(arguments: Arguments, name: str) -> FirewallRuleSet:
    rules = _optional_rule_set(arguments, name)
    if rules is None:
        raise ArgumentError(name, ArgumentReason.MISSING)
    return rules


@dataclass(frozen=True)
class FirewallIdParams:
    firewall_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "FirewallIdParams":
        args = as_mapping(arguments)
        return cls(firewall_id=require_id(args, "firewall_id"))


@dataclass(frozen=True)
class FirewallCreateParams:
    label: str
    rules: Optional[FirewallRuleSet] = None
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: object) -> "FirewallCreateParams":
        args = as_mapping(arguments)
        return cls(
            label=require_string(args, "label"),
            rules=_optional_rule_set(args, "rules"),
            tags=string_list(args, "tags"),
        )

    def to_request(self) -> Dict[str, Any]:
        rules = self.rules or FirewallRuleSet(inbound_policy="ACCEPT", outbound_policy="ACCEPT")
        body: Dict[str, Any] = {"label": self.label, "rules": rules.to_request()}
        if self.tags:
            body["tags"] = list(self.tags)
        return body


@dataclass(frozen=True)
class FirewallUpdateParams:
    firewall_id: int
    label: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "FirewallUpdateParams":
        args = as_mapping(arguments)
        firewall_id = require_id(args, "firewall_id")
        tags = string_list(args, "tags") if _lookup(args, "tags") is not _MISSING else None
        return cls(
            firewall_id=firewall_id,
            label=optional_string(args, "label"),
            status=choice(args, "status", FIREWALL_STATUSES),
            tags=tags,
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.label is not None:
            body["label"] = self.label
        if self.status is not None:
            body["status"] = self.status
        if self.tags is not None:
            body["tags"] = list(self.tags)
        return body


@dataclass(frozen=True)
class FirewallRulesUpdateParams:
    firewall_id: int
    rules: FirewallRuleSet

    @classmethod
    def from_arguments(cls, arguments: object) -> "FirewallRulesUpdateParams":
        args = as_mapping(arguments)
        firewall_id = require_id(args, "firewall_id")
        return cls(firewall_id=firewall_id, rules=_require_rule_set(args, "rules"))


@dataclass(frozen=True)
class FirewallDeviceCreateParams:
    firewall_id: int
    device_id: int
    device_type: str = "linode"

    @classmethod
    def from_arguments(cls, arguments: object) -> "FirewallDeviceCreateParams":
        args = as_mapping(arguments)
        return cls(
            firewall_id=require_id(args, "firewall_id"),
            device_id=require_id(args, "device_id"),
            device_type=choice(args, "device_type", FIREWALL_DEVICE_TYPES) or "linode",
        )


@dataclass(frozen=True)
class FirewallDeviceDeleteParams:
    firewall_id: int
    device_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "FirewallDeviceDeleteParams":
        args = as_mapping(arguments)
        return cls(firewall_id=require_id(args, "firewall_id"), device_id=require_id(args, "device_id"))


# networking


@dataclass(frozen=True)
class IPAddressParams:
    address: str

    @classmethod
    def from_arguments(cls, arguments: object) -> "IPAddressParams":
        args = as_mapping(arguments)
        return cls(address=ip_address(args, "address"))


@dataclass(frozen=True)
class ReservedIPAllocateParams:
    region: str = ""
    linode_id: int = 0

    @classmethod
    def from_arguments(cls, arguments: object) -> "ReservedIPAllocateParams":
        args = as_mapping(arguments)
        region = optional_string(args, "region") or ""
        linode_id = optional_id(args, "linode_id")
        if not region and not linode_id:
            raise ArgumentError("region", ArgumentReason.MISSING, "region or linode_id is required")
        return cls(region=region, linode_id=linode_id)

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"type": "ipv4", "public": True}
        if self.region:
            body["region"] = self.region
        if self.linode_id:
            body["linode_id"] = self.linode_id
        return body


@dataclass(frozen=True)
class ReservedIPAssignParams:
    address: str
    region: str
    linode_id: int = 0

    @classmethod
    def from_arguments(cls, arguments: object) -> "ReservedIPAssignParams":
        args = as_mapping(arguments)
        return cls(
            address=ip_address(args, "address"),
            region=require_string(args, "region"),
            linode_id=optional_id(args, "linode_id"),
        )


@dataclass(frozen=True)
class ReservedIPUpdateParams:
    address: str
    rdns: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "ReservedIPUpdateParams":
        args = as_mapping(arguments)
        return cls(address=ip_address(args, "address"), rdns=optional_string(args, "rdns"))

    def to_request(self) -> Dict[str, Any]:
        # null restores the default reverse DNS.
        return {"rdns": self.rdns}


# StackScripts


@dataclass(frozen=True)
class StackScriptIdParams:
    stackscript_id: int

    @classmethod
    def from_arguments(cls, arguments: object) -> "StackScriptIdParams":
        args = as_mapping(arguments)
        return cls(stackscript_id=require_id(args, "stackscript_id"))


@dataclass(frozen=True)
class StackScriptCreateParams:
    label: str
    script: str
    images: Tuple[str, ...]
    description: Optional[str] = None
    is_public: Optional[bool] = None
    rev_note: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "StackScriptCreateParams":
        args = as_mapping(arguments)
        return cls(
            label=require_string(args, "label"),
            script=require_string(args, "script"),
            images=string_list(args, "images", required=True),
            description=optional_string(args, "description"),
            is_public=optional_bool(args, "is_public"),
            rev_note=optional_string(args, "rev_note"),
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"label": self.label, "script": self.script, "images": list(self.images)}
        for name in ("description", "is_public", "rev_note"):
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        return body


@dataclass(frozen=True)
class StackScriptUpdateParams:
    stackscript_id: int
    label: Optional[str] = None
    script: Optional[str] = None
    images: Tuple[str, ...] = ()
    description: Optional[str] = None
    is_public: Optional[bool] = None
    rev_note: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: object) -> "StackScriptUpdateParams":
        args = as_mapping(arguments)
        return cls(
            stackscript_id=require_id(args, "stackscript_id"),
            label=optional_string(args, "label"),
            script=optional_string(args, "script"),
            images=string_list(args, "images"),
            description=optional_string(args, "description"),
            is_public=optional_bool(args, "is_public"),
            rev_note=optional_string(args, "rev_note"),
        )

    def to_request(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for name in ("label", "script", "description", "is_public", "rev_note"):
            value = getattr(self, name)
            if value is not None:
                body[name] = value
        if self.images:
            body["images"] = list(self.images)
        return body
