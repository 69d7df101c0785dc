"""Kubernetes service address variables."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Optional as _Opt

from .network import NetworkPortBuilder
from .spec import (
    Availability,
    Builder,
    Deprecated,
    Kind,
    Optional,
    Registry,
    Required,
    Variable,
    default_registry,
)

_NAME_BYTES = frozenset(b"abcdefghijklmnopqrstuvwxyz0123456789-")


@dataclass(frozen=True)
class KubernetesAddress:
    """The address of a Kubernetes service."""

    host: str
    port: str

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


def _name_to_env(name: str) -> str:
    return name.replace("-", "_").upper()


def validate_kubernetes_name(name: str) -> None:
    """Raise ValueError unless name is a valid Kubernetes resource name."""
    if name == "":
        raise ValueError("name must not be empty")
    if name[0] == "-" or name[-1] == "-":
        raise ValueError("name must not begin or end with a hyphen")
    if any(byte not in _NAME_BYTES for byte in name.encode("utf-8")):
        raise ValueError(
            "name must contain only lowercase ASCII letters, digits and hyphen"
        )


def validate_host(host: str) -> None:
    """Raise ValueError unless host is a valid hostname or IP address."""
    if host == "":
        raise ValueError("host must not be empty")
    try:
        ipaddress.ip_address(host)
    except ValueError:
        pass
    else:
        return
    if host[0] == "." or host[-1] == ".":
        raise ValueError("host must not begin or end with a dot")
    if any(ch.isspace() for ch in host):
        raise ValueError("host must not contain whitespace")


class _HostBuilder(Builder):
    def with_default(self, value: str) -> "_HostBuilder":
        self._default = value
        return self

    def _check_value(self, value: str) -> None:
        validate_host(value)

    def _unmarshal(self, text: str) -> str:
        return text


def _resolve_pair(host: Variable, port: Variable) -> _Opt[KubernetesAddress]:
    """Resolve an optional host/port pair, which must be defined together."""
    host_res = host.resolve()
    port_res = port.resolve()
    for res in (host_res, port_res):
        if res.error is not None:
            raise res.error

    if host_res.availability is not port_res.availability:
        if host_res.availability is Availability.OK:
            defined, undefined = host, port
        else:
            defined, undefined = port, host
        raise ValueError(
            f"{defined.name} is defined but {undefined.name} is not, "
            "define both or neither"
        )

    if host_res.availability is Availability.OK:
        return KubernetesAddress(host_res.value, port_res.value)
    return None


class _RequiredService(Required):
    def __init__(self, host: Variable, port: Variable) -> None:
        super().__init__(host)
        self.port_variable = port

    def value(self) -> KubernetesAddress:
        host = super().value()
        port = Required(self.port_variable).value()
        return KubernetesAddress(host, port)


class _OptionalService(Optional):
    def __init__(self, host: Variable, port: Variable) -> None:
        super().__init__(host)
        self.port_variable = port

    def value(self) -> _Opt[KubernetesAddress]:
        return _resolve_pair(self.variable, self.port_variable)


class _DeprecatedService(Deprecated):
    def __init__(self, host: Variable, port: Variable) -> None:
        super().__init__(host)
        self.port_variable = port

    def deprecated_value(self) -> _Opt[KubernetesAddress]:
        return _resolve_pair(self.variable, self.port_variable)


class KubernetesServiceBuilder:
    """Builds the pair of variables holding a Kubernetes service's address."""

    def __init__(self, service: str) -> None:
        try:
            validate_kubernetes_name(service)
        except ValueError as exc:
            raise ValueError(f"kubernetes service name is invalid: {exc}") from None
        self.service = service
        prefix = _name_to_env(service)
        self._host = _HostBuilder(
            f"{prefix}_SERVICE_HOST", f'kubernetes "{service}" service host'
        )
        self._port = NetworkPortBuilder(
            f"{prefix}_SERVICE_PORT", f'kubernetes "{service}" service port'
        )

    def with_named_port(self, port: str) -> "KubernetesServiceBuilder":
        """Read the port from "<service>_SERVICE_PORT_<port>" instead."""
        try:
            validate_kubernetes_name(port)
        except ValueError as exc:
            raise ValueError(
                f'specification of kubernetes "{self.service}" service is invalid: '
                f"invalid named port: {exc}"
            ) from None
        self._port._name = f"{_name_to_env(self.service)}_SERVICE_PORT_{_name_to_env(port)}"
        return self

    def with_default(self, host: str, port: str) -> "KubernetesServiceBuilder":
        """Set the values used when the variables are undefined."""
        self._host.with_default(host)
        self._port.with_default(port)
        return self

    def _register(self, kind: Kind, registry: _Opt[Registry]) -> tuple[Variable, Variable]:
        target = registry if registry is not None else default_registry()
        host = self._host._build(kind)
        port = self._port._build(kind)
        return target.register(host), target.register(port)

    def required(self, registry: _Opt[Registry] = None) -> Required:
        return _RequiredService(*self._register(Kind.REQUIRED, registry))

    def optional(self, registry: _Opt[Registry] = None) -> Optional:
        return _OptionalService(*self._register(Kind.OPTIONAL, registry))

    def deprecated(self, registry: _Opt[Registry] = None) -> Deprecated:
        return _DeprecatedService(*self._register(Kind.DEPRECATED, registry))


def kubernetes_service(service: str) -> KubernetesServiceBuilder:
    """Configure the variables that hold the address of a Kubernetes service."""
    return KubernetesServiceBuilder(service)