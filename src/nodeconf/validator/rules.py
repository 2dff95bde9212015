"""Individual validation rules for the configuration validator.

Each rule is a callable that accepts a ``ValidationContext`` and returns a
list of ``Diagnostic`` objects.  Rules are composed into the ``Validator``
class which runs them in order and aggregates the results.

Rule codes use the ``CFG`` prefix followed by a three-digit number:

    CFG001  Machine instructions missing (fatal)
    CFG002  Machine type empty or unknown
    CFG003  Install instructions missing or install disk absent
    CFG004  Cluster instructions missing
    CFG005  Cluster endpoint missing or without a host
    CFG006  Cluster name empty on a control-plane machine
    CFG007  Malformed bootstrap token
    CFG008  Pod or service subnet is not a CIDR
    CFG009  External cloud provider settings inconsistent
"""
from __future__ import annotations

import ipaddress
import os
import re
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlsplit

from nodeconf.config.nodes import Config, MachineType
from nodeconf.runtime import RuntimeMode
from nodeconf.validator.diagnostics import Diagnostic, DiagnosticSeverity

_TOKEN_PATTERN = re.compile(r"[a-z0-9]{6}\.[a-z0-9]{16}")


@dataclass(frozen=True)
class ValidationOptions:
    """Switches that condition how rules are evaluated.

    Parameters
    ----------
    local:
        The document is being checked away from the target machine, so
        rules that inspect the host (e.g. the install disk) are skipped.
    strict:
        Warnings are reported as errors.
    """

    local: bool = False
    strict: bool = False


@dataclass(frozen=True)
class ValidationContext:
    """Everything a rule may look at during one validation pass."""

    config: Config
    mode: RuntimeMode
    options: ValidationOptions


Rule = Callable[[ValidationContext], list[Diagnostic]]


def _error(code: str, message: str, rule: str, fatal: bool = False) -> Diagnostic:
    return Diagnostic(
        severity=DiagnosticSeverity.ERROR,
        code=code,
        message=message,
        rule=rule,
        fatal=fatal,
    )


def _warning(code: str, message: str, rule: str) -> Diagnostic:
    return Diagnostic(
        severity=DiagnosticSeverity.WARNING,
        code=code,
        message=message,
        rule=rule,
    )


# ---------------------------------------------------------------------------
# CFG001: machine section present
# ---------------------------------------------------------------------------

def rule_machine_present(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG001: Every document needs machine instructions."""
    if ctx.config.machine_config is None:
        return [_error("CFG001", "machine instructions are required", "machine_present", fatal=True)]
    return []


# ---------------------------------------------------------------------------
# CFG002: machine type
# ---------------------------------------------------------------------------

def rule_machine_type(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG002: The machine type should be set and must be a known role."""
    machine_type = ctx.config.machine_config.type
    if not machine_type:
        return [_warning("CFG002", "machine type is empty", "machine_type")]
    if machine_type not in MachineType.known():
        return [_error("CFG002", f'invalid machine type "{machine_type}"', "machine_type")]
    return []


# ---------------------------------------------------------------------------
# CFG003: install instructions
# ---------------------------------------------------------------------------

def rule_install(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG003: Modes that install to disk need an install disk."""
    install = ctx.config.machine_config.install
    disk = install.disk if install is not None else ""

    if not ctx.mode.requires_install():
        return []

    if not disk:
        return [_error(
            "CFG003",
            f'install instructions are required in "{ctx.mode}" mode',
            "install",
        )]

    if not ctx.options.local and not os.path.exists(disk):
        return [_error("CFG003", f'install disk "{disk}" does not exist', "install")]

    return []


# ---------------------------------------------------------------------------
# CFG004: cluster section present
# ---------------------------------------------------------------------------

def rule_cluster_present(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG004: Every document needs cluster instructions."""
    if ctx.config.cluster_config is None:
        return [_error("CFG004", "cluster instructions are required", "cluster_present")]
    return []


# ---------------------------------------------------------------------------
# CFG005: control-plane endpoint
# ---------------------------------------------------------------------------

def rule_endpoint(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG005: The control-plane endpoint must be present and name a host."""
    cluster = ctx.config.cluster_config
    if cluster is None:
        return []

    endpoint = cluster.endpoint
    if endpoint is None or not str(endpoint):
        return [_error("CFG005", "a cluster endpoint is required", "endpoint")]
    if not endpoint.hostname:
        return [_error(
            "CFG005",
            f'invalid cluster endpoint "{endpoint}": hostname must not be blank',
            "endpoint",
        )]
    return []


# ---------------------------------------------------------------------------
# CFG006: cluster name
# ---------------------------------------------------------------------------

def rule_cluster_name(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG006: Control-plane machines should carry the cluster name."""
    cluster = ctx.config.cluster_config
    if cluster is None:
        return []

    control_plane_types = {MachineType.INIT.value, MachineType.CONTROL_PLANE.value}
    if ctx.config.machine_config.type in control_plane_types and not cluster.cluster_name:
        return [_warning("CFG006", "cluster name is empty", "cluster_name")]
    return []


# ---------------------------------------------------------------------------
# CFG007: bootstrap token format
# ---------------------------------------------------------------------------

def rule_bootstrap_token(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG007: A bootstrap token, when given, must look like ``abcdef.0123456789abcdef``."""
    cluster = ctx.config.cluster_config
    if cluster is None or not cluster.bootstrap_token:
        return []
    if not _TOKEN_PATTERN.fullmatch(cluster.bootstrap_token):
        return [_error("CFG007", "invalid bootstrap token format", "bootstrap_token")]
    return []


# ---------------------------------------------------------------------------
# CFG008: network subnets
# ---------------------------------------------------------------------------

def _invalid_cidrs(subnets: list[str]) -> list[str]:
    invalid = []
    for subnet in subnets:
        if "/" not in subnet:
            invalid.append(subnet)
            continue
        try:
            ipaddress.ip_network(subnet, strict=False)
        except ValueError:
            invalid.append(subnet)
    return invalid


def rule_network_subnets(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG008: Pod and service subnets must be CIDR blocks."""
    cluster = ctx.config.cluster_config
    if cluster is None or cluster.cluster_network is None:
        return []

    network = cluster.cluster_network
    diagnostics: list[Diagnostic] = []
    for subnet in _invalid_cidrs(network.pod_subnet):
        diagnostics.append(_error("CFG008", f'invalid pod subnet "{subnet}"', "network_subnets"))
    for subnet in _invalid_cidrs(network.service_subnet):
        diagnostics.append(_error("CFG008", f'invalid service subnet "{subnet}"', "network_subnets"))
    return diagnostics


# ---------------------------------------------------------------------------
# CFG009: external cloud provider
# ---------------------------------------------------------------------------

def _manifest_url_problem(manifest: str) -> str | None:
    try:
        hostname = urlsplit(manifest).hostname
    except ValueError as exc:
        return str(exc)
    if not hostname:
        return "hostname must not be blank"
    return None


def rule_external_cloud_provider(ctx: ValidationContext) -> list[Diagnostic]:
    """CFG009: Manifests require the provider to be enabled and must be absolute URLs.

    Only the first invalid manifest is reported.
    """
    cluster = ctx.config.cluster_config
    if cluster is None or cluster.external_cloud_provider_config is None:
        return []

    provider = cluster.external_cloud_provider_config
    if not provider.enabled:
        if provider.manifests:
            return [_error(
                "CFG009",
                "external cloud provider is disabled, but manifests are provided",
                "external_cloud_provider",
            )]
        return []

    for manifest in provider.manifests:
        problem = _manifest_url_problem(manifest)
        if problem is not None:
            return [_error(
                "CFG009",
                f'invalid external cloud provider manifest url "{manifest}": {problem}',
                "external_cloud_provider",
            )]
    return []


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------

DEFAULT_RULES: list[Rule] = [
    rule_machine_present,
    rule_machine_type,
    rule_install,
    rule_cluster_present,
    rule_endpoint,
    rule_cluster_name,
    rule_bootstrap_token,
    rule_network_subnets,
    rule_external_cloud_provider,
]
