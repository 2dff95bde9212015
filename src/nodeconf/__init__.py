"""nodeconf: node and cluster configuration model, accessors, and validator.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import nodeconf
    from nodeconf.runtime import Mode

    config = nodeconf.loads('''
        version: v1alpha1
        machine:
          type: join
        cluster:
          controlPlane:
            endpoint: https://10.0.0.1:6443/
    ''')

    warnings, error = nodeconf.validate(config, Mode.CLOUD)

    config.cluster_config.pod_cidr
    '10.244.0.0/16'
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from nodeconf.config.nodes import Config
    from nodeconf.runtime import RuntimeMode
    from nodeconf.validator.diagnostics import ConfigValidationError


def loads(text: str) -> "Config":
    """Build a ``Config`` from YAML text.

    Raises
    ------
    nodeconf.config.DocumentError
        If the text is not valid YAML or has the wrong structure.
    nodeconf.config.EndpointParseError
        If the control-plane endpoint is not a valid URL.
    """
    from nodeconf.config.serializer import ConfigSerializer

    return ConfigSerializer().from_yaml(text)


def load(path: str | Path) -> "Config":
    """Read a YAML configuration document from ``path``."""
    return loads(Path(path).read_text(encoding="utf-8"))


def dump(config: "Config") -> str:
    """Serialize ``config`` to canonical YAML."""
    from nodeconf.config.serializer import ConfigSerializer

    return ConfigSerializer().to_yaml(config)


def validate(
    config: "Config",
    mode: "RuntimeMode",
    *,
    local: bool = False,
    strict: bool = False,
) -> tuple[list[str], "ConfigValidationError | None"]:
    """Validate ``config`` against all built-in rules.

    Parameters
    ----------
    config:
        The configuration document.
    mode:
        Runtime mode the document is meant for.
    local:
        Skip rules that inspect the current host.
    strict:
        When ``True``, warnings are promoted to errors.

    Returns
    -------
    tuple[list[str], ConfigValidationError | None]
        Warning messages and the aggregated error, if any.
    """
    from nodeconf.validator.validator import validate as _validate

    return _validate(config, mode, local=local, strict=strict)


__all__ = [
    "__version__",
    "load",
    "loads",
    "dump",
    "validate",
]
