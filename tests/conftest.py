"""Shared test fixtures for nodeconf.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import textwrap

import pytest

from nodeconf.config.endpoint import Endpoint


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "nodeconf"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def endpoint() -> Endpoint:
    """The control-plane endpoint used by most document fixtures."""
    return Endpoint.parse("https://localhost:6443/")


@pytest.fixture()
def join_document() -> str:
    """A minimal, valid YAML document for a worker node."""
    return textwrap.dedent("""\
        version: v1alpha1
        machine:
          type: join
        cluster:
          controlPlane:
            endpoint: https://localhost:6443/
    """)
