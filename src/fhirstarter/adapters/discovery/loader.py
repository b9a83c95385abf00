"""Resolve a discovery source from a ``module:attribute`` reference.

Deployments pick their container by configuration (``FHIRSTARTER_DISCOVERY``
or ``--discovery``) instead of the server hard-coding one.
"""

from __future__ import annotations

import importlib

from fhirstarter.interfaces.discovery import DiscoverySource


def load_discovery_source(reference: str) -> DiscoverySource:
    """Import ``module:attribute`` and return the discovery source it names.

    The attribute may be a `DiscoverySource` instance or a zero-argument
    callable returning one.

    Args:
        reference: e.g. ``"fhirstarter.adapters.discovery.demo:build_demo_discovery"``.

    Raises:
        ValueError: If ``reference`` is not of the form ``module:attribute``.
        ImportError: If the module cannot be imported.
        AttributeError: If the module has no such attribute.
        TypeError: If the attribute does not yield a `DiscoverySource`.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {reference!r}")

    target = getattr(importlib.import_module(module_name), attr)
    source = target if isinstance(target, DiscoverySource) else target()
    if not isinstance(source, DiscoverySource):
        raise TypeError(f"{reference} did not produce a DiscoverySource")
    return source
