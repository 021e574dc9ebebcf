"""Locate the remote client implementation at startup.

The wire protocol is provided by a separate package. We only need an
import path to an object (or zero-argument callable returning one) that
satisfies ``RemoteClientFactory``, e.g. ``mygame.client:Factory``.
"""
from __future__ import annotations

import importlib
import inspect

from loguru import logger

from pitcli.engine.protocols import RemoteClientFactory


def loadClientFactory(path: str) -> RemoteClientFactory:
    modname, sep, attr = path.partition(":")
    if not (modname and sep and attr):
        raise ValueError(f"Client factory must look like 'module:attribute', got: {path!r}")

    target = importlib.import_module(modname)
    for part in attr.split("."):
        target = getattr(target, part)

    # classes and builder functions both work
    factory = target() if inspect.isclass(target) or inspect.isfunction(target) else target

    if not isinstance(factory, RemoteClientFactory):
        raise TypeError(f"[{path}] Not a remote client factory (needs jsonClient() and schemaClient(docs))")

    logger.info("Using remote client factory: {}", path)
    return factory
