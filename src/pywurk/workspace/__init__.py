"""Workspaces and the dependency graph between them."""

from pywurk.workspace.link import Link, LinkType, format_dependency_spec, parse_dependency_spec
from pywurk.workspace.status import Status, StatusValue
from pywurk.workspace.workspace import Workspace
from pywurk.workspace.workspaces import RawManifest, Workspaces

__all__ = [
    "Link",
    "LinkType",
    "RawManifest",
    "Status",
    "StatusValue",
    "Workspace",
    "Workspaces",
    "format_dependency_spec",
    "parse_dependency_spec",
]
