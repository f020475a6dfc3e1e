"""Shared CLI state: where the site lives and whether we are debugging."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from vanity.config import SitePaths, VanityConfig, load_vanity_config, resolve_site_root


@dataclass
class CliState:
    """Global options captured by the root callback."""

    site_root: Path
    debug: bool = False

    def load(self) -> tuple[VanityConfig, SitePaths]:
        site_root = resolve_site_root(self.site_root)
        config = load_vanity_config(site_root)
        return config, config.site_paths(site_root)


def get_state(ctx: typer.Context) -> CliState:
    """Return the state set by the root callback, or defaults when run standalone."""
    root = ctx.find_root()
    if isinstance(root.obj, CliState):
        return root.obj
    state = CliState(site_root=Path.cwd())
    root.obj = state
    return state


__all__ = ["CliState", "get_state"]
