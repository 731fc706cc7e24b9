"""
renderer.py

Responsibility: Render a `Formula` into formula-file text with Jinja2.

Rules:
- Templates ship inside the package (`brewpub/templates`); a directory can be
  supplied instead to override them.
- Rendering is strict: an undefined variable is an error, never an empty string.
- Output always ends with a newline and uses `\n` line endings.

This module intentionally does NOT know about GitHub or the filesystem layout
of the published formula.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import jinja2
from jinja2 import Environment, FileSystemLoader, PackageLoader, StrictUndefined

from brewpub.errors import ContractViolation, TemplateError
from brewpub.formula import Formula
from brewpub.targets import MultiTarget, SingleTarget, Target, Targets


class Template(str, Enum):
    SINGLE_TARGET = "single_target.rb.j2"
    MULTI_TARGET = "multi_target.rb.j2"

    def __str__(self) -> str:
        return self.value


def select_template(targets: Targets) -> Template:
    if any(isinstance(t, MultiTarget) for t in targets):
        return Template.MULTI_TARGET
    return Template.SINGLE_TARGET


def rb_string(value: Any) -> str:
    """Escape a value for use inside a double-quoted Ruby string literal."""
    text = str(value)
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")


def class_name(name: str) -> str:
    """Homebrew class name for a formula name: `"my-tool"` -> `"MyTool"`."""
    parts = name.replace("_", "-").replace(".", "-").split("-")
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


def _target_context(target: Target) -> dict[str, Any]:
    if isinstance(target, SingleTarget):
        return {"kind": "single", "url": target.url, "hash": target.hash}
    if isinstance(target, MultiTarget):
        return {
            "kind": "multi",
            "os": target.os.value,
            "os_block": target.os.homebrew_block,
            "archs": [
                {
                    "arch": entry.arch.value,
                    "arch_block": entry.arch.homebrew_block,
                    "url": entry.url,
                    "hash": entry.hash,
                }
                for entry in target.archs
            ],
        }
    raise ContractViolation(f"Unsupported target variant: {type(target).__name__}")


def _platform_blocks(targets: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Multi targets Homebrew can express, i.e. those with an `on_*` os block.

    Two artifacts landing in the same os/arch block would leave Homebrew with
    whichever `url` comes last, so that is rejected.
    """
    blocks = []
    for target in targets:
        if target["kind"] != "multi" or not target["os_block"]:
            continue
        seen: dict[str, str] = {}
        for entry in target["archs"]:
            block = entry["arch_block"]
            if block in seen:
                raise TemplateError(
                    f"{target['os']} artifacts {seen[block]} and {entry['arch']} both render as "
                    f"`{target['os_block']} {block}`; ship only one of them."
                )
            seen[block] = entry["arch"]
        blocks.append(target)
    return blocks


def formula_context(formula: Formula) -> dict[str, Any]:
    targets = [_target_context(t) for t in formula.targets]
    context: dict[str, Any] = {
        "name": formula.name,
        "class_name": class_name(formula.name),
        "description": formula.description,
        "homepage": formula.homepage,
        "license": formula.license,
        "version": formula.version,
        "test": formula.test,
        "caveats": formula.caveats,
        "install": {
            "binaries": list(formula.install.binaries),
            "dependencies": list(formula.install.dependencies),
        },
        "targets": targets,
    }
    # Left undefined when absent so the single-target template fails loudly.
    singles = [t for t in targets if t["kind"] == "single"]
    if singles:
        context["single"] = singles[0]
    # Same for the multi-target template when no target has a Homebrew block.
    platforms = _platform_blocks(targets)
    if platforms:
        context["platforms"] = platforms
    return context


class Renderer:
    def __init__(self, templates_dir: str | Path | None = None) -> None:
        if templates_dir is None:
            loader: jinja2.BaseLoader = PackageLoader("brewpub", "templates")
        else:
            path = Path(templates_dir).resolve()
            if not path.is_dir():
                raise TemplateError(f"Template directory not found: {path}")
            loader = FileSystemLoader(str(path))

        self._env = Environment(
            loader=loader,
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["rb_string"] = rb_string

    def render(self, template: Template | str, formula: Formula) -> str:
        name = str(template)
        try:
            out = self._env.get_template(name).render(**formula_context(formula))
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed rendering template {name}: {e}") from e
        if not out.endswith("\n"):
            out += "\n"
        return out
