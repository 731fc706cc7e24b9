"""
cli.py

Responsibility: CLI entrypoint for brewpub.

High-level flow (single command `publish`):
1) Load the `brew` configuration and the artifact manifest
2) Resolve the version (`--version` or the current git tag)
3) Derive targets -> assemble the `Formula`
4) Render + write `<Name>.rb`, then commit it or open a pull request

This module should orchestrate behavior but keep concerns isolated:
- Config parsing: `config.py`
- Targets / formula record: `targets.py`, `formula.py`
- Rendering: `renderer.py`
- GitHub API: `github_client.py`
- Publish steps: `workflow.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from brewpub.config import load_artifacts, load_config
from brewpub.errors import BrewpubError
from brewpub.formula import assemble
from brewpub.github_client import GitHubClient
from brewpub.logging_setup import configure_logging
from brewpub.renderer import Renderer, Template, select_template
from brewpub.targets import Targets, derive
from brewpub.versioning import current_tag, normalize_version
from brewpub.workflow import PublishWorkflow

logger = logging.getLogger("brewpub")


class CLIError(BrewpubError):
    pass


def _resolve_template(choice: str | None, targets: Targets) -> Template:
    if choice == "single":
        return Template.SINGLE_TARGET
    if choice == "multi":
        return Template.MULTI_TARGET
    return select_template(targets)


def publish_cmd(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    artifacts = load_artifacts(args.artifacts)

    version = args.version or current_tag(args.repo_dir)
    version = normalize_version(version)

    targets = derive(artifacts)
    formula = assemble(config, version, targets)
    template = _resolve_template(args.template, targets)
    renderer = Renderer(args.templates_dir)

    if args.dry_run:
        workflow = PublishWorkflow(client=None, renderer=renderer, output_dir=args.output_dir)
        text = workflow.render(formula, template)
        logger.info("Dry run: rendered %s %s, no remote calls made", formula.name, formula.version)
        logger.debug("%s", text)
        return 0

    token = args.github_token or os.environ.get("GITHUB_TOKEN") or ""
    if not token:
        raise CLIError("GitHub token is required (use --github-token or set GITHUB_TOKEN)")
    client = GitHubClient(token, api_base=args.api_base)

    workflow = PublishWorkflow(client=client, renderer=renderer, output_dir=args.output_dir)
    logger.info("Publishing %s %s to %s/%s", formula.name, formula.version, formula.repository.owner, formula.repository.name)
    workflow.publish(formula, template)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="brewpub", description="Publish a release as a Homebrew formula")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("publish", help="Render the formula and push it to the tap repository")
    b.add_argument("--config", default="brewpub.yaml", help="Configuration file (default: brewpub.yaml)")
    b.add_argument("--artifacts", required=True, help="Artifact manifest (YAML or JSON list of url/sha256/os/arch)")
    b.add_argument("--version", default=None, help="Release version (default: current git tag)")
    b.add_argument("--repo-dir", default=None, help="Git checkout used to resolve the current tag")
    b.add_argument(
        "--template",
        choices=["auto", "single", "multi"],
        default="auto",
        help="Formula template (default: multi when artifacts carry platform tags)",
    )
    b.add_argument("--templates-dir", default=None, help="Directory overriding the bundled templates")
    b.add_argument("--output-dir", default=".", help="Where <Name>.rb is written (default: .)")
    b.add_argument("--github-token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    b.add_argument("--api-base", default="https://api.github.com", help="GitHub API base URL")
    b.add_argument("--dry-run", action="store_true", help="Render and write locally only")

    b.set_defaults(func=publish_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level="DEBUG" if args.verbose else "INFO")
    try:
        return int(args.func(args))
    except BrewpubError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
