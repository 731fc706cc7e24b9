"""
brewpub package

This package publishes a release's artifacts as a Homebrew formula.

Key responsibilities are split across modules:
- `targets.py`: group build artifacts into single/multi platform targets
- `formula.py`: assemble config + version + targets into a `Formula`
- `renderer.py`: Jinja2 rendering of the formula file
- `github_client.py`: isolated GitHub REST API interactions
- `workflow.py`: render -> write -> direct commit or branch + pull request
- `cli.py`: CLI entrypoint and orchestration
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
