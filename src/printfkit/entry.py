"""Console script entry point (``printfkit``) with production wiring.

Lives at package level so the composition root is imported here rather
than from inside the adapters layer.
"""

from __future__ import annotations

from .adapters.cli.main import main as cli_main
from .composition import build_production


def main() -> int:
    """Run the CLI with production services and return its exit code."""
    return cli_main(services_factory=build_production)


__all__ = ["main"]
