"""
url_hasher package initializer.
Defines package version and exposes the CLI entry point.
"""
__version__ = "0.1.0"

# `url_hasher.cli` stays the module; the click group is `url_hasher.cli.cli`
from url_hasher.cli import main  # noqa: E402
from url_hasher.engine import Engine, start_batch  # noqa: E402

__all__ = ["__version__", "main", "Engine", "start_batch"]
