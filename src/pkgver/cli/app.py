"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import logging

import typer

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    name="pkgver",
    help="pkgver - Check and update dependency versions across npm, Composer, PyPI and Pub manifests.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _register_commands() -> None:
    from pkgver.cli.commands.scan_cmd import app as scan_app
    from pkgver.cli.commands.update_cmd import app as update_app
    from pkgver.cli.commands.update_all_cmd import app as update_all_app
    from pkgver.cli.commands.classify_cmd import app as classify_app
    from pkgver.cli.commands.rewrite_cmd import app as rewrite_app

    app.add_typer(scan_app, name="scan", help="Scan manifests and check for updates")
    app.add_typer(update_app, name="update", help="Update a dependency to its latest version")
    app.add_typer(update_all_app, name="update-all", help="Update every outdated dependency")
    app.add_typer(classify_app, name="classify", help="Classify the update between two versions")
    app.add_typer(rewrite_app, name="rewrite", help="Rewrite a specifier to a new version")


_register_commands()


def main() -> None:
    app()
