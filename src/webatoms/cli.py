"""
WebAtoms CLI - Command line interface.

Usage:
    webatoms translate 'hello\\uE008world' --persist
    webatoms attribute https://example.com a href
    webatoms type https://example.com 'input[name=q]' 'search terms\\uE007'
"""

import asyncio
import re

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from webatoms import __version__
from webatoms.config import CDP_URL_ENV

# Load .env file if present
load_dotenv()

app = typer.Typer(
    name="webatoms",
    help="Element attribute resolution and key-sequence typing over CDP",
    add_completion=False,
)

console = Console()

_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")


def decode_keys(text: str) -> str:
    """Expand ``\\uXXXX`` escapes so protocol keys can be given on the command line."""
    return _ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), text)


def _describe(key) -> str:
    if isinstance(key, str):
        return repr(key)
    return f"<{key.name}>"


@app.command()
def translate(
    keys: list[str] = typer.Argument(..., help="Key sequences; \\uE0XX escapes allowed"),
    persist: bool = typer.Option(False, "--persist", "-p", help="Persist modifier keys"),
) -> None:
    """Show the keyboard batches a key sequence translates to."""
    from webatoms.atoms.keyboard import KeySequenceTranslator

    result = KeySequenceTranslator().translate([decode_keys(k) for k in keys], persist)
    if not result.success:
        console.print(f"[red]✗ Unsupported key: {result.error}[/red]")
        raise typer.Exit(1)

    table = Table(title="Keyboard batches")
    table.add_column("#", justify="right")
    table.add_column("Persist")
    table.add_column("Keys")
    for index, batch in enumerate(result.batches):
        table.add_row(
            str(index),
            "yes" if batch.persist else "no",
            " ".join(_describe(k) for k in batch.keys) or "[dim](empty)[/dim]",
        )
    console.print(table)


@app.command()
def attribute(
    url: str = typer.Argument(..., help="Page URL"),
    selector: str = typer.Argument(..., help="CSS selector of the element"),
    name: str = typer.Argument(..., help="Attribute or property name"),
    cdp_url: str | None = typer.Option(
        None, "--cdp-url", envvar=CDP_URL_ENV, help="Connect to a running Chrome"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Resolve an element attribute on a live page."""
    _setup(verbose)

    async def run(atoms, node_id):
        return await atoms.resolve_attribute(node_id, name)

    value = _run_on_element(url, selector, cdp_url, run)
    console.print("null" if value is None else value, markup=False)


@app.command("type")
def type_keys(
    url: str = typer.Argument(..., help="Page URL"),
    selector: str = typer.Argument(..., help="CSS selector of the element"),
    keys: list[str] = typer.Argument(..., help="Key sequences; \\uE0XX escapes allowed"),
    persist: bool = typer.Option(False, "--persist", "-p", help="Persist modifier keys"),
    cdp_url: str | None = typer.Option(
        None, "--cdp-url", envvar=CDP_URL_ENV, help="Connect to a running Chrome"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Type key sequences into an element on a live page."""
    _setup(verbose)
    sequences = [decode_keys(k) for k in keys]

    async def run(atoms, node_id):
        await atoms.type(node_id, sequences, persist)
        return await atoms.resolve_attribute(node_id, "value")

    value = _run_on_element(url, selector, cdp_url, run)
    console.print(f"[green]✓ Typed[/green] (value: {value!r})")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"WebAtoms v{__version__}")


def _setup(verbose: bool) -> None:
    from webatoms.logging import setup_logging

    setup_logging(level="DEBUG" if verbose else "WARNING")


def _run_on_element(url, selector, cdp_url, action):
    """Open the page, find the element and run an async action on it."""
    from webatoms.exceptions import WebAtomsError

    try:
        return asyncio.run(_with_element(url, selector, cdp_url, action))
    except WebAtomsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


async def _with_element(url, selector, cdp_url, action):
    from webatoms.atoms import ElementAtoms
    from webatoms.browser import BrowserSession
    from webatoms.dom import CDPDomAdapter
    from webatoms.input import CDPKeyboard

    session = BrowserSession()
    try:
        await session.start(cdp_url)
        await session.navigate(url)
        node_id = await session.query_selector(selector)
        atoms = ElementAtoms(CDPDomAdapter(session), CDPKeyboard(session))
        return await action(atoms, node_id)
    finally:
        await session.stop()


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
