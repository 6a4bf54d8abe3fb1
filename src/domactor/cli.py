"""CLI module for domactor."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from domactor import __version__
from domactor.actor.page import Page
from domactor.dom.node import Node
from domactor.exceptions import DomActorError
from domactor.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="domactor")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """domactor - inspect and drive the DOM of a running browser."""
    setup_logging(log_level="debug" if verbose else None, force_setup=verbose)


def _run(cdp_url: str, action: Callable[[Page], Awaitable[None]]) -> None:
    """Connect to the browser, run one action against its first page, then disconnect."""

    async def execute():
        page = await Page.connect(cdp_url)
        try:
            await action(page)
        finally:
            await page.close()

    try:
        asyncio.run(execute())
    except (DomActorError, httpx.HTTPError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1) from e


async def _first_match(page: Page, selector: str) -> Node | None:
    document = await page.dom()
    node = await document.query_selector(selector)
    if node is None:
        console.print(f"[yellow]No element matches {escape(repr(selector))}[/yellow]")
    return node


@cli.command()
@click.argument("cdp_url")
@click.argument("selector")
def text(cdp_url: str, selector: str):
    """Print the text of every element matching SELECTOR."""

    async def action(page: Page) -> None:
        document = await page.dom()
        nodes = await document.query_selector_all(selector)
        if not nodes:
            console.print(f"[yellow]No element matches {escape(repr(selector))}[/yellow]")
            return
        for index, node in enumerate(nodes):
            console.print(Panel.fit(Text(await node.get_text()), title=f"{escape(selector)} [{index}]"))

    _run(cdp_url, action)


@cli.command()
@click.argument("cdp_url")
@click.argument("selector")
def attrs(cdp_url: str, selector: str):
    """Show the attributes of the first element matching SELECTOR."""

    async def action(page: Page) -> None:
        node = await _first_match(page, selector)
        if node is None:
            return

        table = Table(title=f"{escape(selector)} (node {node.node_id})")
        table.add_column("Attribute", style="bold")
        table.add_column("Value")
        for name, value in (await node.get_attributes()).items():
            table.add_row(escape(name), escape(value))
        console.print(table)

    _run(cdp_url, action)


@cli.command(name="click")
@click.argument("cdp_url")
@click.argument("selector")
def click_(cdp_url: str, selector: str):
    """Click the first element matching SELECTOR."""

    async def action(page: Page) -> None:
        node = await _first_match(page, selector)
        if node is None:
            return
        await node.click()
        console.print(f"[green]Clicked {escape(repr(selector))}[/green]")

    _run(cdp_url, action)


@cli.command(name="type")
@click.argument("cdp_url")
@click.argument("selector")
@click.argument("value")
def type_(cdp_url: str, selector: str, value: str):
    """Type VALUE into the first element matching SELECTOR."""

    async def action(page: Page) -> None:
        node = await _first_match(page, selector)
        if node is None:
            return
        await node.send_keys(value)
        console.print(f"[green]Typed {len(value)} characters into {escape(repr(selector))}[/green]")

    _run(cdp_url, action)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
