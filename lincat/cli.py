"""
Lincat CLI - categorize links and notes, then browse, search and prune them
"""
import argparse
import asyncio
import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import Config
from .exceptions import LincatError
from .logging_config import get_logger, setup_logging

logger = get_logger("cli")
console = Console()


def get_storage(args):
    from .storage import create_storage
    return create_storage(args.config.storage)


@contextmanager
def open_index(args):
    """LinkIndex for the selected owner; its storage is closed on exit."""
    from .link_index import LinkIndex
    with get_storage(args) as storage:
        yield LinkIndex(storage, args.owner)


def cmd_add(args):
    """Categorize and store one submission."""
    from .categorizer import build_categorizer

    raw_input = " ".join(args.input)
    with get_storage(args) as storage:
        categorizer = build_categorizer(args.config, storage=storage)
        status, body = asyncio.run(categorizer.handle_request({"input": raw_input}, args.owner))

    if args.json:
        print(json.dumps(body, indent=2, ensure_ascii=False))
    elif status == 200:
        link = body["link"]
        console.print(f"[bold]{link['title']}[/bold]")
        console.print(f"  Category: {link['category']}")
        if link["url"]:
            console.print(f"  URL: {link['url']}")
        console.print(f"  {link['aiDescription']}")
        console.print(f"  id: {link['id']}", style="dim")
    else:
        console.print(f"Error: {body['error']}", style="red")
        if body.get("details"):
            console.print(body["details"], style="red")

    if status != 200:
        sys.exit(1)


def cmd_categories(args):
    """List all categories."""
    with open_index(args) as index:
        categories = index.list_categories()

    if not categories:
        print("No categories yet. Use 'lincat add' to categorize something.")
        return

    table = Table(title="Categories")
    table.add_column("Name", style="bold")
    table.add_column("Links", justify="right")
    table.add_column("Id", style="dim")
    for category in categories:
        table.add_row(category.name, str(category.link_count), category.id)
    console.print(table)


def _print_links(links, limit):
    table = Table(show_lines=False)
    table.add_column("Title", style="bold", max_width=50)
    table.add_column("Category")
    table.add_column("URL", overflow="fold")
    table.add_column("Id", style="dim")
    for view in links[:limit]:
        table.add_row(view.title, view.category, view.url, view.id)
    console.print(table)

    total = len(links)
    if total > limit:
        print(f"... and {total - limit} more. Use --limit to see more.")


def cmd_list(args):
    """List links, optionally within one category."""
    with open_index(args) as index:
        if args.category:
            category = index.find_category(args.category)
            if category is None:
                print(f"Category not found: {args.category}")
                sys.exit(1)
            links = index.get_by_category(category.id)
        else:
            links = index.get_all()

    if not links:
        print("No links found matching criteria.")
        return

    _print_links(links, args.limit)
    print(f"\nTotal: {len(links)} links")


def cmd_search(args):
    """Search links by keyword."""
    with open_index(args) as index:
        results = index.search(args.query)

    if not results:
        print(f"No results found for '{args.query}'")
        return

    print(f"Found {len(results)} result(s) for '{args.query}':\n")
    _print_links(results, args.limit)


def cmd_show(args):
    """Show one link in full."""
    with open_index(args) as index:
        view = index.get(args.link_id)
    if view is None:
        print(f"Link not found: {args.link_id}")
        sys.exit(1)

    console.print(f"[bold]{view.title}[/bold]")
    console.print(f"  Category:    {view.category}")
    if view.url:
        console.print(f"  URL:         {view.url}")
    console.print(f"  Input:       {view.original_input}")
    console.print(f"  Description: {view.description}")
    console.print(f"  Summary:     {view.ai_description}")


def cmd_delete_category(args):
    """Delete a category and all its links."""
    with open_index(args) as index:
        category = index.find_category(args.category)
        if category is None:
            print(f"Category not found: {args.category}")
            sys.exit(1)

        if not args.yes:
            answer = input(f"Delete '{category.name}' and its {category.link_count} link(s)? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted.")
                return

        index.remove_category(category.id)
    print(f"Deleted category '{category.name}' and all its links.")


def cmd_delete_link(args):
    """Delete a single link."""
    with open_index(args) as index:
        removed = index.remove(args.link_id)
    if not removed:
        print(f"Link not found: {args.link_id}")
        sys.exit(1)
    print(f"Deleted: {args.link_id}")


def cmd_stats(args):
    """Show statistics about the collection."""
    with open_index(args) as index:
        stats = index.get_stats()

    print("=== Lincat Statistics ===\n")
    print(f"Total items: {stats['total']}")
    print(f"Links:       {stats['urls']}")
    print(f"Notes:       {stats['notes']}")

    if stats["categories"]:
        print("\n--- By Category ---")
        for name, count in sorted(stats["categories"].items(), key=lambda x: -x[1]):
            print(f"  {name}: {count}")


def cmd_export(args):
    """Export links as JSON or markdown."""
    with open_index(args) as index:
        if args.format == "json":
            output = index.export_json()
        else:
            output = index.export_markdown()

    if args.output:
        Path(args.output).write_text(output, encoding='utf-8')
        print(f"Exported to {args.output}")
    else:
        print(output)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lincat",
        description="Lincat - automatically categorize links and notes"
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--owner", help="Owner id to act as (default from config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_parser = subparsers.add_parser("add", help="Categorize a URL or note")
    add_parser.add_argument("input", nargs="+", help="URL or free text")
    add_parser.add_argument("--json", action="store_true", help="Print the raw response")
    add_parser.set_defaults(func=cmd_add)

    cat_parser = subparsers.add_parser("categories", help="List categories")
    cat_parser.set_defaults(func=cmd_categories)

    list_parser = subparsers.add_parser("list", help="List links")
    list_parser.add_argument("-c", "--category", help="Category name or id")
    list_parser.add_argument("-l", "--limit", type=int, default=20, help="Max links to show")
    list_parser.set_defaults(func=cmd_list)

    search_parser = subparsers.add_parser("search", help="Search links")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("-l", "--limit", type=int, default=10, help="Max results")
    search_parser.set_defaults(func=cmd_search)

    show_parser = subparsers.add_parser("show", help="Show one link")
    show_parser.add_argument("link_id", help="Link id")
    show_parser.set_defaults(func=cmd_show)

    del_cat_parser = subparsers.add_parser("delete-category", help="Delete a category and its links")
    del_cat_parser.add_argument("category", help="Category name or id")
    del_cat_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    del_cat_parser.set_defaults(func=cmd_delete_category)

    del_link_parser = subparsers.add_parser("delete-link", help="Delete a link")
    del_link_parser.add_argument("link_id", help="Link id")
    del_link_parser.set_defaults(func=cmd_delete_link)

    stats_parser = subparsers.add_parser("stats", help="Show statistics")
    stats_parser.set_defaults(func=cmd_stats)

    export_parser = subparsers.add_parser("export", help="Export links")
    export_parser.add_argument("-f", "--format", choices=["json", "markdown"],
                               default="json", help="Export format")
    export_parser.add_argument("-o", "--output", help="Output file")
    export_parser.set_defaults(func=cmd_export)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()

    try:
        args.config = Config.load(args.config)
        log_config = args.config.logging
        setup_logging(
            logging.DEBUG if args.verbose else log_config.level,
            log_file=Path(log_config.file) if log_config.file else None,
        )
        args.owner = args.owner or args.config.default_owner
        args.func(args)
    except (LincatError, ValueError) as e:
        logger.error("%s", e)
        console.print(f"Error: {e}", style="red")
        sys.exit(1)


if __name__ == "__main__":
    main()
