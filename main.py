"""CLI entrypoint for managing the link collection."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from dotenv import find_dotenv, load_dotenv

from collection import filter_by_category, missing_descriptions
from description_client import generate_description, load_provider_config
from drag_reorder import DragReorderController
from enrichment import EnrichmentPipeline
from link_store import commit_collection, load_links, load_store
from models import LinkRecord, Progress, ProviderConfig, ProviderConfigError, RunResult, RunState


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Reorder links and fill in missing descriptions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print links in their stored order")
    list_parser.add_argument("--category", default=None, help="Only show links in this category id")

    move_parser = subparsers.add_parser(
        "move",
        help=(
            "Move one link in front of another. To put a link last, move it in front of "
            "the current last link, then move that link in front of it"
        ),
    )
    move_parser.add_argument("moved_id", help="Id of the link being moved")
    move_parser.add_argument("target_id", help="Id of the link it should land in front of")

    enrich_parser = subparsers.add_parser(
        "enrich",
        help="Generate descriptions for links that lack one (Ctrl-C stops after the current link)",
    )
    enrich_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print which links would be described, without provider calls or writes",
    )
    return parser.parse_args(argv)


def run_list(category: str | None) -> None:
    links, categories = load_store()
    names = {c.id: c.name for c in categories}
    shown = filter_by_category(links, category)
    if not shown:
        print("No links found.")
        return
    for position, link in enumerate(shown, start=1):
        category_name = names.get(link.category_id, link.category_id or "-")
        print(f"{position:>3}. [{link.id}] {link.title} <{link.url}> ({category_name})")
        if link.description:
            print(f"       {link.description}")


def run_move(moved_id: str, target_id: str) -> bool:
    """Apply one drag gesture (grab, hover, drop) against the store. Returns True if the order changed."""
    links = load_links()
    controller = DragReorderController(commit=commit_collection)
    controller.drag_start(moved_id)
    try:
        reordered = controller.drag_over(links, target_id)
    finally:
        controller.drop()

    changed = [link.id for link in reordered] != [link.id for link in links]
    if changed:
        logging.info("Moved link_id=%s in front of link_id=%s", moved_id, target_id)
    else:
        logging.info("Order unchanged for move %s -> %s", moved_id, target_id)
    return changed


def run_enrich(config: ProviderConfig, dry_run: bool) -> RunResult | None:
    """Describe every link lacking a description, committing after each one."""
    links = load_links()
    targets = missing_descriptions(links)
    if not targets:
        logging.info("All %s links already have a description", len(links))

    if dry_run:
        for link in targets:
            logging.info("[dry-run] Would describe: %s <%s>", link.title, link.url)
        logging.info("[dry-run] %s of %s links need a description", len(targets), len(links))
        return None

    pipeline = EnrichmentPipeline(
        generate=generate_description,
        commit=commit_collection,
        on_progress=_log_progress,
    )
    return asyncio.run(_enrich(pipeline, links, config))


async def _enrich(pipeline: EnrichmentPipeline, links: list[LinkRecord], config: ProviderConfig) -> RunResult:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, pipeline.request_cancel)
    except (NotImplementedError, RuntimeError):
        logging.debug("SIGINT handler unavailable; Ctrl-C will abort immediately")
    try:
        return await pipeline.run(links, config, snapshot=load_links)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


def _log_progress(progress: Progress) -> None:
    if progress.total:
        logging.info("Progress: %s/%s", progress.current, progress.total)


def main(argv: list[str] | None = None) -> None:
    """Load config and dispatch the chosen command."""
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    if args.command == "list":
        run_list(args.category)
    elif args.command == "move":
        run_move(args.moved_id, args.target_id)
    elif args.command == "enrich":
        config = load_provider_config()
        if not args.dry_run:
            try:
                config.validate()
            except ProviderConfigError as exc:
                logging.error("Cannot start enrichment: %s", exc)
                sys.exit(2)
        result = run_enrich(config, dry_run=args.dry_run)
        if result is not None and result.state is RunState.CANCELLED:
            print(f"Stopped after {result.progress.current}/{result.progress.total} links.")
        elif result is not None:
            print(
                f"Done: {result.succeeded} described, {result.failed} failed "
                f"({result.progress.current}/{result.progress.total})."
            )


if __name__ == "__main__":
    main()
