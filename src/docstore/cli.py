"""Document store inspection CLI.

Loads a JSON snapshot of collections into an in-memory store and runs
queries against it. Filters and orderings are given as JSON records.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
import typer
from pydantic import ValidationError

from docstore.errors import DocumentStoreError
from docstore.models.filter import AnyFilter, FilterNode, filter_from_record
from docstore.models.order_by import OrderNode, order_by_from_record
from docstore.models.partial_select import PartialSelect
from docstore.services.factory import create_seeded_document_store, load_snapshot, parse_select_option
from docstore.services.memory_store import InMemoryDocumentStore


def configure_logging(level: int = logging.WARNING) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        cache_logger_on_first_use=False,
    )


configure_logging()

logger = structlog.get_logger(__name__)

app = typer.Typer(
    name="docstore",
    help="""Query a document store snapshot.

Examples:

  # List collections
  docstore collections snapshot.json

  # Find documents with a filter, sorted and paged
  docstore find snapshot.json users --filter '{"kind": "gt", "prop": "age", "value": 21}' --order-by '{"kind": "asc", "prop": "name"}' --limit 10

  # Count documents
  docstore count snapshot.json users""",
    rich_markup_mode="markdown",
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log store activity to stderr",
    ),
) -> None:
    """Query a document store snapshot."""
    if verbose:
        configure_logging(logging.INFO)


def _open_store(snapshot: str) -> InMemoryDocumentStore:
    try:
        return create_seeded_document_store(load_snapshot(Path(snapshot)))
    except FileNotFoundError:
        logger.error("snapshot_not_found", snapshot=snapshot)
        raise typer.Exit(1)
    except ValidationError as exc:
        logger.error("invalid_snapshot", snapshot=snapshot, errors=exc.error_count())
        raise typer.Exit(1)
    except DocumentStoreError as exc:
        logger.error("snapshot_rejected", snapshot=snapshot, error=str(exc))
        raise typer.Exit(1)


def _parse_filter(filter_json: Optional[str]) -> FilterNode:
    if not filter_json:
        return AnyFilter()
    try:
        return filter_from_record(filter_json)
    except ValidationError as exc:
        logger.error("invalid_filter", errors=exc.error_count())
        raise typer.Exit(1)


def _parse_order_by(order_by_json: Optional[str]) -> OrderNode | None:
    if not order_by_json:
        return None
    try:
        return order_by_from_record(order_by_json)
    except ValidationError as exc:
        logger.error("invalid_order_by", errors=exc.error_count())
        raise typer.Exit(1)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=str))


@app.command()
def collections(
    snapshot: str = typer.Argument(
        ...,
        help="JSON snapshot file to load",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Only list collections starting with this prefix",
    ),
) -> None:
    """List the collections in a snapshot."""
    store = _open_store(snapshot)
    names = store.filter_collections_by_prefix(prefix) if prefix else store.list_collections()
    _echo_json(names)


@app.command()
def find(
    snapshot: str = typer.Argument(
        ...,
        help="JSON snapshot file to load",
    ),
    collection: str = typer.Argument(
        ...,
        help="Collection to query",
    ),
    filter_json: Optional[str] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Filter record as JSON (default: match all)",
    ),
    order_by_json: Optional[str] = typer.Option(
        None,
        "--order-by",
        "-o",
        help="Order-by record as JSON",
    ),
    skip: Optional[int] = typer.Option(
        None,
        "--skip",
        min=0,
        help="Number of matching documents to skip",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=0,
        help="Maximum number of documents to return",
    ),
    select: Optional[list[str]] = typer.Option(
        None,
        "--select",
        "-s",
        help="Field to include, optionally as field:alias (repeatable)",
    ),
) -> None:
    """Find documents in a collection, printed as a JSON object keyed by doc id."""
    store = _open_store(snapshot)
    doc_filter = _parse_filter(filter_json)
    order_by = _parse_order_by(order_by_json)

    try:
        if select:
            partial_select = PartialSelect.from_field_list(parse_select_option(option) for option in select)
            docs = store.find_partial_docs(collection, partial_select, doc_filter, skip, limit, order_by)
        else:
            docs = store.find_docs(collection, doc_filter, skip, limit, order_by)
    except DocumentStoreError as exc:
        logger.error("query_failed", collection=collection, error=str(exc))
        raise typer.Exit(1)

    _echo_json(docs)


@app.command()
def count(
    snapshot: str = typer.Argument(
        ...,
        help="JSON snapshot file to load",
    ),
    collection: str = typer.Argument(
        ...,
        help="Collection to query",
    ),
    filter_json: Optional[str] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Filter record as JSON (default: match all)",
    ),
) -> None:
    """Count documents matching a filter."""
    store = _open_store(snapshot)
    doc_filter = _parse_filter(filter_json)

    try:
        total = store.count_docs(collection, doc_filter)
    except DocumentStoreError as exc:
        logger.error("query_failed", collection=collection, error=str(exc))
        raise typer.Exit(1)

    typer.echo(str(total))


@app.command()
def version() -> None:
    """Show version information."""
    from docstore import __version__

    typer.echo(f"docstore {__version__}")
