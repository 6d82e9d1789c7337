"""
Command-line entry points.

Usage:
    ministore-ingest --store my-shop manual --name "Red Shirt" --price 200 --image shirt.jpg
    ministore-ingest --store my-shop --auto-boost bulk --price 300 photos/*.jpg
    ministore-ingest --store my-shop pdf --price 150 catalog.pdf

    ministore-browse my-shop --search shirt --category tops --sort price-asc
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from .catalog import CatalogViewEngine, CatalogWriter, SortMode, StoreDirectory, ViewQuery
from .common import MinistoreError, Settings, ValidationError, load_settings, setup_logging
from .imaging import DocumentRasterizer, ImageNormalizer
from .ingestion import IngestionBatch, IngestionOrchestrator, ManualEntry, PriceBoostPolicy
from .models import SourceAsset
from .remote import FirestoreClient, RemoteAssetUploader

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_INVALID = 2


@dataclass
class Services:
    """Remote collaborators built from settings."""
    client: FirestoreClient
    uploader: RemoteAssetUploader
    directory: StoreDirectory
    writer: CatalogWriter


def connect(settings: Settings) -> Services:
    """Build the document store client, uploader, directory and writer."""
    fs = settings.firestore
    client = FirestoreClient(
        project_id=fs.project_id,
        api_key=fs.api_key,
        id_token=fs.id_token,
        database=fs.database,
        timeout=fs.timeout,
    )
    uploader = RemoteAssetUploader(
        api_key=settings.uploader.api_key,
        endpoint=settings.uploader.endpoint,
        timeout=settings.uploader.timeout,
    )
    directory = StoreDirectory(client, uploader=uploader, logo_profile=settings.logo_profile)
    return Services(client=client, uploader=uploader, directory=directory,
                    writer=CatalogWriter(client))


def _add_logging_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Warnings only")


# ── ministore-ingest ─────────────────────────────────────────────────────────

def build_ingest_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ministore-ingest",
        description="Add products to a store catalog",
    )
    parser.add_argument("--store", "-s", required=True, help="Store id or handle")
    parser.add_argument(
        "--auto-boost",
        action="store_true",
        help="Add the configured flat markup to every price",
    )
    _add_logging_flags(parser)

    modes = parser.add_subparsers(dest="mode", required=True)

    manual = modes.add_parser("manual", help="Add one product")
    manual.add_argument("--name", "-n", required=True)
    manual.add_argument("--price", "-p", required=True)
    manual.add_argument("--image", "-i", required=True, help="Product image file")
    manual.add_argument("--category", "-c")
    manual.add_argument("--description", "-d")

    bulk = modes.add_parser("bulk", help="One product per image, same price for all")
    bulk.add_argument("--price", "-p", required=True)
    bulk.add_argument("images", nargs="+", help="Image files")

    pdf = modes.add_parser("pdf", help="One product per PDF page")
    pdf.add_argument("--price", "-p", default="")
    pdf.add_argument("document", help="PDF catalog file")

    return parser


def print_batch_summary(batch: IngestionBatch) -> None:
    """Print per-item outcomes of a batch."""
    stats = batch.get_stats()

    print("\n" + "=" * 60)
    print(f"Import Summary  [{stats['state'].upper()}]")
    print("=" * 60)
    print(f"  Items:      {stats['total']}")
    print(f"  Succeeded:  {stats['succeeded']}")
    print(f"  Failed:     {stats['failed']}")
    if stats['pending']:
        print(f"  Pending:    {stats['pending']}")

    if batch.failed:
        print("\n  Failed items:")
        for item in batch.failed:
            print(f"    #{item.index:<4} {item.name[:40]:<40} [{item.failed_stage.value}] {item.error}")

    if batch.orphaned_urls:
        print("\n  Uploaded without a catalog record:")
        for url in batch.orphaned_urls:
            print(f"    {url}")
    print("=" * 60)


def ingest_main(argv: Optional[List[str]] = None) -> int:
    args = build_ingest_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    if not settings.firestore.project_id:
        print("Error: FIRESTORE_PROJECT_ID is not set")
        return EXIT_INVALID
    services = connect(settings)

    try:
        store = services.directory.resolve(args.store)
        if store is None:
            print(f"Error: store not found: {args.store}")
            return EXIT_INVALID

        orchestrator = IngestionOrchestrator(
            store_id=store.id,
            normalizer=ImageNormalizer(),
            uploader=services.uploader,
            writer=services.writer,
            rasterizer=DocumentRasterizer(settings.raster.scale, settings.raster.quality),
            price_policy=PriceBoostPolicy(args.auto_boost, settings.price_boost_amount),
            product_profile=settings.product_profile,
        )

        if args.mode == "manual":
            product_id = orchestrator.submit_manual(ManualEntry(
                name=args.name,
                price=args.price,
                image=SourceAsset.from_path(args.image),
                category=args.category,
                description=args.description,
            ))
            print(f"Added product {product_id} to {store.name}")
            return EXIT_OK

        if args.mode == "bulk":
            files = [SourceAsset.from_path(p) for p in args.images]
            batch = orchestrator.submit_bulk(files, args.price)
        else:
            document = SourceAsset.from_path(args.document)
            pages = orchestrator.prepare_document(document)
            print(f"Rendered {len(pages)} pages from {document.filename}")
            batch = orchestrator.submit_document(document.filename, pages, args.price)

        print_batch_summary(batch)
        return EXIT_PARTIAL if batch.failed else EXIT_OK

    except ValidationError as e:
        print(f"Error: {e}")
        return EXIT_INVALID
    except OSError as e:
        print(f"Error: cannot read input file: {e}")
        return EXIT_INVALID
    except MinistoreError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return EXIT_PARTIAL
    finally:
        services.uploader.close()
        services.client.close()


# ── ministore-browse ─────────────────────────────────────────────────────────

def build_browse_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ministore-browse",
        description="Show a store's public catalog",
    )
    parser.add_argument("store", help="Store id or handle")
    parser.add_argument("--search", default="", help="Search text (name or description)")
    parser.add_argument("--category", default="all", help="Category, or 'all'")
    parser.add_argument(
        "--sort",
        default=SortMode.NEWEST.value,
        choices=[m.value for m in SortMode],
    )
    parser.add_argument("--links", action="store_true", help="Print order links")
    _add_logging_flags(parser)
    return parser


def browse_main(argv: Optional[List[str]] = None) -> int:
    args = build_browse_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    if not settings.firestore.project_id:
        print("Error: FIRESTORE_PROJECT_ID is not set")
        return EXIT_INVALID
    services = connect(settings)
    sf = settings.storefront
    engine = CatalogViewEngine(
        new_badge_days=sf.new_badge_days,
        currency_symbol=sf.currency_symbol,
        default_theme_color=sf.default_theme_color,
    )

    try:
        store = services.directory.resolve(args.store)
        if store is None:
            print("Store not found")
            return EXIT_INVALID

        products = services.directory.list_products(store.id)
        page = engine.build_storefront(
            store,
            products,
            ViewQuery(search_text=args.search, category=args.category, sort=args.sort),
            page_url=f"{sf.public_base_url}{store.public_slug}",
        )
    except MinistoreError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return EXIT_PARTIAL
    finally:
        services.client.close()

    print(f"{page.store.name}  ({page.theme_color})")
    if page.store.description:
        print(page.store.description)
    if len(page.categories) > 1:
        print("Categories: " + " | ".join(page.categories))
    print()

    if page.is_empty:
        print("No products found matching your search.")
        return EXIT_OK

    for card in page.cards:
        badge = "NEW " if card.is_new else "    "
        print(f"  {badge}{card.product.name[:40]:<40} {card.price_label:>10}")
        if args.links:
            print(f"      {card.order_link}")
    print(f"\n{len(page.cards)} of {len(products)} products. Chat: {page.contact_link}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(ingest_main())
