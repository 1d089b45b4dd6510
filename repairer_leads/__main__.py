"""CLI entry point for the repairer lead pipeline."""

import argparse
import asyncio
import csv
import logging
import sys
from pathlib import Path

from repairer_leads.config import ProviderKeys, settings
from repairer_leads.connectors import MockConnector
from repairer_leads.models import Candidate
from repairer_leads.models.database import init_db
from repairer_leads.pipeline import Pipeline
from repairer_leads.storage import SQLRepairerStore, persist_candidates

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "name", "address", "postal_code", "city", "phone", "email", "website",
    "lat", "lng", "confidence_score", "ai_enriched", "source", "description",
]


async def run_discovery(
    search_term: str,
    location: str,
    output_path: Path,
    test_mode: bool = False,
    use_mock: bool = False,
) -> list[Candidate]:
    """Run the pipeline, persist and export its results."""
    keys = ProviderKeys.from_settings()
    connector = None
    if use_mock:
        connector = MockConnector()
        logger.info("Using mock connector for testing")

    pipeline = Pipeline(keys, connector=connector)
    results = await pipeline.run(search_term, location)

    if not results:
        logger.warning("No repairers found. Check your search term and location.")
        return []

    if test_mode:
        logger.info("Test mode: skipping database writes")
    else:
        store = SQLRepairerStore(init_db())
        persist_candidates(store, results)

    logger.info(f"Exporting results to {output_path}...")
    export_to_csv(results, output_path)

    print_summary(results, pipeline.ai_apis_used())
    return results


def export_to_csv(results: list[Candidate], output_path: Path):
    """Export results to CSV file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for r in results:
            row = r.model_dump()
            writer.writerow(["" if row[c] is None else row[c] for c in CSV_COLUMNS])


def print_summary(results: list[Candidate], apis_used: dict[str, bool]):
    """Print a summary of results to console."""
    print("\n" + "=" * 60)
    print("REPAIRER LEAD PIPELINE - RESULTS SUMMARY")
    print("=" * 60)

    geocoded = [r for r in results if r.is_geocoded]
    print(f"\nTotal repairers: {len(results)}")
    print(f"Geocoded: {len(geocoded)}")
    print("Providers: " + ", ".join(
        f"{name}={'on' if used else 'off'}" for name, used in apis_used.items()
    ))

    print("\n" + "-" * 60)
    for r in sorted(results, key=lambda c: c.confidence_score or 0, reverse=True)[:10]:
        print(f"\n{r.name}")
        print(f"   {r.full_address}")
        print(f"   Confidence: {r.confidence_score or 0:.2f} | Source: {r.source}")
        if r.website:
            print(f"   Website: {r.website}")

    print("\n" + "=" * 60)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Find and enrich phone repair businesses"
    )
    parser.add_argument("search_term", help='Search term, e.g. "réparation téléphone"')
    parser.add_argument("location", help="City or area, e.g. Lyon")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=settings.data_dir / "repairers.csv",
        help="Output CSV path (default: data/repairers.csv)",
    )
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Run without writing to the database",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock search results instead of Serper",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        asyncio.run(run_discovery(
            search_term=args.search_term,
            location=args.location,
            output_path=args.output,
            test_mode=args.test_mode,
            use_mock=args.mock,
        ))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Pipeline failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
