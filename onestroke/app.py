"""Command-line level checker for onestroke.

Usage:
    onestroke-check
    onestroke-check --levels 20 --show
    onestroke-check --config my-levels.yaml -v
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from onestroke.config import load_config
from onestroke.core.patterns import Pattern, PatternError
from onestroke.core.store import PatternStore

logger = logging.getLogger(__name__)

CheckResult = Tuple[int, Optional[Pattern], Optional[str]]


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def check_levels(store: PatternStore, count: int) -> List[CheckResult]:
    """Build levels 1..count, collecting the pattern or the reason it failed."""
    results: List[CheckResult] = []
    for number in range(1, count + 1):
        try:
            pattern = store.generate(number)
        except PatternError as e:
            logger.error("Level %d is not playable: %s", number, e)
            results.append((number, None, str(e)))
            continue
        source = "authored" if number <= store.authored_count else "generated"
        logger.info(
            "Level %d ok (%s, %s): %d cells from %s",
            number, source, pattern.title, len(pattern.targets), pattern.start,
        )
        results.append((number, pattern, None))
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check that every onestroke level can be finished in one stroke",
    )
    parser.add_argument(
        "--levels", "-n",
        type=int,
        default=None,
        help="Number of levels to check (default: authored levels plus five generated)",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to a YAML config file (default: $ONESTROKE_CONFIG or ./onestroke.yaml)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print each level's grid",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log at debug level",
    )
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(Path(args.config) if args.config else None)
        store = PatternStore(config=config)
    except (FileNotFoundError, PatternError) as e:
        logger.error("Could not load levels: %s", e)
        return 1

    count = args.levels if args.levels is not None else store.authored_count + 5
    if count < 1:
        parser.error("--levels must be at least 1")

    results = check_levels(store, count)
    if args.show:
        for number, pattern, _ in results:
            if pattern is None:
                continue
            print(f"Level {number}: {pattern.title}")
            for row in pattern.to_rows():
                print(f"  {row}")
            print()

    failures = [number for number, _, error in results if error is not None]
    if failures:
        logger.error("%d of %d levels failed: %s", len(failures), count, failures)
        return 1
    logger.info("All %d levels are playable", count)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
