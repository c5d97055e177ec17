import logging
import json
import sys
import argparse

from certmatch.catalog import CatalogProvider, load_catalog
from certmatch.config_loader import load_config
from certmatch.engine import EligibilityEngine, summarize_batch
from certmatch.exceptions import ConfigurationError
from certmatch.io import load_holdings, load_requirement_sets
from certmatch.scorer.serialization import batch_summary_to_dict, to_dict
from certmatch.utils import ensure_utc

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def run_evaluation(args) -> int:
    config = load_config(args.config)
    if args.lenient:
        config.lenient = True

    if args.catalog:
        provider = CatalogProvider(load_catalog(args.catalog))
    else:
        provider = CatalogProvider.from_config(config.catalog)

    engine = EligibilityEngine(config, provider)
    holdings = load_holdings(args.holdings)
    requirement_sets = load_requirement_sets(
        args.job, config.scorer.default_minimum_match_score
    )
    now = ensure_utc(args.now) if args.now else None

    logger.info(f"Evaluating {len(holdings)} holdings against {len(requirement_sets)} job(s)")
    results = engine.evaluate_batch(holdings, requirement_sets, now=now)

    output = {'results': [to_dict(r) for r in results]}
    if args.summary:
        output['summary'] = batch_summary_to_dict(summarize_batch(results))
    print(json.dumps(output, indent=2))
    return 0


def _timestamp(value: str):
    try:
        return ensure_utc(value)
    except (ValueError, OverflowError):
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Certificate eligibility evaluation")
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Engine config file (YAML)')
    parser.add_argument('--holdings', type=str, required=True,
                        help='YAML/JSON file with the worker\'s holdings')
    parser.add_argument('--job', type=str, required=True,
                        help='YAML/JSON file with one job or a `jobs:` list')
    parser.add_argument('--catalog', type=str, default=None,
                        help='Catalog file overriding config and the built-in catalog')
    parser.add_argument('--lenient', action='store_true',
                        help='Exclude unknown certificate references instead of failing')
    parser.add_argument('--now', type=_timestamp, default=None,
                        help='Evaluation time (ISO-8601), for reproducible output')
    parser.add_argument('--summary', action='store_true',
                        help='Include a batch summary')
    return parser


def main():
    args = build_parser().parse_args()

    try:
        sys.exit(run_evaluation(args))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
