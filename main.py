# main.py
# Command-line entry point: `generate` rebuilds the reference store, any other
# argument is classified against it.

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from core.config import Config
from core.errors import EmotionEmbedError
from core.logging import LoggingInitError, get_logger, init as init_logging
from emotion.labels import EMOTIONS
from emotion.provider import build_provider
from emotion.scorer import SimilarityResult, SimilarityScorer
from emotion.store import StoreBuilder, load_store

logger = get_logger("main")

GENERATE_COMMAND = "generate"
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emotion-embed",
        description=(
            "Classify the emotion of a short text by comparing its embedding "
            f"with reference embeddings of: {', '.join(e.value for e in EMOTIONS)}."
        ),
    )
    parser.add_argument(
        "text",
        help=(
            f"text to classify, or '{GENERATE_COMMAND}' to (re)build the reference store; "
            "put '--' before text that starts with '-'"
        ),
    )
    parser.add_argument("--config", "-c", default=None, help="JSON file with setting overrides")
    parser.add_argument("--store", "-s", dest="store_path", default=None, help="embedding store path")
    parser.add_argument("--threshold", "-t", type=float, default=None, help="confidence threshold (percent)")
    parser.add_argument(
        "--backend",
        dest="embedding_backend",
        choices=["openai", "transformers"],
        default=None,
        help="embedding provider",
    )
    parser.add_argument(
        "--concurrent",
        dest="concurrent_generation",
        action="store_const",
        const=True,
        default=None,
        help="embed the reference labels in parallel (generate only)",
    )
    parser.add_argument("--json", dest="as_json", action="store_true", help="print the result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="log at INFO level")
    return parser


def format_result(result: SimilarityResult) -> str:
    lines = []
    for emotion in EMOTIONS:
        pct = result.percentages[emotion]
        mark = "PASS" if result.passes(emotion) else "FAIL"
        lines.append(f"{emotion.value:<10} {pct:8.2f}%  [{mark}]")
    verdict = "confident" if result.is_confident else "not confident"
    lines.append(
        f"Best match: {result.best_label.value} ({result.confidence:.2f}%, "
        f"{verdict} at threshold {result.threshold:g}%)"
    )
    return "\n".join(lines)


def cmd_generate(cfg: Config) -> int:
    provider = build_provider(cfg)
    builder = StoreBuilder(provider, concurrent=cfg.concurrent_generation)
    store = builder.build_and_save(cfg.store_path)
    print(f"Saved {len(store)} reference embeddings (dimension {store.dimension}) to {cfg.store_path}")
    return 0


def cmd_classify(cfg: Config, text: str, as_json: bool) -> int:
    # A missing or broken store fails before any provider call is made.
    store = load_store(cfg.store_path)
    scorer = SimilarityScorer(build_provider(cfg), threshold=cfg.threshold)
    result = scorer.score(text, store)
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_result(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # --- Configuration and Logging Setup ---
    try:
        cfg = Config(
            json_path=args.config,
            store_path=args.store_path,
            threshold=args.threshold,
            embedding_backend=args.embedding_backend,
            concurrent_generation=args.concurrent_generation,
            log_level="INFO" if args.verbose else None,
        )
        init_logging(cfg)
    except (ValueError, OSError, LoggingInitError) as e:
        print(f"ERROR: invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # --- Run ---
    try:
        if args.text == GENERATE_COMMAND:
            return cmd_generate(cfg)
        return cmd_classify(cfg, args.text, args.as_json)
    except EmotionEmbedError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code
    except OSError as e:
        print(f"ERROR: I/O failure: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
