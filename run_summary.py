"""Convenience script for summarising an article and rendering it to a PNG locally."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure the src directory is on the Python path so the summarysheet package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from summarysheet.config import load_config  # noqa: E402  (import after path setup)
from summarysheet.errors import SummarizerError  # noqa: E402
from summarysheet.services.extractor import ArticleExtractor, fetch_article  # noqa: E402
from summarysheet.services.renderer import render_summary_png  # noqa: E402
from summarysheet.services.summarizer import summarize_article  # noqa: E402


def main() -> None:
    """Fetch the article, summarise it and write the rendered page to disk."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("url", help="Article URL to summarise")
    parser.add_argument("--headline", default="Article summary")
    parser.add_argument("--subheadline", default="")
    parser.add_argument("--output", type=Path, default=Path("summary.png"))
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings JSON file")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = load_config(args.config)
    except ValueError as exc:
        logging.error("Could not load settings: %s", exc)
        sys.exit(1)

    result = fetch_article(args.url, ArticleExtractor(config.fetch))
    if not result.is_success:
        logging.error(result.message)
        sys.exit(1)

    try:
        summary = summarize_article(result.data.text, config.summarizer)
    except SummarizerError as exc:
        logging.error(exc.message)
        sys.exit(1)

    print(summary)

    rendered = render_summary_png(args.headline, args.subheadline or args.url, summary, config.render)
    if not rendered.is_success:
        logging.error(rendered.message)
        sys.exit(1)

    args.output.write_bytes(rendered.data.png)
    logging.info("%s Wrote %s", rendered.message, args.output)


if __name__ == "__main__":
    main()
