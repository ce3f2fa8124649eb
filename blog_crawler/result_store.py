"""JSON persistence for crawl results."""

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models import CrawlResult

logger = logging.getLogger("blog_crawler.result_store")


def save_result(result: CrawlResult, output_file: Path, pretty: bool = True,
                backup_existing: bool = False) -> Optional[Path]:
    """Write *result* as JSON; returns the backup path if one was made."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    backup_file = None
    if backup_existing and output_file.exists():
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_file = output_file.with_name(
            f"{output_file.stem}_backup_{timestamp}{output_file.suffix}"
        )
        shutil.move(str(output_file), str(backup_file))
        logger.info(f"Backed up previous results to {backup_file}")

    with open(output_file, 'w', encoding='utf-8') as f:
        if pretty:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
        else:
            json.dump(result.to_dict(), f, ensure_ascii=False)

    logger.info(f"Results saved to: {output_file}")
    return backup_file


def load_result(input_file: Path) -> CrawlResult:
    """Read a result written by :func:`save_result`."""
    with open(input_file, 'r', encoding='utf-8') as f:
        return CrawlResult.from_dict(json.load(f))
