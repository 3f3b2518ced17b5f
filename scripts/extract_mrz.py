"""
MRZ Extraction from OCR Text Frames.

Runs the per-frame MRZ pipeline over one or more text files, each holding the
OCR output of one camera frame. Frames are processed in order and, like a live
scan session, processing stops at the first frame that yields a validated MRZ.

Usage:
    # Single frame
    python scripts/extract_mrz.py frame_001.txt

    # Sequence of frames, stop at first valid MRZ
    python scripts/extract_mrz.py frames/*.txt

    # Read one frame from stdin with a custom config
    cat frame.txt | python scripts/extract_mrz.py - --config my_config.yaml
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.mrz import MRZProcessor  # noqa: E402

logger = logging.getLogger(__name__)


def read_frame(source: str) -> str:
    """Read one frame of OCR text from a file path or '-' for stdin."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main():
    """Main entry point for MRZ extraction."""
    parser = argparse.ArgumentParser(
        description="Extract a validated MRZ from OCR text frames",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "frames",
        nargs="+",
        help="Text files with one frame of OCR output each ('-' for stdin)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config YAML (default: bundled src/mrz/config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    processor = MRZProcessor(config_path=args.config)

    for index, source in enumerate(args.frames):
        try:
            text = read_frame(source)
        except OSError as e:
            logger.error(f"Cannot read frame {source}: {e}")
            return 2

        result = processor.process(text)
        reason = result.rejection_reason

        if result.is_reject():
            logger.info(
                f"Frame {index} ({source}): rejected "
                f"[{reason.code if reason else '-'}] {reason.message if reason else ''}"
            )
            continue

        logger.info(
            f"Frame {index} ({source}): {result.mrz.document_format.value} MRZ found "
            f"in {result.processing_time_ms:.2f}ms"
        )
        output = {"frame": index, "source": source, **result.mrz.to_dict()}
        print(json.dumps(output, indent=2))
        return 0

    logger.warning(f"No valid MRZ found in {len(args.frames)} frame(s)")
    return 1


if __name__ == "__main__":
    sys.exit(main())
