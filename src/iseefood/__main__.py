"""
ISeeFood CLI entry point.

Usage:
    python -m iseefood                      # Run the Kivy app
    python -m iseefood --source library     # Pick photos instead of using the camera
    python -m iseefood --classify food.jpg  # Classify one image without the UI
    python -m iseefood --help               # Show help
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .core.classifier import OpenCVModelLoader
from .core.config import Config
from .core.pipeline import DEFAULT_HOTDOG_TOKEN, ClassificationPipeline
from .core.preprocessing import ImageConverter
from .core.result import CELEBRATION_LABEL


def setup_logging(config: Config) -> None:
    """Configure logging based on config."""
    log_config = config["logging"]
    level = getattr(logging, str(log_config.get("level", "INFO")).upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = log_config.get("file")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format=log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        handlers=handlers,
        force=True,
    )


def build_pipeline(config: Config) -> ClassificationPipeline:
    """Create a synchronous pipeline from configuration."""
    return ClassificationPipeline(
        model_loader=OpenCVModelLoader.from_config(config),
        converter=ImageConverter(config.get("model", {}) or {}),
        hotdog_token=config.get("classification.hotdog_token", DEFAULT_HOTDOG_TOKEN),
        celebration_label=config.get("classification.celebration_label", CELEBRATION_LABEL),
    )


def run_classify(config: Config, image_path: Path) -> int:
    """
    Classify a single image file and print the verdict.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    pipeline = build_pipeline(config)
    outcome = pipeline.run(image_path, request_id=1)

    if not outcome.ok:
        print(f"Classification failed ({outcome.failure}): {outcome.error}", file=sys.stderr)
        return 1

    update = outcome.update
    print(f"Label:      {update.label}")
    print(f"Prediction: {update.prediction.label}")
    print(f"Confidence: {update.prediction.confidence * 100:.1f}%")
    print(f"Verdict:    {update.verdict}")
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="ISeeFood - On-device hotdog / not hotdog classifier",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m iseefood                      Run the app
    python -m iseefood --source library     Use the photo library
    python -m iseefood --classify food.jpg  Classify one image headless
        """,
    )

    parser.add_argument(
        "--classify", type=str, metavar="PATH", help="Classify an image file and exit"
    )
    parser.add_argument(
        "--source",
        choices=["camera", "library"],
        help="Capture source to use (overrides config)",
    )
    parser.add_argument("--config", type=str, help="Path to configuration directory")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    config_dir = Path(args.config) if args.config else None
    config = Config(config_dir)

    # Apply command-line overrides
    if args.source is not None:
        os.environ["ISEEFOOD_CAPTURE_SOURCE"] = args.source
        config.reload()

    if args.debug:
        os.environ["ISEEFOOD_LOGGING_LEVEL"] = "DEBUG"
        config.reload()

    setup_logging(config)

    logger = logging.getLogger(__name__)
    logger.info("ISeeFood starting...")
    logger.info(f"Environment: {config.env}")

    if args.classify:
        sys.exit(run_classify(config, Path(args.classify)))

    from .mobile.app import run_mobile_app

    run_mobile_app(config)


if __name__ == "__main__":
    main()
