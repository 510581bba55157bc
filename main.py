#!/usr/bin/env python3
"""
BioPAX Network Mapper - CLI Entry Point

Reads a BioPAX (Level 2 or 3) RDF/XML document and writes it as an
attributed network, either the full entity graph (Default mode) or the
binary relation projection (SIF mode).

Usage:
    python main.py pathway.owl
    python main.py pathway.owl --mode SIF --sif-types controls-state-change-of,in-complex-with
    python main.py pathway.owl --output pathway.json --format json

Environment:
    BIOPAX_READER_MODE: Default mapping mode ("Default" or "SIF")
    BIOPAX_SIF_TYPES: Comma-separated binary relation types
    BIOPAX_LINK_BASE_URL: Cross-reference resolver base URL
    BIOPAX_SEARCH_URL: External molecule search endpoint
    BIOPAX_NETWORK_FORMAT: Output format ("graphml" or "json")
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from models.errors import BioPaxReaderError
from pipeline.config import MapperConfig
from pipeline.reader_task import BioPaxReaderTask
from sif.projector import BinaryRelationProjector

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> MapperConfig:
    """Environment configuration overridden by command line options."""
    data = MapperConfig.from_env().to_dict()
    if args.mode:
        data["reader_mode"] = args.mode
    if args.sif_types:
        data["sif_types"] = [t.strip() for t in args.sif_types.split(",") if t.strip()]
    if args.format:
        data["network_format"] = args.format
    return MapperConfig.from_dict(data)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="BioPAX Network Mapper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py pathway.owl
    python main.py pathway.owl --mode SIF
    python main.py pathway.owl --output network.json --format json
    python main.py pathway.owl --mode SIF --sif-output pathway.sif
        """,
    )
    parser.add_argument("input", type=str, help="BioPAX RDF/XML file")
    parser.add_argument(
        "--mode", "-m",
        type=str,
        choices=["Default", "SIF"],
        help="Mapping mode (default: BIOPAX_READER_MODE or Default)",
    )
    parser.add_argument(
        "--sif-types", "-t",
        type=str,
        help="Comma-separated binary relation types for SIF mode (default: all)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Network output path (default: input name with the format's extension)",
    )
    parser.add_argument(
        "--format", "-f",
        type=str,
        choices=["graphml", "json"],
        help="Network output format (default: BIOPAX_NETWORK_FORMAT or graphml)",
    )
    parser.add_argument(
        "--sif-output",
        type=str,
        help="Also write the binary relations table here (SIF mode)",
    )
    parser.add_argument(
        "--name", "-n",
        type=str,
        help="Network name (default: the input file name)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)

    # Load environment variables
    load_dotenv()

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(2)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: {input_path} not found.")
        sys.exit(1)

    try:
        with open(input_path, "rb") as f:
            task = BioPaxReaderTask(f, input_name=args.name or input_path.name, config=config)
            result = task.run()

        output_path = Path(args.output) if args.output else input_path.with_suffix(f".{config.network_format}")
        result.network.save(str(output_path), format=config.network_format)
        logger.info(f"Network saved to {output_path}")

        if args.sif_output and config.reader_mode == "SIF":
            with open(args.sif_output, "wb") as f:
                BinaryRelationProjector().write(result.relations, f)
            logger.info(f"Binary relations saved to {args.sif_output}")
    except BioPaxReaderError as e:
        logger.error(f"Failed to read {input_path}: {e}")
        print(f"Error: {e}")
        sys.exit(1)

    print(result.report.summary_text())


if __name__ == "__main__":
    main()
