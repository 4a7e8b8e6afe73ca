"""
Command line front end: builds a proof and writes it to SVG (and DXF).

Usage:
    label-proof make --label-type Rolls --width 4 --height 6 [--shape Rounded]
    label-proof upload [FILE] --label-type Die-cut [--swap]

Examples:
    label-proof make --label-type Sheets --width 2 --height 2 --output sheet.svg
    label-proof make --label-type Die-cut --width 3 --height 3 --shape Round --dxf cut.dxf
    label-proof upload art/dieline.svg --label-type Rolls --white-ink --material Clear
    label-proof upload --set-default-dir ~/Dielines --label-type Rolls
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from label_proof.config import MATERIALS, LabelType, ShapeType
from label_proof.errors import LabelProofError
from label_proof.hosts.dxf import export_dxf
from label_proof.hosts.svg import OPENABLE_PATTERNS, SvgDrawingHost
from label_proof.logging_config import setup_logging
from label_proof.preferences import PreferenceStore, most_recent_file
from label_proof.project_config import ProjectConfig, create_sample_config, load_config
from label_proof.request import ProofRequest
from label_proof.workflow import ProofResult, ProofWorkflow

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "LabelProof"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--label-type", "-t",
        required=True,
        dest="label_type",
        help="Label construction: " + ", ".join(t.value for t in LabelType) + ".",
    )
    parser.add_argument(
        "--material", "-m",
        default=None,
        help="Legend material (" + ", ".join(MATERIALS) + "). Ignored for Sheets.",
    )
    parser.add_argument(
        "--white-ink",
        action="store_true",
        dest="white_ink",
        help="Proof prints white ink (turns guidelines on).",
    )
    parser.add_argument(
        "--guidelines", "-g",
        action="store_true",
        help="Add the white backer, dimensions and legend.",
    )
    parser.add_argument(
        "--swap",
        action="store_true",
        help="Swap the label orientation.",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output SVG file (default: <output_dir>/<prefix>LabelProof.svg from the config).",
    )
    parser.add_argument(
        "--dxf",
        default=None,
        help="Also write the cut paths to this DXF file.",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to a .labelproof.json configuration file.",
    )
    parser.add_argument(
        "--legends-dir",
        default=None,
        dest="legends_dir",
        help="Folder holding the legend artwork (overrides the config).",
    )
    parser.add_argument(
        "--prefs",
        default=None,
        help="Preferences file (default: ~/LabelProofPrefs.json).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging.",
    )
    parser.add_argument(
        "--log-json",
        default=None,
        dest="log_json",
        help="Also write JSON-lines logs to this file.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-proof",
        description="Generate label proofs: dieline, bleed, safezone, dimensions and legend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--init-config",
        default=None,
        dest="init_config",
        metavar="PATH",
        help="Write a sample configuration file and exit.",
    )
    sub = parser.add_subparsers(dest="mode")

    make = sub.add_parser("make", help="Draw a new dieline of the given size.")
    make.add_argument("--width", "-W", type=float, default=None, help="Label width in inches.")
    make.add_argument("--height", "-H", type=float, default=None, help="Label height in inches.")
    make.add_argument(
        "--shape", "-s",
        default=ShapeType.SQUARED.value,
        help="Dieline shape: " + ", ".join(s.value for s in ShapeType) + ".",
    )
    _add_common_arguments(make)

    upload = sub.add_parser("upload", help="Build a proof around existing dieline artwork.")
    upload.add_argument(
        "file",
        nargs="?",
        default=None,
        help="Dieline artwork (default: newest SVG in the saved upload folder).",
    )
    upload.add_argument(
        "--set-default-dir",
        default=None,
        dest="set_default_dir",
        metavar="DIR",
        help="Remember DIR as the default upload folder.",
    )
    _add_common_arguments(upload)
    return parser


def _upload_file(args: argparse.Namespace) -> Optional[Path]:
    """The file to upload: the argument, else the newest SVG in the default folder."""
    prefs = PreferenceStore(args.prefs)
    if args.set_default_dir:
        prefs.default_upload_dir = Path(args.set_default_dir).expanduser()
    if args.file:
        return Path(args.file)

    folder = prefs.default_upload_dir
    if folder is None:
        return None
    found = most_recent_file(folder, patterns=OPENABLE_PATTERNS)
    if found is not None:
        logger.info("No file given, using newest upload %s", found)
    return found


def _build_request(args: argparse.Namespace) -> ProofRequest:
    common = dict(
        label_type=args.label_type,
        material=args.material,
        white_ink=args.white_ink,
        add_guidelines=args.guidelines,
        swap_orientation=args.swap,
    )
    if args.mode == "upload":
        return ProofRequest.upload(dieline_file=_upload_file(args), **common)
    return ProofRequest.make(width_in=args.width, height_in=args.height, shape=args.shape, **common)


def _output_paths(args: argparse.Namespace, config: ProjectConfig):
    if args.output:
        svg_path = Path(args.output)
    else:
        folder = Path(config.output.output_dir) if config.output.output_dir else Path.cwd()
        svg_path = folder / f"{config.output.prefix}{DEFAULT_OUTPUT_NAME}.svg"

    dxf_path = None
    if args.dxf:
        dxf_path = Path(args.dxf)
    elif "dxf" in [f.lower() for f in config.output.formats]:
        dxf_path = svg_path.with_suffix('.dxf')
    return svg_path, dxf_path


def run(args: argparse.Namespace) -> ProofResult:
    """Build and save the proof described by parsed arguments.

    Raises:
        LabelProofError: the proof could not be built.
    """
    dieline_hint = args.file if args.mode == "upload" else None
    config = load_config(dieline_path=dieline_hint, explicit_config=args.config)
    if args.legends_dir:
        config.paths.legends_dir = args.legends_dir

    request = _build_request(args)
    host = SvgDrawingHost()
    result = ProofWorkflow(host, config).run(request)

    svg_path, dxf_path = _output_paths(args, config)
    svg_path.parent.mkdir(parents=True, exist_ok=True)
    host.save(svg_path)
    if dxf_path is not None:
        dxf_path.parent.mkdir(parents=True, exist_ok=True)
        export_dxf(host, dxf_path)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        setup_logging(logging.INFO)
        create_sample_config(args.init_config)
        return 0
    if args.mode is None:
        parser.print_usage(sys.stderr)
        return 2

    setup_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        json_file=args.log_json,
    )

    try:
        result = run(args)
    except LabelProofError as exc:
        logger.critical("Proof failed: %s", exc)
        return 1
    except OSError as exc:
        logger.critical("Could not write proof: %s", exc)
        return 1

    print(result.summary())
    return 0 if result.ok else 1
