"""Command line interface for pixedit."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from pixedit.analyzer import analyze, detect_edges
from pixedit.edit_service import EditService
from pixedit.raster_ingest import load_buffer, save_buffer
from pixedit.types import PixEditError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog='pixedit',
        description='Analyze and edit images with natural-language prompts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pixedit photo.jpg --analyze
  pixedit photo.jpg -p "make it warm and vibrant" -o edited.png
  pixedit photo.jpg -p "black and white" --mask mask.png
  pixedit photo.jpg -p "brighter" --mode additive
        """,
    )

    parser.add_argument(
        'input',
        type=str,
        help='Input image path'
    )

    parser.add_argument(
        '-p', '--prompt',
        type=str,
        default=None,
        help='Edit prompt, e.g. "vintage look"'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output image path (default: input_edited.png)'
    )

    parser.add_argument(
        '--ai-text',
        type=str,
        default=None,
        help='Analysis text from an external AI service to enrich the prompt'
    )

    parser.add_argument(
        '--mask',
        type=str,
        default=None,
        help='Mask image; only opaque mask pixels are edited'
    )

    parser.add_argument(
        '--mode',
        choices=['percent', 'additive'],
        default='percent',
        help='percent: settings from prompt keywords (default); '
             'additive: brightness shifted relative to the measured mean'
    )

    parser.add_argument(
        '--analyze',
        action='store_true',
        help='Print brightness, contrast and dominant colors'
    )

    parser.add_argument(
        '--edges',
        type=str,
        default=None,
        help='Write the edge map of the input to this path'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser


def print_summary(buffer) -> None:
    summary = analyze(buffer)
    print(f"  Size: {summary.width}x{summary.height} ({summary.total_pixels:,} pixels)")
    print(f"  Brightness: {summary.brightness:.2f}")
    print(f"  Contrast: {summary.contrast:.2f}")
    print("  Dominant colors:")
    for color in summary.dominant_colors:
        print(f"    rgb{color.as_tuple()} x {color.count:,}")


def main(args: Optional[list] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    input_path = Path(parsed.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    if not (parsed.prompt or parsed.analyze or parsed.edges):
        print("Error: Nothing to do, give --prompt, --analyze or --edges", file=sys.stderr)
        return 1

    try:
        print(f"Processing: {input_path}")
        buffer = load_buffer(input_path)

        if parsed.analyze:
            print_summary(buffer)

        if parsed.edges:
            edges_path = save_buffer(detect_edges(buffer), parsed.edges)
            print(f"  Edge map saved: {edges_path}")

        if parsed.prompt:
            mask = load_buffer(parsed.mask) if parsed.mask else None

            if parsed.ai_text is not None:
                ai_text = parsed.ai_text
                service = EditService(advisor=lambda prompt, summary: ai_text)
            else:
                service = EditService()

            if parsed.mode == 'additive':
                result = service.edit_pixels(buffer, parsed.prompt, mask=mask)
            else:
                result = service.edit(buffer, parsed.prompt, mask=mask)

            print(f"  Mode: {parsed.mode}{' (fallback)' if result.fallback else ''}")
            applied = result.applied_settings()
            if applied:
                print("  Applied settings:")
                for key, value in applied.items():
                    print(f"    {key}: {value}")
            else:
                print("  No matching edits for prompt; image unchanged")

            if parsed.output:
                output_path = Path(parsed.output)
            else:
                output_path = input_path.with_name(f"{input_path.stem}_edited.png")
            save_buffer(result.buffer, output_path)
            print(f"  Output saved: {output_path}")

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (PixEditError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
