#!/usr/bin/env python3
"""Render the four-sphere scene to a PPM image.

This script builds the standard scene (ivory, glass, red rubber, and mirror
spheres over a checkerboard, lit by three point lights), renders it once,
and writes a binary PPM file.

Usage:
    python -m examples.render_four_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --output OUTPUT     Output file path (default: out.ppm)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --verbose           Log per-depth ray counts

Example:
    python -m examples.render_four_spheres --width 512 --height 384
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

from sdf_tracer.core.constants import IMAGE_HEIGHT, IMAGE_WIDTH

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the four-sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=IMAGE_WIDTH,
        help=f"Image width in pixels (default: {IMAGE_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=IMAGE_HEIGHT,
        help=f"Image height in pixels (default: {IMAGE_HEIGHT})",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path (default: out.ppm)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-depth ray counts",
    )
    return parser.parse_args()


def render_four_spheres(
    width: int = IMAGE_WIDTH,
    height: int = IMAGE_HEIGHT,
    output_path: str = "out.ppm",
) -> Path:
    """Render the four-sphere scene and save it as PPM.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from sdf_tracer.core.renderer import Renderer
    from sdf_tracer.scene.four_spheres import create_four_spheres_scene

    logger.info("Creating four-sphere scene (%dx%d)", width, height)
    scene, camera = create_four_spheres_scene()
    logger.info(
        "Scene has %d primitives and %d lights",
        scene.get_primitive_count(),
        scene.get_light_count(),
    )

    renderer = Renderer(width, height, camera)
    renderer.render()

    output_file = Path(output_path)
    renderer.save_ppm(output_file)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        output_file = render_four_spheres(
            width=args.width,
            height=args.height,
            output_path=args.output,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Saved to: {output_file.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
