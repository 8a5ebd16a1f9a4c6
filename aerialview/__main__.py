# -*- coding: utf-8 -*-
"""
aerialview CLI - Render a synthetic aerial view headlessly.

Usage:
    python -m aerialview scene.tif --params camera.yaml --output-dir out/
    python -m aerialview scene.tif --width 1920 --height 1080 --seed 7

Author
------
Steven Siebert

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

import argparse
import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="aerialview",
        description="aerialview — Render what an aerial camera would see.",
    )
    parser.add_argument(
        "raster",
        help="Path or http(s) URL of the overhead raster (e.g. GeoTIFF).",
    )
    parser.add_argument(
        "--params", "-p",
        type=Path,
        default=None,
        help="YAML or JSON file with camera and enhancement parameters.",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=Path("."),
        help="Directory for the exported PNG (default: current directory).",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Export width in pixels (default: intrinsic output width).",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Export height in pixels (default: intrinsic output height).",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Configuration JSON (default: ~/.aerialview/config.json).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the roughness noise.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from aerialview.core.compositor import SceneCompositor
    from aerialview.core.config import load_config
    from aerialview.core.exceptions import AerialViewError
    from aerialview.core.parameters import Parameters
    from aerialview.core.raster import read_raster

    if args.params is not None and not args.params.exists():
        print(f"Error: parameter file not found: {args.params}", file=sys.stderr)
        return 1

    config = load_config(args.config)

    try:
        if args.params is not None:
            parameters = Parameters.from_file(args.params, alt_min=config.alt_min)
        else:
            parameters = Parameters()
        if args.seed is not None:
            parameters = parameters.replace(seed=args.seed)

        compositor = SceneCompositor(parameters, config=config)
        compositor.set_raster(read_raster(args.raster, timeout=config.fetch_timeout))
        path = compositor.export(args.output_dir, args.width, args.height)
    except AerialViewError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Output written to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
