#!/usr/bin/env python3
"""
Main entry point for room boundary detection from model files.

Usage:
    python main.py <path_to_obj_file_or_directory>
    python main.py sample_models/office.obj
    python main.py sample_models/

Detection thresholds can be tuned with the command line options below.
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from room_boundaries import (
    DetectionSettings,
    detect_rooms_from_file,
)
from room_boundaries.visualizer import visualize_detection


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Detect rooms enclosed by walls and furniture in OBJ files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py sample_models/office.obj
  python main.py sample_models/
  python main.py --up-axis z --unit-scale 0.01 sample_models/revit_export.obj
  python main.py --max-gap 2 --visualize sample_models/office.obj
        """
    )

    parser.add_argument(
        "input_path",
        type=str,
        help="Path to OBJ file or directory containing OBJ files"
    )

    parser.add_argument(
        "--up-axis",
        choices=("y", "z"),
        default="y",
        help="Vertical axis of the model (default: y)"
    )

    parser.add_argument(
        "--unit-scale",
        type=float,
        default=1.0,
        help="Factor converting model units to meters (default: 1.0)"
    )

    parser.add_argument(
        "--mesh-rays",
        action="store_true",
        help="Cast scan rays against triangle meshes instead of bounding boxes"
    )

    parser.add_argument(
        "--max-gap",
        type=float,
        default=1.0,
        help="Largest tolerated wall gap in feet (default: 1.0)"
    )

    parser.add_argument(
        "--min-area",
        type=float,
        default=25.0,
        help="Minimum room area in square feet (default: 25.0)"
    )

    parser.add_argument(
        "--max-area",
        type=float,
        default=10000.0,
        help="Maximum room area in square feet (default: 10000.0)"
    )

    parser.add_argument(
        "--wall-height",
        type=float,
        default=3.0,
        help="Scan height above the floor in feet (default: 3.0)"
    )

    parser.add_argument(
        "--floor-level",
        type=float,
        default=0.0,
        help="World Y of the floor in meters (default: 0.0)"
    )

    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Open interactive 3D viewer to visualize results"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print detected rooms as JSON"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output"
    )

    return parser.parse_args()


def process_model_file(
    model_path: Path,
    settings: DetectionSettings,
    up_axis: str = 'y',
    unit_scale: float = 1.0,
    use_mesh_rays: bool = False,
    visualize: bool = False,
    as_json: bool = False,
    verbose: bool = True
) -> bool:
    """Process a single model file. Returns False if it could not be processed."""
    print(f"\nProcessing: {model_path}")
    print("-" * 60)

    try:
        rooms, detector = detect_rooms_from_file(
            str(model_path),
            settings,
            up_axis=up_axis,
            unit_scale=unit_scale,
            use_mesh_rays=use_mesh_rays,
            verbose=verbose
        )
    except (OSError, ValueError) as e:
        print(f"Error processing {model_path}: {e}")
        return False

    if as_json:
        print(json.dumps([room.to_dict() for room in rooms], indent=2))
    elif not rooms:
        print("No rooms detected.")
    else:
        print(f"\nDetected {len(rooms)} room(s)")
        for room in rooms:
            print(f"  {room.id}: {room.suggested_name}, {room.area:.1f} sq ft, "
                  f"confidence {room.confidence:.2f}, "
                  f"{len(room.boundary_objects)} boundary object(s)")

    if visualize:
        candidates = detector.scene.list_candidate_objects()
        visualize_detection(candidates, rooms, settings)

    detector.close()
    return True


def main():
    """Main entry point."""
    args = parse_args()

    verbose = not args.quiet
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    input_path = Path(args.input_path)

    if not input_path.exists():
        print(f"Error: Path '{input_path}' does not exist.")
        sys.exit(1)

    try:
        settings = DetectionSettings(
            floor_level=args.floor_level,
            wall_analysis_height=args.wall_height,
            max_gap_size=args.max_gap,
            min_room_area=args.min_area,
            max_room_area=args.max_area,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    # Collect model files
    model_files = []
    if input_path.is_file():
        if input_path.suffix.lower() == '.obj':
            model_files.append(input_path)
        else:
            print(f"Error: '{input_path}' is not an OBJ file.")
            sys.exit(1)
    elif input_path.is_dir():
        model_files = sorted(input_path.glob("*.obj"))
        if not model_files:
            print(f"Warning: No OBJ files found in '{input_path}'.")
            sys.exit(1)

    failures = 0
    for model_file in model_files:
        ok = process_model_file(
            model_file,
            settings,
            up_axis=args.up_axis,
            unit_scale=args.unit_scale,
            use_mesh_rays=args.mesh_rays,
            visualize=args.visualize,
            as_json=args.json,
            verbose=verbose
        )
        if not ok:
            failures += 1

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
