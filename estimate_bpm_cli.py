#!/usr/bin/env python3
import os
import sys
import time
import argparse
import traceback
import logging

from energy_bpm.audio.bpm_detection import detect_bpm_from_file
from energy_bpm.audio.errors import InsufficientSamplesError, InvalidInputError
from energy_bpm.utils.logging_config import setup_logging

logger = logging.getLogger('energy_bpm.cli')


def build_parser():
    parser = argparse.ArgumentParser(description='Estimate the BPM of a mono sample file.')
    parser.add_argument('input', help='Sample file: text (one value per line) or audio')
    parser.add_argument('--sample-rate', type=int, help='Samples per analysis window (default 44100)')
    parser.add_argument('--block-size', type=int, help='Samples per energy block (default 1024)')
    parser.add_argument('--block-count', type=int, help='Blocks per window (default 43)')
    parser.add_argument('--run-length', type=int, help='Above-threshold blocks per beat (default 4)')
    parser.add_argument('--window-stride', type=int,
                        help='Samples the block cursor advances per window (default: sample rate)')
    parser.add_argument('--windows', action='store_true', help='Print statistics for every window')
    parser.add_argument('--plot', metavar='PATH', help='Save a plot of the window statistics')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    return parser


def main(argv=None):
    """
    Main entry point for the estimate-bpm command.
    Parses command line arguments, runs the detector and prints the result.

    Returns:
        int: Process exit status
    """
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.debug)

    # Validate input file
    if not os.path.exists(args.input):
        raise FileNotFoundError(f"Sample file not found: {args.input}")

    start = time.perf_counter()
    print("Starting")

    try:
        result = detect_bpm_from_file(
            args.input,
            sample_rate=args.sample_rate,
            block_size=args.block_size,
            block_count=args.block_count,
            run_length=args.run_length,
            window_stride=args.window_stride,
        )
    except (InsufficientSamplesError, InvalidInputError) as error:
        logger.error(f"Cannot estimate BPM: {error}")
        return 2

    if args.windows:
        for window in result.windows:
            print(
                f"window {window.index}: samples {window.start}-{window.end} "
                f"mean={window.mean:.6g} variance={window.variance:.6g} "
                f"c={window.sensitivity:.7f} threshold={window.threshold:.6g} beats={window.beats}"
            )

    print(f"BPM = {result.bpm}")

    if args.plot:
        # matplotlib is only imported when a plot is requested
        from energy_bpm.utils.window_visualizer import plot_windows
        path = plot_windows(result, args.plot)
        logger.info(f"Saved window plot to {path}")

    msec = int((time.perf_counter() - start) * 1000)
    print(f"Time taken {msec // 1000} seconds {msec % 1000} milliseconds")
    return 0


def run():
    try:
        sys.exit(main())
    except Exception as error:
        logging.getLogger('energy_bpm').error(f"Fatal error: {error}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    run()
