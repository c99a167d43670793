#!/usr/bin/env python3
import os
import sys
import argparse
import traceback
import logging

from energy_bpm.audio.audio_utils import load_audio, write_sample_text
from energy_bpm.config.detector_config import SAMPLE_RATE
from energy_bpm.utils.logging_config import setup_logging


def main(argv=None):
    """
    Entry point for the export-samples command.
    Decodes an audio file to mono and writes its samples one per line.
    """
    parser = argparse.ArgumentParser(description='Write the samples of an audio file to a text file.')
    parser.add_argument('input', help='Input audio path')
    parser.add_argument('output', help='Output text path')
    parser.add_argument('--sample-rate', type=int, default=SAMPLE_RATE, help='Target sample rate')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    args = parser.parse_args(argv)

    logger = setup_logging(args.debug)

    if not os.path.exists(args.input):
        raise FileNotFoundError(f"Audio file not found: {args.input}")

    y, sr = load_audio(args.input, sr=args.sample_rate)
    count = write_sample_text(y, args.output)
    logger.info(f"Exported {count} samples at {sr} Hz")
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
