import argparse
import sys

import cli.transcribe


def create_parser():
    parser = argparse.ArgumentParser(
        prog='pagescribe',
        description='pagescribe - Transcribe a directory of page images with a vision model',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Transcribe the current directory into ./output.txt
  pagescribe

  # Journal scans with a known first date
  pagescribe ~/Scans/journal --start-date "January 1, 1942"

  # Tune throughput and image size
  pagescribe ~/Scans/journal --concurrency 4 --max-dimension 2000 -o journal.txt

Environment:
  OPENAI_API_KEY is required (a .env file in the working directory is read).
"""
    )

    cli.transcribe.setup_parser(parser)
    return parser


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    sys.exit(args.func(args))
