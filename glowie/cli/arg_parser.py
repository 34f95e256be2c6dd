"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
glowie command-line interface. Options left unset fall back to the user
configuration file and environment.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..utils.selection import KeepPolicy


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='glowie',
        description='Index image folders and report duplicate sets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/Pictures
      Update the index for ~/Pictures and report exact duplicates

  %(prog)s ~/Pictures --mode both --distance 5
      Also report near duplicates whose hashes differ by at most 5%% of bits

  %(prog)s --skip-update --mode near --keep-policy created-first
      Cluster the existing index without touching the file system

  %(prog)s ~/Pictures --include-ignored
      Also report byte-identical non-image files
        """
    )

    parser.add_argument(
        'directories',
        type=Path,
        nargs='*',
        help='Directories whose files should be (re)indexed before clustering'
    )

    parser.add_argument(
        '--db',
        dest='db_path',
        default=None,
        help='Index database file. Default: from config (~/.glowie/glowie.db)'
    )

    # Indexing options
    parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not index subdirectories'
    )

    parser.add_argument(
        '--images-only',
        action='store_true',
        help='Only index files with image extensions'
    )

    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help='Number of concurrent update workers. Default: from config'
    )

    parser.add_argument(
        '--skip-update',
        action='store_true',
        help='Do not update the index; cluster what is already stored'
    )

    # Clustering options
    parser.add_argument(
        '-m', '--mode',
        choices=['exact', 'near', 'both', 'none'],
        default='exact',
        help='Which duplicate sets to report. Default: exact'
    )

    parser.add_argument(
        '--include-ignored',
        action='store_true',
        default=None,
        help='Include non-image files in exact duplicate sets'
    )

    parser.add_argument(
        '-d', '--distance',
        type=float,
        default=None,
        help='Near-duplicate threshold in percent of hash bits (0-100). Default: from config'
    )

    parser.add_argument(
        '-k', '--keep-policy',
        choices=[policy.value for policy in KeepPolicy],
        default=None,
        help='Which copy in each set to keep. Default: from config (path-shallowest)'
    )

    parser.add_argument(
        '--reversed',
        action='store_true',
        default=None,
        help='Reverse the keep policy (e.g. keep the deepest path)'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['/photos', '--mode', 'near'])
        >>> args.mode
        'near'
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
