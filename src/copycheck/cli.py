import argparse
import logging
import sys
import textwrap

from . import Checker, Processor, Settings, UnreadableFileError
from .loader import read_path_list
from .utils.profiling import profile_main

logger = logging.getLogger(__name__)


def _read_source_paths(src_file: str | None) -> list[str]:
    """Read the source list from src_file, or from standard input if it is absent or unopenable."""
    if src_file is not None:
        try:
            with open(src_file, 'rb') as f:
                return read_path_list(f)
        except OSError as e:
            logger.info(f"Cannot open source list {src_file!r} ({e}), reading paths from standard input")

    # A replaced stdin may be a text stream without an underlying buffer.
    return read_path_list(getattr(sys.stdin, 'buffer', sys.stdin))


@profile_main
def copycheck_main():
    parser = argparse.ArgumentParser(
        prog='copycheck',
        description='Find files with identical content between two lists of files, regardless of their names or '
                    'locations. Every pair that is compared is reported on standard error; every pair with identical '
                    'content is reported on standard output.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              copycheck --src-file submissions.txt previous_years.txt
              find submissions -type f | copycheck previous_years.txt
              copycheck --quiet --src-file submissions.txt previous_years.txt | sort

            Lists contain one path per line. Paths that cannot be opened are skipped.
            ''').strip()
    )
    parser.add_argument(
        'dest_file',
        metavar='DEST_FILE',
        help='File listing the paths of the files that the source files are compared to')
    parser.add_argument(
        '--src-file', '--src_file',
        dest='src_file',
        metavar='PATH',
        help='File listing the paths of the files to check. If it is not given or cannot be opened, the paths are '
             'read from standard input.')
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Do not report each comparison on standard error')
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a TOML settings file. If not provided, uses the COPYCHECK_CONFIG environment variable.')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from the settings or no '
             'logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO when --log-file is provided.')

    args = parser.parse_args()

    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, args.log_level or 'INFO'),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    try:
        settings = Settings(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        with open(args.dest_file, 'rb') as f:
            destination_paths = read_path_list(f)
    except OSError as e:
        print(f"Error: cannot read destination list {args.dest_file}: {e}", file=sys.stderr)
        sys.exit(1)

    source_paths = _read_source_paths(args.src_file)

    with Processor() as processor:
        try:
            checker = Checker(processor, settings)
            if not args.log_file:
                checker.configure_logging_from_settings()
        except ValueError as e:
            print(f"Error: invalid settings: {e}", file=sys.stderr)
            sys.exit(1)

        checker.output.quiet = args.quiet

        try:
            checker.check(source_paths, destination_paths)
        except UnreadableFileError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == '__main__':
    copycheck_main()
