"""signup-reconciler – find event roster players missing from a signup list."""

import argparse
import logging
import sys
from pathlib import Path

from signup_recon import DOB_MODES, SignupReconError
from signup_recon.matching import partition_results, prepare_signups, reconcile
from signup_recon.parser import serialize_table
from signup_recon.reader import DEFAULT_TIMEOUT, load_source, read_roster
from signup_recon.reporter import print_summary, write_csv_report, write_html_report


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Compare an event roster against an external signup CSV '
                    'by name and date of birth.',
        prog='reconcile.py',
    )
    parser.add_argument(
        '--roster', required=True, type=Path,
        help='Path to the roster export (team, name, birthday columns)',
    )
    parser.add_argument(
        '--signups', required=True,
        help='Path or http(s) URL of the signup CSV',
    )
    parser.add_argument(
        '--name-column',
        help='Signup column holding the first name (default: auto-detect)',
    )
    parser.add_argument(
        '--surname-column',
        help='Signup column holding the surname (default: auto-detect)',
    )
    parser.add_argument(
        '--dob-column',
        help='Signup column holding the date of birth (default: auto-detect)',
    )
    parser.add_argument(
        '--dob-mode', choices=DOB_MODES, default='auto',
        help='How to read DD/MM vs MM/DD dates (default: auto)',
    )
    parser.add_argument(
        '--output', type=Path,
        help='Path for the CSV report',
    )
    parser.add_argument(
        '--html', action='store_true',
        help='Also write an HTML report next to the CSV report',
    )
    parser.add_argument(
        '--summary', action='store_true',
        help='Print a summary to stdout',
    )
    parser.add_argument(
        '--missing-only', action='store_true',
        help='Only list roster players missing from the signup list in the CSV report',
    )
    parser.add_argument(
        '--timeout', type=float, default=DEFAULT_TIMEOUT,
        help=f'HTTP timeout in seconds (default: {DEFAULT_TIMEOUT:g})',
    )
    parser.add_argument(
        '--dump-table', type=Path,
        help='Write the parsed signup table as normalized CSV',
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Enable debug logging',
    )
    return parser


def run(args: argparse.Namespace) -> int:
    """Run one reconciliation and write the requested outputs."""
    roster = read_roster(args.roster)

    try:
        signups = prepare_signups(
            load_source(args.signups, timeout=args.timeout),
            name=args.name_column,
            surname=args.surname_column,
            dob=args.dob_column,
            dob_mode=args.dob_mode,
        )
    except SignupReconError as exc:
        logging.error("%s", exc)
        return 1

    if args.dump_table:
        args.dump_table.parent.mkdir(parents=True, exist_ok=True)
        args.dump_table.write_text(serialize_table(signups.table), encoding='utf-8')
        logging.info("Parsed table written: %s", args.dump_table)

    results = reconcile(roster, signups.records)
    title = Path(str(args.signups)).name

    if args.output:
        write_csv_report(results, args.output, missing_only=args.missing_only)
        if args.html:
            write_html_report(
                results, args.output.with_suffix('.html'), title,
                signups.resolved_dob_mode,
            )

    if args.summary or not args.output:
        print_summary(results, title)

    missing, _matched = partition_results(results)
    for result in missing:
        logging.debug(
            "Missing: %s / %s (%s) %s",
            result.roster_record.team_name, result.roster_record.player_name,
            result.reason, ', '.join(result.suggestions),
        )
    return 0


def main() -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    if args.html and not args.output:
        parser.error('--html requires --output.')

    sys.exit(run(args))


if __name__ == '__main__':
    main()
