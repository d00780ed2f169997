"""Report generation for reconciliation results (CSV, HTML, summary)."""

import csv
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from signup_recon import (
    REASON_DOB_MISSING,
    REASON_DOB_NOT_FOUND,
    REASON_NAME_MISMATCH,
    MatchResult,
)
from signup_recon.matching import partition_results

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / 'templates'

REASON_LABELS = {
    REASON_DOB_MISSING: 'Missing DOB in roster',
    REASON_NAME_MISMATCH: 'Name mismatch (DOB exists in external list)',
    REASON_DOB_NOT_FOUND: 'DOB not found in external list',
}

CSV_COLUMNS = [
    'Roster_ID',
    'Team',
    'Player',
    'Birthday',
    'Match',
    'Reason',
    'Suggestions',
]


def _result_to_row(result: MatchResult) -> dict:
    """Convert a MatchResult to a flat dict for CSV/HTML output."""
    record = result.roster_record
    return {
        'Roster_ID': record.roster_id,
        'Team': record.team_name,
        'Player': record.player_name,
        'Birthday': record.birthday or '',
        'Match': 'YES' if result.is_match else 'NO',
        'Reason': REASON_LABELS.get(result.reason, ''),
        'Suggestions': ', '.join(result.suggestions),
        # Raw reason code for row styling in HTML
        '_reason': result.reason or '',
    }


def write_csv_report(
    results: list[MatchResult],
    output_path: Path,
    missing_only: bool = False,
) -> None:
    """Write reconciliation results as a CSV report.

    Uses UTF-8 with BOM (utf-8-sig) and semicolon delimiter so the file
    opens cleanly in spreadsheet tools.

    Args:
        results: List of match results.
        output_path: Path for the output CSV file.
        missing_only: Only write roster players missing from the list.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if missing_only:
        results, _matched = partition_results(results)

    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.DictWriter(
            f, fieldnames=CSV_COLUMNS, delimiter=';', extrasaction='ignore',
        )
        writer.writeheader()
        for result in results:
            writer.writerow(_result_to_row(result))

    log.info("CSV report written: %s (%d rows)", output_path, len(results))


def write_html_report(
    results: list[MatchResult],
    output_path: Path,
    title: str = '',
    dob_mode: str = '',
) -> None:
    """Write reconciliation results as an HTML report using Jinja2.

    Args:
        results: List of match results.
        output_path: Path for the output HTML file.
        title: Name of the signup list (for the report title).
        dob_mode: DOB mode used to read the signup list.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template('report.html')

    missing, matched = partition_results(results)
    html = template.render(
        title=title,
        dob_mode=dob_mode,
        missing=[_result_to_row(r) for r in missing],
        matched=[_result_to_row(r) for r in matched],
        stats=compute_stats(results),
        columns=CSV_COLUMNS,
    )

    output_path.write_text(html, encoding='utf-8')
    log.info("HTML report written: %s", output_path)


def compute_stats(results: list[MatchResult]) -> dict:
    """Compute summary statistics from match results."""
    reasons = [r.reason for r in results if not r.is_match]
    return {
        'total': len(results),
        'matched': sum(1 for r in results if r.is_match),
        'missing': len(reasons),
        'dob_missing': reasons.count(REASON_DOB_MISSING),
        'name_mismatch': reasons.count(REASON_NAME_MISMATCH),
        'dob_not_found': reasons.count(REASON_DOB_NOT_FOUND),
        'with_suggestions': sum(1 for r in results if r.suggestions),
    }


def print_summary(results: list[MatchResult], title: str = '') -> None:
    """Print a summary of reconciliation results to stdout.

    Args:
        results: List of match results.
        title: Name of the signup list.
    """
    stats = compute_stats(results)

    print(f"\n=== Signup reconciliation: {title} ===")
    print(f"Roster players:            {stats['total']:>5}")
    print(f"Found in signup list:      {stats['matched']:>5}")
    print(f"Missing:                   {stats['missing']:>5}")
    print("---")
    print(f"  - No DOB in roster:      {stats['dob_missing']:>5}")
    print(f"  - Name mismatch:         {stats['name_mismatch']:>5}")
    print(f"  - DOB not in list:       {stats['dob_not_found']:>5}")
    print(f"With suggestions:          {stats['with_suggestions']:>5}")
    print()
