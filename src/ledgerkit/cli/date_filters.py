"""CLI helpers for date range resolution."""

from datetime import datetime, time

import click

from ledgerkit.utils.date_parser import get_date_range

PERIOD_FLAGS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def period_options(command):
    """Attach the --this-month ... --last-week flags to a command."""
    for period in reversed(PERIOD_FLAGS):
        command = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Limit to {period.replace('-', ' ')}",
        )(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[datetime | str | None, datetime | str | None]:
    """Resolve CLI date range from period flags or explicit dates.

    Explicit dates are passed through untouched: the transaction query
    ignores bounds it cannot parse instead of failing.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --this-week, --last-month, --last-year, --last-week) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        start, end = get_date_range(selected[0])
        # Periods cover whole days, including the last one
        return datetime.combine(start, time.min), datetime.combine(end, time.max)
    return start_date, end_date
