"""Application entry point: resolve run configuration and drive the spillover pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

import pandas as pd
import pytz

from sprint_spillover.analytics.spillover import distinct_epic_keys, filter_spillover
from sprint_spillover.core.config import (
    DEFAULT_OUTPUT_FILE,
    DEFAULT_RECENCY_DAYS,
    NO_MATCHES_MESSAGE,
    TIMEZONE,
    RunConfig,
)
from sprint_spillover.core.credentials import load_credential
from sprint_spillover.core.errors import (
    ConfigError,
    CredentialNotFound,
    OutputWriteFailed,
    SearchRequestFailed,
)
from sprint_spillover.core.jira_client import JiraAPI
from sprint_spillover.core.models import EpicTitle, SearchFilter, SpilloverCandidate, coerce_recency_days
from sprint_spillover.core.service import IssueService, ProgressCallback
from sprint_spillover.core.settings import load_settings
from sprint_spillover.report.formatter import (
    build_rows,
    normalize_output_name,
    render_report,
    rows_to_frame,
    write_report,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_CREDENTIAL = 1
EXIT_FAILED = 2
EXIT_WRITE_FAILED = 3

Prompt = Callable[[str], str]


@dataclass(slots=True)
class PipelineResult:
    candidates: tuple[SpilloverCandidate, ...]
    titles: dict[str, EpicTitle]
    frame: pd.DataFrame
    output_path: str
    write_error: OutputWriteFailed | None = None


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report Jira issues that spilled over across more than one sprint."
    )
    parser.add_argument("-p", "--project", help="Jira project key to search")
    parser.add_argument(
        "-d",
        "--days",
        help=f"Recency window in days (default {DEFAULT_RECENCY_DAYS})",
    )
    parser.add_argument("-o", "--output", help=f"Output file name (default {DEFAULT_OUTPUT_FILE})")
    parser.add_argument("-c", "--config", help="Path to a YAML settings file")
    parser.add_argument("--credentials", help="Path to the one-line credential file")
    parser.add_argument(
        "--no-input",
        action="store_true",
        help="Never prompt; use defaults for anything not given on the command line",
    )
    parser.add_argument(
        "--strict-write",
        action="store_true",
        help="Exit non-zero when the report file cannot be written",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_run_config(args: argparse.Namespace, prompt: Prompt | None = input) -> RunConfig:
    """Populate RunConfig from arguments, prompting only for values not supplied."""
    settings = load_settings(args.config)
    if args.credentials:
        settings.credentials_path = args.credentials
    ask = None if args.no_input else prompt

    project = (args.project or "").strip()
    if not project and ask is not None:
        project = ask("Enter project key: ").strip()
    if not project:
        raise ConfigError("A project key is required")

    days_raw = args.days
    if days_raw is None and ask is not None:
        days_raw = ask(f"Enter number of days to look back [{DEFAULT_RECENCY_DAYS}]: ")
    recency_days = coerce_recency_days(days_raw)

    output = args.output
    if output is None and ask is not None:
        output = ask(f"Enter output file name [{DEFAULT_OUTPUT_FILE}]: ")

    return RunConfig(
        project=project,
        recency_days=recency_days,
        output_path=normalize_output_name(output),
        settings=settings,
    )


def run_pipeline(
    service: IssueService,
    run_config: RunConfig,
    *,
    now: datetime | None = None,
    echo: Callable[[str], None] = print,
    progress: ProgressCallback | None = None,
) -> PipelineResult:
    """Fetch, filter, enrich, print, and write the spillover report.

    ``SearchRequestFailed`` propagates before anything is printed or written.
    A write failure is captured on the result instead of raised.
    """
    now = now or datetime.now(pytz.timezone(TIMEZONE))
    search_filter = SearchFilter(
        project_key=run_config.project,
        excluded_issue_types=run_config.settings.excluded_issue_types,
        recency_days=run_config.recency_days,
    )
    issues = service.fetch_all(search_filter, page_size=run_config.settings.page_size, progress=progress)
    candidates = filter_spillover(issues, run_config.recency_days, now=now)
    titles = service.resolve_epic_titles(distinct_epic_keys(candidates), progress=progress)

    frame = rows_to_frame(build_rows(candidates, titles))
    if candidates:
        echo(render_report(frame).rstrip("\n"))
    else:
        echo(NO_MATCHES_MESSAGE)

    result = PipelineResult(candidates, titles, frame, run_config.output_path)
    try:
        write_report(frame, run_config.output_path)
    except OutputWriteFailed as exc:
        result.write_error = exc
    return result


def _print_progress(message: str, done: int | None, total: int | None) -> None:
    if done is not None and total is not None:
        print(f"{message} [{done}/{total}]")
    else:
        print(message)


def main(
    argv: Sequence[str] | None = None,
    *,
    prompt: Prompt | None = input,
    api_factory: Callable[..., JiraAPI] = JiraAPI,
) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run_config = build_run_config(args, prompt)
        credential = load_credential(run_config.settings.credentials_path)
    except CredentialNotFound as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_NO_CREDENTIAL
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED

    logger.debug(
        "Running for project=%s days=%s output=%s server=%s",
        run_config.project,
        run_config.recency_days,
        run_config.output_path,
        run_config.settings.server,
    )
    service = IssueService(api_factory(run_config.settings.server, credential), run_config.settings)
    try:
        result = run_pipeline(service, run_config, progress=_print_progress)
    except SearchRequestFailed as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED

    if result.write_error is not None:
        print(f"Warning: {result.write_error}", file=sys.stderr)
        return EXIT_WRITE_FAILED if args.strict_write else EXIT_OK
    print(f"Report written to {result.output_path} ({len(result.candidates)} issues)")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
