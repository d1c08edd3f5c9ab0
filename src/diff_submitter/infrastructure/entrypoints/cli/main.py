import asyncio
import json
import sys
from typing import TextIO

from pydantic import ValidationError

from diff_submitter.core.application.exceptions import UsageError, WorkflowExecutionError
from diff_submitter.core.application.ports.common.exceptions import RepositoryError
from diff_submitter.core.domain.submission import OutcomeStatus, RunOutcome, SubmissionRequest
from diff_submitter.infrastructure.configuration.main_settings import Settings
from diff_submitter.infrastructure.entrypoints.cli.argument_parser import (
    build_parser,
    request_from_args,
)
from diff_submitter.infrastructure.observability.logger_factory_service import configure_logging
from diff_submitter.infrastructure.resolution.container import submission_workflow

EXIT_FAILURE = 1
EXIT_USAGE = 2


async def run_submission(request: SubmissionRequest, settings: Settings) -> RunOutcome:
    async with submission_workflow(request, settings) as workflow:
        return await workflow.execute(request)


def render_outcome(outcome: RunOutcome, json_output: bool, out: TextIO) -> None:
    if outcome.is_cancelled:
        out.write(f"Cancelled: {outcome.reason}\n")
        return
    if json_output:
        out.write(
            json.dumps(
                {
                    "diffURI": outcome.diff_uri,
                    "diffID": outcome.diff_id,
                    "revisionURI": outcome.revision_uri,
                }
            )
            + "\n"
        )
        return

    if outcome.status == OutcomeStatus.CREATED_DIFF:
        out.write(f"Created a new diff:\n        Diff URI: {outcome.diff_uri}\n")
    elif outcome.status == OutcomeStatus.UPDATED_REVIEW:
        out.write(f"Updated an existing revision:\n        Revision URI: {outcome.revision_uri}\n")
    else:
        out.write(f"Created a new revision:\n        Revision URI: {outcome.revision_uri}\n")
    out.write("\nIncluded changes:\n")
    for summary in outcome.change_summaries:
        out.write(f"    {summary}\n")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        request = request_from_args(args)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        sys.stderr.write(f"Usage Exception: {exc.message}\n")
        return EXIT_USAGE

    try:
        settings = Settings()
        settings.conduit.validate_credentials()
    except (ValidationError, ValueError) as exc:
        sys.stderr.write(f"Configuration error: {exc}\n")
        return EXIT_FAILURE

    configure_logging(settings.log_level)
    try:
        outcome = asyncio.run(run_submission(request, settings))
    except UsageError as exc:
        sys.stderr.write(f"Usage Exception: {exc.message}\n")
        return EXIT_FAILURE
    except WorkflowExecutionError as exc:
        sys.stderr.write(f"Error: {exc.message}\n")
        return EXIT_FAILURE
    except RepositoryError as exc:
        sys.stderr.write(f"Repository error: {exc}\n")
        return EXIT_FAILURE

    render_outcome(outcome, request.json_output, sys.stderr if outcome.is_cancelled else sys.stdout)
    return outcome.exit_code


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
