"""Main CLI entry point for rci."""

import sys

import click

from rci import __version__
from rci.config import load_settings
from rci.probe import run_probe
from rci.utils.error import handle_probe_error
from rci.utils.log import configure_logging
from rci.utils.output import emit_message


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option("-a", "--address", "url", default=None, help="Target URL (env: RCI_URL).")
@click.option("-m", "--method", default=None, help="HTTP method [default: GET].")
@click.option(
    "-b",
    "--body",
    default=None,
    help=(
        "Request body for POST and PUT; if the value starts with @ the rest "
        "is the name of a file to read the body from, @- reads standard input."
    ),
)
@click.option(
    "-r",
    "--response-map",
    default=None,
    help=(
        "Response mapping `X1;X2;...` where each Xi is CODE=MAPPING. CODE is "
        "an HTTP status code or 2XX, 4XX, 5XX. MAPPING is an exit code EC or "
        "EC:MESSAGE_TEMPLATE, the template holding {}-enclosed jsonpath "
        "expressions evaluated against the JSON response."
    ),
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose (debug) output on stderr.")
@handle_probe_error
def main(url, method, body, response_map, verbose):
    """Issue one HTTP request and turn the response into an exit code.

    2XX responses exit 0 silently unless mapped; other responses exit 1
    with the status line unless mapped.

    Examples:
        rci -a https://example.com/health
        rci -a https://api/jobs/42 -r '404=3;5XX=2:{.error.message}'
        rci -a https://api/jobs -m POST -b @job.json -r '201=0:{.id}'
    """
    settings = load_settings(
        url=url,
        method=method,
        body=body,
        response_map=response_map,
        verbose=verbose or None,
    )
    configure_logging(settings.verbose)

    outcome = run_probe(settings)
    if outcome.message is not None:
        emit_message(outcome.message)
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
