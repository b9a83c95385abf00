"""Server commands: bootstrap a server and report on it.

Every command bootstraps a fresh server from the ``FHIRSTARTER_*`` settings.
``--discovery module:attr`` overrides ``FHIRSTARTER_DISCOVERY`` for one run.

Output conventions
- Documents (conformance statement, response bodies) go to **stdout**.
- Status lines go to **stderr** via the message helpers.

Failure modes
- Invalid settings or a failed bootstrap: red error line and a
  ``ClickException`` carrying the cause (exit code 1). No server is served.
"""

from __future__ import annotations

import json
import os
from urllib.parse import parse_qsl, urlsplit

import click

from fhirstarter import config
from fhirstarter.bootstrap import bootstrap
from fhirstarter.domain.errors import BootstrapError
from fhirstarter.interfaces.rest import Request
from fhirstarter.service_layer.capability import interactions_of
from fhirstarter.service_layer.server import Server

from .helpers import error, hyperlink, success, warn

DEFAULT_REQUEST_BASE = "http://localhost:8080/fhir"

discovery_option = click.option(
    "--discovery",
    "discovery",
    metavar="MODULE:ATTR",
    default=None,
    help=(
        "Discovery source to resolve providers from: a DiscoverySource instance "
        "or a factory returning one. Overrides FHIRSTARTER_DISCOVERY."
    ),
)


def assemble_server(discovery: str | None = None) -> Server:
    """Bootstrap a server from the environment, mapping failures to Click errors.

    Raises:
        click.ClickException: If the settings are invalid or bootstrap fails.
    """
    environ = dict(os.environ)
    if discovery:
        environ[config.ENV_PREFIX + "DISCOVERY"] = discovery
    try:
        return bootstrap(environ=environ)
    except (BootstrapError, config.InvalidSettingError) as e:
        error("Server bootstrap failed")
        raise click.ClickException(str(e)) from e


@click.command()
@discovery_option
@click.option(
    "--pretty/--compact",
    default=True,
    show_default=True,
    help="Indent the JSON document.",
)
@click.option(
    "--no-date",
    "no_date",
    is_flag=True,
    help="Omit the generation timestamp so output is byte-stable across runs.",
)
def capabilities(discovery: str | None, pretty: bool, no_date: bool) -> None:
    """Print the server's conformance statement as JSON."""
    server = assemble_server(discovery)
    click.echo(
        server.capability_statement.to_json(include_date=not no_date, pretty=pretty)
    )


@click.command()
@discovery_option
def check(discovery: str | None) -> None:
    """Bootstrap a server and summarize what was bound."""
    server = assemble_server(discovery)
    statement = server.capability_statement

    base = server.policy.canonical_base_address
    click.echo(f"FHIR version : {server.version.name} ({statement.fhir_version})")
    click.echo(f"Base address : {hyperlink(base) if base else '<from each request>'}")
    click.echo(f"Description  : {statement.implementation_description}")

    click.echo("Resources    :")
    for resource in statement.resources:
        provider = server.registry.lookup(resource.type)
        codes = ", ".join(i.value for i in resource.interactions)
        click.echo(f"  {resource.type:<16} {type(provider).__name__} [{codes}]")

    system_codes = ", ".join(i.value for i in statement.system_interactions)
    click.echo(f"System       : {system_codes or '<none>'}")

    interceptors = [type(i).__name__ for i in server.interceptors]
    click.echo(f"Interceptors : {', '.join(interceptors) or '<none>'}")

    paging = server.paging
    click.echo(
        f"Paging       : capacity={paging.retention_capacity}, "
        f"max page size={paging.maximum_page_size}, "
        f"default page size={paging.default_page_size}"
    )

    if not interceptors:
        warn("No interceptors registered.")
    success(
        f"Server assembled with {len(statement.resources)} resource types "
        f"and {sum(1 for _ in interactions_of(statement))} operations."
    )


def _parse_header(text: str) -> tuple[str, str]:
    name, sep, value = text.partition(":")
    if not sep or not name.strip():
        raise click.BadParameter(f"Expected 'Name: value', got {text!r}")
    return name.strip(), value.strip()


@click.command()
@discovery_option
@click.option(
    "--method",
    "-X",
    default="GET",
    show_default=True,
    type=click.Choice(["GET", "POST", "PUT", "DELETE"], case_sensitive=False),
    help="HTTP method.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Request header as 'Name: value'. Repeatable.",
)
@click.option(
    "--data",
    "-d",
    "data",
    default=None,
    help="JSON request body.",
)
@click.option(
    "--base",
    default=DEFAULT_REQUEST_BASE,
    show_default=True,
    help="Base URL the request is treated as arriving on.",
)
@click.argument("path", default="metadata")
@click.pass_context
def request(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    discovery: str | None,
    method: str,
    headers: tuple[str, ...],
    data: str | None,
    base: str,
    path: str,
) -> None:
    """Serve one request, given as PATH[?QUERY], and print the response body.

    The status line and content type go to stderr. Bodies are printed as JSON
    whatever encoding was negotiated. Exits with status 1 for 4xx/5xx responses.
    """
    try:
        body = json.loads(data) if data is not None else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON body: {e}", param_hint="--data") from e

    url = urlsplit(path)
    inbound = Request(
        method=method.upper(),
        path=url.path.strip("/"),
        params=dict(parse_qsl(url.query, keep_blank_values=True)),
        headers=dict(_parse_header(h) for h in headers),
        body=body,
        server_base=base,
    )

    server = assemble_server(discovery)
    response = server.handle(inbound)

    click.echo(f"HTTP {response.status} {response.content_type}", err=True)
    for name, value in response.headers.items():
        click.echo(f"{name}: {value}", err=True)
    if response.body is not None:
        click.echo(
            json.dumps(response.body, indent=2 if response.pretty else None)
        )
    if response.status >= 400:
        ctx.exit(1)
