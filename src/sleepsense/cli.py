"""CLI for the sleepsense scoring service."""

import asyncio
import json
import logging

import click

from sleepsense.config import Settings


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: IOT_LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """sleepsense -- sleep scoring for wearable sensor samples."""
    settings = Settings()
    _setup_logging(log_level or settings.log_level)
    ctx.obj = settings


@main.command()
@click.option("--host", default=None, help="Bind address (default: IOT_HOST).")
@click.option("--port", "-p", default=None, type=int, help="Bind port (default: IOT_PORT).")
@click.option("--store", "store_path", default=None, help="JSON-lines store path (default: IOT_STORE_PATH).")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None, store_path: str | None) -> None:
    """Run the HTTP ingress."""
    import uvicorn

    from sleepsense.server import create_app

    overrides = {
        k: v for k, v in {"host": host, "port": port, "store_path": store_path}.items()
        if v is not None
    }
    settings = settings.model_copy(update=overrides)
    if not settings.api_key:
        raise click.UsageError("IOT_API_KEY is not set; refusing to start without a shared secret.")

    app = create_app(settings)
    click.echo(f"Storing records in {settings.store_path}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


@main.command()
@click.argument("body")
def score(body: str) -> None:
    """Score one sample given as a JSON string."""
    from sleepsense.analytics.pipeline import score_sample
    from sleepsense.errors import InvalidInput, InvalidTimestamp

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="BODY") from e

    try:
        record = score_sample(parsed)
    except (InvalidInput, InvalidTimestamp) as e:
        raise click.ClickException(str(e)) from e

    click.echo(record.to_json(indent=2))


@main.command()
@click.argument("file", type=click.Path(exists=True))
@click.option("--output", "-o", default=None, help="Write scored records as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Report skipped lines.")
def replay(file: str, output: str | None, verbose: bool) -> None:
    """Score a JSON-lines file of samples offline."""
    from sleepsense.replay import replay_file

    replay_file(file, output, verbose)


@main.command()
@click.option("--output", "-o", default="-", help="Output .jsonl path ('-' for stdout).")
@click.option("--seed", default=None, type=int, help="Random seed.")
@click.option("--start", default=None, help="Night start as ISO-8601 (default: last Friday 22:00).")
@click.option("--hours", default=8.0, help="Night length in hours when --start is given.")
def generate(output: str, seed: int | None, start: str | None, hours: float) -> None:
    """Generate a synthetic night of resting samples."""
    from datetime import timedelta

    from sleepsense.analytics.pipeline import resolve_timestamp
    from sleepsense.errors import InvalidTimestamp
    from sleepsense.generator import generate_night, previous_friday_night

    if start is None:
        night_start, night_end = previous_friday_night()
    else:
        try:
            night_start = resolve_timestamp(start)
        except InvalidTimestamp as e:
            raise click.BadParameter(str(e), param_hint="--start") from e
        night_end = night_start + timedelta(hours=hours)

    samples = generate_night(night_start, night_end, seed=seed)
    lines = "\n".join(json.dumps(s) for s in samples) + "\n"

    if output == "-":
        click.echo(lines, nl=False)
    else:
        with open(output, "w") as f:
            f.write(lines)
        click.echo(f"{len(samples)} samples ({night_start.isoformat()} to "
                   f"{night_end.isoformat()}) written to {output}")


@main.command()
@click.argument("file", required=False, type=click.Path(exists=True))
@click.option("--dummy", is_flag=True, help="Send a single dummy sample instead of a file.")
@click.option("--url", default=None, help="Ingress URL (default: IOT_ENDPOINT_URL).")
@click.option("--api-key", default=None, help="Shared secret (default: IOT_API_KEY).")
@click.option("--concurrency", "-c", default=4, help="Requests in flight.")
@click.pass_obj
def push(
    settings: Settings,
    file: str | None,
    dummy: bool,
    url: str | None,
    api_key: str | None,
    concurrency: int,
) -> None:
    """POST samples from a JSON-lines file (or one dummy sample) to the ingress."""
    from sleepsense.generator import dummy_sample, push_samples

    if dummy:
        samples = [dummy_sample()]
    elif file is not None:
        with open(file) as f:
            samples = [json.loads(line) for line in f if line.strip()]
    else:
        raise click.UsageError("Give a FILE or --dummy.")

    key = api_key or settings.api_key
    if not key:
        raise click.UsageError("No API key: pass --api-key or set IOT_API_KEY.")

    target = url or settings.endpoint_url
    click.echo(f"Sending {len(samples)} sample(s) to {target}...")
    report = asyncio.run(push_samples(samples, target, key, concurrency=concurrency))
    click.echo(f"{report.sent} sent, {report.failed} failed.")
    if report.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
