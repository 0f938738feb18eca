"""``inkfeed-writer`` command line."""

import logging
import time
from pathlib import Path

import click

from core.markdown import render_markdown
from .api import ApiClient
from .debounce import Debouncer
from .editor import TextBuffer
from .errors import ApiError, ValidationError, WriterError
from .session import WritingSession
from .store import DraftCache, LocalStore, Preferences

logger = logging.getLogger(__name__)

WATCH_INTERVAL = 0.1


@click.group()
@click.option("--api-url", envvar="INKFEED_API_URL", default="http://localhost:8000", show_default=True)
@click.option("--token", envvar="INKFEED_TOKEN", default=None, help="Session token from the sign-in callback.")
@click.option("--store", "store_path", envvar="INKFEED_STORE", type=click.Path(dir_okay=False), default=None)
@click.option("-v", "--verbose", is_flag=True)
@click.pass_context
def cli(ctx, api_url, token, store_path, verbose):
    """Write and publish posts to an inkfeed blog."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {
        "client": ApiClient(api_url, token=token),
        "store": LocalStore(store_path),
    }


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--id", "doc_id", default=None, help="Update this feed instead of creating one.")
@click.option("--title", default=None)
@click.option("--summary", default=None)
@click.option("--tags", default=None, help="Tags as '#one #two'.")
@click.option("--alias", default=None)
@click.option("--draft/--no-draft", default=None)
@click.option("--listed/--unlisted", default=None)
@click.pass_obj
def publish(obj, source, doc_id, title, summary, tags, alias, draft, listed):
    """Publish SOURCE (Markdown) as a new or existing feed."""
    session = WritingSession(obj["client"], DraftCache(obj["store"], doc_id), doc_id)
    try:
        session.load()
        session.set("content", source.read_text(encoding="utf-8"))
        options = {"title": title, "summary": summary, "tags": tags, "alias": alias, "draft": draft, "listed": listed}
        session.update(**{k: v for k, v in options.items() if v is not None})
        path = session.publish()
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc
    except WriterError as exc:
        raise click.ClickException(str(exc)) from exc
    click.secho(f"Published: {path}", fg="green")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--watch", is_flag=True, help="Re-render whenever SOURCE changes.")
@click.option("--wait", default=0.2, show_default=True, help="Debounce delay in seconds.")
def preview(source, output, watch, wait):
    """Render SOURCE to HTML."""
    target = output or source.with_suffix(".html")

    def render():
        target.write_text(render_markdown(source.read_text(encoding="utf-8")), encoding="utf-8")
        click.echo(f"Rendered {target}")

    render()
    if not watch:
        return

    debounced = Debouncer(render, wait)
    last = source.stat().st_mtime
    try:
        while True:
            time.sleep(WATCH_INTERVAL)
            mtime = source.stat().st_mtime
            if mtime != last:
                last = mtime
                debounced()
    except KeyboardInterrupt:
        debounced.flush()


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--into", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help="Append the image link to this Markdown file.")
@click.pass_obj
def upload(obj, image, into):
    """Upload IMAGE and print its URL."""
    buffer = None
    upload_id = None
    if into is not None:
        buffer = TextBuffer(into.read_text(encoding="utf-8"))
        upload_id = buffer.begin_upload(image.name)

    try:
        with image.open("rb") as fh:
            url = obj["client"].upload(fh, image.name)
    except ApiError as exc:
        if buffer is not None:
            buffer.fail_upload(upload_id)
            into.write_text(buffer.text, encoding="utf-8")
        raise click.ClickException(exc.message) from exc

    if buffer is not None:
        buffer.complete_upload(upload_id, image.name, url)
        into.write_text(buffer.text, encoding="utf-8")
    click.echo(url)


@cli.command("clear-cache")
@click.option("--id", "doc_id", default=None, help="Feed id; the unsaved draft when omitted.")
@click.pass_obj
def clear_cache(obj, doc_id):
    """Discard cached draft fields."""
    DraftCache(obj["store"], doc_id).clear()
    click.echo("Draft cache cleared.")


@cli.command()
@click.option("--font-size", type=int, default=None)
@click.option("--font-family", default=None)
@click.option("--line-height", type=float, default=None)
@click.pass_obj
def prefs(obj, font_size, font_family, line_height):
    """Show or change editor preferences."""
    preferences = Preferences(obj["store"])
    try:
        if font_size is not None:
            preferences.font_size = font_size
        if font_family is not None:
            preferences.font_family = font_family
        if line_height is not None:
            preferences.line_height = line_height
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    for key, value in preferences.as_dict().items():
        click.echo(f"{key}: {value}")


def main():
    cli(prog_name="inkfeed-writer")


__all__ = ["cli", "main"]
