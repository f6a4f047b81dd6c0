"""Command line Shoutbox client."""

import asyncio
import logging
from typing import Optional

import asyncclick as click

from shoutbox.client.api import ShoutboxAPI, ShoutboxAPIError
from shoutbox.client.controller import ShoutboxController
from shoutbox.client.push import PushChannel
from shoutbox.client.settings import ClientSettings
from shoutbox.client.storage import USERNAME_KEY, LocalStorage
from shoutbox.client.view import ConsoleView, render_message
from shoutbox.core.message import ValidationError


@click.group()
@click.option("--api-url", default=None, help="Base API URL (defaults to SHOUTBOX_API_URL)")
@click.option("--debug", is_flag=True, default=False)
@click.pass_context
async def command(ctx: click.Context, api_url: Optional[str], debug: bool):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = ClientSettings()
    if api_url:
        settings.api_url = api_url
    ctx.obj = settings


@command.command(name="list")
@click.pass_obj
async def list_messages(settings: ClientSettings):
    """Print every message, oldest first."""
    async with ShoutboxAPI(settings.api_url, timeout=settings.request_timeout) as api:
        try:
            messages = await api.list_messages()
        except ShoutboxAPIError as e:
            raise click.ClickException(str(e)) from e

    for message in messages:
        username, content, time_of_day = render_message(message)
        click.echo(f"[{time_of_day}] {username}: {content}")


@command.command(name="post")
@click.argument("username")
@click.argument("content")
@click.pass_obj
async def post_message(settings: ClientSettings, username: str, content: str):
    """Append a message as USERNAME."""
    LocalStorage(settings.storage_path).set(USERNAME_KEY, username)

    async with ShoutboxAPI(settings.api_url, timeout=settings.request_timeout) as api:
        try:
            message = await api.append_message(username, content)
        except ValidationError as e:
            for field, reason in e.errors.items():
                click.echo(f"{field}: {reason}", err=True)
            raise click.exceptions.Exit(1) from e
        except ShoutboxAPIError as e:
            raise click.ClickException(str(e)) from e

    click.echo(f"Sent #{message.id}")


@command.command(name="watch")
@click.option("--duration", type=float, default=None, help="Stop after this many seconds")
@click.pass_obj
async def watch(settings: ClientSettings, duration: Optional[float]):
    """Show messages as they arrive until interrupted."""
    push = PushChannel(settings.push_url) if settings.realtime_enabled else None

    async with ShoutboxAPI(settings.api_url, timeout=settings.request_timeout) as api:
        controller = ShoutboxController(
            api=api,
            view=ConsoleView(),
            storage=LocalStorage(settings.storage_path),
            settings=settings,
            push=push,
        )
        await controller.mount()
        try:
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)
        finally:
            await controller.unmount()


if __name__ == "__main__":
    command()
