"""
Shoutbox client controller.
Drives the state container from timers, user input and the network.
"""

import asyncio
import logging
from typing import Optional

from shoutbox.client.api import ShoutboxAPI, ShoutboxAPIError
from shoutbox.client.push import PushChannel
from shoutbox.client.settings import ClientSettings
from shoutbox.client.state import (
    Action,
    ContentChanged,
    MessageReceived,
    MessagesLoaded,
    RefreshFailed,
    ShoutboxState,
    SubmitFailed,
    SubmitRejected,
    SubmitStarted,
    SubmitSucceeded,
    UsernameChanged,
    reduce,
)
from shoutbox.client.storage import USERNAME_KEY, LocalStorage
from shoutbox.client.view import ShoutboxView
from shoutbox.core.message import ValidationError

logger = logging.getLogger(__name__)


class ShoutboxController:
    """
    Owns the client state for the lifetime of a view.
    mount() loads and starts polling, unmount() stops all background work.
    """

    def __init__(
        self,
        api: ShoutboxAPI,
        view: ShoutboxView,
        storage: LocalStorage,
        settings: ClientSettings,
        push: Optional[PushChannel] = None,
    ):
        self.api = api
        self.view = view
        self.storage = storage
        self.settings = settings
        self.push = push
        self.state = ShoutboxState(username=storage.get(USERNAME_KEY) or "")
        self._refresh_task: Optional[asyncio.Task[None]] = None
        self._push_task: Optional[asyncio.Task[None]] = None
        self._scroll_handle: Optional[asyncio.TimerHandle] = None

    def dispatch(self, action: Action) -> ShoutboxState:
        self.state = reduce(self.state, action)
        self.view.render(self.state)
        return self.state

    @property
    def mounted(self) -> bool:
        return self._refresh_task is not None

    async def mount(self) -> None:
        """Loads messages once, then keeps them fresh until unmount()."""
        if self.mounted:
            return

        await self.refresh()
        self._refresh_task = asyncio.create_task(self._poll())

        if self.push is not None:
            self._push_task = asyncio.create_task(self._listen())
        else:
            logger.info("No realtime configuration, polling every %.1fs", self.settings.refresh_interval)

    async def unmount(self) -> None:
        for task in (self._refresh_task, self._push_task):
            if task is None:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Background task had already failed")

        if self._scroll_handle is not None:
            self._scroll_handle.cancel()

        self._refresh_task = None
        self._push_task = None
        self._scroll_handle = None

    async def refresh(self) -> None:
        """Replaces the server snapshot with a fresh List result."""
        try:
            messages = await self.api.list_messages()
        except (ShoutboxAPIError, ValidationError) as e:
            logger.warning("Refresh failed: %s", e)
            self.dispatch(RefreshFailed())
            return

        self.dispatch(MessagesLoaded(tuple(messages)))

    def set_username(self, username: str) -> None:
        self.dispatch(UsernameChanged(username))
        self.storage.set(USERNAME_KEY, username)

    def set_content(self, content: str) -> None:
        self.dispatch(ContentChanged(content))

    async def submit(self) -> bool:
        """
        Appends the current draft.
        Returns True when the server accepted it. Never retries.
        """
        if not self.state.can_submit:
            return False

        self.dispatch(SubmitStarted())

        try:
            message = await self.api.append_message(self.state.username, self.state.content)
        except ValidationError as e:
            self.dispatch(SubmitRejected(e.errors))
            return False
        except ShoutboxAPIError as e:
            logger.error("Submit failed: %s", e)
            self.dispatch(SubmitFailed())
            return False

        self.dispatch(SubmitSucceeded(message))
        self._scroll_handle = asyncio.get_running_loop().call_later(
            self.settings.scroll_delay, self.view.scroll_to_end
        )
        return True

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.settings.refresh_interval)
            await self.refresh()

    async def _listen(self) -> None:
        if self.push is None:
            return
        async for message in self.push.messages():
            self.dispatch(MessageReceived(message))
