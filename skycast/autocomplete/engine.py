"""Debounced city autocomplete with keyboard navigation.

The engine is driven by input events (keystrokes, keys, clicks) and runs
on the caller's asyncio loop. Each keystroke cancels the pending debounce
or query task and bumps a sequence token, so only the most recent query
can ever land in `suggestions`.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum

from skycast.config.schema import AutocompleteConfig
from skycast.models.location import CitySuggestion

logger = logging.getLogger(__name__)

SearchFn = Callable[[str, int], list[CitySuggestion]]
SelectFn = Callable[[CitySuggestion], None]


class AutocompleteState(StrEnum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    QUERYING = "querying"
    SHOWING_SUGGESTIONS = "showing_suggestions"
    CLOSED = "closed"


class Key(StrEnum):
    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


class AutocompleteEngine:
    def __init__(
        self,
        search: SearchFn,
        on_select: SelectFn | None = None,
        config: AutocompleteConfig | None = None,
    ):
        self.search = search
        self.on_select = on_select
        self.config = config or AutocompleteConfig()

        self.text = ""
        self.suggestions: list[CitySuggestion] = []
        self.selected_index = -1
        self.is_open = False
        self.state = AutocompleteState.IDLE

        self._seq = 0
        self._task: asyncio.Task | None = None

    @property
    def selected(self) -> CitySuggestion | None:
        if 0 <= self.selected_index < len(self.suggestions):
            return self.suggestions[self.selected_index]
        return None

    # --- Events ---

    def on_input(self, text: str) -> None:
        """Handle a keystroke that changed the input text.

        Must be called with a running event loop when the text is long
        enough to query.
        """
        self.text = text
        self._cancel_pending()

        if len(text.strip()) < self.config.min_query_length:
            self.suggestions = []
            self.selected_index = -1
            self.is_open = False
            self.state = AutocompleteState.IDLE
            return

        self.state = AutocompleteState.DEBOUNCING
        self._task = asyncio.get_running_loop().create_task(
            self._debounced_search(self._seq, text)
        )

    def on_key(self, key: str) -> None:
        if not self.is_open or not self.suggestions:
            return

        if key == Key.ARROW_DOWN:
            self.selected_index = min(self.selected_index + 1, len(self.suggestions) - 1)
        elif key == Key.ARROW_UP:
            self.selected_index = max(self.selected_index - 1, -1)
        elif key == Key.ENTER:
            if self.selected is not None:
                self.select(self.selected)
        elif key == Key.ESCAPE:
            self.is_open = False
            self.state = AutocompleteState.CLOSED

    def on_focus(self) -> None:
        if self.suggestions:
            self.is_open = True
            self.state = AutocompleteState.SHOWING_SUGGESTIONS

    def on_click_outside(self) -> None:
        """Close an open panel; a pending debounce or query keeps its state."""
        if not self.is_open:
            return
        self.is_open = False
        self.state = AutocompleteState.CLOSED

    def select(self, suggestion: CitySuggestion) -> None:
        """Commit a suggestion: canonical label into the input, notify, close."""
        self._cancel_pending()
        self.text = suggestion.label
        if self.on_select is not None:
            self.on_select(suggestion)
        self.suggestions = []
        self.selected_index = -1
        self.is_open = False
        self.state = AutocompleteState.CLOSED

    # --- Lifecycle ---

    async def settle(self) -> None:
        """Wait for the pending debounce/query task, if any, to finish."""
        while self._task is not None and not self._task.done():
            task = self._task
            await asyncio.wait({task})
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()

    async def aclose(self) -> None:
        """Tear down: cancel pending work and wait for it to unwind."""
        task = self._task
        self._cancel_pending()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    # --- Internals ---

    def _cancel_pending(self) -> None:
        self._seq += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _debounced_search(self, seq: int, query: str) -> None:
        await asyncio.sleep(self.config.debounce_ms / 1000)
        if seq != self._seq:
            return

        self.state = AutocompleteState.QUERYING
        logger.debug("Searching cities for %r (seq=%d)", query, seq)
        results = await asyncio.to_thread(
            self.search, query, self.config.max_suggestions
        )
        if seq != self._seq:
            logger.debug("Discarding stale results for %r (seq=%d)", query, seq)
            return

        self.suggestions = list(results)
        self.selected_index = -1
        self.is_open = bool(self.suggestions)
        self.state = (
            AutocompleteState.SHOWING_SUGGESTIONS
            if self.is_open else AutocompleteState.IDLE
        )
