"""Mouse class for pointer operations using CDP."""

import logging
from typing import TYPE_CHECKING

from domactor.commands import DispatchMouseEvent, MouseButton
from domactor.exceptions import ProtocolError

if TYPE_CHECKING:
    from domactor.session import DomSession

logger = logging.getLogger(__name__)


class Mouse:
    """Mouse operations for a page.

    Tracks the pointer position so `click()` presses where the last `move()`
    left the pointer.
    """

    def __init__(self, session: 'DomSession'):
        self._session = session
        self._current_x: float = 0
        self._current_y: float = 0

    async def _dispatch(self, command: DispatchMouseEvent) -> None:
        response = await self._session.send(command)
        if not response.is_successful:
            raise ProtocolError(response.error or 'Unknown error', method=response.method)

    async def move(
        self,
        x: float,
        y: float,
        steps: int = 1,
    ) -> None:
        """Move mouse to the specified coordinates.

        Args:
            x: Target X coordinate
            y: Target Y coordinate
            steps: Number of intermediate steps for smooth movement
        """
        if steps > 1:
            start_x, start_y = self._current_x, self._current_y
            for i in range(1, steps + 1):
                t = i / steps
                await self._dispatch(
                    DispatchMouseEvent(
                        type='mouseMoved',
                        x=start_x + (x - start_x) * t,
                        y=start_y + (y - start_y) * t,
                    )
                )
        else:
            await self._dispatch(DispatchMouseEvent(type='mouseMoved', x=x, y=y))

        self._current_x = x
        self._current_y = y

    async def click(
        self,
        button: MouseButton = 'left',
        click_count: int = 1,
    ) -> None:
        """Click at the current pointer position.

        Args:
            button: Mouse button ('left', 'right', 'middle')
            click_count: Number of clicks (1 for single, 2 for double)
        """
        for event_type in ('mousePressed', 'mouseReleased'):
            await self._dispatch(
                DispatchMouseEvent(
                    type=event_type,
                    x=self._current_x,
                    y=self._current_y,
                    button=button,
                    click_count=click_count,
                )
            )
        logger.debug(f'Clicked {button} at ({self._current_x}, {self._current_y})')

    async def double_click(self, button: MouseButton = 'left') -> None:
        await self.click(button, click_count=2)

    @property
    def position(self) -> tuple[float, float]:
        """Get the current mouse position."""
        return (self._current_x, self._current_y)
