"""Keyboard class for typing into the focused element using CDP."""

import asyncio
import logging
from typing import TYPE_CHECKING

from domactor.actor.utils import calculate_modifier_bitmask, get_key_info, get_key_stroke, split_key_combination
from domactor.commands import DispatchKeyEvent
from domactor.config import CONFIG
from domactor.exceptions import ProtocolError

if TYPE_CHECKING:
    from domactor.session import DomSession

logger = logging.getLogger(__name__)


class Keyboard:
    """Keyboard operations for a page.

    Keys go to whatever element has focus in the page.
    """

    def __init__(self, session: 'DomSession', typing_delay: float | None = None):
        self._session = session
        self._typing_delay = CONFIG.TYPING_DELAY if typing_delay is None else typing_delay

    async def _dispatch(self, command: DispatchKeyEvent) -> None:
        response = await self._session.send(command)
        if not response.is_successful:
            raise ProtocolError(response.error or 'Unknown error', method=response.method)

    async def type_text(self, text: str) -> None:
        """Type text character by character.

        Each character is sent as keyDown, char and keyUp events; newlines
        press Enter.

        Args:
            text: Text to type
        """
        for char in text:
            if char == '\n':
                await self._press_enter()
            else:
                stroke = get_key_stroke(char)
                await self._dispatch(
                    DispatchKeyEvent(
                        type='keyDown',
                        key=stroke.key,
                        code=stroke.code,
                        modifiers=stroke.modifiers,
                        windows_virtual_key_code=stroke.virtual_key_code,
                    )
                )
                await self._dispatch(DispatchKeyEvent(type='char', text=char, key=char))
                await self._dispatch(
                    DispatchKeyEvent(
                        type='keyUp',
                        key=stroke.key,
                        code=stroke.code,
                        modifiers=stroke.modifiers,
                        windows_virtual_key_code=stroke.virtual_key_code,
                    )
                )

            if self._typing_delay:
                await asyncio.sleep(self._typing_delay)

        logger.debug(f'Typed {len(text)} characters')

    async def _press_enter(self) -> None:
        await self._dispatch(DispatchKeyEvent(type='keyDown', key='Enter', code='Enter', windows_virtual_key_code=13))
        await self._dispatch(DispatchKeyEvent(type='char', text='\r', key='Enter'))
        await self._dispatch(DispatchKeyEvent(type='keyUp', key='Enter', code='Enter', windows_virtual_key_code=13))

    async def press(self, key: str) -> None:
        """Press a key or key combination.

        Args:
            key: Key name or combination (e.g., 'Enter', 'Control+A')
        """
        modifiers, main_key = split_key_combination(key)
        modifier_value = calculate_modifier_bitmask(modifiers)

        for mod in modifiers:
            code, vk_code = get_key_info(mod)
            await self._dispatch(DispatchKeyEvent(type='keyDown', key=mod, code=code, windows_virtual_key_code=vk_code))

        code, vk_code = get_key_info(main_key)
        for event_type in ('keyDown', 'keyUp'):
            await self._dispatch(
                DispatchKeyEvent(
                    type=event_type,
                    key=main_key,
                    code=code,
                    modifiers=modifier_value or None,
                    windows_virtual_key_code=vk_code,
                )
            )

        for mod in reversed(modifiers):
            code, vk_code = get_key_info(mod)
            await self._dispatch(DispatchKeyEvent(type='keyUp', key=mod, code=code, windows_virtual_key_code=vk_code))
