"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw key string from curtsies


SPECIAL_KEYS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
    'page_up', 'page_down', 'insert',
}


def control_key_event(letter: str, raw: str) -> KeyEvent:
    """Map Ctrl+letter to the key a terminal sends that control byte for.

    ^H is backspace, ^I is tab and ^J/^M are enter; any other letter stays
    a CTRL event.
    """
    if letter in ('j', 'm'):
        return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=raw)
    if letter == 'h':
        return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=raw)
    if letter == 'i':
        return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=raw)
    return KeyEvent(key_type=KeyType.CTRL, value=letter, raw=raw)


class KeyboardHandler:
    """Turns key names read from the terminal into KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event and map curtsies-style names to KeyEvent."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key name into a KeyEvent.

        Args:
            key: Key token such as '<LEFT>', '<Ctrl-LEFT>', '<Ctrl-s>' or 'a'

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Alt-left>'
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            name = key_str[1:-1]
            # Support both '-' and '+' as modifier separators (e.g., '<Esc+b>')
            lower = name.lower().replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            base = parts[-1]
            mods = set(parts[:-1])
            if 'meta' in mods or 'esc' in mods:
                mods.add('alt')
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'
            elif base in ('del',):
                base = 'delete'

            # Map named whitespace tokens to regular characters
            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if base == 'tab' and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw='\t')
            if 'ctrl' in mods:
                if len(base) == 1 and 'a' <= base <= 'z' and 'alt' not in mods:
                    return control_key_event(base, key_str)
                if len(base) == 1 or base in SPECIAL_KEYS:
                    return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str)
            if 'alt' in mods and (base in SPECIAL_KEYS or len(base) == 1):
                return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str)
            # Shift does not change what an arrow key does
            if base in SPECIAL_KEYS:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            # Fallback: treat unknown token as special
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                return control_key_event(chr(ord('a') + o - 1), key_str)
            if o == 127:
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)

        # Bare ESC
        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

        # Regular character
        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)
