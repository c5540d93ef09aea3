"""Test key to command mapping."""

from unittest.mock import Mock

import pytest

from rut.commands import (
    BackspaceCommand, CommandRegistry, DeleteCharCommand, DownLineCommand,
    InsertNewlineCommand, LeftCharCommand, LeftWordCommand, QuitCommand,
    RightCharCommand, RightWordCommand, SaveCommand, UpLineCommand,
)
from rut.keyboard import KeyEvent, KeyType


@pytest.mark.parametrize("key,command_type", [
    ((KeyType.SPECIAL, 'left'), LeftCharCommand),
    ((KeyType.SPECIAL, 'right'), RightCharCommand),
    ((KeyType.SPECIAL, 'up'), UpLineCommand),
    ((KeyType.SPECIAL, 'down'), DownLineCommand),
    ((KeyType.CTRL, 'left'), LeftWordCommand),
    ((KeyType.CTRL, 'right'), RightWordCommand),
    ((KeyType.ALT, 'left'), LeftWordCommand),
    ((KeyType.SPECIAL, 'enter'), InsertNewlineCommand),
    ((KeyType.SPECIAL, 'backspace'), BackspaceCommand),
    ((KeyType.SPECIAL, 'delete'), DeleteCharCommand),
    ((KeyType.CTRL, 's'), SaveCommand),
    ((KeyType.CTRL, 'c'), QuitCommand),
])
def test_default_bindings(key, command_type):
    """Each default key resolves to its command."""
    assert isinstance(CommandRegistry().get_command(*key), command_type)


def test_unbound_key_does_nothing():
    """Keys without a binding leave the buffer alone."""
    editor = Mock()
    event = KeyEvent(key_type=KeyType.CTRL, value='z', raw='\x1a')
    assert CommandRegistry().execute(editor, event) is False
    assert editor.method_calls == []


def test_movement_never_reports_modification():
    """Movement commands never mark the document modified."""
    editor = Mock()
    editor.cursor.move_word_left.return_value = True
    event = KeyEvent(key_type=KeyType.CTRL, value='left', raw='<Ctrl-LEFT>')
    assert CommandRegistry().execute(editor, event) is False
    editor.cursor.move_word_left.assert_called_once()


def test_edit_reports_whether_buffer_changed():
    """Edit commands report whether the buffer actually changed."""
    editor = Mock()
    editor.cursor.backspace.return_value = False
    event = KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw='<BACKSPACE>')
    assert CommandRegistry().execute(editor, event) is False
    editor.cursor.backspace.return_value = True
    assert CommandRegistry().execute(editor, event) is True


def test_regular_key_inserts_character():
    """Printable keys insert themselves at the cursor."""
    editor = Mock()
    editor.cursor.insert_char.return_value = True
    event = KeyEvent(key_type=KeyType.REGULAR, value='q', raw='q')
    assert CommandRegistry().execute(editor, event) is True
    editor.cursor.insert_char.assert_called_once_with('q')


def test_save_and_quit_call_editor():
    editor = Mock()
    registry = CommandRegistry()
    registry.execute(editor, KeyEvent(key_type=KeyType.CTRL, value='s', raw='\x13'))
    editor.save.assert_called_once()
    registry.execute(editor, KeyEvent(key_type=KeyType.CTRL, value='q', raw='\x11'))
    editor.quit.assert_called_once()
