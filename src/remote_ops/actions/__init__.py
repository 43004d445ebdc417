"""Action handlers bound to keys in each mode."""

from .core import exit_to_normal_mode, insert_backspace, move_down, move_left, move_right, move_up
from .locate import cancel_locate, confirm_locate, delete_locate_char
from .panel import (
    cancel_panel,
    next_instance,
    next_line,
    previous_instance,
    previous_line,
    search_panel,
    select_instance,
)
from .remote import entry_to_mode_result, start_operation
from .visual import change_selection, delete_selection, yank_selection

__all__ = [
    "exit_to_normal_mode",
    "insert_backspace",
    "move_left",
    "move_right",
    "move_up",
    "move_down",
    "confirm_locate",
    "cancel_locate",
    "delete_locate_char",
    "next_line",
    "previous_line",
    "next_instance",
    "previous_instance",
    "select_instance",
    "cancel_panel",
    "search_panel",
    "start_operation",
    "entry_to_mode_result",
    "yank_selection",
    "delete_selection",
    "change_selection",
]
