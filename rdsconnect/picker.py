"""Interactive instance picker."""

from __future__ import annotations

import logging
from typing import Protocol

from simple_term_menu import TerminalMenu

from rdsconnect.constants import PICKER_TITLE
from rdsconnect.exceptions import SelectionCancelledError
from rdsconnect.models import InstanceRecord

logger = logging.getLogger(__name__)


class Picker(Protocol):
    """Choose one entry from a list of labels."""

    def pick(self, labels: list[str], title: str = PICKER_TITLE) -> int:
        """Return the index of the chosen label.

        Raises
        ------
        SelectionCancelledError
            If the user dismissed the picker
        """
        ...


def format_candidate(instance: InstanceRecord) -> str:
    return f"{instance.id:<30} | {instance.size:<12} | {instance.version}"


class FuzzyPicker:
    """Arrow-key picker with ``/`` incremental search."""

    def pick(self, labels: list[str], title: str = PICKER_TITLE) -> int:
        menu = TerminalMenu(
            labels,
            title=title,
            menu_cursor="> ",
            menu_cursor_style=("fg_cyan", "bold"),
            menu_highlight_style=("standout",),
            search_key="/",
            show_search_hint=True,
            quit_keys=("escape", "q", "ctrl-g"),
            clear_screen=False,
        )
        index = menu.show()

        if index is None:
            raise SelectionCancelledError("selection cancelled")

        logger.debug("Picked %s", labels[index])
        return index


def pick_instance(
    instances: list[InstanceRecord], picker: Picker, title: str = PICKER_TITLE
) -> InstanceRecord:
    """Let the user choose among instances, keeping discovery order."""
    index = picker.pick([format_candidate(i) for i in instances], title)
    return instances[index]
