"""State handlers for the bibx scanner.

Each module is a mixin providing the handlers for one group of states.
The Scanner composes them and wires them into its dispatch table.
"""

from __future__ import annotations

from bibx.scanner.states.body import BodyStatesMixin
from bibx.scanner.states.comment import CommentStatesMixin
from bibx.scanner.states.declaration import DeclarationStatesMixin
from bibx.scanner.states.field import FieldStatesMixin

__all__ = [
    "BodyStatesMixin",
    "CommentStatesMixin",
    "DeclarationStatesMixin",
    "FieldStatesMixin",
]
