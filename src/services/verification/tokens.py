"""
Gatekeep - Decision Tokens
==========================

Custom-id encoding for the Accept / Reject buttons.

Wire format: ``"<action>:<memberId>"`` with action ``verify_accept`` or
``verify_reject`` and a numeric Discord snowflake. Anything else decodes
to None, meaning the click is ignored.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DecisionAction(str, Enum):
    """What a decision button does to its target member."""

    ACCEPT = "verify_accept"
    REJECT = "verify_reject"


TOKEN_SEPARATOR = ":"

TOKEN_TEMPLATE = r"(?P<action>verify_accept|verify_reject):(?P<member_id>[0-9]+)"
"""Regex used by the persistent button to claim matching custom ids."""

_TOKEN_RE = re.compile(TOKEN_TEMPLATE)


@dataclass(frozen=True)
class DecisionToken:
    """Decoded (action, target member id) pair."""

    action: DecisionAction
    member_id: int

    def encode(self) -> str:
        return encode_token(self.action, self.member_id)


def encode_token(action: DecisionAction, member_id: int) -> str:
    """Build the custom id for a decision button."""
    return f"{action.value}{TOKEN_SEPARATOR}{member_id}"


def decode_token(custom_id: Optional[str]) -> Optional[DecisionToken]:
    """
    Parse a button custom id.

    Args:
        custom_id: Raw custom id from the interaction.

    Returns:
        The decoded token, or None for unknown actions, missing ids,
        non-numeric ids and anything else malformed.
    """
    if not custom_id:
        return None
    match = _TOKEN_RE.fullmatch(custom_id)
    if match is None:
        return None
    return DecisionToken(
        action=DecisionAction(match.group("action")),
        member_id=int(match.group("member_id")),
    )


__all__ = [
    "DecisionAction",
    "DecisionToken",
    "TOKEN_TEMPLATE",
    "encode_token",
    "decode_token",
]
