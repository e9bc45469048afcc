"""
Consent prompts: yes/no questions before any installing action.

A ``Confirm`` is any callable taking the question and returning True to
go ahead.  The bootstrapper only ever receives one of these, so tests
and unattended runs never touch the terminal.

Only "y" or "yes" (any case) counts as consent.  Empty input, any other
answer, and end-of-input all decline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

import click

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

_AFFIRMATIVE = frozenset({"y", "yes"})


class ConsentPolicy(str, Enum):
    """How installation questions are answered."""

    ASK = "ask"
    DECLINE = "decline"
    ACCEPT = "accept"


def is_affirmative(answer: str | None) -> bool:
    return (answer or "").strip().lower() in _AFFIRMATIVE


def ask(message: str) -> bool:
    """Ask on the terminal; anything but an explicit yes declines."""
    try:
        answer = click.prompt(
            f"{message} [y/N]",
            default="",
            show_default=False,
            err=True,
        )
    except click.Abort:
        click.echo(err=True)
        return False
    return is_affirmative(answer)


def make_confirm(policy: ConsentPolicy = ConsentPolicy.ASK) -> Confirm:
    """Build the confirm callable for a consent policy."""
    if policy is ConsentPolicy.ASK:
        return ask

    decision = policy is ConsentPolicy.ACCEPT

    def _unattended(message: str) -> bool:
        logger.info(
            "%s → %s (non-interactive)", message, "yes" if decision else "no",
        )
        return decision

    return _unattended
