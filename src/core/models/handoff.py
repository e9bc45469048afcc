"""
ShellHandoff: the terminal disposition of a bootstrap run.

The core never replaces the process itself.  It returns this value and
the CLI driver performs ``os.execve`` with it, so everything up to the
handoff stays testable without starting a real shell.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShellHandoff:
    """Replace the current process with ``argv`` run from ``executable``."""

    executable: str
    argv: list[str]
    env: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "executable": self.executable,
            "argv": list(self.argv),
            "env": {k: v for k, v in sorted(self.env.items()) if k in _REPORTED_ENV},
        }


# Only the variables the bootstrapper sets are reported; the rest is the
# inherited process environment.
_REPORTED_ENV = frozenset({
    "DOTFILES",
    "ZDOTDIR",
    "XDG_CONFIG_HOME",
    "XDG_CACHE_HOME",
    "XDG_DATA_HOME",
    "XDG_STATE_HOME",
})
