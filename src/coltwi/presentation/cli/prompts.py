"""Line-oriented prompts built on the prefix resolver."""
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple, TypeVar

from coltwi.services.resolver import Cancelled, PrefixResolver, ResolutionError, or_list

T = TypeVar("T")

ABORT_CONFIRM_PROMPT = "Really abort (y/n)? "
HELP_COMMAND = "help"

_confirm_abort = True


def set_confirm_abort(enabled: bool) -> None:
    """Choose whether ``abort`` asks for confirmation before unwinding."""
    global _confirm_abort
    _confirm_abort = enabled


def read_line(prompt: str) -> str:
    """Return the next input line; EOFError propagates to the session loop."""
    return input(prompt)


def ask_one_of(
    prompt: str,
    choices: Sequence[object],
    *,
    initial: str | None = None,
    allow_none: bool = False,
    allow_abort: bool = True,
) -> str | None:
    """Prompt until the input resolves to exactly one of ``choices``.

    ``initial`` is tried before prompting. A blank line returns None when
    ``allow_none`` is set. Raises :class:`Cancelled` when the user aborts.
    """
    resolver = PrefixResolver(choices, abortable=allow_abort)
    response = initial
    while True:
        if response is None:
            response = read_line(prompt)
        if not response.strip():
            if allow_none:
                return None
            response = None
            continue
        try:
            return resolver.resolve(response)
        except ResolutionError as exc:
            print(exc)
        except Cancelled:
            if not _confirm_abort or ask_yes_no(ABORT_CONFIRM_PROMPT):
                raise
        response = None


def ask_yes_no(prompt: str) -> bool:
    while True:
        answer = read_line(prompt).strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False


def ask_int(
    prompt: str,
    low: int,
    high: int,
    *,
    default: int | None = None,
    allow_abort: bool = True,
) -> int:
    if low > high:
        raise ValueError("ask_int() low cannot be greater than high")
    if low == high:
        print(f"{prompt}: {low}")
        return low
    choices = list(range(low, high + 1))
    if len(choices) > 6:
        range_text = f"{low} - {high}"
    else:
        range_text = or_list(choices)
    if default is None:
        answer = ask_one_of(f"{prompt} ({range_text}): ", choices, allow_abort=allow_abort)
        assert answer is not None
        return int(answer)
    answer = ask_one_of(
        f"{prompt} ({range_text}) Default = {default}: ",
        choices,
        allow_none=True,
        allow_abort=allow_abort,
    )
    return default if answer is None else int(answer)


def ask_menu(
    items: Sequence[Tuple[T, str]],
    *,
    num_choices: int = 1,
    repeats_ok: bool = False,
    allow_abort: bool = True,
) -> List[T]:
    """Present a numbered menu and return the keys of the chosen items."""
    remaining: List[Tuple[T, str]] = list(items)
    chosen: List[T] = []
    while remaining and len(chosen) < num_choices:
        if len(remaining) == 1:
            chosen.append(remaining[0][0])
            break
        print("-" * 52)
        for index, (_, label) in enumerate(remaining, start=1):
            print(f"{index}) {label}")
        prompt = f"{_ordinal(len(chosen) + 1)} Selection: " if num_choices > 1 else "Selection: "
        answer = ask_one_of(prompt, range(1, len(remaining) + 1), allow_abort=allow_abort)
        assert answer is not None
        key, _ = remaining[int(answer) - 1]
        chosen.append(key)
        if not repeats_ok:
            del remaining[int(answer) - 1]
    return chosen


def ask_command(prompt: str, commands: Mapping[str, str]) -> Tuple[str, str | None]:
    """Read ``<command> [parameter]``; returns the command name and parameter.

    ``commands`` maps command names to help text. ``help`` is always
    available and handled here.
    """
    descriptions: Dict[str, str] = dict(commands)
    descriptions.setdefault(HELP_COMMAND, "List available commands")
    resolver = PrefixResolver(descriptions)
    while True:
        response = read_line(prompt).strip()
        if not response:
            continue
        verb, _, rest = response.partition(" ")
        param = rest.strip() or None
        try:
            name = resolver.resolve(verb)
        except ResolutionError as exc:
            print(exc)
            continue
        if name == HELP_COMMAND:
            _show_help(resolver, descriptions, param)
            continue
        return name, param


def _show_help(resolver: PrefixResolver, descriptions: Mapping[str, str], param: str | None) -> None:
    if param is None:
        print("Available commands: (type help <command> for more detail)")
        print(or_list(descriptions))
        return
    try:
        print(descriptions[resolver.resolve(param)])
    except ResolutionError as exc:
        print(exc)


def _ordinal(number: int) -> str:
    if number == 1:
        return "1st"
    if number == 2:
        return "2nd"
    if number == 3:
        return "3rd"
    return f"{number}th"


__all__ = [
    "ask_command",
    "ask_int",
    "ask_menu",
    "ask_one_of",
    "ask_yes_no",
    "or_list",
    "read_line",
    "set_confirm_abort",
]
