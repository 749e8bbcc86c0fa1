"""Terminal material picker (prompt_toolkit-based).

Kept separate from the CLI rendering so it can be driven from a pipe input in
tests. The picker completes on material ids (descriptions are shown as
completion metadata and also match), suggests the first id with the typed
prefix, and only accepts a known material id or an empty line (cancel).
"""

from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .models import MaterialSummary


def _prefix_completion(ids: Sequence[str], text: str) -> str | None:
    """Remaining characters of the first id that ``text`` is a strict prefix of."""

    if not text:
        return None
    lower = text.lower()
    for material in ids:
        if material.lower() == lower:
            return None
    for material in ids:
        if material.lower().startswith(lower):
            return material[len(text) :]
    return None


class _PrefixSuggest(AutoSuggest):
    def __init__(self, ids: Sequence[str]) -> None:
        self._ids = ids

    def get_suggestion(self, buffer, document):
        remainder = _prefix_completion(self._ids, document.text)
        return Suggestion(remainder) if remainder else None


class _KnownMaterial(Validator):
    def __init__(self, by_lower: dict[str, MaterialSummary]) -> None:
        self._by_lower = by_lower

    def validate(self, document) -> None:
        text = document.text.strip()
        if text and text.lower() not in self._by_lower:
            raise ValidationError(
                message=f"Unknown material: {text}", cursor_position=len(document.text)
            )


def select_material(
    materials: Sequence[MaterialSummary],
    *,
    message: str = "Material (empty to quit): ",
    session: PromptSession | None = None,
) -> MaterialSummary | None:
    """Prompt for a material id; return its summary, or ``None`` on empty input."""

    ids = [m.material for m in materials]
    by_lower = {m.material.lower(): m for m in materials}
    completer = WordCompleter(
        ids,
        meta_dict={m.material: m.material_description for m in materials},
        ignore_case=True,
        match_middle=True,
    )

    kb = KeyBindings()

    @kb.add("enter", eager=True)
    def _(event) -> None:  # pragma: no cover - integration path
        b = event.app.current_buffer
        cs = b.complete_state
        if cs is not None and cs.current_completion is not None:
            b.apply_completion(cs.current_completion)
        else:
            # The async suggestion may not have rendered yet; recompute it.
            remainder = _prefix_completion(ids, b.document.text.strip())
            if remainder:
                b.text = b.document.text.strip() + remainder
                b.cursor_position = len(b.text)
        b.validate_and_handle()

    if session is None:
        sess: PromptSession = PromptSession(key_bindings=kb)
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
            key_bindings=kb,
        )

    result = sess.prompt(
        message,
        completer=completer,
        auto_suggest=_PrefixSuggest(ids),
        validator=_KnownMaterial(by_lower),
        validate_while_typing=False,
        style=Style.from_dict({"auto-suggestion": "fg:#888888"}),
    )
    text = result.strip()
    return by_lower.get(text.lower()) if text else None


__all__ = ["select_material"]
