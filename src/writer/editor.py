"""Markdown text buffer with the writing page's toolbar commands.

A ``TextBuffer`` holds the document text and one selection given as two
character offsets. Every command edits the selection in place the way the
browser editor does: styles toggle, math and table templates are inserted,
and image uploads leave a placeholder line that is swapped for the final
image link once the upload finishes.
"""

import re
import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class Style:
    before: str
    after: str

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(f"^{re.escape(self.before)}([\\s\\S]*){re.escape(self.after)}$")


STYLES = {
    "bold": Style("**", "**"),
    "italic": Style("*", "*"),
    "underline": Style("<u>", "</u>"),
    "strikethrough": Style("~~", "~~"),
    "sup": Style("<sup>", "</sup>"),
    "sub": Style("<sub>", "</sub>"),
}

# name -> (template, placeholder selected after insertion)
MATH_TEMPLATES = {
    "inline": ("$公式$", "公式"),
    "block": ("\n$$\n公式内容\n$$\n", "公式内容"),
    "frac": ("$\\frac{分子}{分母}$", "分子"),
    "int": ("$\\int_{下限}^{上限} f(x) dx$", "下限"),
    "sqrt": ("$\\sqrt{内容}$", "内容"),
}
_CONTAINER_PLACEHOLDERS = ("公式", "公式内容")

WRAP_PAIRS = {"$": "$", "<": ">"}

UPLOAD_PLACEHOLDER = "\n![⌛ Uploading {name}... {{{upload_id}}}]()\n"


class TextBuffer:
    def __init__(self, text: str = "", selection: tuple[int, int] | None = None):
        self.text = text
        self.selection_start, self.selection_end = selection or (len(text), len(text))
        self.pending_uploads: set[str] = set()
        self._clamp()

    def _clamp(self) -> None:
        size = len(self.text)
        start = min(max(self.selection_start, 0), size)
        end = min(max(self.selection_end, 0), size)
        self.selection_start, self.selection_end = min(start, end), max(start, end)

    @property
    def selection(self) -> tuple[int, int]:
        return self.selection_start, self.selection_end

    @property
    def selected_text(self) -> str:
        return self.text[self.selection_start:self.selection_end]

    @property
    def uploading(self) -> bool:
        return bool(self.pending_uploads)

    def select(self, start: int, end: int | None = None) -> None:
        self.selection_start = start
        self.selection_end = start if end is None else end
        self._clamp()

    def _replace_selection(self, new_text: str, keep_selected: bool = True) -> None:
        start = self.selection_start
        self.text = self.text[:start] + new_text + self.text[self.selection_end:]
        if keep_selected:
            self.select(start, start + len(new_text))
        else:
            self.select(start + len(new_text))

    def insert(self, text: str) -> None:
        """Replace the selection with ``text`` and put the cursor after it."""
        self._replace_selection(text, keep_selected=False)

    def apply_style(self, kind: str) -> None:
        """Toggle ``kind`` around the selection.

        Applying the same style twice to the resulting selection restores the
        original text.
        """
        try:
            style = STYLES[kind]
        except KeyError:
            raise ValueError(f"Unknown style: {kind}") from None

        selected = self.selected_text
        match = style.pattern.match(selected)
        new_text = match.group(1) if match else f"{style.before}{selected}{style.after}"
        self._replace_selection(new_text, keep_selected=bool(selected))

    def style_status(self) -> dict[str, bool]:
        """Which styles enclose the cursor on its line."""
        line_start = self.text.rfind("\n", 0, self.selection_start) + 1
        line_end = self.text.find("\n", self.selection_start)
        line = self.text[line_start:] if line_end == -1 else self.text[line_start:line_end]
        col = self.selection_start - line_start

        def enclosed(style: Style) -> bool:
            opening = line.rfind(style.before, 0, col + len(style.before))
            closing = line.find(style.after, col)
            return opening != -1 and closing != -1 and opening < closing

        return {kind: enclosed(style) for kind, style in STYLES.items()}

    def insert_math_template(self, template: str, placeholder: str | None = None) -> None:
        """Insert a math snippet.

        A selection fills the placeholder. With nothing selected the
        placeholder of the inserted snippet is left selected for typing over.
        Selecting a bare container placeholder and inserting again drops the
        surrounding ``$``.
        """
        selected = self.selected_text
        replacing_placeholder = selected in _CONTAINER_PLACEHOLDERS
        if replacing_placeholder:
            new_text = re.sub(r"\$$", "", re.sub(r"^\$", "", template))
        elif selected and placeholder:
            new_text = template.replace(placeholder, selected, 1)
        else:
            new_text = template

        start = self.selection_start
        self.insert(new_text)
        if placeholder and (not selected or replacing_placeholder):
            offset = new_text.find(placeholder)
            if offset != -1:
                self.select(start + offset, start + offset + len(placeholder))

    def insert_math(self, name: str) -> None:
        template, placeholder = MATH_TEMPLATES[name]
        self.insert_math_template(template, placeholder)

    def insert_table(self, rows: int = 2, cols: int = 2) -> None:
        """Insert a Markdown table skeleton and select the first header cell."""
        if rows < 1 or cols < 1:
            raise ValueError("a table needs at least one row and one column")
        headers = [f"Column {i + 1}" for i in range(cols)]
        lines = [
            "| " + " | ".join(headers) + " |",
            "|" + "|".join([" --- "] * cols) + "|",
        ]
        lines.extend("|" + "|".join(["     "] * cols) + "|" for _ in range(rows))
        prefix = "\n" if self.selection_start and self.text[self.selection_start - 1] != "\n" else ""
        table = prefix + "\n".join(lines) + "\n"

        start = self.selection_start
        self.insert(table)
        first = start + len(prefix) + 2
        self.select(first, first + len(headers[0]))

    def wrap_on_type(self, char: str) -> bool:
        """Handle a typed ``$`` or ``<`` while text is selected.

        The selection is wrapped in the matching pair instead of being
        replaced. Returns False when the keystroke should be handled
        normally.
        """
        if char not in WRAP_PAIRS or self.selection_start == self.selection_end:
            return False
        self._replace_selection(f"{char}{self.selected_text}{WRAP_PAIRS[char]}")
        return True

    def begin_upload(self, name: str) -> str:
        """Insert an upload placeholder line and return its id."""
        upload_id = uuid.uuid4().hex[:6]
        self.insert(UPLOAD_PLACEHOLDER.format(name=name, upload_id=upload_id))
        self.pending_uploads.add(upload_id)
        return upload_id

    def complete_upload(self, upload_id: str, name: str, url: str) -> bool:
        """Swap the placeholder line of ``upload_id`` for ``![name](url)``.

        Returns False when the placeholder has been edited away.
        """
        self.pending_uploads.discard(upload_id)
        marker = self.text.find(f"{{{upload_id}}}")
        if marker == -1:
            return False

        line_start = self.text.rfind("\n", 0, marker) + 1
        line_end = self.text.find("\n", marker)
        if line_end == -1:
            line_end = len(self.text)
        replacement = f"![{name}]({url})"
        delta = len(replacement) - (line_end - line_start)

        def shift(pos: int) -> int:
            if pos >= line_end:
                return pos + delta
            return min(pos, line_start + len(replacement))

        start, end = shift(self.selection_start), shift(self.selection_end)
        self.text = self.text[:line_start] + replacement + self.text[line_end:]
        self.select(start, end)
        return True

    def fail_upload(self, upload_id: str) -> None:
        """Stop tracking a failed upload; its placeholder stays in the text."""
        self.pending_uploads.discard(upload_id)


__all__ = ["TextBuffer", "STYLES", "MATH_TEMPLATES", "UPLOAD_PLACEHOLDER"]
