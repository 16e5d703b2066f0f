"""Data models for styled text runs, lines and content."""

from dataclasses import dataclass, field

from postergen.fonts import FontFace, FontKey
from postergen.types import RGBA, Alignment
from postergen.utils.colors import BLACK, WHITE

DEFAULT_FONT_SIZE = 120.0

# Stand-in glyph measured in place of a trailing space
TRAILING_SPACE_STANDIN = "0"


@dataclass(frozen=True)
class TextStyle:
    """
    Inherited style context threaded through the markup tree.

    Frozen: elements derive a new context with dataclasses.replace(), so a
    subtree can never leak its overrides into its siblings.
    """

    font_key: FontKey
    font_size: float = DEFAULT_FONT_SIZE
    font_color: RGBA = BLACK
    background_color: RGBA = WHITE
    alignment: Alignment | None = None


@dataclass
class Run:
    """
    One contiguous fragment of text drawn with a single style.

    Attributes:
        content: Text to draw.
        font_size: Pixel size.
        font_color: Glyph color.
        background_color: Fill behind the run's box; fully transparent means none.
        font_key: Requested font variant.
        face: Resolved face. Set during parsing, required for measuring and drawing.
        line_index: 1-based index of the owning line, used for default alignment.
        alignment: Explicit alignment, or None to use the line default.
    """

    content: str
    font_size: float
    font_color: RGBA
    background_color: RGBA
    font_key: FontKey
    face: FontFace | None = None
    line_index: int = 0
    alignment: Alignment | None = None

    @classmethod
    def from_style(cls, content: str, style: TextStyle, line_index: int) -> "Run":
        return cls(
            content=content,
            font_size=style.font_size,
            font_color=style.font_color,
            background_color=style.background_color,
            font_key=style.font_key,
            line_index=line_index,
            alignment=style.alignment,
        )

    def resolved_alignment(self) -> Alignment:
        """
        Effective alignment of this run.

        Without an explicit alignment, runs on the first line go left and runs
        on every later line go right.
        """
        if self.alignment is not None:
            return self.alignment
        return "left" if self.line_index == 1 else "right"

    def _require_face(self) -> FontFace:
        if self.face is None:
            raise RuntimeError(f"Run {self.content!r} has no resolved font face")
        return self.face

    def size(self) -> tuple[int, int]:
        """
        Measure the run's glyph box.

        A single trailing space is measured as a stand-in glyph, since
        rasterizers give trailing whitespace no width and the gap would vanish.

        Returns:
            (width, height) in pixels.
        """
        face = self._require_face()
        text = self.content
        if text.endswith(" "):
            text = text[:-1] + TRAILING_SPACE_STANDIN
        return face.measure(text, self.font_size)

    def ascent(self) -> int:
        return self._require_face().ascent(self.font_size)


@dataclass
class Line:
    """Runs sharing one line, in document order."""

    runs: list[Run] = field(default_factory=list)
    max_run_height: int = 0

    def is_empty(self) -> bool:
        return not self.runs

    def push(self, run: Run) -> None:
        """Append a run and grow the line to fit it."""
        _, height = run.size()
        self.max_run_height = max(self.max_run_height, height)
        self.runs.append(run)

    def line_height(self, spacing: float) -> int:
        """
        Height of the line scaled by a spacing factor, rounded half up.

        Args:
            spacing: 1.0 for the line's own box, the line spacing factor for
                the vertical advance to the next line.
        """
        return int(self.max_run_height * spacing + 0.5)


@dataclass
class Content:
    """Parsed document: always at least one (possibly empty) line."""

    lines: list[Line] = field(default_factory=lambda: [Line()])

    def new_line(self) -> None:
        self.lines.append(Line())

    def line_size(self) -> int:
        return len(self.lines)

    def push(self, run: Run) -> None:
        """Append a run to the last line."""
        self.lines[-1].push(run)

    def content_height(self, spacing: float) -> int:
        """Total height of all lines advanced with the given spacing."""
        return sum(line.line_height(spacing) for line in self.lines)
