import re
from dataclasses import dataclass, field
from html import unescape
from html.parser import HTMLParser


@dataclass(frozen=True)
class ScriptSignal:
    attrs: dict[str, str]
    body: str

    @property
    def is_external(self) -> bool:
        return bool(self.attrs.get("src", "").strip())

    @property
    def script_type(self) -> str:
        return self.attrs.get("type", "").strip().lower()


@dataclass(frozen=True)
class MetaSignal:
    key: str
    content: str


@dataclass(frozen=True)
class ElementSignal:
    """A rendered element with its collapsed text content and its parent's index."""

    index: int
    tag: str
    attrs: dict[str, str]
    text: str
    parent: int | None

    @property
    def naming(self) -> str:
        """class and id values, lowercased, for naming-convention matching."""
        return f"{self.attrs.get('class', '')} {self.attrs.get('id', '')}".lower().strip()


@dataclass(frozen=True)
class PageSignals:
    scripts: list[ScriptSignal] = field(default_factory=list)
    meta_tags: list[MetaSignal] = field(default_factory=list)
    elements: list[ElementSignal] = field(default_factory=list)
    title: str = ""

    def meta_content(self, *keys: str) -> str | None:
        """First non-empty content among `keys`, honoring key order over document order."""
        for key in keys:
            for meta in self.meta_tags:
                if meta.key == key and meta.content:
                    return meta.content
        return None

    def first_heading(self) -> str | None:
        for element in self.elements:
            if element.tag == "h1" and element.text:
                return element.text
        return None


_VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)
# Raw-text containers whose content is never visible page text.
_RAW_TEXT_TAGS = frozenset({"script", "style", "template", "noscript"})
# A repeated start tag implicitly closes the previous sibling (<li>One<li>Two).
_IMPLICIT_CLOSE_TAGS = frozenset({"li", "p", "option", "dt", "dd", "tr", "td", "th"})
_WHITESPACE_RE = re.compile(r"\s+")


class _SignalParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.scripts: list[ScriptSignal] = []
        self.meta_tags: list[MetaSignal] = []
        self.title_chunks: list[str] = []
        # Elements in document order; text is filled in when each one closes.
        self._elements: list[dict] = []
        self._open: list[dict] = []
        self._script_attrs: dict[str, str] | None = None
        self._script_chunks: list[str] = []
        self._raw_depth = 0
        # Only the document title counts; <title> inside inline SVG labels an icon.
        self._svg_depth = 0
        self._in_title = False
        self._title_seen = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        attrs_dict = {key.lower(): (value or "") for key, value in attrs}
        tag = tag.lower()
        if tag == "script":
            self._script_attrs = attrs_dict
            self._script_chunks = []
            return
        if tag in _RAW_TEXT_TAGS:
            self._raw_depth += 1
            return
        if self._raw_depth:
            return
        if tag == "svg":
            self._svg_depth += 1
        elif tag == "title" and not self._svg_depth and not self._title_seen:
            self._in_title = True

        if tag == "meta":
            # Meta tags: accept property/name/itemprop as key
            key = (
                attrs_dict.get("property")
                or attrs_dict.get("name")
                or attrs_dict.get("itemprop")
                or ""
            ).strip()
            content = attrs_dict.get("content", "").strip()
            if key and content:
                self.meta_tags.append(MetaSignal(key=key.lower(), content=unescape(content)))

        if tag in _IMPLICIT_CLOSE_TAGS and self._open and self._open[-1]["tag"] == tag:
            self._open.pop()

        parent = self._open[-1]["index"] if self._open else None
        frame = {
            "index": len(self._elements),
            "tag": tag,
            "attrs": attrs_dict,
            "chunks": [],
            "parent": parent,
        }
        self._elements.append(frame)
        if tag not in _VOID_TAGS:
            self._open.append(frame)

    def handle_data(self, data: str) -> None:
        if self._script_attrs is not None:
            self._script_chunks.append(data)
            return
        if self._raw_depth:
            return
        if self._in_title:
            self.title_chunks.append(data)
        for frame in self._open:
            frame["chunks"].append(data)

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag == "script":
            if self._script_attrs is not None:
                body = "".join(self._script_chunks).strip()
                self.scripts.append(ScriptSignal(attrs=self._script_attrs, body=body))
            self._script_attrs = None
            self._script_chunks = []
            return
        if tag in _RAW_TEXT_TAGS:
            self._raw_depth = max(0, self._raw_depth - 1)
            return
        if self._raw_depth:
            return
        if tag == "svg":
            self._svg_depth = max(0, self._svg_depth - 1)
        elif tag == "title" and self._in_title:
            self._in_title = False
            self._title_seen = True

        # Close the innermost matching element and anything left unclosed inside it.
        for position in range(len(self._open) - 1, -1, -1):
            if self._open[position]["tag"] == tag:
                del self._open[position:]
                return

    def elements(self) -> list[ElementSignal]:
        return [
            ElementSignal(
                index=frame["index"],
                tag=frame["tag"],
                attrs=frame["attrs"],
                text=_WHITESPACE_RE.sub(" ", "".join(frame["chunks"])).strip(),
                parent=frame["parent"],
            )
            for frame in self._elements
        ]


def extract_html_signals(html_text: str) -> PageSignals:
    parser = _SignalParser()
    parser.feed(html_text)
    parser.close()
    return PageSignals(
        scripts=parser.scripts,
        meta_tags=parser.meta_tags,
        elements=parser.elements(),
        title=_WHITESPACE_RE.sub(" ", "".join(parser.title_chunks)).strip(),
    )
