"""Data structures describing the typed content blocks of a document."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class BlockKindTag(Enum):
    PARAGRAPH = "paragraph"
    HEADER = "header"
    LIST_ITEM = "list_item"
    CHART_EMBED = "chart"
    IMAGE_EMBED = "image"
    UNKNOWN = "unknown"


EMBED_TAGS = frozenset({BlockKindTag.CHART_EMBED, BlockKindTag.IMAGE_EMBED})
LIST_STYLES = ("ordered", "bullet")


@dataclass(frozen=True)
class BlockKind:
    """Closed set of block kinds understood by the line grid.

    ``level`` is only meaningful for headers (1..4) and ``list_style`` only
    for list items. Use the constructors rather than building instances by
    hand so the combination is always valid.
    """

    tag: BlockKindTag
    level: int = 0
    list_style: Optional[str] = None

    def __post_init__(self):
        if self.tag is BlockKindTag.HEADER and not 1 <= self.level <= 4:
            raise ValueError(f"Header level must be between 1 and 4, got {self.level}")
        if self.tag is BlockKindTag.LIST_ITEM and self.list_style not in LIST_STYLES:
            raise ValueError(f"Unknown list style: {self.list_style!r}")

    @classmethod
    def paragraph(cls) -> "BlockKind":
        return cls(BlockKindTag.PARAGRAPH)

    @classmethod
    def header(cls, level: int) -> "BlockKind":
        return cls(BlockKindTag.HEADER, level=int(level))

    @classmethod
    def list_item(cls, style: str = "bullet") -> "BlockKind":
        return cls(BlockKindTag.LIST_ITEM, list_style=style)

    @classmethod
    def chart(cls) -> "BlockKind":
        return cls(BlockKindTag.CHART_EMBED)

    @classmethod
    def image(cls) -> "BlockKind":
        return cls(BlockKindTag.IMAGE_EMBED)

    @classmethod
    def unknown(cls) -> "BlockKind":
        return cls(BlockKindTag.UNKNOWN)

    @classmethod
    def from_format(cls, formats: Optional[dict]) -> "BlockKind":
        """Map an editor line-format dictionary onto a block kind.

        Embeds win over line formats, then headers, then lists. Anything the
        grid does not know about is reported as ``UNKNOWN``.
        """
        if not formats:
            return cls.paragraph()
        if "chart" in formats:
            return cls.chart()
        if "image" in formats:
            return cls.image()
        header = formats.get("header")
        if header is not None and header is not False:
            try:
                return cls.header(int(header))
            except (TypeError, ValueError):
                return cls.unknown()
        list_style = formats.get("list")
        if list_style:
            return cls.list_item(list_style) if list_style in LIST_STYLES else cls.unknown()
        return cls.paragraph()

    @property
    def is_embed(self) -> bool:
        return self.tag in EMBED_TAGS

    def to_dict(self) -> dict:
        data = {"tag": self.tag.value}
        if self.level:
            data["level"] = self.level
        if self.list_style is not None:
            data["list_style"] = self.list_style
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "BlockKind":
        if not data:
            return cls.paragraph()
        try:
            tag = BlockKindTag(data.get("tag", "paragraph"))
        except ValueError:
            return cls.unknown()
        try:
            return cls(tag, level=int(data.get("level", 0)), list_style=data.get("list_style"))
        except (TypeError, ValueError):
            return cls.unknown()


@dataclass
class Block:
    """A content block together with its document-offset footprint.

    Text blocks occupy ``text_length`` characters plus a trailing line
    separator. Embeds occupy exactly one offset unit whatever their height.
    """

    kind: BlockKind
    document_length: int
    text_length: int = 0
    measured_height: Optional[float] = None
    measured_width: Optional[float] = None
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.kind.is_embed:
            self.document_length = 1
            self.text_length = 0
        elif not 0 <= self.text_length <= self.document_length:
            raise ValueError(
                f"Text length {self.text_length} does not fit a block of length {self.document_length}"
            )

    @classmethod
    def text(cls, text: str = "", kind: Optional[BlockKind] = None, **metadata) -> "Block":
        kind = kind or BlockKind.paragraph()
        if kind.is_embed:
            raise ValueError("Use Block.embed for embed kinds")
        metadata.setdefault("text", text)
        return cls(kind=kind, document_length=len(text) + 1, text_length=len(text), metadata=metadata)

    @classmethod
    def embed(cls, kind: BlockKind, config: Optional[dict] = None,
              measured_height: Optional[float] = None) -> "Block":
        if not kind.is_embed:
            raise ValueError(f"{kind.tag.value} is not an embed kind")
        return cls(
            kind=kind,
            document_length=1,
            measured_height=measured_height,
            metadata={"config": dict(config or {})},
        )

    @property
    def is_embed(self) -> bool:
        return self.kind.is_embed

    @property
    def has_separator(self) -> bool:
        return not self.is_embed and self.document_length > self.text_length

    def to_dict(self) -> dict:
        data = asdict(self)
        data["kind"] = self.kind.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Block":
        kwargs = dict(data)
        kind = BlockKind.from_dict(kwargs.pop("kind", None))
        if "document_length" not in kwargs:
            text = kwargs.get("metadata", {}).get("text", "")
            kwargs["text_length"] = len(text)
            kwargs["document_length"] = 1 if kind.is_embed else len(text) + 1
        kwargs["metadata"] = dict(kwargs.get("metadata") or {})
        return cls(kind=kind, **kwargs)


__all__ = ["BlockKindTag", "BlockKind", "Block", "EMBED_TAGS", "LIST_STYLES"]
