"""Ordered block sequence and its document-offset arithmetic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from .block import Block, BlockKind


class EmbedInsertion(NamedTuple):
    block_index: int
    offset: int
    caret: int
    split: bool


@dataclass
class Document:
    """A document as the line grid sees it: blocks and their offset lengths.

    Every embed reserves one trailing separator offset on top of its own
    unit, so ``document_length()`` counts two per embed while positional
    offsets only advance by one.
    """

    blocks: List[Block] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def embed_count(self) -> int:
        return sum(1 for blk in self.blocks if blk.is_embed)

    def positional_length(self) -> int:
        return sum(blk.document_length for blk in self.blocks)

    def document_length(self) -> int:
        return self.positional_length() + self.embed_count

    def block_start(self, index: int) -> int:
        if not 0 <= index <= len(self.blocks):
            raise IndexError(f"Block index {index} out of range")
        return sum(blk.document_length for blk in self.blocks[:index])

    def block_index_at(self, offset: int) -> int:
        """Return the index of the block whose offset range contains ``offset``.

        Offsets at or past the positional end map to the last block; -1 for
        an empty document.
        """
        if not self.blocks:
            return -1
        start = 0
        for i, blk in enumerate(self.blocks):
            if offset < start + blk.document_length:
                return i
            start += blk.document_length
        return len(self.blocks) - 1

    def remove_block(self, index: int) -> Block:
        return self.blocks.pop(index)

    def insert_embed(self, offset: int, kind: BlockKind, config: Optional[dict] = None,
                     measured_height: Optional[float] = None) -> EmbedInsertion:
        """Insert an atomic embed at ``offset``.

        Existing offsets >= ``offset`` move by exactly one. A text block that
        contains ``offset`` strictly inside it is split in two around the
        embed. The returned caret sits immediately after the embed.
        """
        offset = max(0, min(int(offset), self.positional_length()))
        embed = Block.embed(kind, config, measured_height=measured_height)

        index = len(self.blocks)
        split = False
        start = 0
        for i, blk in enumerate(self.blocks):
            end = start + blk.document_length
            if offset == start:
                index = i
                break
            if start < offset < end:
                # Embeds are one unit long, so only text blocks get here.
                left, right = self._split_text_block(blk, offset - start)
                self.blocks[i:i + 1] = [left, right]
                index = i + 1
                split = True
                break
            start = end

        self.blocks.insert(index, embed)
        return EmbedInsertion(block_index=index, offset=offset, caret=offset + 1, split=split)

    @staticmethod
    def _split_text_block(blk: Block, at: int) -> tuple[Block, Block]:
        text = blk.metadata.get("text")
        left_meta = dict(blk.metadata)
        right_meta = dict(blk.metadata)
        if isinstance(text, str):
            left_meta["text"] = text[:at]
            right_meta["text"] = text[at:]
        left_text = min(at, blk.text_length)
        left = Block(kind=blk.kind, document_length=at, text_length=left_text, metadata=left_meta)
        right = Block(
            kind=blk.kind,
            document_length=blk.document_length - at,
            text_length=max(0, blk.text_length - at),
            metadata=right_meta,
        )
        return left, right

    def merge_text_blocks(self, index: int) -> None:
        """Join block ``index`` with the following text block of the same kind."""
        left, right = self.blocks[index], self.blocks[index + 1]
        if left.is_embed or right.is_embed:
            raise ValueError("Only text blocks can be merged")
        meta = dict(right.metadata)
        if isinstance(left.metadata.get("text"), str) and isinstance(right.metadata.get("text"), str):
            meta["text"] = left.metadata["text"] + right.metadata["text"]
        merged = Block(
            kind=left.kind,
            document_length=left.document_length + right.document_length,
            text_length=left.text_length + right.text_length,
            metadata=meta,
        )
        self.blocks[index:index + 2] = [merged]

    def to_dict(self) -> dict:
        return {"blocks": [blk.to_dict() for blk in self.blocks]}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Document":
        if not data:
            return cls()
        return cls(blocks=[Block.from_dict(b) for b in data.get("blocks", [])])


__all__ = ["Document", "EmbedInsertion"]
