import json
import logging
import sys

from config.settings import settings
from modules.layout.anchor import compute_anchor_for
from modules.layout.caret_mapper import CaretMapper
from modules.layout.embeds import ChartEmbedMeasurer
from modules.layout.monospace import MonospaceTextLayout
from modules.layout.snapshot import LayoutSnapshot
from schemas.document import Document

logger = logging.getLogger(__name__)


def load_document(path: str) -> Document:
    with open(path, "r", encoding="utf-8") as f:
        return Document.from_dict(json.load(f))


def describe(document: Document, snapshot: LayoutSnapshot) -> list[str]:
    lines = []
    for span in snapshot.table:
        kind = span.kind
        label = kind.tag.value if not kind.level else f"{kind.tag.value}{kind.level}"
        flag = "" if span.measured else " (unmeasured)"
        lines.append(
            f"#{span.block_index:<3} {label:<10} rows {span.start_row}-{span.end_row - 1} "
            f"offset {span.start_offset} len {span.block.document_length} "
            f"anchor {compute_anchor_for(span, settings)}{flag}"
        )
    lines.append(f"total rows {snapshot.total_rows}, document length {document.document_length()}")
    return lines


def main():
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if len(sys.argv) < 2:
        print("usage: main.py DOCUMENT.json [X Y]")
        return 2

    document = load_document(sys.argv[1])
    measurer = ChartEmbedMeasurer()
    snapshot = LayoutSnapshot.build(document, settings, measurer)
    for line in describe(document, snapshot):
        print(line)

    if len(sys.argv) >= 4:
        x, y = float(sys.argv[2]), float(sys.argv[3])
        layout = MonospaceTextLayout(document, settings, measurer)
        offset = CaretMapper(snapshot, document, layout, settings).resolve(x, y)
        logger.info("Resolved (%s, %s) against layout %d", x, y, snapshot.generation)
        print(f"caret at ({x}, {y}) -> offset {offset}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
