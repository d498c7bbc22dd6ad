"""
CSV export utilities
"""
import csv
import io
from typing import Dict, Iterable, Iterator, List
from fastapi.responses import StreamingResponse


def iter_csv(headers: List[str], rows: Iterable[Dict], missing: str = "") -> Iterator[str]:
    """
    Yield CSV text chunk by chunk: the header line first, then one line per row.

    Columns absent from a row (or set to None) are written as `missing`.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=headers, quoting=csv.QUOTE_MINIMAL)

    def drain() -> str:
        chunk = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)
        return chunk

    writer.writeheader()
    yield drain()

    for row in rows:
        writer.writerow({
            header: missing if row.get(header) is None else str(row[header])
            for header in headers
        })
        yield drain()


def stream_csv(
    headers: List[str],
    rows: Iterable[Dict],
    filename: str = "export.csv",
    missing: str = "",
) -> StreamingResponse:
    """
    Stream CSV data as HTTP response

    Args:
        headers: List of column headers
        rows: Iterable of dictionaries keyed by header
        filename: Filename for Content-Disposition header
        missing: Placeholder for absent values

    Returns:
        StreamingResponse with CSV content
    """
    return StreamingResponse(
        iter_csv(headers, rows, missing=missing),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )
