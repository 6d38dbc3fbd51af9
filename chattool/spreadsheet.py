import logging
from pathlib import Path
from typing import Any, List, Union

from openpyxl import load_workbook

from chattool.errors import ArtifactNotFound, SpreadsheetUnreadable

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 60

SPREADSHEET_PROMPT = (
    "Now generate C# code (a separate console app) that reads this Excel into a strongly typed object "
    "and validates required fields. Use ClosedXML. Output NuGet commands and the full code files."
)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def summarize_workbook(path: Union[str, Path], max_rows: int = DEFAULT_MAX_ROWS) -> str:
    """Render column A/B of the first worksheet, one line per row.

    Reading stops at the first row whose column A is blank, or after
    ``max_rows`` rows.
    """
    path = Path(path)
    try:
        exists = path.is_file()
    except OSError as exc:
        raise SpreadsheetUnreadable(path, str(exc)) from exc
    if not exists:
        raise ArtifactNotFound(path)
    try:
        wb = load_workbook(path, data_only=True)
    except Exception as exc:
        raise SpreadsheetUnreadable(path, str(exc)) from exc
    try:
        if not wb.worksheets:
            raise SpreadsheetUnreadable(path, "no worksheets")
        ws = wb.worksheets[0]
        lines: List[str] = [
            f"Workbook: {path.name}",
            f"Worksheet: {ws.title}",
            "Showing Column A (field) and Column B (value) rows:",
            "",
        ]
        rows = 0
        for r in range(1, max_rows + 1):
            a = cell_text(ws.cell(row=r, column=1).value)
            b = cell_text(ws.cell(row=r, column=2).value)
            if not a.strip():
                break
            lines.append(f"{r:02d}. A: {a} | B: {b}")
            rows += 1
    finally:
        wb.close()
    logger.info("workbook_summarized path=%s rows=%d", path, rows)
    return "\n".join(lines) + "\n"


def spreadsheet_message(summary: str) -> str:
    return f"Here is a summary of my Excel template:\n\n```\n{summary}\n```\n\n{SPREADSHEET_PROMPT}"
