"""
DataTable component for the admin CRUD lists.

Columns are (header, accessor) pairs; accessors return plain text which is
escaped here. Each row gets Edit and Delete links built from the base path.
"""

from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .base import Component


Column = Tuple[str, Callable[[Mapping[str, Any]], Any]]


class DataTable(Component):
    def __init__(
        self,
        columns: Sequence[Column],
        rows: Iterable[Mapping[str, Any]],
        *,
        base_path: str,
        caption: Optional[str] = None,
        empty_text: str = "Nothing here yet",
    ) -> None:
        self.columns = list(columns)
        self.rows: List[Mapping[str, Any]] = list(rows)
        self.base_path = base_path.rstrip("/")
        self.caption = caption
        self.empty_text = empty_text

    def render(self) -> str:
        if not self.rows:
            return f'<div class="card empty-state"><p>{self.escape(self.empty_text)}</p></div>'
        head = "".join(f'<th scope="col">{self.escape(header)}</th>' for header, _ in self.columns)
        body = "".join(self._render_row(row) for row in self.rows)
        caption_html = f'<caption class="sr-only">{self.escape(self.caption)}</caption>' if self.caption else ""
        return f"""
        <div class="table-wrapper">
            <table class="data-table">
                {caption_html}
                <thead><tr>{head}<th scope="col"><span class="sr-only">Actions</span></th></tr></thead>
                <tbody>{body}</tbody>
            </table>
        </div>
        """

    def _render_row(self, row: Mapping[str, Any]) -> str:
        cells = "".join(f"<td>{self.escape(self._text(accessor(row)))}</td>" for _, accessor in self.columns)
        row_id = self.escape(row.get("id"))
        actions = (
            f'<a class="btn btn-secondary btn-sm" href="{self.base_path}/{row_id}/edit">Edit</a>'
            f'<a class="btn btn-danger btn-sm" href="{self.base_path}/{row_id}/delete">Delete</a>'
        )
        return f'<tr data-row-id="{row_id}">{cells}<td class="table-actions">{actions}</td></tr>'

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return "—"
        if value is True:
            return "Yes"
        if value is False:
            return "No"
        return str(value)
