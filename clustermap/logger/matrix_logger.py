"""Matrix display functionality for logs."""

import html
from typing import Any, Callable, List, Optional, Sequence

from clustermap.logger.base_logger import AlgorithmLogger
from clustermap.logger.formatting import format_distance


class MatrixLogger(AlgorithmLogger):
    """Extension of AlgorithmLogger with numeric matrix display support."""

    def matrix(
        self,
        matrix: Sequence[Sequence[Any]],
        labels: Optional[Sequence[str]] = None,
        format_func: Optional[Callable[[Any], str]] = None,
        title: str = "",
    ) -> None:
        """
        Display a matrix as ASCII art in the terminal and as a toggleable
        ASCII/table view in HTML.
        """
        if self.disabled or len(matrix) == 0:
            return

        if format_func is None:
            format_func = format_distance

        rows: List[List[str]] = [[format_func(cell) for cell in row] for row in matrix]
        row_labels = [str(label) for label in labels] if labels is not None else None

        if title:
            self.logger.info(f"\n{title}:")

        ascii_view = self._create_ascii_matrix(rows, row_labels)
        self.logger.info(ascii_view)

        matrix_wrapper = '<div class="matrix-container">'
        if title:
            matrix_wrapper += f"<h4>{html.escape(title)}</h4>"
        matrix_wrapper += """
        <div class="matrix-toggle">
            <button class="toggle-button active" data-view="table">Table</button>
            <button class="toggle-button" data-view="ascii">ASCII</button>
        </div>
        """
        matrix_wrapper += (
            '<div class="table-view matrix-view">'
            f"{self._create_table_matrix(rows, row_labels)}</div>"
        )
        matrix_wrapper += (
            '<div class="ascii-view matrix-view" style="display:none;">'
            f"<pre>{html.escape(ascii_view)}</pre></div>"
        )
        matrix_wrapper += "</div>"

        self._html_content.append(matrix_wrapper)

    def _create_ascii_matrix(
        self, rows: List[List[str]], labels: Optional[List[str]]
    ) -> str:
        width = max((len(cell) for row in rows for cell in row), default=1)
        if labels:
            width = max(width, max(len(label) for label in labels))
        label_width = max((len(label) for label in labels), default=0) if labels else 0

        lines: List[str] = []
        if labels:
            header = " " * label_width + "   " + " | ".join(
                label.rjust(width) for label in labels
            )
            lines.append(header)
        for r_idx, row in enumerate(rows):
            prefix = labels[r_idx].ljust(label_width) + " " if labels else ""
            lines.append(f"{prefix}[ {' | '.join(cell.rjust(width) for cell in row)} ]")
        return "\n".join(lines)

    def _create_table_matrix(
        self, rows: List[List[str]], labels: Optional[List[str]]
    ) -> str:
        parts = ['<table class="matrix-table">']
        if labels:
            parts.append(
                "<tr><th></th>"
                + "".join(f"<th>{html.escape(label)}</th>" for label in labels)
                + "</tr>"
            )
        for r_idx, row in enumerate(rows):
            parts.append("<tr>")
            if labels:
                parts.append(f"<th>{html.escape(labels[r_idx])}</th>")
            for cell in row:
                css = ' class="missing"' if cell == "-" else ""
                parts.append(f"<td{css}>{html.escape(cell)}</td>")
            parts.append("</tr>")
        parts.append("</table>")
        return "".join(parts)
