"""
ProgressSummary component.

Statistics tiles (sessions completed, current level, average score) and the
exam score history as a table.
"""

from typing import Any, Mapping, Sequence

from records import ExamScore
from tutoring.progress import format_score

from ..base import Component
from ..formatting import format_date, format_datetime


class ProgressSummary(Component):
    def __init__(self, progress: Mapping[str, Any], *, average: int, entries: Sequence[ExamScore]):
        self.progress = progress
        self.average = average
        self.entries = list(entries)

    def render(self) -> str:
        completed = int(self.progress.get("sessions_completed") or 0)
        remaining = int(self.progress.get("sessions_remaining") or 0)
        exams = len(self.entries)
        tiles = [
            ("Sessions Completed", str(completed), f"{remaining} remaining"),
            ("Current Level", str(self.progress.get("level") or ""), "Keep up the great work!"),
            ("Average Score", str(self.average), f"Based on {exams} exam{'' if exams == 1 else 's'}"),
        ]
        tiles_html = "".join(
            '<div class="stat-tile">'
            f'<p class="stat-label">{self.escape(label)}</p>'
            f'<p class="stat-value">{self.escape(value)}</p>'
            f'<p class="stat-hint">{self.escape(hint)}</p>'
            "</div>"
            for label, value, hint in tiles
        )
        updated = self.progress.get("updated_at")
        updated_html = f'<p class="text-muted">Last updated {self.escape(format_datetime(updated))}</p>' if updated else ""
        return f"""
        <section class="progress-summary" aria-label="Progress overview">
            <div class="stat-grid">{tiles_html}</div>
            {updated_html}
        </section>
        {self._render_scores()}
        """

    def _render_scores(self) -> str:
        if not self.entries:
            return ""
        rows = "".join(
            f"<tr><td>{self.escape(format_date(entry.date))}</td><td>{self.escape(format_score(entry.score))}</td></tr>"
            for entry in self.entries
        )
        return f"""
        <section class="card">
            <h2 class="card-title">Individual Exam Scores</h2>
            <table class="data-table">
                <thead><tr><th scope="col">Date</th><th scope="col">Score</th></tr></thead>
                <tbody>{rows}</tbody>
            </table>
        </section>
        """
