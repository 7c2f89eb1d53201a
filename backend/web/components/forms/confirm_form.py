"""Delete confirmation form (stands in for a browser confirm() prompt)."""

from ..base import Component
from .submit import SubmitButton


class DeleteConfirmForm(Component):
    """Ask before deleting; only `confirm=yes` makes the POST delete anything."""

    def __init__(self, *, action: str, cancel_href: str, prompt: str, summary: str, csrf_token: str):
        self.action = action
        self.cancel_href = cancel_href
        self.prompt = prompt
        self.summary = summary
        self.csrf_token = csrf_token

    def render(self) -> str:
        return f"""
        <section class="card confirm-card" aria-labelledby="confirm-title">
            <h2 id="confirm-title">{self.escape(self.prompt)}</h2>
            <p class="confirm-summary">{self.escape(self.summary)}</p>
            <form method="post" action="{self.escape(self.action)}" class="confirm-form">
                <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
                <div class="form-actions">
                    {SubmitButton("Delete", variant="danger", name="confirm", value="yes").render()}
                    <a class="btn btn-secondary" href="{self.escape(self.cancel_href)}">Cancel</a>
                </div>
            </form>
        </section>
        """
