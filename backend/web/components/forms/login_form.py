"""Student code login form."""

from typing import Optional

from ..base import Component
from .fields import TextInputField
from .submit import SubmitButton


class LoginForm(Component):
    """Single-field form posting the student code to /login with CSRF protection."""

    def __init__(self, csrf_token: str, *, brand: str, error: Optional[str] = None, code: str = ""):
        self.csrf_token = csrf_token
        self.brand = brand
        self.error = error
        self.code = code

    def render(self) -> str:
        code_field = TextInputField(
            "student_code",
            "Student Code",
            required=True,
            error_text=self.error,
        ).render(
            value=self.code,
            autocomplete="off",
            placeholder="Enter your student code",
            class_="form-input",
            autofocus=True,
        )
        return f"""
        <section class="login-card" aria-labelledby="login-title">
            <h1 id="login-title">{self.escape(self.brand)}</h1>
            <p class="text-muted">Enter your student code to access your dashboard</p>
            <form method="post" action="/login" class="login-form">
                <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
                {code_field}
                <div class="form-actions">
                    {SubmitButton("Login").render()}
                </div>
            </form>
        </section>
        """
