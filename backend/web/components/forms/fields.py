"""
Form field components.

Every field renders inside the same FormField wrapper so labels, help and
error text stay consistent across the login, contact and admin forms.
"""

from typing import Any, Dict, List, Optional

from ..base import Component


class FormField(Component):
    """Wrapper that renders label, input slot, help, and error text."""

    def __init__(
        self,
        field_id: str,
        label: str,
        *,
        required: bool = False,
        help_text: Optional[str] = None,
        error_text: Optional[str] = None,
    ) -> None:
        self.field_id = field_id
        self.label = label
        self.required = required
        self.help_text = help_text
        self.error_text = error_text

    def render(self, input_html: str) -> str:
        state_class = " form-field--error" if self.error_text else ""
        required_marker = '<span class="form-required" aria-hidden="true">*</span>' if self.required else ""
        help_html = (
            f'<p class="form-help" id="{self.field_id}-help">{self.escape(self.help_text)}</p>'
            if self.help_text
            else ""
        )
        error_html = (
            f'<p class="form-error" role="alert" id="{self.field_id}-error">{self.escape(self.error_text)}</p>'
            if self.error_text
            else ""
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-label")
        return (
            f'<div class="form-field{state_class}">'
            f"<label {label_attrs}>{self.escape(self.label)}{required_marker}</label>"
            f"{input_html}{help_html}{error_html}"
            "</div>"
        )

    def _aria(self) -> Dict[str, Any]:
        return {
            "aria_describedby": f"{self.field_id}-help" if self.help_text else None,
            "aria_invalid": "true" if self.error_text else "false",
        }


class TextInputField(FormField):
    """Single-line input; `input_type` covers text, email, number and datetime-local."""

    def render(
        self,
        *,
        value: str = "",
        input_type: str = "text",
        autocomplete: Optional[str] = None,
        placeholder: Optional[str] = None,
        **attrs: Any,
    ) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type=input_type,
            value=value,
            autocomplete=autocomplete,
            placeholder=placeholder,
            required=self.required,
            **self._aria(),
            **attrs,
        )
        return super().render(f"<input {input_attrs}>")


class TextAreaField(FormField):
    def render(self, value: str = "", rows: int = 5, **attrs: Any) -> str:
        textarea_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            rows=str(rows),
            required=self.required,
            **self._aria(),
            **attrs,
        )
        return super().render(f"<textarea {textarea_attrs}>{self.escape(value)}</textarea>")


class CheckboxField(FormField):
    """Checkbox posting "on" when checked; absent from the form when unchecked."""

    def render(self, *, checked: bool = False, **attrs: Any) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type="checkbox",
            value="on",
            checked=checked,
            class_="form-checkbox",
            **attrs,
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-check-label")
        return (
            '<div class="form-field form-field--checkbox">'
            f"<input {input_attrs}>"
            f"<label {label_attrs}>{self.escape(self.label)}</label>"
            "</div>"
        )


class SelectField(FormField):
    """Select box from (value, label) options with an optional empty choice."""

    def render(
        self,
        *,
        options: List[tuple],
        value: str = "",
        empty_label: Optional[str] = None,
        disabled: bool = False,
        **attrs: Any,
    ) -> str:
        option_html = []
        if empty_label is not None:
            option_html.append(f'<option value="">{self.escape(empty_label)}</option>')
        for option_value, option_label in options:
            selected = " selected" if str(option_value) == value else ""
            option_html.append(
                f'<option value="{self.escape(option_value)}"{selected}>{self.escape(option_label)}</option>'
            )
        select_attrs = self.attributes(
            id=self.field_id,
            # A disabled select is not submitted; the form carries a hidden copy instead.
            name=None if disabled else self.field_id,
            required=self.required and not disabled,
            disabled=disabled,
            class_="form-select",
            **self._aria(),
            **attrs,
        )
        return super().render(f"<select {select_attrs}>{''.join(option_html)}</select>")
