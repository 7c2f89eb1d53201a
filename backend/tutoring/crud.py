"""
CRUD View Controller: one authenticated list view with a create/edit dialog.

State machine:
    UNAUTHORIZED <- guard() fails (nothing is fetched)
    LOADING -> EMPTY | POPULATED <-> DIALOG_OPEN

The controller never touches the Record Store before `guard()` has passed.
Mutations are never optimistic: a successful submit or delete re-fetches the
list from scratch, or leaves that one fetch to the page a web route redirects
to. Every outcome is reported as a Notice; store failures are
logged with the operation and surfaced with a generic message.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from identity_access.holder import IdentityHolder
from records import Filter, RecordStoreError, RecordStoreProtocol

from .entities import EntitySpec
from .forms import FormValidationError


logger = logging.getLogger("tutordesk.tutoring")


class ViewState(str, Enum):
    UNAUTHORIZED = "unauthorized"
    LOADING = "loading"
    EMPTY = "empty"
    POPULATED = "populated"
    DIALOG_OPEN = "dialog_open"


@dataclass(frozen=True)
class Notice:
    level: str
    title: str
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls("success", "Success", message)

    @classmethod
    def error(cls, message: str, *, title: str = "Error") -> "Notice":
        return cls("error", title, message)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Notice":
        return cls(str(data.get("level", "success")), str(data.get("title", "")), str(data.get("message", "")))


class CrudViewController:
    """Generic list/dialog/delete controller driven by an EntitySpec."""

    def __init__(
        self,
        spec: EntitySpec,
        store: RecordStoreProtocol,
        identity: IdentityHolder,
        *,
        admin_only: bool = True,
    ) -> None:
        self.spec = spec
        self.store = store
        self.identity = identity
        self.admin_only = admin_only
        self.state = ViewState.LOADING
        self.loading = True
        self.rows: List[Dict[str, Any]] = []
        self.form: Dict[str, str] = spec.blank_form()
        self.editing_id: Optional[str] = None
        self.error: Optional[str] = None
        self.choices: Dict[str, List[Dict[str, Any]]] = {}
        self.notices: List[Notice] = []
        self._authorized = False

    # --- Guard -------------------------------------------------------------------

    def guard(self) -> bool:
        """Check identity (and admin rights for admin-only views) before any fetch."""
        allowed = self.identity.is_authenticated and (self.identity.is_admin or not self.admin_only)
        self._authorized = allowed
        if not allowed:
            self.state = ViewState.UNAUTHORIZED
            self.loading = False
        return allowed

    # --- List --------------------------------------------------------------------

    def load(self) -> List[Dict[str, Any]]:
        if not self._authorized:
            return []
        self.loading = True
        try:
            self.rows = self.spec.fetch(self.store)
        except RecordStoreError as exc:
            logger.error("Fetching %s failed during %s", self.spec.table, exc.operation)
            self._notify(Notice.error(f"Failed to load {self.spec.plural.lower()}"))
        finally:
            self.loading = False
        if self.state != ViewState.DIALOG_OPEN:
            self.state = ViewState.POPULATED if self.rows else ViewState.EMPTY
        return self.rows

    # --- Dialog ------------------------------------------------------------------

    def open_create(self) -> bool:
        if not self._authorized:
            return False
        self.editing_id = None
        self.form = self.spec.blank_form()
        self.error = None
        self.state = ViewState.DIALOG_OPEN
        return True

    def open_edit(self, row_id: str) -> bool:
        if not self._authorized:
            return False
        row = next((r for r in self.rows if str(r.get("id")) == row_id), None)
        if row is None:
            try:
                row = self.store.maybe_single(self.spec.table, filters=[Filter.eq("id", row_id)])
            except RecordStoreError as exc:
                logger.error("Loading %s %s for edit failed during %s", self.spec.table, row_id, exc.operation)
                self._notify(Notice.error(f"Failed to load {self.spec.singular.lower()}"))
                return False
        if row is None:
            self._notify(Notice.error(f"{self.spec.singular} not found"))
            return False
        self.editing_id = row_id
        self.form = self.spec.form_from_row(row)
        self.error = None
        self.state = ViewState.DIALOG_OPEN
        return True

    def load_choices(self) -> Dict[str, List[Dict[str, Any]]]:
        """Fetch option lists for the dialog (e.g. the student selector)."""
        if not self._authorized:
            return {}
        try:
            self.choices = self.spec.load_choices(self.store)
        except RecordStoreError as exc:
            logger.error("Loading choices for %s failed during %s", self.spec.table, exc.operation)
            self.choices = {}
        return self.choices

    def close_dialog(self) -> None:
        self.editing_id = None
        self.form = self.spec.blank_form()
        self.error = None
        self.state = ViewState.POPULATED if self.rows else ViewState.EMPTY

    # --- Mutations ---------------------------------------------------------------

    def submit(self, form: Mapping[str, Any], editing_id: Optional[str] = None, *, refetch: bool = True) -> bool:
        """Validate and insert/update; on success close the dialog and re-fetch.

        Pass `refetch=False` when the caller redirects to a page that loads the
        list itself, so the mutation still costs one fetch.
        """
        if not self._authorized:
            return False
        self.state = ViewState.DIALOG_OPEN
        self.editing_id = editing_id
        self.form = self._editable(form)
        try:
            payload = self.spec.parse_form(self.form)
        except FormValidationError as exc:
            self.error = exc.message
            self._notify(Notice.error(exc.message))
            return False

        action = "updated" if editing_id else "created"
        try:
            if editing_id:
                for name in self.spec.locked_on_edit:
                    payload.pop(name, None)
                if self.store.update(self.spec.table, editing_id, payload) is None:
                    self.error = f"{self.spec.singular} not found"
                    self._notify(Notice.error(self.error))
                    return False
            else:
                self.store.insert(self.spec.table, payload)
        except RecordStoreError as exc:
            logger.error("Saving %s failed during %s", self.spec.table, exc.operation)
            self.error = self.spec.failure_message("save")
            self._notify(Notice.error(self.error))
            return False

        logger.info("%s %s", self.spec.singular, action)
        self._notify(Notice.success(self.spec.success_message(action)))
        self.close_dialog()
        if refetch:
            self.load()
        return True

    def delete(self, row_id: str, *, confirmed: bool, refetch: bool = True) -> bool:
        """Delete by id after explicit confirmation, then re-fetch once (see `submit`)."""
        if not self._authorized or not confirmed:
            return False
        try:
            self.store.delete(self.spec.table, row_id)
        except RecordStoreError as exc:
            logger.error("Deleting %s %s failed during %s", self.spec.table, row_id, exc.operation)
            self._notify(Notice.error(self.spec.failure_message("delete")))
            return False
        logger.info("%s deleted", self.spec.singular)
        self._notify(Notice.success(self.spec.success_message("deleted")))
        if refetch:
            self.load()
        return True

    # --- Helpers -----------------------------------------------------------------

    def _editable(self, form: Mapping[str, Any]) -> Dict[str, str]:
        # Only the spec's fields survive; absent inputs (unchecked boxes) become "".
        return {name: "" if form.get(name) is None else str(form.get(name)) for name in self.spec.blank_form()}

    def _notify(self, notice: Notice) -> None:
        self.notices.append(notice)


__all__ = ["ViewState", "Notice", "CrudViewController"]
