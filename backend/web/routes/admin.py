"""
Admin area: hub page plus one CRUD view per table.

Routes (all admin-only; everyone else is sent to /dashboard before any
Record Store call):
    GET  /admin                              hub with links to the four views
    GET  /admin/{entity}                     list
    GET  /admin/{entity}/new                 create dialog
    POST /admin/{entity}                     create
    GET  /admin/{entity}/{row_id}/edit       edit dialog
    POST /admin/{entity}/{row_id}/edit       update
    GET  /admin/{entity}/{row_id}/delete     confirmation
    POST /admin/{entity}/{row_id}/delete     delete (requires confirm=yes)

Mutations follow PRG: success pushes a toast and redirects (303) to the list,
validation or store failures re-render the dialog with the entered values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from components import DataTable, DeleteConfirmForm, EntityForm, MessageCard
from components.base import Component
from components.formatting import format_datetime
from rendering import csrf_error_response, layout_response, push_notices
from routes.security import csrf_token_for, validate_csrf
from storage_wiring import get_record_store
from tutoring import ENTITY_SPECS, CrudViewController


admin_router = APIRouter(tags=["Admin"])


def _exam_count(row: Mapping[str, Any]) -> int:
    scores = row.get("exam_scores")
    return len(scores) if isinstance(scores, list) else 0


def _messages_list(rows: List[Dict[str, Any]]) -> str:
    cards = [
        MessageCard(
            row,
            edit_href=f"/admin/messages/{row.get('id')}/edit",
            delete_href=f"/admin/messages/{row.get('id')}/delete",
        ).render()
        for row in rows
    ]
    return f'<div class="card-stack">{"".join(cards)}</div>'


@dataclass(frozen=True)
class AdminView:
    title: str
    subtitle: str
    add_label: str
    empty_text: str
    render_rows: Callable[[List[Dict[str, Any]]], str]
    summary: Callable[[Mapping[str, str]], str]


ADMIN_VIEWS: Dict[str, AdminView] = {
    "students": AdminView(
        title="Manage Students",
        subtitle="View and edit student information",
        add_label="Add Student",
        empty_text="No students found",
        render_rows=lambda rows: DataTable(
            [
                ("Code", lambda r: r.get("student_code")),
                ("Name", lambda r: r.get("full_name")),
                ("Grade", lambda r: r.get("grade")),
                ("Age", lambda r: r.get("age")),
                ("Admin", lambda r: bool(r.get("is_admin"))),
            ],
            rows,
            base_path="/admin/students",
            caption="Students",
        ).render(),
        summary=lambda form: f"{form.get('full_name', '')} ({form.get('student_code', '')})",
    ),
    "sessions": AdminView(
        title="Manage Sessions",
        subtitle="Create, edit, and delete sessions",
        add_label="Add Session",
        empty_text="No sessions found",
        render_rows=lambda rows: DataTable(
            [
                ("Title", lambda r: r.get("title")),
                ("Date & Time", lambda r: format_datetime(r.get("date_time"))),
                ("Published", lambda r: "Published" if r.get("is_published") else "Draft"),
            ],
            rows,
            base_path="/admin/sessions",
            caption="Sessions",
        ).render(),
        summary=lambda form: form.get("title", ""),
    ),
    "progress": AdminView(
        title="Manage Progress",
        subtitle="Update student progress data",
        add_label="Add Progress",
        empty_text="No progress records found",
        render_rows=lambda rows: DataTable(
            [
                ("Student", lambda r: r.get("student_name")),
                ("Completed", lambda r: r.get("sessions_completed")),
                ("Remaining", lambda r: r.get("sessions_remaining")),
                ("Level", lambda r: r.get("level")),
                ("Exams", _exam_count),
            ],
            rows,
            base_path="/admin/progress",
            caption="Progress records",
        ).render(),
        summary=lambda form: f"Level: {form.get('level', '')}",
    ),
    "messages": AdminView(
        title="Messages",
        subtitle="View messages from students",
        add_label="Add Message",
        empty_text="No messages yet",
        render_rows=_messages_list,
        summary=lambda form: f"{form.get('name', '')}: {form.get('message', '')[:80]}",
    ),
}

HUB_CARDS = [
    ("/admin/sessions", "Manage Sessions", "Create, edit, and delete sessions", "Go to Sessions"),
    ("/admin/students", "Manage Students", "View and edit student information", "Go to Students"),
    ("/admin/progress", "Manage Progress", "Update student progress data", "Go to Progress"),
    ("/admin/messages", "View Messages", "Read messages from students", "Go to Messages"),
]


def _not_admin() -> RedirectResponse:
    return RedirectResponse(url="/dashboard", status_code=303, headers={"Cache-Control": "private, no-store"})


def _not_found(request: Request) -> HTMLResponse:
    content = '<div class="card empty-state"><h1>Not Found</h1><p>This admin view does not exist.</p></div>'
    return layout_response(request, title="Not Found", content=content, status_code=404)


def _open(request: Request, entity: str):
    """Return (controller, view) for an authorized admin, or a response to send instead."""
    spec = ENTITY_SPECS.get(entity)
    controller = CrudViewController(
        spec or ENTITY_SPECS["students"], get_record_store(), request.state.identity, admin_only=True
    )
    if not controller.guard():
        return None, _not_admin()
    if spec is None:
        return None, _not_found(request)
    return controller, ADMIN_VIEWS[entity]


def _header(view: AdminView, entity: str) -> str:
    return (
        '<header class="page-header page-header--actions">'
        "<div>"
        f"<h1>{Component.escape(view.title)}</h1>"
        f'<p class="text-muted">{Component.escape(view.subtitle)}</p>'
        "</div>"
        f'<a class="btn btn-primary" href="/admin/{entity}/new">+ {Component.escape(view.add_label)}</a>'
        "</header>"
    )


def _list_redirect(entity: str) -> RedirectResponse:
    return RedirectResponse(url=f"/admin/{entity}", status_code=303, headers={"Cache-Control": "private, no-store"})


def _dialog_page(
    request: Request,
    controller: CrudViewController,
    entity: str,
    *,
    status_code: int = 200,
) -> HTMLResponse:
    push_notices(request, controller.notices)
    spec = controller.spec
    editing = controller.editing_id is not None
    if editing:
        heading = f"Edit {spec.singular}"
        action = f"/admin/{entity}/{controller.editing_id}/edit"
    else:
        heading = f"Add New {spec.singular}"
        action = f"/admin/{entity}"
    form = EntityForm(
        entity,
        action=action,
        values=controller.form,
        csrf_token=csrf_token_for(request),
        submit_label="Update" if editing else "Create",
        error=controller.error,
        choices=controller.choices,
        locked=spec.locked_on_edit if editing else (),
        cancel_href=f"/admin/{entity}",
    )
    content = (
        f'<section class="card dialog-card" role="dialog" aria-labelledby="dialog-title">'
        f'<h1 id="dialog-title">{Component.escape(heading)}</h1>'
        f"{form.render()}"
        "</section>"
    )
    return layout_response(request, title=heading, content=content, status_code=status_code)


@admin_router.get("/admin", response_class=HTMLResponse)
async def admin_hub(request: Request):
    identity = request.state.identity
    if not (identity.is_authenticated and identity.is_admin):
        return _not_admin()
    cards = "".join(
        '<article class="card hub-card">'
        f'<h2 class="card-title">{Component.escape(title)}</h2>'
        f'<p class="text-muted">{Component.escape(description)}</p>'
        f'<a class="btn btn-primary btn-block" href="{href}">{Component.escape(button)}</a>'
        "</article>"
        for href, title, description, button in HUB_CARDS
    )
    content = (
        '<header class="page-header"><h1>Admin Area</h1>'
        '<p class="text-muted">Manage students, sessions, and progress</p></header>'
        f'<div class="card-grid">{cards}</div>'
    )
    return layout_response(request, title="Admin Area", content=content)


@admin_router.get("/admin/{entity}", response_class=HTMLResponse)
async def admin_list(request: Request, entity: str):
    controller, view = _open(request, entity)
    if controller is None:
        return view
    controller.load()
    push_notices(request, controller.notices)
    body = view.render_rows(controller.rows) if controller.rows else (
        f'<div class="card empty-state"><p>{Component.escape(view.empty_text)}</p></div>'
    )
    return layout_response(request, title=view.title, content=_header(view, entity) + body)


@admin_router.get("/admin/{entity}/new", response_class=HTMLResponse)
async def admin_new(request: Request, entity: str):
    controller, view = _open(request, entity)
    if controller is None:
        return view
    controller.open_create()
    controller.load_choices()
    return _dialog_page(request, controller, entity)


@admin_router.post("/admin/{entity}", response_class=HTMLResponse)
async def admin_create(request: Request, entity: str):
    form = await request.form()
    if not validate_csrf(request, form.get("csrf_token")):
        return csrf_error_response()
    controller, view = _open(request, entity)
    if controller is None:
        return view
    if not controller.submit(form, refetch=False):
        controller.load_choices()
        return _dialog_page(request, controller, entity, status_code=400)
    push_notices(request, controller.notices)
    return _list_redirect(entity)


@admin_router.get("/admin/{entity}/{row_id}/edit", response_class=HTMLResponse)
async def admin_edit(request: Request, entity: str, row_id: str):
    controller, view = _open(request, entity)
    if controller is None:
        return view
    if not controller.open_edit(row_id):
        push_notices(request, controller.notices)
        return _list_redirect(entity)
    controller.load_choices()
    return _dialog_page(request, controller, entity)


@admin_router.post("/admin/{entity}/{row_id}/edit", response_class=HTMLResponse)
async def admin_update(request: Request, entity: str, row_id: str):
    form = await request.form()
    if not validate_csrf(request, form.get("csrf_token")):
        return csrf_error_response()
    controller, view = _open(request, entity)
    if controller is None:
        return view
    if not controller.submit(form, editing_id=row_id, refetch=False):
        controller.load_choices()
        return _dialog_page(request, controller, entity, status_code=400)
    push_notices(request, controller.notices)
    return _list_redirect(entity)


@admin_router.get("/admin/{entity}/{row_id}/delete", response_class=HTMLResponse)
async def admin_delete_confirm(request: Request, entity: str, row_id: str):
    controller, view = _open(request, entity)
    if controller is None:
        return view
    if not controller.open_edit(row_id):
        push_notices(request, controller.notices)
        return _list_redirect(entity)
    confirm = DeleteConfirmForm(
        action=f"/admin/{entity}/{row_id}/delete",
        cancel_href=f"/admin/{entity}",
        prompt=controller.spec.delete_prompt,
        summary=view.summary(controller.form),
        csrf_token=csrf_token_for(request),
    )
    return layout_response(request, title=f"Delete {controller.spec.singular}", content=confirm.render())


@admin_router.post("/admin/{entity}/{row_id}/delete", response_class=HTMLResponse)
async def admin_delete(request: Request, entity: str, row_id: str):
    form = await request.form()
    if not validate_csrf(request, form.get("csrf_token")):
        return csrf_error_response()
    controller, view = _open(request, entity)
    if controller is None:
        return view
    confirmed = str(form.get("confirm", "")).lower() == "yes"
    # The list page the redirect lands on is the single re-fetch.
    controller.delete(row_id, confirmed=confirmed, refetch=False)
    push_notices(request, controller.notices)
    return _list_redirect(entity)
