"""
Student-facing pages: dashboard, recorded sessions, materials, own progress
and the contact form.

Every page runs a CrudViewController with `admin_only=False` so the identity
check happens before any Record Store call and store failures surface as toasts
instead of error pages. The auth middleware already redirects anonymous
requests; the controller guard is the second line for the same rule.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from components import CardLink, EntityForm, ProgressSummary, SessionCard
from components.base import Component
from rendering import csrf_error_response, layout_response, push_notices
from routes.security import csrf_token_for, validate_csrf
from storage_wiring import get_record_store
from tutoring import CrudViewController
from tutoring.entities import EntitySpec
from tutoring.progress import average_score, exam_score_entries
from tutoring.queries import (
    ContactMessageSpec,
    MaterialsSpec,
    OwnProgressSpec,
    RecordedSessionsSpec,
    UpcomingSessionsSpec,
)


student_router = APIRouter(tags=["Student"])
logger = logging.getLogger("tutordesk.web.student")


def _controller(request: Request, spec: EntitySpec) -> CrudViewController:
    return CrudViewController(spec, get_record_store(), request.state.identity, admin_only=False)


def _page_header(title: str, subtitle: str) -> str:
    return (
        '<header class="page-header">'
        f"<h1>{Component.escape(title)}</h1>"
        f'<p class="text-muted">{Component.escape(subtitle)}</p>'
        "</header>"
    )


def _empty_state(text: str) -> str:
    return f'<div class="card empty-state"><p>{Component.escape(text)}</p></div>'


def _session_grid(sessions: List[Dict[str, Any]], *, link_for, edit_base: Optional[str]) -> str:
    cards = []
    for session in sessions:
        edit_href = f"{edit_base}/{session.get('id')}/edit" if edit_base else None
        cards.append(SessionCard(session, link=link_for(session), edit_href=edit_href).render())
    return f'<div class="card-grid">{"".join(cards)}</div>'


def _render_list(
    request: Request,
    controller: CrudViewController,
    *,
    title: str,
    header: str,
    empty_text: str,
    body,
) -> HTMLResponse:
    push_notices(request, controller.notices)
    if controller.rows:
        content = header + body(controller.rows)
    else:
        content = header + _empty_state(empty_text)
    return layout_response(request, title=title, content=content)


@student_router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request):
    controller = _controller(request, UpcomingSessionsSpec())
    if not controller.guard():
        return RedirectResponse(url="/login", status_code=302)
    controller.load()
    student = request.state.identity.current
    header = _page_header(f"Welcome, {student.full_name}!", "Here are your upcoming sessions")
    header += '<h2 class="section-title">Upcoming Sessions</h2>'
    # Admins can jump from a session card straight to its edit dialog.
    edit_base = "/admin/sessions" if student.is_admin else None
    return _render_list(
        request,
        controller,
        title="Dashboard",
        header=header,
        empty_text="No upcoming sessions available at this time.",
        body=lambda rows: _session_grid(rows, link_for=lambda _s: None, edit_base=edit_base),
    )


@student_router.get("/recorded-sessions", response_class=HTMLResponse)
async def recorded_sessions(request: Request):
    controller = _controller(request, RecordedSessionsSpec())
    if not controller.guard():
        return RedirectResponse(url="/login", status_code=302)
    controller.load()
    return _render_list(
        request,
        controller,
        title="Recorded Sessions",
        header=_page_header("Recorded Sessions", "Watch previous session recordings"),
        empty_text="No recorded sessions available at this time.",
        body=lambda rows: _session_grid(
            rows,
            link_for=lambda s: CardLink("View Session", str(s.get("recorded_url")), external=True),
            edit_base=None,
        ),
    )


@student_router.get("/materials", response_class=HTMLResponse)
async def materials(request: Request):
    controller = _controller(request, MaterialsSpec())
    if not controller.guard():
        return RedirectResponse(url="/login", status_code=302)
    controller.load()
    return _render_list(
        request,
        controller,
        title="Session Materials",
        header=_page_header("Session Materials", "Download materials from your sessions"),
        empty_text="No session materials available at this time.",
        body=lambda rows: _session_grid(
            rows,
            link_for=lambda s: CardLink("Download Materials", str(s.get("materials_url")), external=True),
            edit_base=None,
        ),
    )


@student_router.get("/progress", response_class=HTMLResponse)
async def progress(request: Request):
    identity = request.state.identity
    student = identity.current
    controller = _controller(request, OwnProgressSpec(student.id if student else ""))
    if not controller.guard():
        return RedirectResponse(url="/login", status_code=302)
    controller.load()

    def body(rows: List[Dict[str, Any]]) -> str:
        row = rows[0]
        scores = row.get("exam_scores")
        return ProgressSummary(row, average=average_score(scores), entries=exam_score_entries(scores)).render()

    return _render_list(
        request,
        controller,
        title="Student Progress",
        header=_page_header("Student Progress", "Track your learning journey"),
        empty_text="No progress data available yet.",
        body=body,
    )


def _contact_page(request: Request, controller: CrudViewController, *, status_code: int = 200) -> HTMLResponse:
    push_notices(request, controller.notices)
    form = EntityForm(
        "contact",
        action="/contact",
        values=controller.form,
        csrf_token=csrf_token_for(request),
        submit_label="Send Message",
        error=controller.error,
    )
    content = (
        _page_header("Contact Us", "Have a question or feedback? Send us a message!")
        + '<section class="card contact-card">'
        '<h2 class="card-title">Send a Message</h2>'
        '<p class="text-muted">We will get back to you as soon as possible</p>'
        f"{form.render()}"
        "</section>"
    )
    return layout_response(request, title="Contact Us", content=content, status_code=status_code)


@student_router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request):
    controller = _controller(request, ContactMessageSpec(request.state.identity.current))
    if not controller.guard():
        return RedirectResponse(url="/login", status_code=302)
    controller.open_create()
    return _contact_page(request, controller)


@student_router.post("/contact", response_class=HTMLResponse)
async def contact_submit(request: Request):
    form = await request.form()
    if not validate_csrf(request, form.get("csrf_token")):
        return csrf_error_response()
    controller = _controller(request, ContactMessageSpec(request.state.identity.current))
    if not controller.guard():
        return RedirectResponse(url="/login", status_code=303)
    if not controller.submit(form, refetch=False):
        return _contact_page(request, controller, status_code=400)
    # Sent: the form is cleared by the redirect back to a blank page.
    push_notices(request, controller.notices)
    return RedirectResponse(url="/contact", status_code=303, headers={"Cache-Control": "private, no-store"})
