"""Operations endpoints: health probe, web app manifest and service worker."""

from __future__ import annotations

import json

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from storage_wiring import get_record_store

try:
    import config as _cfg  # type: ignore
except ImportError:  # pragma: no cover - package layout
    from backend.web import config as _cfg  # type: ignore


operations_router = APIRouter(tags=["Operations"])

# Cache names carry the version so a new deploy drops stale shells.
SERVICE_WORKER_JS = """
const CACHE = "tutordesk-shell-v1";
const SHELL = ["/static/css/tutordesk.css?v=1", "/static/js/tutordesk.js?v=1", "/manifest.json"];

self.addEventListener("install", (event) => {
  event.waitUntil(caches.open(CACHE).then((cache) => cache.addAll(SHELL)));
  self.skipWaiting();
});

self.addEventListener("activate", (event) => {
  event.waitUntil(
    caches.keys().then((keys) => Promise.all(keys.filter((k) => k !== CACHE).map((k) => caches.delete(k))))
  );
  self.clients.claim();
});

self.addEventListener("fetch", (event) => {
  const url = new URL(event.request.url);
  // Personalized pages are never cached; only static shell assets are.
  if (event.request.method !== "GET" || !url.pathname.startsWith("/static/")) {
    return;
  }
  event.respondWith(caches.match(event.request).then((hit) => hit || fetch(event.request)));
});
""".lstrip()


def web_manifest() -> dict:
    brand = _cfg.brand_name()
    return {
        "name": brand,
        "short_name": brand,
        "description": f"{brand} student dashboard",
        "start_url": "/dashboard",
        "scope": "/",
        "display": "standalone",
        "background_color": "#ffffff",
        "theme_color": "#2563eb",
        "icons": [],
    }


@operations_router.get("/health")
async def health_check():
    # Reports which Record Store backend is active; never touches the store itself.
    body = {"status": "healthy", "record_store": get_record_store().backend_name}
    return JSONResponse(body, headers={"Cache-Control": "private, no-store"})


@operations_router.get("/manifest.json")
async def manifest():
    return Response(
        content=json.dumps(web_manifest()),
        media_type="application/manifest+json",
        headers={"Cache-Control": "public, max-age=3600"},
    )


@operations_router.get("/sw.js")
async def service_worker():
    return Response(
        content=SERVICE_WORKER_JS,
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache", "Service-Worker-Allowed": "/"},
    )
