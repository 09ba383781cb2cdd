#!/usr/bin/env python3
"""
HTML for the directory page.

Everything is rendered server side from a DirectoryView: clicks and the
count form are plain form POSTs that redirect back to "/".
"""

import logging
from html import escape
from typing import Iterable, Optional, Sequence
from urllib.parse import urlparse

from .config import DEFAULT_IMAGE_HOSTS
from .models import MAX_REQUEST_COUNT, MIN_REQUEST_COUNT, ProfileRecord, UserRecord
from .transformations import address_lines, full_name
from .view import DirectoryView, Notification

logger = logging.getLogger(__name__)

AVATAR_SIZE = 128

STYLE = """
body { font-family: sans-serif; margin: 0; }
.page { padding: 1rem; }
h1 { font-size: 1.5rem; font-weight: bold; margin-bottom: 1rem; }
.grid { display: grid; gap: 1rem; grid-template-columns: repeat(auto-fill, minmax(16rem, 1fr)); }
.card { border: 1px solid #ddd; border-radius: 0.5rem; padding: 1rem; background: none; text-align: left; width: 100%; font: inherit; }
button.card { cursor: pointer; }
button.card:hover { background: #f9fafb; }
.avatar { border-radius: 9999px; }
.gender { color: #4b5563; }
.overlay { position: fixed; inset: 0; background: rgba(0, 0, 0, 0.5); display: flex; align-items: center; justify-content: center; }
.modal { background: #fff; padding: 1.5rem; border-radius: 0.5rem; max-width: 28rem; width: 100%; margin: 1rem; }
.modal-header { display: flex; justify-content: space-between; align-items: flex-start; margin-bottom: 1rem; }
.field-error { color: #b91c1c; margin-left: 0.5rem; }
.toasts { position: fixed; top: 1rem; right: 1rem; }
.toast { padding: 0.5rem 1rem; border-radius: 0.25rem; margin-bottom: 0.5rem; color: #fff; }
.toast-success { background: #15803d; }
.toast-error { background: #b91c1c; }
"""


def is_allowed_image(url: str, hosts: Iterable[str] = DEFAULT_IMAGE_HOSTS) -> bool:
    """True when ``url`` is https and its hostname is on the allow-list."""
    parsed = urlparse(url)
    return parsed.scheme == "https" and (parsed.hostname or "") in {h.lower() for h in hosts}


def render_avatar(user: UserRecord, hosts: Iterable[str]) -> str:
    name = escape(full_name(user))
    src = user.picture.large
    if not is_allowed_image(src, hosts):
        logger.warning("image host not allowed, skipping avatar: %s", src)
        return f'<div class="avatar avatar-missing" title="{name}">{name}</div>'
    return (
        f'<img class="avatar" src="{escape(src)}" alt="{name}" '
        f'width="{AVATAR_SIZE}" height="{AVATAR_SIZE}">'
    )


def render_card(index: int, user: UserRecord, selectable: bool, hosts: Iterable[str]) -> str:
    body = (
        f"{render_avatar(user, hosts)}"
        f'<h2 class="name">{escape(full_name(user))}</h2>'
        f'<p class="gender">{escape(user.gender)}</p>'
    )
    if not selectable:
        return f'<div class="card">{body}</div>'
    return (
        f'<form method="post" action="/select/{index}">'
        f'<button type="submit" class="card">{body}</button>'
        f"</form>"
    )


def render_modal(user: UserRecord, extended: bool) -> str:
    details = ""
    if extended and isinstance(user, ProfileRecord):
        address = "<br>".join(escape(line) for line in address_lines(user.location))
        details = (
            '<div class="details">'
            f"<p><strong>Email:</strong> {escape(user.email)}</p>"
            "<p><strong>Address:</strong></p>"
            f'<p class="address">{address}</p>'
            "</div>"
        )
    return (
        '<div class="overlay"><div class="modal">'
        '<div class="modal-header">'
        f"<h2>{escape(full_name(user))}</h2>"
        '<form method="post" action="/clear">'
        '<button type="submit" class="close" aria-label="Close">&#x2715;</button>'
        "</form></div>"
        f"{details}"
        "</div></div>"
    )


def render_form(request_count: int, form_error: Optional[str] = None) -> str:
    error = f'<span class="field-error" role="alert">{escape(form_error)}</span>' if form_error else ""
    return (
        '<form method="post" action="/users" class="count-form">'
        '<label for="count">Number of Users</label> '
        f'<input id="count" name="count" type="number" min="{MIN_REQUEST_COUNT}" '
        f'max="{MAX_REQUEST_COUNT}" value="{request_count}">'
        '<button type="submit">Fetch Users</button>'
        f"{error}"
        "</form>"
    )


def render_toasts(notifications: Sequence[Notification]) -> str:
    if not notifications:
        return ""
    items = "".join(
        f'<div class="toast toast-{escape(n.kind)}" role="status">{escape(n.message)}</div>'
        for n in notifications
    )
    return f'<div class="toasts">{items}</div>'


def render_page(view: DirectoryView, image_hosts: Iterable[str] = DEFAULT_IMAGE_HOSTS) -> str:
    """Render the whole page; pending toasts are consumed."""
    hosts = tuple(image_hosts)
    variant = view.variant
    users = view.users
    selected = view.selected_user

    parts = ['<div class="page">', "<h1>Random Users</h1>"]
    if variant.is_extended:
        parts.append(render_form(view.request_count, view.form_error))
    parts.append('<div class="grid">')
    parts.extend(render_card(i, user, variant.has_modal, hosts) for i, user in enumerate(users))
    parts.append("</div>")
    if variant.has_modal and selected is not None:
        parts.append(render_modal(selected, variant.is_extended))
    if variant.is_extended:
        parts.append(render_toasts(view.drain_notifications()))
    parts.append("</div>")

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="utf-8">'
        "<title>Random Users</title>"
        f"<style>{STYLE}</style></head>"
        f"<body>{''.join(parts)}</body></html>"
    )
