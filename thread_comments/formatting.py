import bleach
from django.utils.html import escape
from django.utils.safestring import mark_safe


def render_comment_body(body: str) -> str:
    """
    Render a plain text comment body as safe HTML.

    HTML is escaped, URLs become links (rel="nofollow") and line breaks
    become <br> tags.
    """
    if not body:
        return ''

    html = bleach.linkify(escape(body))
    html = html.replace('\r\n', '\n').replace('\n', '<br>')
    return mark_safe(html)
