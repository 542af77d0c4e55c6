"""HTML pages served to the phone during pairing."""

from html import escape


def upload_form_page(session_id: str) -> str:
    """Form the phone uses to take or pick a photo for a session."""
    action = f"/api/mobile-upload/{escape(session_id)}"
    return _UPLOAD_FORM_HTML.replace("{action}", action)


def upload_done_page() -> str:
    return _message_page(
        "Photo sent",
        "Your photo was delivered. You can return to your computer.",
    )


def upload_error_page(message: str) -> str:
    """Error page that also raises a browser alert."""
    body = (
        f"<script>alert({_js_string(message)});</script>"
        f"<p>{escape(message)}</p>"
    )
    return _PAGE_TEMPLATE.format(title="Upload failed", body=body)


def session_not_found_page() -> str:
    return _message_page(
        "Session not found",
        "This pairing code is unknown or was already used. "
        "Scan a fresh code on your computer.",
    )


def _message_page(title: str, message: str) -> str:
    return _PAGE_TEMPLATE.format(
        title=escape(title), body=f"<h1>{escape(title)}</h1><p>{escape(message)}</p>"
    )


def _js_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("<", "\\u003c")
    )
    return f'"{escaped}"'


_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{title}</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }}
    </style>
  </head>
  <body>
    {body}
  </body>
</html>
"""

_UPLOAD_FORM_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Send a photo</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      input, button { font-size: 1.1rem; margin-top: 1rem; }
      button { padding: 0.6rem 1.2rem; }
    </style>
  </head>
  <body>
    <h1>Send a photo</h1>
    <form method="post" action="{action}" enctype="multipart/form-data">
      <input type="file" name="image" accept="image/*" capture="environment" required />
      <br />
      <button type="submit">Upload</button>
    </form>
  </body>
</html>
"""
