import re

# Everything except ASCII letters, digits, brackets, spaces, dots and hyphens.
# Tabs, newlines and non-ASCII whitespace are replaced too; the result is
# always a valid latin-1 header value.
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\[\] .-]")


def sanitize_file_name(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def suggest_file_name(document_name: str) -> str:
    """
    File name for a Content-Disposition header, built from a document's base name.

    Unsafe characters (path separators included) become underscores and names
    containing a space are wrapped in double quotes, e.g.
    '[2024-01-05] - Contrat.pdf' -> '"[2024-01-05] - Contrat.pdf"'.
    """
    filename = sanitize_file_name(document_name or "")
    if " " in filename:
        filename = f'"{filename}"'
    return filename
