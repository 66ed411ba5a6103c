"""SQL template store - resolves template ids to .sql files and splits them.

Namespace convention:
    sql/user/get_by_id.sql       -> "user.get_by_id"
    sql/billing/invoice/list.sql -> "billing.invoice.list"

Templates are read fresh on every call, so edits to .sql files are picked up
without restarting the application.
"""

from __future__ import annotations

from pathlib import Path

from media_query.core.exceptions import EmptyTemplate, TemplateNotFound

STATEMENT_TERMINATOR = ";"

# Characters trimmed around the whole file before splitting
_FILE_EDGE_CHARS = "\\ \t\n\r\0\x0b"

# Characters trimmed around a single statement used for pagination
_SINGLE_EDGE_CHARS = "; \n\r\t\v\0"


def split_statements(text: str) -> list[str]:
    """Split raw template text into trimmed statements.

    The split is literal: a ``;`` inside a string literal or a comment also
    ends a statement.
    """
    if STATEMENT_TERMINATOR not in text:
        text += STATEMENT_TERMINATOR

    fragments = [part.strip() for part in text.strip(_FILE_EDGE_CHARS).split(STATEMENT_TERMINATOR)]
    # A terminal ";" leaves one empty fragment behind
    if fragments and fragments[-1] == "":
        fragments.pop()
    if not fragments or fragments[0] == "":
        return []
    return [fragment for fragment in fragments if fragment]


class SQLTemplateStore:
    """Loads SQL templates from a directory structure.

    Args:
        root_dir: Root directory containing .sql files.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self._root_dir = Path(root_dir)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def path_for(self, template_id: str) -> Path:
        """Map a dot-separated template id onto its .sql file path."""
        parts = template_id.split(".")
        if any(not part or "/" in part or "\\" in part for part in parts):
            raise TemplateNotFound(template_id)
        return self._root_dir.joinpath(*parts).with_suffix(".sql")

    def _read(self, template_id: str) -> tuple[Path, str]:
        path = self.path_for(template_id)
        if not path.is_file():
            raise TemplateNotFound(template_id, str(path))
        return path, path.read_text(encoding="utf-8")

    def load(self, template_id: str) -> list[str]:
        """Load a template as an ordered list of statements.

        Raises:
            TemplateNotFound: If no .sql file exists for the id.
            EmptyTemplate: If the file contains no statement text.
        """
        path, text = self._read(template_id)
        statements = split_statements(text)
        if not statements:
            raise EmptyTemplate(template_id, str(path))
        return statements

    def load_single(self, template_id: str) -> str:
        """Load a template as one statement, without splitting.

        Used where the statement text itself is rewritten (pagination count
        and slice queries).
        """
        path, text = self._read(template_id)
        sql = text.strip(_SINGLE_EDGE_CHARS)
        if not sql:
            raise EmptyTemplate(template_id, str(path))
        return sql

    def has(self, template_id: str) -> bool:
        """Check if a template id resolves to an existing file."""
        try:
            return self.path_for(template_id).is_file()
        except TemplateNotFound:
            return False

    @property
    def template_ids(self) -> list[str]:
        """List all template ids found on disk, sorted alphabetically."""
        if not self._root_dir.exists():
            return []

        ids: list[str] = []
        for sql_file in self._root_dir.rglob("*.sql"):
            parts = list(sql_file.relative_to(self._root_dir).parts)
            parts[-1] = parts[-1].removesuffix(".sql")
            ids.append(".".join(parts))
        return sorted(ids)
