"""
Asana resource models.

Only the fields the rule engine reads are declared; anything else in an API
response is ignored. Every model prints as "<gid> (<name>)".
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, PrivateAttr

NOTES_PARSER = "html.parser"


class Resource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    gid: str
    name: str = ""

    def __str__(self) -> str:
        return f"{self.gid} ({self.name})"


class Workspace(Resource):
    pass


class User(Resource):
    email: Optional[str] = None


class Project(Resource):
    """A project. User task lists ("My Tasks") are addressed the same way."""
    pass


class Section(Resource):
    pass


class Tag(Resource):
    pass


class Task(Resource):
    html_notes: Optional[str] = None
    assignee_section: Optional[Section] = None
    completed: Optional[bool] = None
    due_on: Optional[date] = None
    created_at: Optional[datetime] = None

    _parsed_html_notes: Optional[BeautifulSoup] = PrivateAttr(default=None)

    @property
    def parsed_html_notes(self) -> BeautifulSoup:
        """
        Notes as a document tree, parsed on first access and then shared.
        CR LF and lone CR line breaks are read as LF, as an HTML5 tokenizer would.
        """
        if self._parsed_html_notes is None:
            notes = (self.html_notes or "").replace("\r\n", "\n").replace("\r", "\n")
            self._parsed_html_notes = BeautifulSoup(notes, NOTES_PARSER)
        return self._parsed_html_notes
