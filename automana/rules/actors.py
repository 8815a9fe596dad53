"""Task actors — side effects applied, in order, to each surviving task."""

from __future__ import annotations

import logging
from typing import Callable

from automana.client.models import Task
from automana.rules.linkify import fix_unlinked_urls, render_notes

logger = logging.getLogger("automana.rules.actors")

TaskActor = Callable[..., None]


def fix_unlinked_url() -> TaskActor:
    def actor(wc, t: Task) -> None:
        fix_unlinked_urls(t.parsed_html_notes)

        update = Task(gid=t.gid, html_notes=render_notes(t.parsed_html_notes))
        wc.update_task(update)
        logger.info(f"Linked URLs in task {t}")

    return actor


def move_to_my_tasks_section(name: str) -> TaskActor:
    def actor(wc, t: Task) -> None:
        utl = wc.get_my_user_task_list()
        sec = wc.get_section_by_name(utl, name)
        wc.add_task_to_section(t, sec)
        logger.info(f"Moved task {t} to section {sec}")

    return actor


def print_tasks() -> TaskActor:
    def actor(wc, t: Task) -> None:
        print(t, flush=True)

    return actor
