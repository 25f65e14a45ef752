#!/usr/bin/env python3
"""Programmatic task management example.

This demonstrates using the TaskZen components directly, without the web server:

* load settings from `.env`
* list tasks with an access token obtained elsewhere
* optionally create a task and ask the model for description suggestions

The access token is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
from typing import Sequence

from taskzen.auth.session import StaticTokenProvider
from taskzen.config import TaskZenSettings
from taskzen.llm.factory import LLMFactory
from taskzen.logging import configure_logging
from taskzen.presentation.board import order_tasks
from taskzen.suggestions.flows import SuggestionFlow, SuggestionMode
from taskzen.tasks.actions import TaskActions
from taskzen.tasks.client import TaskApiClient


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List and create tasks (programmatic example).")
    parser.add_argument("--token", required=True, help="Bearer access token for the task API")
    parser.add_argument("--title", default="", help="Create a task with this title (optional)")
    parser.add_argument("--description", default=None, help="Description for the new task")
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Print AI description suggestions for --title",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = TaskZenSettings()
    configure_logging(settings.log_level)

    client = TaskApiClient(
        base_url=settings.api_base_url,
        token_provider=StaticTokenProvider(args.token),
        timeout=settings.http_timeout_seconds,
    )
    actions = TaskActions(client=client)

    try:
        if args.suggest:
            result = SuggestionFlow(LLMFactory.create(settings)).suggest(
                SuggestionMode.DESCRIPTION, args.title
            )
            if not result.ok:
                print(f"Suggestions failed: {result.error}")
                return 1
            for suggestion in result.data or []:
                print(f"- {suggestion}")

        if args.title:
            created = actions.create_task(args.title, args.description)
            if not created.ok:
                print(f"Create failed: {created.error}")
                return 1
            print(f"Created task #{created.data.id}: {created.data.title}")

        listed = actions.list_tasks()
        if not listed.ok:
            print(f"Error fetching tasks: {listed.error}")
            return 1
        for task in order_tasks(listed.data or []):
            mark = "x" if task.completed else " "
            print(f"[{mark}] #{task.id} {task.title}")
    finally:
        client.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
