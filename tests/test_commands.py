# tests/test_commands.py

from __future__ import annotations

from tickdown.cli.commands import CommandRegistry, registry
from tickdown.core.errors import ValidationError
from tickdown.tasks.task_models import TaskDraft

DEADLINE = "2030-06-01T09:30"


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_command_registry_turns_domain_errors_into_replies(state) -> None:
    reg = CommandRegistry()

    def bad(state, args):
        raise ValidationError("nope")

    reg.register("bad", bad, "bad")
    assert reg.handle(state, "/bad") == "Invalid input: nope"


def test_add_list_toggle_delete_flow(state, dialog, remote) -> None:
    dialog.answers.append(TaskDraft(text="write report", deadline=DEADLINE))

    assert registry.handle(state, "/add") == "Task added: write report"
    listing = registry.handle(state, "/list") or ""
    assert "1. [ ] write report" in listing
    assert "Calculating..." in listing
    assert "Total: 1" in listing

    state.countdown.tick()
    assert "Calculating..." not in (registry.handle(state, "/list") or "")

    assert registry.handle(state, "/toggle 1") == "Task completed: write report"
    assert "[x] write report (done)" in (registry.handle(state, "/list") or "")

    assert registry.handle(state, "/delete 1") == "Task deleted: write report"
    assert state.store.tasks == ()
    assert remote.ops() == ["create", "update", "delete"]


def test_edit_and_missing_refs(state, dialog) -> None:
    task = state.store.create("old", DEADLINE)
    dialog.answers.append(TaskDraft(text="new", deadline=DEADLINE))

    assert registry.handle(state, f"/edit {task.id}") == "Task updated: new"
    assert registry.handle(state, "/edit 7") == "No such task: 7"
    assert (registry.handle(state, "/toggle") or "").startswith("Invalid input: Usage")


def test_delete_remote_failure_is_reported_not_fatal(state, remote) -> None:
    state.store.create("x", DEADLINE)
    remote.fail_ops.add("delete")

    reply = registry.handle(state, "/delete 1") or ""

    assert reply.startswith("Task deleted locally: x (warning:")
    assert "OUT OF SYNC" in (registry.handle(state, "/status") or "")

    remote.fail_ops.clear()
    assert registry.handle(state, "/reload") == "Reloaded 1 task(s) from the remote store."
    assert "sync: ok" in (registry.handle(state, "/status") or "")


def test_reload_failure_reply(state, remote) -> None:
    remote.fail_ops.add("list")
    assert (registry.handle(state, "/reload") or "").startswith("Sync error: Remote list failed")

    status = registry.handle(state, "/status") or ""
    assert "tasks: 0" in status
    assert "OUT OF SYNC" in status


def test_watch_requires_running_countdown(state) -> None:
    assert registry.handle(state, "/watch 0", emit=lambda _: None) == "Countdown is not running."


def test_watch_emits_updates(state) -> None:
    state.store.create("x", DEADLINE)
    lines: list[str] = []
    with state.countdown:
        assert registry.handle(state, "/watch 0.1", emit=lines.append) == "Watch finished."
    assert lines
    assert "x" in lines[0]
