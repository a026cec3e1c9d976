"""Integration tests for frictionpm/cli.py"""

import json

from frictionpm.cli import build_parser


class TestParser:
    def test_edit_flags(self):
        args = build_parser().parse_args(["task", "edit", "t1", "--friction", "high", "--unblock"])
        assert args.task_action == "edit"
        assert args.text is None
        assert args.friction == "high"
        assert args.unblock is True


class TestCommands:
    def test_project_and_task_lifecycle(self, run_cli):
        code, created = run_cli("project", "add", "Garden shed")
        assert code == 0
        project_id = created["data"]["project_id"]
        assert created["data"]["project"]["status"] == "hot"

        code, task = run_cli("task", "add", project_id, "buy screws")
        assert code == 0
        task_id = task["data"]["task_id"]
        assert task["data"]["task"]["friction"] == "low"

        code, cycled = run_cli("task", "friction", task_id)
        assert cycled["data"]["friction"] == "moderate"

        code, tree = run_cli("tree", project_id)
        assert tree["data"]["rows"][0]["task"]["id"] == task_id

    def test_edit_sets_and_clears_blocker(self, run_cli):
        _, project = run_cli("project", "add", "Shed")
        project_id = project["data"]["project_id"]
        _, a = run_cli("task", "add", project_id, "a")
        _, b = run_cli("task", "add", project_id, "b")
        a_id, b_id = a["data"]["task_id"], b["data"]["task_id"]

        _, edited = run_cli("task", "edit", b_id, "--blocked-by", a_id)
        assert edited["data"]["blockedBy"] == a_id
        assert edited["data"]["text"] == "b"

        _, kept = run_cli("task", "edit", b_id, "b again")
        assert kept["data"]["blockedBy"] == a_id

        _, cleared = run_cli("task", "edit", b_id, "--unblock")
        assert "blockedBy" not in cleared["data"]

    def test_failures_exit_non_zero(self, run_cli):
        code, result = run_cli("task", "get", "missing")
        assert code == 1
        assert result["error"] == "Task not found: missing"

    def test_delete_with_yes_skips_prompt(self, run_cli):
        _, project = run_cli("project", "add", "Gone soon")
        project_id = project["data"]["project_id"]

        code, result = run_cli("project", "delete", project_id, "--yes")

        assert code == 0
        _, listing = run_cli("project", "list")
        assert listing["data"]["total"] == 0

    def test_declined_prompt_cancels(self, run_cli, monkeypatch):
        _, project = run_cli("project", "add", "Stays")
        monkeypatch.setattr("builtins.input", lambda prompt: "n")

        code, result = run_cli("project", "delete", project["data"]["project_id"])

        assert code == 1
        assert result["error"] == "Cancelled by user"

    def test_export_then_import(self, run_cli, tmp_path):
        run_cli("project", "add", "Backed up")
        code, exported = run_cli("export", "--dest", str(tmp_path))
        assert code == 0
        path = exported["data"]["path"]

        run_cli("project", "add", "Extra")
        code, imported = run_cli("import", path, "--yes")

        assert code == 0
        assert imported["message"] == "Import successful!"
        _, listing = run_cli("project", "list")
        assert [p["name"] for p in listing["data"]["projects"]] == ["Backed up"]

    def test_import_rejects_bad_file(self, run_cli, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"projects": {}}))

        code, result = run_cli("import", str(bad), "--yes")

        assert code == 1
        assert "Invalid backup file format" in result["error"]

    def test_sweep_and_run_refused_when_decay_disabled(self, run_cli, tmp_path):
        config = tmp_path / "frictionpm.yaml"
        config.write_text("decay:\n  enabled: false\n")

        for command in ("sweep", "run"):
            code, result = run_cli("--config", str(config), command)

            assert code == 1
            assert "Decay is disabled" in result["error"]

    def test_sweep_and_board(self, run_cli):
        run_cli("project", "add", "Fresh")

        code, swept = run_cli("sweep")
        assert code == 0
        assert swept["data"]["changed"] is False

        _, board = run_cli("board")
        assert board["data"]["columns"]["hot"][0]["project"]["name"] == "Fresh"
