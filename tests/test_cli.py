from typer.testing import CliRunner

from unity_auditor.cli import app

from conftest import ORPHAN_GUID, ORPHAN_SOURCE, PARENT_CHILD_SCENE

runner = CliRunner()


def make_project(project):
    project.script("Assets/Orphan.cs", ORPHAN_SOURCE, ORPHAN_GUID)
    project.scene("Assets/Main.unity", PARENT_CHILD_SCENE)


def test_project_and_output_positionals(project, output_dir):
    make_project(project)
    result = runner.invoke(app, [str(project.root), str(output_dir)])

    assert result.exit_code == 0, result.output
    assert "Analysis completed successfully." in result.output
    assert (output_dir / "Main.unity.dump").read_text() == "Parent\n--Child\n"
    assert ORPHAN_GUID in (output_dir / "UnusedScripts.csv").read_text()


def test_summary_tables_are_printed(project, output_dir):
    make_project(project)
    result = runner.invoke(app, [str(project.root), str(output_dir)])

    assert result.exit_code == 0, result.output
    assert "Script Usage" in result.output
    assert "Main.unity" in result.output


def test_quiet_skips_summary(project, output_dir):
    make_project(project)
    result = runner.invoke(app, [str(project.root), str(output_dir), "--quiet"])

    assert result.exit_code == 0, result.output
    assert "Script Usage" not in result.output
    assert "Analysis completed successfully." in result.output


def test_scene_pass_only(project, output_dir):
    make_project(project)
    result = runner.invoke(app, [str(project.root), str(output_dir), "--no-scripts", "-q"])

    assert result.exit_code == 0, result.output
    assert (output_dir / "Main.unity.dump").exists()
    assert not (output_dir / "UnusedScripts.csv").exists()


def test_script_pass_only(project, output_dir):
    make_project(project)
    result = runner.invoke(app, [str(project.root), str(output_dir), "--no-scenes", "-q", "--max-workers", "2"])

    assert result.exit_code == 0, result.output
    assert not (output_dir / "Main.unity.dump").exists()
    assert (output_dir / "UnusedScripts.csv").exists()


def test_missing_project_exits_with_error(tmp_path, output_dir):
    result = runner.invoke(app, [str(tmp_path / "missing"), str(output_dir)])

    assert result.exit_code == 1
    assert "does not exist" in result.output
    assert not output_dir.exists()


def test_wrong_argument_count_is_a_usage_error(tmp_path):
    result = runner.invoke(app, [str(tmp_path)])
    assert result.exit_code == 2


def test_zero_workers_is_rejected(project, output_dir):
    result = runner.invoke(app, [str(project.root), str(output_dir), "--max-workers", "0"])
    assert result.exit_code == 2
