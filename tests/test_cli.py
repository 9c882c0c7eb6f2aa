from typer.testing import CliRunner

from feedsafe.cli.app import app

runner = CliRunner()

CONFIG = """\
filter:
  whitelisted_tags:
    p: []
    a: [href]
  scheme_whitelist: [https]
rules:
  folders: ['{rules}']
"""


def write_config(tmp_path):
    rules = tmp_path / "rules"
    rules.mkdir()
    (rules / "example.com.yaml").write_text(
        "filter:\n  - url: '.*'\n    substitutions:\n      - search: 'Sponsored'\n        replace: ''\n"
    )
    path = tmp_path / "feedsafe.yaml"
    path.write_text(CONFIG.format(rules=rules))
    return path


def test_sanitize_command_prints_clean_html(tmp_path):
    config = write_config(tmp_path)
    page = tmp_path / "page.html"
    page.write_text('<p onclick="x()">Hi <a href="/about">us</a></p><script>x()</script>')

    result = runner.invoke(app, ["sanitize", str(page), "--site", "https://example.com/", "--config", str(config)])

    assert result.exit_code == 0
    assert '<p>Hi <a href="https://example.com/about">us</a></p>' in result.output
    assert "script" not in result.output


def test_sanitize_command_reports_missing_file(tmp_path):
    result = runner.invoke(app, ["sanitize", str(tmp_path / "nope.html")])

    assert result.exit_code == 1


def test_rules_command_lists_substitutions(tmp_path):
    config = write_config(tmp_path)

    result = runner.invoke(app, ["rules", "https://example.com/post", "--config", str(config)])

    assert result.exit_code == 0
    assert "Sponsored" in result.output


def test_policy_command_lists_whitelisted_tags(tmp_path):
    config = write_config(tmp_path)

    result = runner.invoke(app, ["policy", "--config", str(config)])

    assert result.exit_code == 0
    assert "href" in result.output
    assert "https" in result.output
