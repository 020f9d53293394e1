import json
from pathlib import Path

import pytest

from prnotify import cli
from prnotify.commands.parser import build_parser
from prnotify.connectors.github_gh import GithubComment, GithubIssue
from prnotify.errors import SourceFetchError
from prnotify.models import PullRequestSnapshot
from prnotify.services.command_runtime import CommandRuntime
from prnotify.storage import JsonSnapshotStore

PR = {
    "id": 101,
    "number": 7,
    "title": "Add widgets",
    "user": {"login": "bob"},
    "html_url": "https://github.com/acme/widgets/pull/7",
}


class FakeSource:
    instances: list["FakeSource"] = []

    def __init__(self, hostname="github.com", gh_bin="gh", *, token=None, cookie=None) -> None:  # noqa: ANN001
        self.kwargs = {"hostname": hostname, "gh_bin": gh_bin, "token": token, "cookie": cookie}
        self.queries: list[str] = []
        self.comments = [
            {"id": 5, "body": "old", "user": {"login": "carol"}, "html_url": "https://github.com/acme/widgets/pull/7#c5"},
            {"id": 6, "body": "Nice", "user": {"login": "carol"}, "html_url": "https://github.com/acme/widgets/pull/7#c6"},
        ]
        FakeSource.instances.append(self)

    def search_pull_requests(self, query: str) -> list[GithubIssue]:
        self.queries.append(query)
        return [GithubIssue.model_validate(PR)]

    def list_issue_comments(self, repo: str, pr_number: int) -> list[GithubComment]:
        return [GithubComment.model_validate(item) for item in self.comments]

    def list_reviews(self, repo: str, pr_number: int):
        return []

    def list_review_comments(self, repo: str, pr_number: int):
        return []


class FailingSource(FakeSource):
    def list_issue_comments(self, repo: str, pr_number: int) -> list[GithubComment]:
        raise SourceFetchError("gh api failed")


class FakeSink:
    instances: list["FakeSink"] = []

    def __init__(self, base_url, topic, *, timeout_seconds=10.0, dry_run=False) -> None:  # noqa: ANN001
        self.base_url = base_url
        self.topic = topic
        self.dry_run = dry_run
        self.sent: list[tuple[str, str, list]] = []
        FakeSink.instances.append(self)

    def send(self, title, body, actions=()) -> None:  # noqa: ANN001
        self.sent.append((title, body, list(actions)))


@pytest.fixture(autouse=True)
def _reset_fakes() -> None:
    FakeSource.instances.clear()
    FakeSink.instances.clear()


def _runtime(source_cls=FakeSource, cookies: list | None = None) -> CommandRuntime:  # noqa: ANN001
    def _extract(path, hostname):  # noqa: ANN001
        if cookies is not None:
            cookies.append((str(path), hostname))
        return "user_session=abc;"

    return CommandRuntime(
        source_connector_cls=source_cls,
        sink_connector_cls=FakeSink,
        store_cls=JsonSnapshotStore,
        cookie_extractor=_extract,
    )


def _config(tmp_path: Path, extra: str = "") -> tuple[Path, Path]:
    cache = tmp_path / "cache.json"
    path = tmp_path / "prnotify.yaml"
    path.write_text(
        f"""
github:
  username: me
  hostname: git.corp.example
  personal_access_token: secret
ntfy:
  base_url: https://ntfy.example
  topic: prs
cache:
  path: {cache}
{extra}
"""
    )
    return path, cache


def test_parser_supports_command_aliases() -> None:
    parser = build_parser()

    assert parser.parse_args(["notify"]).command == "notify"
    assert parser.parse_args(["show-snapshot", "--json"]).json is True
    parsed = parser.parse_args(["run", "--query", "a", "--query", "b", "--dry-run"])
    assert parsed.query == ["a", "b"]
    assert parsed.dry_run is True


def test_run_command_notifies_and_writes_snapshot(tmp_path: Path) -> None:
    config, cache = _config(tmp_path)
    JsonSnapshotStore(cache).save({101: PullRequestSnapshot(comment_ids={5})})

    exit_code = cli.main(["run", "--config", str(config)], runtime=_runtime())

    assert exit_code == 0
    source = FakeSource.instances[0]
    assert source.kwargs == {"hostname": "git.corp.example", "gh_bin": "gh", "token": "secret", "cookie": None}
    assert source.queries == ["is:open is:pr involves:@me"]
    sink = FakeSink.instances[0]
    assert (sink.base_url, sink.topic, sink.dry_run) == ("https://ntfy.example", "prs", False)
    assert [body for _, body, _ in sink.sent] == ["@carol commented:\n\nNice"]
    assert json.loads(cache.read_text()) == {"101": {"reviews": [], "comments": [5, 6]}}


def test_first_run_without_snapshot_announces_pull_request(tmp_path: Path) -> None:
    config, cache = _config(tmp_path)

    assert cli.main(["run", "--config", str(config)], runtime=_runtime()) == 0

    assert [title for title, _, _ in FakeSink.instances[0].sent] == ["New Pull Request"]
    assert cache.exists()


def test_dry_run_leaves_snapshot_untouched(tmp_path: Path) -> None:
    config, cache = _config(tmp_path)

    exit_code = cli.main(["run", "--config", str(config), "--dry-run", "--query", "author:@me"], runtime=_runtime())

    assert exit_code == 0
    assert FakeSink.instances[0].dry_run is True
    assert FakeSource.instances[0].queries == ["author:@me"]
    assert not cache.exists()


def test_firefox_cookies_are_passed_to_source(tmp_path: Path) -> None:
    config, _ = _config(tmp_path, extra=f"firefox:\n  cookies_file_path: {tmp_path / 'cookies.sqlite'}\n")
    cookies: list = []

    cli.main(["run", "--config", str(config)], runtime=_runtime(cookies=cookies))

    assert cookies == [(str(tmp_path / "cookies.sqlite"), "git.corp.example")]
    assert FakeSource.instances[0].kwargs["cookie"] == "user_session=abc;"


def test_fetch_failure_propagates_and_keeps_snapshot(tmp_path: Path) -> None:
    config, cache = _config(tmp_path)
    JsonSnapshotStore(cache).save({101: PullRequestSnapshot(comment_ids={5})})
    before = cache.read_text()

    with pytest.raises(SourceFetchError):
        cli.main(["run", "--config", str(config)], runtime=_runtime(FailingSource))

    assert cache.read_text() == before


def test_skip_policy_returns_partial_failure_code(tmp_path: Path) -> None:
    config, cache = _config(tmp_path, extra="run:\n  failure_policy: skip_pull_request\n")

    exit_code = cli.main(["run", "--config", str(config)], runtime=_runtime(FailingSource))

    assert exit_code == 2
    assert json.loads(cache.read_text()) == {}


def test_snapshot_command_text_and_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config, cache = _config(tmp_path)
    JsonSnapshotStore(cache).save({101: PullRequestSnapshot(review_ids={9}, comment_ids={5, 6})})

    assert cli.main(["snapshot", "--config", str(config)], runtime=_runtime()) == 0
    out = capsys.readouterr().out
    assert "Pull requests: 1" in out
    assert "101: reviews=1 comments=2" in out

    assert cli.main(["show-snapshot", "--path", str(cache), "--json"], runtime=_runtime()) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["pull_requests"] == 1
    assert payload["snapshot"] == {"101": {"reviews": [9], "comments": [5, 6]}}


def test_snapshot_command_without_snapshot(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    missing = tmp_path / "missing.json"

    assert cli.main(["snapshot", "--path", str(missing)], runtime=_runtime()) == 1
    assert "No snapshot" in capsys.readouterr().out
