"""Tests for GitGateway argument construction and error mapping."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from gitu.git.gateway import (
    GIT_NOT_FOUND_STATUS,
    LOG_ARGS,
    GitCommandError,
    GitGateway,
    is_conflict_error,
    log_args,
    run_git,
)
from gitu.git.models import SearchFilter


class _FakeRunner:
    def __init__(self, responses: dict[tuple[str, ...], tuple[int, str, str]] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []

    def __call__(self, args):
        self.calls.append(list(args))
        return self.responses.get(tuple(args), (0, "", ""))


class LogArgsTests(unittest.TestCase):
    def test_without_filter(self) -> None:
        self.assertEqual(log_args(None), list(LOG_ARGS))

    def test_message_filter_uses_grep(self) -> None:
        self.assertEqual(
            log_args(SearchFilter.message("fix")),
            [*LOG_ARGS, "--grep=fix", "--regexp-ignore-case"],
        )

    def test_author_filter(self) -> None:
        self.assertEqual(
            log_args(SearchFilter.author("alice")),
            [*LOG_ARGS, "--author=alice", "--regexp-ignore-case"],
        )


class GitGatewayQueryTests(unittest.TestCase):
    def test_get_commits_parses_log(self) -> None:
        runner = _FakeRunner({LOG_ARGS: (0, "* abc1234 (HEAD -> main) First\n", "")})

        commits = GitGateway(run=runner).get_commits()

        self.assertEqual(runner.calls, [list(LOG_ARGS)])
        self.assertEqual(commits[0].hash, "abc1234")

    def test_is_inside_work_tree(self) -> None:
        inside = _FakeRunner({("rev-parse", "--is-inside-work-tree"): (0, "true\n", "")})
        outside = _FakeRunner({("rev-parse", "--is-inside-work-tree"): (128, "", "fatal: not a git repository")})

        self.assertTrue(GitGateway(run=inside).is_inside_work_tree())
        self.assertFalse(GitGateway(run=outside).is_inside_work_tree())

    def test_get_commit_diff_uses_show(self) -> None:
        runner = _FakeRunner()

        diff = GitGateway(run=runner).get_commit_diff("abc1234")

        self.assertEqual(runner.calls, [["show", "--color=never", "abc1234"]])
        self.assertEqual(len(diff.files), 1)

    def test_file_diff_variants(self) -> None:
        runner = _FakeRunner(
            {
                ("diff", "--cached", "--color=never", "--", "a.txt"): (0, "staged diff\n", ""),
                ("diff", "--color=never", "--", "a.txt"): (0, "", ""),
                ("diff", "--no-index", "--color=never", "--", "/dev/null", "new.txt"): (1, "+new\n", ""),
            }
        )
        gateway = GitGateway(run=runner)

        self.assertEqual(gateway.get_file_diff("a.txt", staged=True), "staged diff\n")
        self.assertEqual(gateway.get_file_diff("a.txt", staged=False), "No differences for a.txt\n")
        self.assertEqual(gateway.get_file_diff("new.txt", staged=False, untracked=True), "+new\n")

    def test_branches_fall_back_to_local_when_remote_listing_fails(self) -> None:
        runner = _FakeRunner(
            {
                ("branch", "-vv", "--no-color"): (0, "* main abc1234 msg\n", ""),
                ("branch", "-r", "-v", "--no-color"): (1, "", "boom"),
            }
        )

        branches = GitGateway(run=runner).get_branches()

        self.assertEqual([b.name for b in branches], ["main"])

    def test_last_commit_message_strips_trailing_newlines(self) -> None:
        runner = _FakeRunner({("log", "-1", "--format=%B"): (0, "Subject\n\nBody\n\n", "")})

        self.assertEqual(GitGateway(run=runner).get_last_commit_message(), "Subject\n\nBody")


class GitGatewayMutationTests(unittest.TestCase):
    def test_arguments_for_mutating_commands(self) -> None:
        runner = _FakeRunner()
        gateway = GitGateway(run=runner)

        gateway.stage_file("a.txt")
        gateway.unstage_file("a.txt")
        gateway.stage_all()
        gateway.unstage_all()
        gateway.discard_file("a.txt")
        gateway.discard_file("new.txt", untracked=True)
        gateway.commit("Subject\n\nBody")
        gateway.commit_amend("Amended")
        gateway.create_stash("wip", include_untracked=True)
        gateway.apply_stash(1)
        gateway.pop_stash(0)
        gateway.drop_stash(2)
        gateway.switch_branch("feature")
        gateway.switch_branch("origin/topic", remote=True)
        gateway.delete_branch("old")
        gateway.delete_branch("older", force=True)
        gateway.merge_branch("feature")
        gateway.create_new_branch("fresh")
        gateway.create_branch("at-commit", "abc1234")
        gateway.checkout_commit("abc1234")
        gateway.cherry_pick("abc1234")
        gateway.revert_commit("abc1234")
        gateway.fetch()
        gateway.push()
        gateway.push(force=True)
        gateway.pull()
        gateway.pull(rebase=True)

        self.assertEqual(
            runner.calls,
            [
                ["add", "--", "a.txt"],
                ["restore", "--staged", "--", "a.txt"],
                ["add", "-A"],
                ["reset", "-q"],
                ["checkout", "--", "a.txt"],
                ["clean", "-f", "--", "new.txt"],
                ["commit", "-m", "Subject\n\nBody"],
                ["commit", "--amend", "-m", "Amended"],
                ["stash", "push", "--include-untracked", "-m", "wip"],
                ["stash", "apply", "stash@{1}"],
                ["stash", "pop", "stash@{0}"],
                ["stash", "drop", "stash@{2}"],
                ["checkout", "feature"],
                ["checkout", "-b", "topic", "--track", "origin/topic"],
                ["branch", "-d", "old"],
                ["branch", "-D", "older"],
                ["merge", "feature"],
                ["checkout", "-b", "fresh"],
                ["branch", "at-commit", "abc1234"],
                ["checkout", "abc1234"],
                ["cherry-pick", "abc1234"],
                ["revert", "--no-edit", "abc1234"],
                ["fetch", "--all"],
                ["push"],
                ["push", "--force-with-lease"],
                ["pull"],
                ["pull", "--rebase"],
            ],
        )

    def test_commit_message_reports_first_line(self) -> None:
        gateway = GitGateway(run=_FakeRunner())

        self.assertEqual(gateway.commit("Subject\n\nBody"), "Committed: Subject")

    def test_stash_without_changes(self) -> None:
        runner = _FakeRunner({("stash", "push"): (0, "No local changes to save\n", "")})

        self.assertEqual(GitGateway(run=runner).create_stash(), "No local changes to stash")

    def test_failure_raises_with_stderr(self) -> None:
        runner = _FakeRunner({("checkout", "nope"): (1, "", "error: pathspec 'nope' did not match\n")})

        with self.assertRaises(GitCommandError) as ctx:
            GitGateway(run=runner).switch_branch("nope")

        self.assertEqual(ctx.exception.exit_status, 1)
        self.assertEqual(ctx.exception.args_list, ["checkout", "nope"])
        self.assertEqual(str(ctx.exception), "git checkout failed: error: pathspec 'nope' did not match")
        self.assertFalse(is_conflict_error(ctx.exception))

    def test_merge_conflict_reported_on_stdout(self) -> None:
        stdout = (
            "Auto-merging a.txt\n"
            "CONFLICT (content): Merge conflict in a.txt\n"
            "Automatic merge failed; fix conflicts and then commit the result.\n"
        )
        runner = _FakeRunner({("merge", "feature"): (1, stdout, "")})

        with self.assertRaises(GitCommandError) as ctx:
            GitGateway(run=runner).merge_branch("feature")

        self.assertEqual(ctx.exception.stdout, stdout)
        self.assertIn("Merge conflict in a.txt", str(ctx.exception))
        self.assertTrue(is_conflict_error(ctx.exception))

    def test_commit_with_nothing_staged_explains_why(self) -> None:
        runner = _FakeRunner({("commit", "-m", "x"): (1, "On branch main\nnothing to commit, working tree clean\n", "")})

        with self.assertRaises(GitCommandError) as ctx:
            GitGateway(run=runner).commit("x")

        self.assertIn("nothing to commit", str(ctx.exception))
        self.assertFalse(is_conflict_error(ctx.exception))

    def test_failure_without_stderr_mentions_exit_status(self) -> None:
        runner = _FakeRunner({("push",): (128, "", "")})

        with self.assertRaises(GitCommandError) as ctx:
            GitGateway(run=runner).push()

        self.assertEqual(str(ctx.exception), "git push failed: exit status 128")
        self.assertFalse(is_conflict_error(ctx.exception))


class ForWorkTreeTests(unittest.TestCase):
    def _fake_run_git(self, toplevel_result):
        calls: list[tuple[list[str], Path | None]] = []

        def run(args, cwd=None):
            calls.append((list(args), cwd))
            if list(args) == ["rev-parse", "--show-toplevel"]:
                return toplevel_result
            return 0, "", ""

        return calls, run

    def test_commands_run_from_toplevel(self) -> None:
        calls, run = self._fake_run_git((0, "/work/repo\n", ""))

        with mock.patch("gitu.git.gateway.run_git", side_effect=run):
            gateway = GitGateway.for_work_tree(Path("/work/repo/sub"))
            gateway.stage_file("sub/f.txt")

        self.assertEqual(
            calls,
            [
                (["rev-parse", "--show-toplevel"], Path("/work/repo/sub")),
                (["add", "--", "sub/f.txt"], Path("/work/repo")),
            ],
        )

    def test_outside_work_tree_keeps_cwd(self) -> None:
        calls, run = self._fake_run_git((128, "", "fatal: not a git repository\n"))

        with mock.patch("gitu.git.gateway.run_git", side_effect=run):
            gateway = GitGateway.for_work_tree(Path("/tmp/elsewhere"))
            gateway.is_inside_work_tree()

        self.assertEqual(calls[-1], (["rev-parse", "--is-inside-work-tree"], Path("/tmp/elsewhere")))


class RunGitTests(unittest.TestCase):
    def test_missing_executable_maps_to_status_127(self) -> None:
        with mock.patch("gitu.git.gateway.subprocess.run", side_effect=FileNotFoundError("git")):
            status, stdout, stderr = run_git(["status"])

        self.assertEqual(status, GIT_NOT_FOUND_STATUS)
        self.assertEqual(stdout, "")
        self.assertIn("not found", stderr)

    def test_returns_process_output(self) -> None:
        completed = mock.Mock(returncode=0, stdout="out", stderr="err")
        with mock.patch("gitu.git.gateway.subprocess.run", return_value=completed) as run:
            result = run_git(["status", "--porcelain"])

        self.assertEqual(result, (0, "out", "err"))
        self.assertEqual(run.call_args.args[0], ["git", "status", "--porcelain"])


if __name__ == "__main__":
    unittest.main()
