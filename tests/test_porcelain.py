"""Tests for the `git worktree list --porcelain` parser"""
from workbox.services.git.porcelain import (
    PorcelainEntry,
    WorktreePorcelainParser,
    parse_worktree_porcelain,
)

SAMPLE_OUTPUT = """worktree /repo
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /repo/.workbox/worktrees/box-a
HEAD 2222222222222222222222222222222222222222
branch refs/heads/wkb/box-a
locked reason here

worktree /repo/.workbox/worktrees/loose
HEAD 3333333333333333333333333333333333333333
detached
prunable gitdir file points to non-existent location

"""


class TestParseWorktreePorcelain:
    """Test parsing full listings."""

    def test_parses_every_block(self):
        entries = parse_worktree_porcelain(SAMPLE_OUTPUT)

        assert [entry.path for entry in entries] == [
            "/repo",
            "/repo/.workbox/worktrees/box-a",
            "/repo/.workbox/worktrees/loose",
        ]

    def test_branch_prefix_is_stripped(self):
        entries = parse_worktree_porcelain(SAMPLE_OUTPUT)

        assert entries[0].branch == "main"
        assert entries[1].branch == "wkb/box-a"

    def test_detached_block(self):
        loose = parse_worktree_porcelain(SAMPLE_OUTPUT)[2]

        assert loose.detached is True
        assert loose.branch is None
        assert loose.head == "3333333333333333333333333333333333333333"
        assert loose.prunable is True

    def test_locked_flag(self):
        box = parse_worktree_porcelain(SAMPLE_OUTPUT)[1]
        assert box.locked is True
        assert box.detached is False

    def test_block_without_branch_or_detached(self):
        """Neither line present: no branch, and not reported as detached."""
        entries = parse_worktree_porcelain("worktree /repo/x\nHEAD abc\n")

        assert entries == [PorcelainEntry(path="/repo/x", head="abc")]

    def test_last_block_without_trailing_blank_line(self):
        output = "worktree /a\nbranch refs/heads/one\n\nworktree /b\nbranch refs/heads/two"
        entries = parse_worktree_porcelain(output)

        assert [(entry.path, entry.branch) for entry in entries] == [("/a", "one"), ("/b", "two")]

    def test_bare_repository_block(self):
        entries = parse_worktree_porcelain("worktree /repo.git\nbare\n")
        assert entries[0].bare is True

    def test_branch_outside_heads_namespace_is_kept(self):
        entries = parse_worktree_porcelain("worktree /a\nbranch refs/remotes/origin/x\n")
        assert entries[0].branch == "refs/remotes/origin/x"

    def test_path_with_spaces(self):
        entries = parse_worktree_porcelain("worktree /tmp/my repo/box\nHEAD abc\n")
        assert entries[0].path == "/tmp/my repo/box"

    def test_empty_output(self):
        assert parse_worktree_porcelain("") == []

    def test_crlf_line_endings(self):
        entries = parse_worktree_porcelain("worktree /a\r\nbranch refs/heads/main\r\n")
        assert entries[0].path == "/a"
        assert entries[0].branch == "main"


class TestWorktreePorcelainParser:
    """Test the incremental parser."""

    def test_lines_before_first_block_are_ignored(self):
        parser = WorktreePorcelainParser()
        parser.feed("")
        parser.feed("HEAD abc")
        parser.feed("worktree /a")

        assert parser.finish() == [PorcelainEntry(path="/a")]

    def test_finish_resets_state(self):
        parser = WorktreePorcelainParser()
        parser.feed("worktree /a")
        assert len(parser.finish()) == 1
        assert parser.finish() == []
