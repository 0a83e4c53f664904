"""Git repository queries scoped to a directory."""

from __future__ import annotations

from pathlib import Path

from pywurk.errors import GitError, MissingExecutableError, SpawnExitCodeError
from pywurk.execution.args import quote
from pywurk.execution.results import SpawnResult
from pywurk.execution.spawn import Spawn
from pywurk.git.commits import Commit, parse_log

# Record and field separators for `git log` output.
LOG_FORMAT = "%H%x1f%B%x1e"


class GitRepo:
    """Git queries run from a fixed directory.

    Status queries are scoped to ``path`` so that one workspace's pending
    changes do not make a sibling workspace look dirty.

    Attributes:
        path: Directory the queries run in.
    """

    def __init__(self, path: Path, spawn: Spawn) -> None:
        self.path = path
        self._spawn = spawn

    async def run(self, args: list[str], *, check: bool = True) -> SpawnResult:
        """Run a git command in ``path``.

        Args:
            args: Git command arguments (without 'git').
            check: Raise on non-zero exit code.

        Returns:
            Spawn result.

        Raises:
            GitError: If git is missing, or the command fails and check is True.
        """
        try:
            result = await self._spawn(
                "git", args, cwd=self.path, allow_non_zero_exit_code=True
            )
        except MissingExecutableError as e:
            raise GitError("Git is not installed") from e

        if check and not result.ok:
            raise GitError(
                result.stderr_text or f"Command failed with exit code {result.exit_code}",
                command=quote("git", *args),
            )
        return result

    async def is_repo(self) -> bool:
        """Check if ``path`` is inside a git repository."""
        try:
            result = await self.run(["rev-parse", "--git-dir"], check=False)
        except GitError:
            return False
        return result.ok

    async def is_dirty(self) -> bool:
        """Check for uncommitted changes (including untracked files) under ``path``."""
        result = await self.run(["status", "--porcelain", "--", "."])
        return bool(result.stdout_text)

    async def get_head(self) -> str | None:
        """Get the current commit SHA, or None for a repository without commits."""
        result = await self.run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.stdout_text or None

    async def get_root(self) -> Path:
        """Get the root directory of the repository."""
        result = await self.run(["rev-parse", "--show-toplevel"])
        return Path(result.stdout_text)

    async def get_commits(self, since: str | None = None) -> list[Commit]:
        """Get commits touching ``path``, newest first.

        Args:
            since: Exclusive starting revision. All history when None.
        """
        revision = f"{since}..HEAD" if since else "HEAD"
        result = await self.run(["log", f"--format={LOG_FORMAT}", revision, "--", "."])
        return parse_log(result.stdout.decode("utf-8", errors="replace"))

    async def get_changed_files(self, since: str) -> set[Path]:
        """Get absolute paths of files under ``path`` changed since a reference.

        Includes committed, staged, unstaged and untracked changes.
        """
        root = await self.get_root()
        results = [await self.run(["diff", "--name-only", f"{since}...HEAD", "--", "."])]

        # Working tree changes are best effort (HEAD may not exist yet).
        for args in (
            ["diff", "--name-only", "HEAD", "--", "."],
            ["ls-files", "--others", "--exclude-standard", "--full-name", "--", "."],
        ):
            result = await self.run(args, check=False)
            if result.ok:
                results.append(result)

        return {
            root / line
            for result in results
            for line in result.stdout_text.splitlines()
            if line
        }


async def is_git_dirty(repo: GitRepo) -> bool:
    """Dirty check that treats a missing repository or git as clean."""
    try:
        if not await repo.is_repo():
            return False
        return await repo.is_dirty()
    except (GitError, SpawnExitCodeError):
        return False
