"""Git integration."""

from pywurk.git.commits import Commit, parse_log
from pywurk.git.repo import GitRepo, is_git_dirty

__all__ = ["Commit", "GitRepo", "is_git_dirty", "parse_log"]
