from .cli import parse_args, validate_args
from .models import Chapter, ChapterNumber, parse_identifier
from .tracker import Decision, check_for_updates, diff, reconcile

__all__ = [
    "Chapter",
    "ChapterNumber",
    "Decision",
    "check_for_updates",
    "diff",
    "parse_args",
    "parse_identifier",
    "reconcile",
    "validate_args",
]
