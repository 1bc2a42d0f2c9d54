"""Issue identity carried through Slack button values.

Buttons carry ``"<owner>/<repo>|<issue number>"``. Slack returns the value
unmodified when the button is clicked, so this token is the only link
between a click and the issue it refers to.
"""

from dataclasses import dataclass

from feedback_api.errors import PayloadError


@dataclass(frozen=True)
class ActionTarget:
    owner: str
    repo: str
    issue_number: int


def encode_action_token(owner: str, repo: str, issue_number: int) -> str:
    return f"{owner}/{repo}|{issue_number}"


def parse_action_token(
    value: str | None, *, default_owner: str = "", default_repo: str = ""
) -> ActionTarget:
    """Resolve an action token to an issue, falling back to default owner/repo.

    The repository segment may be empty, ``owner`` or ``owner/repo``; empty
    parts are filled from the defaults. The issue segment must be a positive
    decimal integer.

    Raises:
        PayloadError: If the token is malformed or does not resolve to a
            complete owner, repo and issue number.
    """
    if not value:
        raise PayloadError("Invalid action value")

    parts = value.split("|")
    if len(parts) != 2:
        raise PayloadError("Invalid action value")
    repo_segment, number_segment = parts

    repo_parts = repo_segment.split("/") if repo_segment else []
    if len(repo_parts) > 2:
        raise PayloadError("Invalid action value")
    owner = repo_parts[0] if repo_parts else ""
    repo = repo_parts[1] if len(repo_parts) == 2 else ""

    # str.isdigit() accepts non-ASCII digits that int() may still parse
    if not (number_segment.isascii() and number_segment.isdigit()):
        raise PayloadError("Invalid action value")
    issue_number = int(number_segment)

    owner = owner or default_owner
    repo = repo or default_repo
    if not owner or not repo or issue_number <= 0:
        raise PayloadError("Invalid action value")

    return ActionTarget(owner=owner, repo=repo, issue_number=issue_number)
