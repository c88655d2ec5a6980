"""Public URLs built around capability tokens."""


def manage_url(base_url: str, token: str) -> str:
    return f"{base_url}/manage/{token}"


def invite_url(base_url: str, token: str) -> str:
    return f"{base_url}/invite/{token}"


def member_edit_url(base_url: str, token: str) -> str:
    return f"{base_url}/member/edit/{token}"
