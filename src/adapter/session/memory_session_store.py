"""In-process SessionStore.

Sessions live as long as the process: there is no expiry, and separate
server processes do not see each other's tokens.
"""


class InMemorySessionStore:
    def __init__(self):
        self.sessions: dict[str, str] = {}

    def get(self, token: str) -> str | None:
        return self.sessions.get(token)

    def put(self, token: str, user_id: str) -> None:
        self.sessions[token] = user_id

    def delete(self, token: str) -> None:
        self.sessions.pop(token, None)
