from dataclasses import dataclass

from clauseradar.logging.logger import Log


@dataclass
class SessionContext:
    """Process-wide session state, injected wherever it is needed.

    Holds the optional bearer credential attached to every service call and
    the id of the document currently on screen.
    """

    auth_token: str | None = None
    document_id: str | None = None

    def sign_in(self, token: str) -> None:
        self.auth_token = token or None
        Log.info("Signed in", component="session")

    def sign_out(self) -> None:
        self.auth_token = None
        self.document_id = None
        Log.info("Signed out, session cleared", component="session")

    def open_document(self, document_id: str) -> None:
        self.document_id = document_id

    def close_document(self) -> None:
        self.document_id = None

    def auth_headers(self) -> dict[str, str]:
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}
