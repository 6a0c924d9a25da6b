import logging

import pytest

from clauseradar.logging.logger import Log
from clauseradar.session.context import SessionContext
from clauseradar.session.notices import Notice, NoticeBoard, NoticeLevel


class TestSessionContext:
    def test_no_headers_without_token(self) -> None:
        assert SessionContext().auth_headers() == {}

    def test_sign_in_sets_bearer_header(self) -> None:
        context = SessionContext()
        context.sign_in("abc")
        assert context.auth_headers() == {"Authorization": "Bearer abc"}

    def test_sign_out_clears_token_and_document(self) -> None:
        context = SessionContext(auth_token="abc", document_id="doc-123")

        context.sign_out()

        assert context.auth_token is None
        assert context.document_id is None

    def test_open_and_close_document(self) -> None:
        context = SessionContext()
        context.open_document("doc-123")
        assert context.document_id == "doc-123"
        context.close_document()
        assert context.document_id is None


class TestNoticeBoard:
    def test_post_and_drain(self) -> None:
        board = NoticeBoard()
        board.post(Notice("Export Complete", "Done"))
        board.post(Notice("Export Failed", "Nope", NoticeLevel.ERROR))

        drained = board.drain()

        assert [n.title for n in drained] == ["Export Complete", "Export Failed"]
        assert board.notices == ()

    def test_error_notices_are_logged_as_warnings(self, caplog: pytest.LogCaptureFixture) -> None:
        board = NoticeBoard()
        with caplog.at_level(logging.WARNING, logger="clauseradar"):
            board.post(Notice("Upload Failed", "There was an error", NoticeLevel.ERROR))

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.component == "notice"


class TestLog:
    def test_records_without_component_are_tagged_core(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="clauseradar"):
            Log.info("plain message")

        assert caplog.records[-1].component == "core"
