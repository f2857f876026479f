"""Tests for the digest ledger."""

from datetime import date

from chairtext import DigestLedger, InMemoryDigestLedger


class TestDigestLedger:
    def test_missing_file_is_empty(self, tmp_path):
        ledger = DigestLedger(tmp_path / "state" / "ledger.json")
        assert not ledger.has_sent(date(2025, 1, 17))

    def test_mark_and_reload(self, tmp_path):
        path = tmp_path / "state" / "ledger.json"
        DigestLedger(path).mark_sent(date(2025, 1, 17))

        reloaded = DigestLedger(path)
        assert reloaded.has_sent(date(2025, 1, 17))
        assert not reloaded.has_sent(date(2025, 1, 18))
        assert path.read_text(encoding="utf-8").count("2025-01-17") == 1

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")
        ledger = DigestLedger(path)

        assert not ledger.has_sent(date(2025, 1, 17))
        ledger.mark_sent(date(2025, 1, 17))
        assert ledger.has_sent(date(2025, 1, 17))

    def test_non_list_payload_ignored(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text('{"2025-01-17": true}', encoding="utf-8")
        assert not DigestLedger(path).has_sent(date(2025, 1, 17))


class TestInMemoryDigestLedger:
    def test_marks(self):
        ledger = InMemoryDigestLedger()
        ledger.mark_sent(date(2025, 1, 17))
        assert ledger.has_sent(date(2025, 1, 17))
        assert not ledger.has_sent(date(2025, 1, 16))
