"""Tests for core types."""

from chairtext import DailyDigest, DeliveryResult, DeliveryStatus, DigestEntry, PacingSchedule, PartOutcome, SendOutcome


class TestDeliveryResult:
    def test_ok_factory(self):
        result = DeliveryResult.ok(external_id="<abc@example.com>")
        assert result.succeeded
        assert result.status == DeliveryStatus.SENT
        assert result.error_message is None

    def test_fail_factory(self):
        result = DeliveryResult.fail("Something broke", error_code="535")
        assert not result.succeeded
        assert result.status == DeliveryStatus.FAILED
        assert result.error_code == "535"


class TestSendOutcome:
    def test_part_views(self):
        outcome = SendOutcome(
            success=False,
            parts=[PartOutcome(0, True, external_id="id-1"), PartOutcome(1, False, error="boom")],
            error="1 of 2 parts failed",
        )
        assert [p.to_dict() for p in outcome.parts] == [
            {"part": 1, "success": True, "messageId": "id-1", "error": None},
            {"part": 2, "success": False, "messageId": None, "error": "boom"},
        ]
        assert outcome.message_ids == ["id-1"]
        assert [p.index for p in outcome.failed_parts] == [1]

    def test_failure_factory(self):
        outcome = SendOutcome.failure("nope")
        assert not outcome.success
        assert outcome.parts == []
        assert not outcome.skipped


class TestPacingSchedule:
    def test_defaults(self):
        schedule = PacingSchedule()
        assert schedule.delay_after(0) == 60.0
        assert [schedule.delay_after(i) for i in range(1, 4)] == [120.0] * 3


class TestDailyDigest:
    def test_from_entries(self):
        digest = DailyDigest.from_entries([DigestEntry("Jane", "09:00")])
        assert digest.appointment_count == 1
