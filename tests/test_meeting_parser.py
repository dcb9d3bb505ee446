import unittest

from schedule_api.extraction.contracts import DeliveryMode
from schedule_api.extraction.meeting_parser import parse_meeting_block


class TestParseMeetingBlock(unittest.TestCase):
    def test_multi_day_fragment_fans_out(self) -> None:
        meetings = parse_meeting_block("M/W 10:00 AM - 11:30 AM Room 204")

        self.assertEqual(len(meetings), 2)
        self.assertEqual([m.day for m in meetings], [1, 3])
        for m in meetings:
            self.assertEqual(m.startTime, 1000)
            self.assertEqual(m.endTime, 1130)
            self.assertEqual(m.location, "Room 204")
            self.assertEqual(m.deliveryMode, DeliveryMode.MIXED)
        self.assertEqual(meetings[0].model_copy(update={"day": 3}), meetings[1])

    def test_no_day_token_yields_nothing(self) -> None:
        self.assertEqual(parse_meeting_block("Roblin Centre (Prev. PSC), \\n"), [])
        self.assertEqual(parse_meeting_block("12:00 PM - 3:00 PM Roblin Centre"), [])
        self.assertEqual(parse_meeting_block(""), [])

    def test_word_starting_with_day_letter_is_not_a_day(self) -> None:
        self.assertEqual(parse_meeting_block("The Forks Market 9:00 AM - 10:00 AM"), [])

    def test_lecture_block_with_date_range(self) -> None:
        fragment = (
            "T12:00 PM - 3:00 PM Roblin Centre (Prev. PSC),  \\nPrincess Building PSCP312"
            "\\n2025-01-06 - 2025-04-25\\nLecture\\n"
        )
        meetings = parse_meeting_block(fragment)

        self.assertEqual(len(meetings), 1)
        m = meetings[0]
        self.assertEqual(m.day, 2)
        self.assertEqual(m.startTime, 1200)
        self.assertEqual(m.endTime, 1500)
        self.assertEqual(m.deliveryMode, DeliveryMode.LECTURE)
        self.assertEqual(m.location, "Roblin Centre (Prev. PSC), Princess Building PSCP312")

    def test_online_block(self) -> None:
        meetings = parse_meeting_block(
            "W 1:00 PM - 4:00 PM Roblin Centre (Prev. PSC)\\n2025-01-06 - 2025-04-25 Online\\n"
        )
        self.assertEqual(len(meetings), 1)
        self.assertEqual(meetings[0].day, 3)
        self.assertEqual(meetings[0].deliveryMode, DeliveryMode.ONLINE)
        self.assertEqual(meetings[0].location, "Roblin Centre (Prev. PSC)")

    def test_thursday_is_not_tuesday(self) -> None:
        meetings = parse_meeting_block("Th 2:00 PM - 5:00 PM Innovation Centre")
        self.assertEqual([m.day for m in meetings], [4])
        self.assertEqual((meetings[0].startTime, meetings[0].endTime), (1400, 1700))

    def test_dash_without_spaces(self) -> None:
        meetings = parse_meeting_block("M 8:00 AM -11:00 AM Innovation Centre INNE239")
        self.assertEqual((meetings[0].startTime, meetings[0].endTime), (800, 1100))
        self.assertEqual(meetings[0].location, "Innovation Centre INNE239")

    def test_unknown_second_day_token_is_sentinel(self) -> None:
        meetings = parse_meeting_block("M/Xy 9:00 AM - 10:00 AM Lab 3")
        self.assertEqual([m.day for m in meetings], [1, 99])

    def test_missing_time_range_defaults_to_zero(self) -> None:
        meetings = parse_meeting_block("F Online")
        self.assertEqual(len(meetings), 1)
        self.assertEqual((meetings[0].startTime, meetings[0].endTime), (0, 0))
        self.assertEqual(meetings[0].deliveryMode, DeliveryMode.ONLINE)
        self.assertEqual(meetings[0].location, "")


if __name__ == "__main__":
    unittest.main()
