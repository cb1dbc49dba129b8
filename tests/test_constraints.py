from blueprints.constraints.index import TermScheduleIndex
from blueprints.constraints.services import (
    Proposal, run_all_checks,
    check_section_overlap, check_faculty_availability, check_room_availability, check_course_hours,
)


def _index(tp):
    return TermScheduleIndex.from_payload(tp.build())


def _s1(tp):
    """Секция S1: C1 во вторник 13:00-15:00 в R1 у Fa; C2 ещё не назначен."""
    s1 = tp.section(1, "BSIT", 1, 11, "S1")
    tp.meeting(s1, schedule_id=101, course_id=1, code="C1", title="Course One", day="Tuesday",
               start="13:00", end="15:00", faculty_id=50, professor="Fa", room_id=1, room_code="R1")
    tp.meeting(s1, schedule_id=102, course_id=2, code="C2", title="Course Two")
    return s1


def _move_c2(day, start, end, **kw):
    return Proposal(schedule_id=102, program_id=1, year_level=1, section_id=11,
                    day=day, start_time=start, end_time=end, **kw)


def test_scenario_section_overlap(term_payload, rooms):
    _s1(term_payload)
    index = _index(term_payload)

    res = run_all_checks(index, rooms, _move_c2("Tuesday", "14:00", "16:00"))
    assert res.has_conflicts is True
    assert res.codes == ["SECTION_BUSY"]
    assert "C1 (Course One)" in res.messages[0]
    assert res.messages[0] == ("BSIT 1-S1 is already scheduled for C1 (Course One) "
                               "on Tuesday from 1:00 PM to 3:00 PM.")

    ok = run_all_checks(index, rooms, _move_c2("Tuesday", "15:00", "17:00"))
    assert ok.has_conflicts is False
    assert ok.messages == []


def test_section_check_other_day_and_other_section(term_payload, rooms):
    _s1(term_payload)
    s2 = term_payload.section(1, "BSIT", 1, 12, "S2")
    term_payload.meeting(s2, schedule_id=201, course_id=1, code="C1")
    index = _index(term_payload)
    assert check_section_overlap(index, _move_c2("Wednesday", "13:00", "15:00")) is None
    # та же программа и курс, но другая секция: не конфликт по секции
    p = Proposal(schedule_id=201, program_id=1, year_level=1, section_id=12,
                 day="Tuesday", start_time="13:00", end_time="15:00")
    assert check_section_overlap(index, p) is None


def test_section_check_skipped_without_context(term_payload):
    _s1(term_payload)
    index = _index(term_payload)
    # занятия нет в снимке, секция из запроса неполная
    p = Proposal(schedule_id=999, program_id=1, year_level=1, section_id=None,
                 day="Tuesday", start_time="14:00", end_time="16:00")
    assert check_section_overlap(index, p) is None
    assert check_section_overlap(index, _move_c2(None, "14:00", "16:00")) is None


def test_section_comes_from_meeting_not_request(term_payload, rooms):
    _s1(term_payload)
    term_payload.section(1, "BSIT", 1, 12, "S2")
    index = _index(term_payload)

    # C2 принадлежит S1, запрос называет S2
    wrong = Proposal(schedule_id=102, program_id=1, year_level=1, section_id=12,
                     day="Tuesday", start_time="14:00", end_time="16:00")
    conflict = check_section_overlap(index, wrong)
    assert conflict is not None
    assert conflict.section_name == "S1"
    assert conflict.details == {"section_id": 11}

    missing = Proposal(schedule_id=102, day="Tuesday", start_time="14:00", end_time="16:00")
    assert run_all_checks(index, rooms, missing).codes == ["SECTION_BUSY"]


def test_self_exclusion(term_payload, rooms):
    _s1(term_payload)
    index = _index(term_payload)
    same = Proposal(schedule_id=101, program_id=1, year_level=1, section_id=11, day="Tuesday",
                    start_time="13:00", end_time="15:00", faculty_id=50, room_id=1)
    assert run_all_checks(index, rooms, same).has_conflicts is False


def test_cross_program_faculty_collision(term_payload, rooms):
    a = term_payload.section(1, "BSIT", 1, 11, "A")
    term_payload.meeting(a, schedule_id=1, course_id=1, code="IT101", title="Intro", day="Monday",
                         start="09:00", end="11:00", faculty_id=77, professor="Prof F")
    b = term_payload.section(2, "BSCS", 3, 21, "B")
    term_payload.meeting(b, schedule_id=2, course_id=9, code="CS301")
    index = _index(term_payload)

    p = Proposal(schedule_id=2, program_id=2, year_level=3, section_id=21,
                 day="Monday", start_time="10:00", end_time="12:00", faculty_id=77)
    conflict = check_faculty_availability(index, p)
    assert conflict is not None
    assert conflict.code == "FACULTY_BUSY"
    assert conflict.faculty_name == "Prof F"
    assert conflict.message == ("Prof F is already assigned to IT101 (Intro) for BSIT 1-A "
                                "on Monday from 9:00 AM to 11:00 AM.")
    assert check_faculty_availability(index, Proposal(
        schedule_id=2, day="Monday", start_time="11:00", end_time="12:00", faculty_id=77)) is None


def test_faculty_check_skipped_without_faculty(term_payload):
    _s1(term_payload)
    index = _index(term_payload)
    assert check_faculty_availability(index, _move_c2("Tuesday", "13:00", "15:00")) is None


def test_room_collision_and_invalid_room(term_payload, rooms):
    _s1(term_payload)
    other = term_payload.section(2, "BSCS", 2, 21, "X")
    term_payload.meeting(other, schedule_id=301, course_id=7, code="CS201")
    index = _index(term_payload)

    p = Proposal(schedule_id=301, day="Tuesday", start_time="14:30", end_time="16:00", room_id=1)
    conflict = check_room_availability(index, rooms, p)
    assert conflict.code == "ROOM_BUSY"
    assert conflict.room_code == "R1"
    assert conflict.message.startswith("Room R1 is already booked for C1 (Course One) in BSIT 1-S1")

    missing = Proposal(schedule_id=301, day="Tuesday", start_time="14:30", end_time="16:00", room_id=99)
    conflict = check_room_availability(index, {"rooms": rooms}, missing)
    assert conflict.code == "INVALID_ROOM"
    assert conflict.message == "Invalid room selected."

    assert check_room_availability(index, rooms, Proposal(
        schedule_id=301, day="Tuesday", start_time="14:30", end_time="16:00", room_id=2)) is None


def test_budget_exactness(term_payload):
    sec = term_payload.section(1, "BSIT", 1, 11, "S1")
    term_payload.meeting(sec, schedule_id=1, course_id=5, code="GE101", lec=3, lab=0)
    term_payload.meeting(sec, schedule_id=2, course_id=5, code="GE101", lec=3, lab=0, is_copy=True)
    index = _index(term_payload)

    assert check_course_hours(index, Proposal(schedule_id=1, start_time="08:00", end_time="11:00")) is None
    over = check_course_hours(index, Proposal(schedule_id=1, start_time="08:00", end_time="11:30"))
    assert over.code == "COURSE_HOURS_EXCEEDED"
    assert over.message == ("The selected time range (3.5 hours) exceeds the remaining allowed hours "
                            "(3 hours) for this course.")


def test_budget_after_two_hours_scheduled(term_payload):
    sec = term_payload.section(1, "BSIT", 1, 11, "S1")
    term_payload.meeting(sec, schedule_id=1, course_id=5, code="GE101", lec=3, lab=0,
                         day="Monday", start="08:00", end="10:00")
    term_payload.meeting(sec, schedule_id=2, course_id=5, code="GE101", lec=3, lab=0, is_copy=True)
    index = _index(term_payload)

    assert check_course_hours(index, Proposal(schedule_id=2, start_time="13:00", end_time="14:00")) is None
    over = check_course_hours(index, Proposal(schedule_id=2, start_time="13:00", end_time="14:30"))
    assert over is not None
    assert "remaining allowed hours (1 hours)" in over.message
    # редактируем сам двухчасовой блок: его прежняя длительность не считается
    assert check_course_hours(index, Proposal(schedule_id=1, start_time="08:00", end_time="11:00")) is None


def test_budget_skips_unknown_schedule_and_missing_times(term_payload):
    _s1(term_payload)
    index = _index(term_payload)
    assert check_course_hours(index, Proposal(schedule_id=999, start_time="08:00", end_time="20:00")) is None
    assert check_course_hours(index, Proposal(schedule_id=102, start_time=None, end_time=None)) is None


def test_independent_checks_report_all_messages(term_payload, rooms):
    a = term_payload.section(1, "BSIT", 1, 11, "A")
    term_payload.meeting(a, schedule_id=1, course_id=1, code="IT101", day="Friday", start="08:00",
                         end="10:00", faculty_id=5, professor="Prof P", room_id=2, room_code="R2")
    b = term_payload.section(2, "BSCS", 1, 21, "B")
    term_payload.meeting(b, schedule_id=2, course_id=2, code="CS101", lec=1, lab=0)
    index = _index(term_payload)

    p = Proposal(schedule_id=2, program_id=2, year_level=1, section_id=21, day="Friday",
                 start_time="08:00", end_time="10:00", faculty_id=5, room_id=2)
    res = run_all_checks(index, rooms, p)
    # порядок фиксирован: преподаватель, аудитория, часы
    assert res.codes == ["FACULTY_BUSY", "ROOM_BUSY", "COURSE_HOURS_EXCEEDED"]
    assert len(res.messages) == 3
    body = res.to_dict()
    assert body["hasConflicts"] is True
    assert body["conflicts"][0]["schedule_id"] == 1


def test_unschedule_passes_trivially(term_payload, rooms):
    _s1(term_payload)
    index = _index(term_payload)
    p = Proposal(schedule_id=101, program_id=1, year_level=1, section_id=11)
    assert run_all_checks(index, rooms, p).has_conflicts is False


def test_first_conflict_only_per_dimension(term_payload, rooms):
    sec = term_payload.section(1, "BSIT", 1, 11, "S1")
    term_payload.meeting(sec, schedule_id=1, course_id=1, code="A1", day="Monday", start="08:00", end="09:00")
    term_payload.meeting(sec, schedule_id=2, course_id=2, code="A2", day="Monday", start="09:00", end="10:00")
    term_payload.meeting(sec, schedule_id=3, course_id=3, code="A3", lec=5)
    index = _index(term_payload)
    p = Proposal(schedule_id=3, program_id=1, year_level=1, section_id=11,
                 day="Monday", start_time="08:00", end_time="10:00")
    res = run_all_checks(index, rooms, p)
    assert res.codes == ["SECTION_BUSY"]
    assert "A1" in res.messages[0]
