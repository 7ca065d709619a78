from hydroflow.segmenter import CalculationSegmenter, extract_calculations

from log_samples import CURVE, END, PARAMS, calculation_lines, level, to_entries


def test_no_start_marker_yields_no_calculations():
    entries = to_entries(["App started", CURVE, level(10, "0.1", "1.0"), END])
    assert extract_calculations(entries) == []


def test_empty_log_yields_no_calculations():
    assert extract_calculations([]) == []


def test_groups_lines_into_records(sample_entries):
    calculations = extract_calculations(sample_entries)

    assert len(calculations) == 2
    first, second = calculations
    assert first.timestamp == "10:00:01"
    assert first.parameters == PARAMS
    assert first.consumption_curve_info == CURVE
    assert [lvl.message for lvl in first.levels] == calculation_lines()[2:5]
    assert first.end_message == END
    assert "b = 8" in second.parameters
    assert len(second.levels) == 1


def test_level_keeps_its_own_timestamp(sample_entries):
    first = extract_calculations(sample_entries)[0]
    assert [lvl.timestamp for lvl in first.levels] == ["10:00:03", "10:00:04", "10:00:05"]


def test_open_record_is_flushed_at_end_of_log():
    entries = to_entries(calculation_lines(end=None))
    calculations = extract_calculations(entries)

    assert len(calculations) == 1
    assert calculations[0].end_message is None
    assert len(calculations[0].levels) == 3


def test_new_start_flushes_open_record():
    entries = to_entries(
        [PARAMS, level(10, "0.1", "1.0"), PARAMS.replace("m = 1.5", "m = 1.6"), level(20, "0.2", "2.0")]
    )
    calculations = extract_calculations(entries)

    assert len(calculations) == 2
    assert [lvl.message for lvl in calculations[0].levels] == [level(10, "0.1", "1.0")]
    assert [lvl.message for lvl in calculations[1].levels] == [level(20, "0.2", "2.0")]


def test_lines_after_end_marker_are_ignored_until_next_start():
    entries = to_entries(calculation_lines() + [level(99, "9.9", "99.0"), CURVE])
    calculations = extract_calculations(entries)

    assert len(calculations) == 1
    assert all("Level 99cm" not in lvl.message for lvl in calculations[0].levels)


def test_curve_info_last_one_wins():
    later = "Generating consumption curve: rozsah = 0-300cm, segment = 20cm"
    entries = to_entries([PARAMS, CURVE, later, END])
    assert extract_calculations(entries)[0].consumption_curve_info == later


def test_curve_info_defaults_to_empty():
    entries = to_entries(calculation_lines(curve=None))
    assert extract_calculations(entries)[0].consumption_curve_info == ''


def test_segmenter_state_transitions():
    segmenter = CalculationSegmenter()
    entries = to_entries([PARAMS, level(10, "0.1", "1.0"), END])

    assert not segmenter.is_open
    segmenter.feed(entries[0])
    assert segmenter.is_open
    segmenter.feed(entries[1])
    assert segmenter.calculations == []
    segmenter.feed(entries[2])
    assert not segmenter.is_open
    assert len(segmenter.calculations) == 1
    assert segmenter.finish() == segmenter.calculations


def test_point_count_from_end_message(sample_entries):
    calculations = extract_calculations(sample_entries)
    assert calculations[0].point_count == 3
