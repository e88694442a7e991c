from services.extractor import extract_fragment, extract_fragments


def test_extracts_both_fragments(feed_text):
    fragments = extract_fragments(feed_text)
    assert fragments is not None
    assert fragments.metadata == "[['101','Test','BG','100','200','x','500']]"
    assert fragments.measurements.startswith("[['0','y','01/01/2024'")
    assert fragments.measurements.endswith("'60']]")


def test_multiline_fragment():
    text = "var coords = [\n  ['101','A','BG','1','2'],\n  ['102','B','MI','3','4']\n];\nvar other = 1;"
    assert extract_fragment(text, "coords") == "[\n  ['101','A','BG','1','2'],\n  ['102','B','MI','3','4']\n]"


def test_non_greedy_stops_at_first_assignment_end():
    text = "var coords = [['1']];\nvar datostazione = [['0']];\nvar coords2 = [['9']];"
    assert extract_fragment(text, "coords") == "[['1']]"
    assert extract_fragment(text, "datostazione") == "[['0']]"


def test_terminator_inside_string_does_not_end_fragment():
    text = "var coords = [['1','a];b'],['2','c']];"
    assert extract_fragment(text, "coords") == "[['1','a];b'],['2','c']]"


def test_whitespace_variants():
    text = "var   coords=[['1']]  ;"
    assert extract_fragment(text, "coords") == "[['1']]"


def test_prefixed_name_is_not_matched():
    assert extract_fragment("var coordsOld = [['1']];", "coords") is None


def test_missing_fragment_reports_absence():
    assert extract_fragments("var coords = [['1']];") is None
    assert extract_fragments("<html>manutenzione</html>") is None
    assert extract_fragments("") is None
