import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth

from piscineo.services.report_pdf.text_layout import wrap_text


def char_width(text, size):
    """One point per character, size ignored"""
    return float(len(text))


def helvetica(text, size):
    return stringWidth(text, "Helvetica", size)


def test_empty_text_gives_no_lines():
    assert wrap_text("", char_width, 11, 100) == []


def test_short_text_stays_on_one_line():
    assert wrap_text("Nettoyage standard", char_width, 11, 100) == ["Nettoyage standard"]


def test_greedy_wrap_at_exact_width():
    # "hello world" is exactly 11 wide and still fits
    assert wrap_text("hello world foo", char_width, 11, 11) == ["hello world", "foo"]


def test_explicit_newlines_break_and_blank_lines_survive():
    assert wrap_text("Filtre\n\nPompe", char_width, 11, 100) == ["Filtre", "", "Pompe"]


def test_windows_newlines_are_normalised():
    assert wrap_text("a\r\nb", char_width, 11, 100) == ["a", "b"]


def test_trailing_newline_keeps_blank_line():
    assert wrap_text("chlore\n", char_width, 11, 100) == ["chlore", ""]


def test_long_word_goes_alone_unsplit():
    lines = wrap_text("pH hydroxychloroquinisation ok", char_width, 11, 8)
    assert lines == ["pH", "hydroxychloroquinisation", "ok"]


def test_long_first_word_does_not_emit_empty_line():
    assert wrap_text("antidepressivement x", char_width, 11, 5) == ["antidepressivement", "x"]


def test_repeated_spaces_collapse():
    assert wrap_text("a   b", char_width, 11, 100) == ["a b"]


@pytest.mark.parametrize(
    "text,max_width",
    [
        ("Contrôle du pH et du chlore, nettoyage de la ligne d'eau et des skimmers.", 120),
        ("Remplacement du joint de la pompe " * 6, 200),
        ("Nettoyage\ndu filtre à sable\n\nrincage complet et contre-lavage", 90),
    ],
)
def test_lines_fit_width_with_real_metrics(text, max_width):
    lines = wrap_text(text, helvetica, 11, max_width)
    assert lines
    for line in lines:
        if " " in line:
            assert helvetica(line, 11) <= max_width


def test_words_keep_reading_order():
    text = "un deux trois quatre cinq six sept huit neuf dix"
    lines = wrap_text(text, helvetica, 11, 60)
    assert " ".join(lines).split() == text.split()
