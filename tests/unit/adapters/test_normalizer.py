"""Tests for CSV normalizer functions."""

from leadrouter.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_number,
    parse_set,
)

# ─── normalize_column_name ───────────────────────────────────────────


def test_strip_trailing_spaces():
    assert normalize_column_name("  Name  ") == "name"


def test_remove_bom():
    assert normalize_column_name("\ufeffName") == "name"


def test_replace_spaces_with_underscore():
    assert normalize_column_name("Max Leads") == "max_leads"


def test_non_breaking_space_and_hyphen():
    assert normalize_column_name("Min\u00a0Amount") == "min_amount"
    assert normalize_column_name("WhatsApp-Number") == "whatsapp_number"


def test_punctuation_dropped():
    assert normalize_column_name("Max Amount (RM)") == "max_amount_rm"


# ─── clean_string ────────────────────────────────────────────────────


def test_clean_string():
    assert clean_string("  Aisyah ") == "Aisyah"
    assert clean_string("   ") is None
    assert clean_string(None) is None


# ─── parse_set ───────────────────────────────────────────────────────


def test_parse_set_mixed_separators():
    assert parse_set("personal; auto, business") == {"personal", "auto", "business"}


def test_parse_set_keeps_inner_whitespace():
    assert parse_set("Selangor, Negeri Sembilan") == {"Selangor", "Negeri Sembilan"}


def test_parse_set_transform():
    assert parse_set("AUTO|Medical", str.lower) == {"auto", "medical"}


def test_parse_set_empty():
    assert parse_set(None) == set()
    assert parse_set("") == set()
    assert parse_set(" ;, ") == set()


# ─── parse_number ────────────────────────────────────────────────────


def test_parse_number_formats():
    assert parse_number("50,000") == 50_000
    assert parse_number("RM 50000") == 50_000
    assert parse_number("50000.00") == 50_000


def test_parse_number_garbage():
    assert parse_number(None) is None
    assert parse_number("n/a") is None
    assert parse_number("-") is None
