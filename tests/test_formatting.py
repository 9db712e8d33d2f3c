from fintrack import config
from fintrack.formatting import format_amount, money, percent_label, round_half_away, signed_money

NBSP = "\u00a0"


def test_round_half_away():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2
    assert round_half_away(0.5) == 1
    assert round_half_away(71.9047) == 72


def test_format_amount():
    assert format_amount(85000) == f"85{NBSP}000"
    assert format_amount(1234.5) == f"1{NBSP}234,5"
    assert format_amount(100) == "100"
    assert format_amount(0) == "0"
    assert format_amount(1234567.891) == f"1{NBSP}234{NBSP}567,89"
    assert format_amount(-4200) == f"-4{NBSP}200"


def test_money_labels():
    assert money(500) == f"500 {config.CURRENCY}"
    assert signed_money(75500) == f"+75{NBSP}500 {config.CURRENCY}"
    assert signed_money(-500) == f"−500 {config.CURRENCY}"
    assert signed_money(0) == f"+0 {config.CURRENCY}"


def test_percent_label():
    assert percent_label(85.71) == "86%"
    assert percent_label(12.5) == "13%"
