#!/usr/bin/env python3
"""Tests for Content-Disposition file name sanitization"""

import sys
sys.path.append('.')

import re


def test_unsafe_characters_become_underscores():
    """Colons and slashes are replaced, the name is quoted because it has a space"""
    from docsign.utils.filenames import suggest_file_name

    name = suggest_file_name("Report: Q1/2024.pdf")

    assert name == '"Report_ Q1_2024.pdf"'
    assert re.fullmatch(r'[A-Za-z0-9\[\] .\-_]+', name.strip('"'))
    print("[PASS] unsafe characters test passed")


def test_brackets_hyphens_and_dots_are_kept():
    """The stored version naming scheme survives unchanged"""
    from docsign.utils.filenames import suggest_file_name

    assert suggest_file_name("[2024-01-05]-Contrat.v2.pdf") == "[2024-01-05]-Contrat.v2.pdf"
    print("[PASS] kept characters test passed")


def test_names_without_spaces_are_not_quoted():
    """Quotes are only added when the name contains a space"""
    from docsign.utils.filenames import suggest_file_name

    assert suggest_file_name("contrat.pdf") == "contrat.pdf"
    assert suggest_file_name("été 2024.pdf") == '"_t_ 2024.pdf"'
    print("[PASS] quoting test passed")


def test_other_whitespace_becomes_underscores():
    """Tabs, newlines and non-ASCII spaces are replaced so the header stays latin-1"""
    from docsign.utils.filenames import suggest_file_name

    assert suggest_file_name("Contrat\u2003final.pdf") == "Contrat_final.pdf"
    assert suggest_file_name("Contrat\u00a0final.pdf") == "Contrat_final.pdf"
    assert suggest_file_name("a\tb\nc.pdf") == "a_b_c.pdf"
    assert suggest_file_name("Contrat \u2003final.pdf") == '"Contrat _final.pdf"'
    suggest_file_name("Contrat\u2003final.pdf").encode("latin-1")
    print("[PASS] other whitespace test passed")


if __name__ == "__main__":
    print("Running file name tests...")
    print()

    test_unsafe_characters_become_underscores()
    test_brackets_hyphens_and_dots_are_kept()
    test_names_without_spaces_are_not_quoted()
    test_other_whitespace_becomes_underscores()

    print()
    print("[SUCCESS] All tests passed!")
