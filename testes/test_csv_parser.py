import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from contentful_migrator.utils.csv_parser import parse_csv


def test_quoted_commas_and_escaped_quotes():
    text = 'name,notes\n"Smith, John","He said ""hi"""\n'
    assert parse_csv(text) == [["name", "notes"], ["Smith, John", 'He said "hi"']]


def test_crlf_and_lf_line_endings():
    assert parse_csv("a,b\r\n1,2\n3,4") == [["a", "b"], ["1", "2"], ["3", "4"]]


def test_newline_inside_quotes_is_kept():
    assert parse_csv('a,b\n"line1\nline2",x\n') == [["a", "b"], ["line1\nline2", "x"]]


def test_blank_lines_and_empty_rows_are_skipped():
    assert parse_csv("a,b\n\n , \n1,2\n\n") == [["a", "b"], ["1", "2"]]


def test_cells_are_trimmed_and_bom_is_stripped():
    assert parse_csv("\ufeff name , key \n Agency A , agency ") == [["name", "key"], ["Agency A", "agency"]]


def test_empty_text():
    assert parse_csv("") == []
