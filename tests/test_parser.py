"""Tests for signup_recon.parser module."""

from signup_recon import ParsedTable
from signup_recon.parser import (
    parse_delimited_rows,
    parse_table,
    serialize_table,
    unique_headers,
)


class TestParseDelimitedRows:
    """Tests for the quote-aware tokenizer."""

    def test_quoted_delimiter(self):
        assert parse_delimited_rows('a,"b,c",d', ',') == [['a', 'b,c', 'd']]

    def test_escaped_quote(self):
        assert parse_delimited_rows('a,"b""c",d', ',') == [['a', 'b"c', 'd']]

    def test_newline_inside_quotes(self):
        rows = parse_delimited_rows('x,"line1\nline2"\ny,z', ',')
        assert rows == [['x', 'line1\nline2'], ['y', 'z']]

    def test_carriage_returns_dropped(self):
        assert parse_delimited_rows('a,b\r\nc,d\r\n', ',') == [['a', 'b'], ['c', 'd']]

    def test_blank_rows_dropped(self):
        rows = parse_delimited_rows('a,b\n\n , \nc,d\n', ',')
        assert rows == [['a', 'b'], ['c', 'd']]

    def test_empty_text(self):
        assert parse_delimited_rows('', ',') == []

    def test_unterminated_quote_degrades(self):
        rows = parse_delimited_rows('a,"b\nc', ',')
        assert rows == [['a', 'b\nc']]

    def test_quote_opens_mid_field(self):
        assert parse_delimited_rows('a,x"y,z"\n', ',') == [['a', 'xy,z']]


class TestUniqueHeaders:
    """Tests for header de-duplication."""

    def test_duplicates_and_empty(self):
        assert unique_headers(['x', 'x', '']) == ['x', 'x_2', 'column_3']

    def test_third_duplicate(self):
        assert unique_headers(['a', 'a', 'a']) == ['a', 'a_2', 'a_3']

    def test_whitespace_collapsed(self):
        assert unique_headers(['  Date   of Birth ']) == ['Date of Birth']

    def test_suffix_collides_with_real_header(self):
        assert unique_headers(['x', 'x_2', 'x']) == ['x', 'x_2', 'x_3']

    def test_real_header_after_generated_suffix(self):
        assert unique_headers(['x', 'x', 'x_2']) == ['x', 'x_2', 'x_2_2']


class TestParseTable:
    """Tests for parsing whole signup files."""

    def test_basic_comma_file(self):
        table = parse_table('Name,Surname,DOB\nA,B,05/05/1999\n')
        assert table.headers == ['Name', 'Surname', 'DOB']
        assert table.rows == [{'Name': 'A', 'Surname': 'B', 'DOB': '05/05/1999'}]

    def test_bom_stripped(self):
        table = parse_table('\ufeffName,DOB\nA,2000-01-01\n')
        assert table.headers == ['Name', 'DOB']

    def test_semicolon_detected(self):
        table = parse_table('Name;Surname\nA;B\nC;D\n')
        assert table.headers == ['Name', 'Surname']
        assert table.rows[1] == {'Name': 'C', 'Surname': 'D'}

    def test_comma_kept_when_first_row_has_several_fields(self):
        table = parse_table('Name,Note\nA,x;y\n')
        assert table.headers == ['Name', 'Note']
        assert table.rows == [{'Name': 'A', 'Note': 'x;y'}]

    def test_single_column_without_semicolon(self):
        table = parse_table('Name\nA\nB\n')
        assert table.headers == ['Name']
        assert [r['Name'] for r in table.rows] == ['A', 'B']

    def test_single_column_with_semicolon_in_data(self):
        table = parse_table('Notes\na;b\n')
        assert table.headers == ['Notes']
        assert table.rows == [{'Notes': 'a;b'}]

    def test_colliding_headers_keep_every_cell(self):
        table = parse_table('x,x_2,x\n1,2,3\n')
        assert table.headers == ['x', 'x_2', 'x_3']
        assert table.rows == [{'x': '1', 'x_2': '2', 'x_3': '3'}]

    def test_short_rows_padded(self):
        table = parse_table('a,b,c\n1\n')
        assert table.rows == [{'a': '1', 'b': '', 'c': ''}]

    def test_extra_cells_ignored(self):
        table = parse_table('a,b\n1,2,3\n')
        assert table.rows == [{'a': '1', 'b': '2'}]

    def test_cells_trimmed(self):
        table = parse_table('a,b\n  1 ,\t2\n')
        assert table.rows == [{'a': '1', 'b': '2'}]

    def test_empty_input(self):
        assert parse_table('') == ParsedTable(headers=[], rows=[])
        assert parse_table('\n\n ,\n') == ParsedTable(headers=[], rows=[])

    def test_header_only(self):
        table = parse_table('a,b\n')
        assert table.headers == ['a', 'b']
        assert table.rows == []

    def test_sample_file(self, data_dir):
        text = (data_dir / 'signups.csv').read_text(encoding='utf-8')
        table = parse_table(text)
        assert table.headers == ['Name', 'Surname', 'Date of Birth', 'Notes']
        assert len(table.rows) == 4
        assert table.rows[0]['Notes'] == 'first time; new'
        assert table.rows[1]['Surname'] == 'DOE'
        assert table.rows[2]['Notes'] == 'said "hi"'


class TestSerializeTable:
    """Tests for writing tables back to text."""

    def test_round_trip_plain_values(self):
        table = ParsedTable(
            headers=['Name', 'Surname', 'DOB'],
            rows=[
                {'Name': 'Ann', 'Surname': 'Lee', 'DOB': '2001-02-03'},
                {'Name': 'Bo', 'Surname': '', 'DOB': '04/05/2006'},
            ],
        )
        assert parse_table(serialize_table(table)) == table

    def test_special_values_quoted(self):
        table = ParsedTable(headers=['a'], rows=[{'a': 'x,"y"'}])
        assert serialize_table(table) == 'a\n"x,""y"""\n'
        assert parse_table(serialize_table(table)) == table
