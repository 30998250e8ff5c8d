"""Tests for the Liberty group grammar and the raw document tree."""

import pytest

from liberty_parse import parse_ast
from liberty_parse.exceptions import GrammarError, ParseError
from liberty_parse.models.ast import Block, Comment, ComplexAttribute, LibertyAst, SimpleAttribute
from liberty_parse.models.values import Bool, Expression, Number, NumberList, Text
from liberty_parse.parsers.liberty import LibertyParser


def run_rule(rule_name, text):
    """Runs a single grammar rule on ``text`` and returns (result, rest)."""
    parser = LibertyParser()
    parser._init_text(text)
    result = getattr(parser, f"_{rule_name}")()
    return result, text[parser._pos :]


def test_complex_attr_values_multi_line():
    result, rest = run_rule(
        "complex_values",
        '( \\\n    "0, 0.18, 0.33", \\\n    "-0.555, -0.45, -0.225" \\\n    )',
    )
    assert rest == ""
    assert result == [
        NumberList([0.0, 0.18, 0.33]),
        NumberList([-0.555, -0.45, -0.225]),
    ]


def test_complex_attr_values_string_and_numbers():
    result, rest = run_rule("complex_values", '( \\\n   "a string(b)" \\\n   )')
    assert rest == ""
    assert result == [Text("a string(b)")]

    result, rest = run_rule("complex_values", "(123,-456)")
    assert result == [Number(123.0), Number(-456.0)]


@pytest.mark.parametrize(
    "layout",
    [
        'values ( \\\n  "1, 2", \\\n  "3, 4" \\\n);',
        'values ( \\\n  "1, 2" \\\n  , "3, 4" \\\n);',
        'values ("1, 2", "3, 4");',
        'values ("1, 2",\n  "3, 4");',
        'values ("1, 2", \\\n  "3, 4");',
    ],
)
def test_continuation_layouts_are_equivalent(layout):
    result, rest = run_rule("complex_attribute", layout)
    assert rest == ""
    assert result == ComplexAttribute(
        name="values", values=[NumberList([1.0, 2.0]), NumberList([3.0, 4.0])]
    )


def test_complex_attr_number_and_unit():
    result, rest = run_rule("complex_attribute", "capacitive_load_unit (1,pf);")
    assert rest == ""
    assert result == ComplexAttribute(
        name="capacitive_load_unit", values=[Number(1.0), Expression("pf")]
    )


def test_complex_attr_semicolon_is_optional():
    result, rest = run_rule("complex_attribute", 'index_1 ("0.5, 1.0")\n  next')
    assert result.values == [NumberList([0.5, 1.0])]
    assert rest == "next"


def test_comment_rule():
    result, rest = run_rule("comment", "/*** abc **/def")
    assert result == Comment(text="** abc *")
    assert rest == "def"

    result, rest = run_rule("comment", "/* multi\nline\n**\n**/\n**/rest")
    assert result == Comment(text="multi\nline\n**\n*")
    assert rest == "\n**/rest"


@pytest.mark.parametrize(
    "text, name, rest",
    [
        ("a_b__c", "a_b__c", ""),
        ("abc other", "abc", " other"),
        ("nand2", "nand2", ""),
    ],
)
def test_identifier(text, name, rest):
    assert run_rule("identifier", text) == (name, rest)


@pytest.mark.parametrize("text", ["_", " a_b", ",,", "2abc"])
def test_identifier_rejects(text):
    with pytest.raises(GrammarError) as exc_info:
        run_rule("identifier", text)
    assert not exc_info.value.fatal


@pytest.mark.parametrize(
    "text, value",
    [
        ("attr_name : true ; ", Bool(True)),
        ("attr_name : false ; ", Bool(False)),
        ("attr_name : 345.123 ; ", Number(345.123)),
        ("attr_name : -345.123 ; ", Number(-345.123)),
        ("attr_name : 345 ; ", Number(345.0)),
        ("attr_name : -345 ; ", Number(-345.0)),
        ("attr_name : nand2; ", Expression("nand2")),
        ("attr_name : table_lookup; ", Expression("table_lookup")),
        ("attr_name : A +B; ", Expression("A +B")),
        ("attr_name : A + 1.2; ", Expression("A + 1.2")),
        ('attr_name : "table_lookup"; ', Text("table_lookup")),
    ],
)
def test_simple_attribute(text, value):
    result, rest = run_rule("simple_attribute", text)
    assert result == SimpleAttribute(name="attr_name", value=value)
    assert rest == " "


def test_simple_attribute_malformed_is_fatal():
    text = "attr_name : a b ; "
    with pytest.raises(GrammarError) as exc_info:
        run_rule("simple_attribute", text)
    err = exc_info.value
    assert err.fatal
    assert err.offset == text.index("b ;")
    assert [label for label, _ in err.contexts] == ["simple attr"]


def test_simple_attribute_without_colon_is_recoverable():
    with pytest.raises(GrammarError) as exc_info:
        run_rule("simple_attribute", "abc ( 1 );")
    assert not exc_info.value.fatal


def test_parse_group():
    result, rest = run_rule("group", "library ( foo ) {\n    abc ( 1, 2, 3 );\n}")
    assert rest == ""
    assert result == Block(
        kind="library",
        name="foo",
        children=[
            ComplexAttribute(name="abc", values=[Number(1.0), Number(2.0), Number(3.0)]),
        ],
    )


def test_nested_group():
    text = """outer( outer ) {
                inner ( inner) {
                    abc ( 1, 2, 3 );
                }
                inner(inner2 ) {
                    abc ( 1, 2, 3 );
                }
            }"""
    result, rest = run_rule("group", text)
    abc = ComplexAttribute(name="abc", values=[Number(1.0), Number(2.0), Number(3.0)])
    assert rest == ""
    assert result == Block(
        kind="outer",
        name="outer",
        children=[
            Block(kind="inner", name="inner", children=[abc]),
            Block(kind="inner", name="inner2", children=[abc]),
        ],
    )


def test_group_parameters_are_joined():
    ast = parse_ast('library(x) { ff(IQ, IQN) { } bus("A", b) { } timing() { } }')
    names = [(b.kind, b.name) for b in ast.libraries[0].blocks()]
    assert names == [("ff", "IQ, IQN"), ("bus", '"A", b'), ("timing", "")]


def test_lib_simple():
    text = """
/*
 delay model :       typ
 check model :       typ
*/
library(foo) {

  delay_model : table_lookup;
  /* unit attributes */
  time_unit : "1ns";
  capacitive_load_unit (1, pf );
  function: "A & B";

  slew_upper_threshold_pct_rise : 80;
  nom_temperature : 25.0;
}
"""
    assert parse_ast(text) == LibertyAst(
        libraries=[
            Block(
                kind="library",
                name="foo",
                children=[
                    SimpleAttribute(name="delay_model", value=Expression("table_lookup")),
                    Comment(text="unit attributes"),
                    SimpleAttribute(name="time_unit", value=Text("1ns")),
                    ComplexAttribute(
                        name="capacitive_load_unit", values=[Number(1.0), Expression("pf")]
                    ),
                    SimpleAttribute(name="function", value=Text("A & B")),
                    SimpleAttribute(name="slew_upper_threshold_pct_rise", value=Number(80.0)),
                    SimpleAttribute(name="nom_temperature", value=Number(25.0)),
                ],
            )
        ]
    )


def test_multiple_libraries_and_outer_comments():
    ast = parse_ast("/* a */ library(a) { } /* b */\nlibrary(b) { }\n\n")
    assert [lib.name for lib in ast.libraries] == ["a", "b"]


def test_empty_input():
    assert parse_ast("") == LibertyAst(libraries=[])
    assert parse_ast("  \n\t ") == LibertyAst(libraries=[])


def test_repeated_attributes_are_kept_in_raw_tree():
    ast = parse_ast("library(l) { x : 1; y : 2; x : 3; }")
    names = [child.name for child in ast.libraries[0].children]
    assert names == ["x", "y", "x"]


def test_parse_sample(sample_liberty_content):
    ast = LibertyParser().parse_string(sample_liberty_content)

    assert len(ast.libraries) == 1
    lib = ast.libraries[0]
    assert (lib.kind, lib.name) == ("library", "sample")
    # the file comment before the library is dropped, the body comment is kept
    assert Comment(text="unit attributes") in lib.children
    assert [b.name for b in lib.blocks()] == ["delay_temp_3x3", "AND2", "DFF_X1"]


def test_parse_from_file(sample_liberty_file, sample_liberty_gz_file, sample_liberty_content):
    parser = LibertyParser()
    expected = parser.parse_string(sample_liberty_content)
    assert parser.parse(sample_liberty_file) == expected
    assert parser.parse(sample_liberty_gz_file) == expected


# === Errors ===


def test_malformed_simple_attribute_reports_position():
    text = "library(l) {\n  attr_name : a b ;\n}\n"
    with pytest.raises(ParseError) as exc_info:
        parse_ast(text)
    err = exc_info.value
    assert err.line == 2
    assert err.column == 17
    assert err.offset == text.index("b ;")
    assert "a b ;" in err.excerpt
    assert err.message == "expected ';'"
    assert err.context_labels()[0] == "simple attr"
    assert "parsing group" in err.context_labels()


def test_missing_closing_brace_is_fatal():
    with pytest.raises(ParseError) as exc_info:
        parse_ast("library(l) {\n  area : 1;\n")
    err = exc_info.value
    assert err.message.startswith("expected '}'")
    assert "unexpected end of input" in err.message
    assert err.line == 3


def test_junk_after_library():
    with pytest.raises(ParseError) as exc_info:
        parse_ast("library(l) { }\narea : 1;\n")
    assert exc_info.value.line == 2


def test_top_level_attribute_is_rejected():
    with pytest.raises(ParseError):
        parse_ast("area : 1;")


def test_unterminated_comment():
    with pytest.raises(ParseError) as exc_info:
        parse_ast("library(l) { /* never closed }")
    assert "expected '*/'" in exc_info.value.message


def test_bad_body_item_is_reported():
    text = "library(l) {\n  cell(a) {\n    123 ;\n  }\n}"
    with pytest.raises(ParseError) as exc_info:
        parse_ast(text)
    err = exc_info.value
    assert err.line == 3
    assert err.column == 5


def test_max_depth():
    text = "g(a) {" * 5 + "}" * 5
    assert len(LibertyParser(max_depth=5).parse_string(text).libraries) == 1

    with pytest.raises(ParseError) as exc_info:
        LibertyParser(max_depth=4).parse_string(text)
    assert "nesting deeper than 4" in exc_info.value.message


def test_deep_parentheses_are_rejected():
    text = "library(l) { x : " + "(" * 3000 + "A" + ")" * 3000 + "; }"
    with pytest.raises(ParseError) as exc_info:
        parse_ast(text)
    assert "parenthesis nesting deeper than 100 levels" in exc_info.value.message


def test_nesting_limit_counts_groups_and_parentheses():
    text = "g(a) { g(b) { x : ((A)); } }"
    assert LibertyParser(max_depth=4).parse_string(text).libraries[0].name == "a"
    with pytest.raises(ParseError):
        LibertyParser(max_depth=3).parse_string(text)


def test_parser_is_reusable():
    parser = LibertyParser()
    with pytest.raises(ParseError):
        parser.parse_string("library(l) {")
    assert parser.parse_string("library(l) { }").libraries[0].name == "l"


# === Validation ===


def test_validate_reports_duplicates():
    parser = LibertyParser()
    ast = parser.parse_string(
        "library(l) { x : 1; x : 2; cell(c) { pin(a) { } pin(a) { } } cell(c) { } }"
    )
    warnings = parser.validate(ast)
    assert "Attribute 'x' appears 2 times in library(l)" in warnings
    assert "2 cell groups named 'c' in library(l)" in warnings
    assert "2 pin groups named 'a' in cell(c)" in warnings
    assert len(warnings) == 3


def test_validate_clean(sample_liberty_content):
    parser = LibertyParser()
    assert parser.validate(parser.parse_string(sample_liberty_content)) == []
