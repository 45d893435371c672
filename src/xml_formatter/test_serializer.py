"""Tests for the canonical serializer."""

from xml.dom import minidom

from xml_formatter.modules.serializer import (
    CanonicalSerializer,
    collapse_whitespace,
    escape_attribute,
    rewrite_comment_text
)

DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def serialize(xml, line_separator="\n", **kwargs):
    document = minidom.parseString(xml)
    serializer = CanonicalSerializer(
        line_separator,
        comment_hook=rewrite_comment_text(line_separator),
        **kwargs
    )
    return serializer.serialize(document)


def test_nested_elements_are_indented_with_four_spaces():
    xml = '<project><modelVersion>4.0.0</modelVersion><build><plugins/></build></project>'
    assert serialize(xml) == (
        DECLARATION + "\n"
        "<project>\n"
        "    <modelVersion>4.0.0</modelVersion>\n"
        "    <build>\n"
        "        <plugins/>\n"
        "    </build>\n"
        "</project>\n"
    )


def test_line_separator_used_for_every_newline():
    assert serialize('<a><b/></a>', "\r\n") == DECLARATION + "\r\n<a>\r\n    <b/>\r\n</a>\r\n"


def test_declaration_keeps_version_and_standalone():
    output = serialize('<?xml version="1.0" standalone="yes"?><a/>')
    assert output.startswith('<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n<a/>')


def test_declaration_names_output_encoding():
    output = serialize('<a/>', encoding="ISO-8859-1")
    assert output == '<?xml version="1.0" encoding="ISO-8859-1"?>\n<a/>\n'


def test_text_is_trimmed_and_collapsed():
    assert serialize('<a>\n   hello\n     world   </a>') == DECLARATION + "\n<a>hello world</a>\n"


def test_whitespace_only_element_is_empty():
    assert serialize('<a>  \n  </a>') == DECLARATION + "\n<a/>\n"


def test_attributes_keep_order_and_escaping():
    xml = '<a z="1" b="x &amp; y" c="say &quot;hi&quot;"/>'
    assert serialize(xml) == DECLARATION + '\n<a z="1" b="x &amp; y" c="say &quot;hi&quot;"/>\n'


def test_text_is_escaped():
    assert serialize('<a>1 &lt; 2 &amp;&amp; 3 &gt; 2</a>') == DECLARATION + "\n<a>1 &lt; 2 &amp;&amp; 3 &gt; 2</a>\n"


def test_mixed_content_puts_each_child_on_its_own_line():
    assert serialize('<p>Hello <b>bold</b> world</p>') == (
        DECLARATION + "\n"
        "<p>\n"
        "    Hello\n"
        "    <b>bold</b>\n"
        "    world\n"
        "</p>\n"
    )


def test_cdata_is_written_verbatim():
    assert serialize('<a><![CDATA[x < y]]></a>') == DECLARATION + "\n<a><![CDATA[x < y]]></a>\n"


def test_preserved_space_is_kept():
    xml = '<a><pre xml:space="preserve">  keep\n  me </pre></a>'
    assert serialize(xml, "\r\n") == (
        DECLARATION + "\r\n"
        "<a>\r\n"
        '    <pre xml:space="preserve">  keep\r\n  me </pre>\r\n'
        "</a>\r\n"
    )


def test_doctype_and_processing_instruction():
    xml = '<!DOCTYPE note SYSTEM "note.dtd"><?xml-stylesheet href="style.css"?><note/>'
    assert serialize(xml) == (
        DECLARATION + "\n"
        '<!DOCTYPE note SYSTEM "note.dtd">\n'
        '<?xml-stylesheet href="style.css"?>\n'
        "<note/>\n"
    )


def test_comments_use_target_line_ending():
    output = serialize('<a><!-- first\nsecond --><b/></a>', "\r\n")
    assert "    <!-- first\r\nsecond -->\r\n    <b/>" in output


def test_comment_hook_rewrites_line_breaks():
    rewrite = rewrite_comment_text("\n")
    assert rewrite("line1\r\nline2") == "line1\nline2"
    assert rewrite("a\rb\nc") == "a\nb\nc"


def test_comment_hook_rewrites_tabs_to_indent():
    assert rewrite_comment_text("\n")("\tindented") == "    indented"


def test_comment_hook_leaves_blank_text_alone():
    assert rewrite_comment_text("\n")(" \r\n ") == " \r\n "


def test_custom_comment_hook():
    document = minidom.parseString('<a><!--secret--></a>')
    serializer = CanonicalSerializer("\n", comment_hook=lambda text: text.upper())
    assert "<!--SECRET-->" in serializer.serialize(document)


def test_serialization_is_idempotent():
    xml = '<root a="1"><!-- note --><x>  text </x><y><z/>tail</y></root>'
    once = serialize(xml)
    assert serialize(once) == once


def test_helpers():
    assert collapse_whitespace("  a \t\n b  ") == "a b"
    # non-breaking spaces are content, not XML whitespace
    assert collapse_whitespace("\u00a0a\u00a0") == "\u00a0a\u00a0"
    assert escape_attribute('a\tb\n"c"') == "a&#9;b&#10;&quot;c&quot;"
