from conftest import fragment, page

from meet_chat_converter import (
    ChatEntry,
    extract_chat_log,
    render_markdown,
    render_text,
)


def test_extracts_entries_in_document_order():
    html = page(
        fragment('Alice', 'Hello'),
        fragment('Bob', 'Hi Alice'),
        fragment('Alice', 'Hello'),
    )

    entries = extract_chat_log(html)

    assert entries == (
        ChatEntry('Alice', 'Hello'),
        ChatEntry('Bob', 'Hi Alice'),
        ChatEntry('Alice', 'Hello'),
    )


def test_no_fragments_returns_empty_tuple():
    assert extract_chat_log('') == ()
    assert extract_chat_log('<html><body><p>nothing here</p></body></html>') == ()


def test_captures_are_trimmed_and_may_span_lines():
    html = page(fragment('\n   Alice Smith\n  ', '\n  line one\nline two  \n'))

    (entry,) = extract_chat_log(html)

    assert entry.speaker == 'Alice Smith'
    assert entry.message == 'line one\nline two'


def test_empty_captures_are_kept():
    entries = extract_chat_log(page(fragment('  ', ''), fragment('Bob', 'x')))

    assert entries == (ChatEntry('', ''), ChatEntry('Bob', 'x'))


def test_inline_markup_in_message_is_passed_through():
    (entry,) = extract_chat_log(page(fragment('Bob', 'see <a href="https://x.test">this</a>')))

    assert entry.message == 'see <a href="https://x.test">this</a>'


def test_message_stops_at_first_closing_div():
    html = page(fragment('Bob', 'before</div>after'), fragment('Carol', 'next'))

    entries = extract_chat_log(html)

    assert entries == (ChatEntry('Bob', 'before'), ChatEntry('Carol', 'next'))


def test_colon_in_message_is_not_split():
    (entry,) = extract_chat_log(page(fragment('Bob', 'note: read this')))

    assert entry == ChatEntry('Bob', 'note: read this')


def test_render_text_single_entry():
    assert render_text([ChatEntry('Alice', 'Hello')]) == 'Alice: Hello'


def test_render_text_separates_entries_with_blank_line():
    assert render_text([ChatEntry('A', 'x'), ChatEntry('B', 'y')]) == 'A: x\n\nB: y'


def test_render_markdown_single_entry():
    assert render_markdown([ChatEntry('Alice', 'Hello')]) == '# Google Meet Chat Log\n\n**Alice:** Hello'


def test_render_markdown_keeps_structured_pairs():
    entries = [ChatEntry('Dr: Who', ': leading colon'), ChatEntry('B', 'y')]

    assert render_markdown(entries) == (
        '# Google Meet Chat Log\n\n**Dr: Who:** : leading colon\n\n**B:** y'
    )
