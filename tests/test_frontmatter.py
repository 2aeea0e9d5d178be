from datetime import date, datetime, timedelta, timezone

import pytest

from postkit.frontmatter import (
    CompositeFieldExtractor,
    DateField,
    DraftField,
    FieldError,
    PostFormatError,
    TitleField,
    dump_frontmatter,
    extra_fields,
    parse_frontmatter,
    split_frontmatter,
)

POST = "---\ntitle: Hello\ndate: 2019-03-10T18:22:41+05:30\ndraft: true\n---\n\nBody\n"


def test_split_frontmatter_keeps_exact_text():
    block = split_frontmatter(POST)
    assert block.raw == "---\ntitle: Hello\ndate: 2019-03-10T18:22:41+05:30\ndraft: true\n---\n"
    assert block.inner == "title: Hello\ndate: 2019-03-10T18:22:41+05:30\ndraft: true\n"
    assert block.body == "\nBody\n"
    assert block.body_line == 6
    assert block.raw + block.body == POST


def test_split_frontmatter_missing_and_unterminated():
    with pytest.raises(PostFormatError) as missing:
        split_frontmatter("# No front matter\n")
    assert missing.value.line == 1
    assert "missing front matter" in missing.value.message

    with pytest.raises(PostFormatError) as unterminated:
        split_frontmatter("---\ntitle: Hello\n")
    assert "never closed" in unterminated.value.message


def test_line_of_finds_top_level_keys():
    block = split_frontmatter(POST)
    assert block.line_of("title") == 2
    assert block.line_of("draft") == 4
    assert block.line_of("tags") is None


def test_parse_frontmatter_types():
    fields = parse_frontmatter(split_frontmatter(POST))
    assert fields["title"] == "Hello"
    assert fields["draft"] is True
    assert fields["date"] == datetime(
        2019, 3, 10, 18, 22, 41, tzinfo=timezone(timedelta(hours=5, minutes=30))
    )
    assert set(fields["frontmatter"]) == {"title", "date", "draft"}


def test_parse_frontmatter_reports_field_line():
    text = "---\ntitle: Hello\ndate: 2019-03-10T18:22:41+05:30\ndraft: maybe\n---\n"
    with pytest.raises(FieldError) as exc:
        parse_frontmatter(split_frontmatter(text))
    assert exc.value.field == "draft"
    assert exc.value.line == 4


def test_parse_frontmatter_invalid_yaml():
    text = "---\ntitle: [unclosed\ndate: x\n---\n"
    with pytest.raises(PostFormatError) as exc:
        parse_frontmatter(split_frontmatter(text))
    assert "invalid YAML" in exc.value.message


def test_parse_frontmatter_rejects_non_mapping():
    with pytest.raises(PostFormatError):
        parse_frontmatter(split_frontmatter("---\n- a\n- b\n---\n"))


def test_title_field():
    assert TitleField().extract({"title": "SOLID"}) == {"title": "SOLID"}
    with pytest.raises(FieldError):
        TitleField().extract({})
    with pytest.raises(FieldError):
        TitleField().extract({"title": "   "})
    with pytest.raises(FieldError):
        TitleField().extract({"title": 42})


def test_date_field_accepts_timestamps_and_iso_strings():
    stamp = datetime(2019, 3, 10, 18, 22, 41)
    assert DateField().extract({"date": stamp}) == {"date": stamp}
    parsed = DateField().extract({"date": "2019-03-10T18:22:41+05:30"})["date"]
    assert parsed.utcoffset() == timedelta(hours=5, minutes=30)


def test_date_field_rejects_bare_dates_and_garbage():
    with pytest.raises(FieldError, match="bare date"):
        DateField().extract({"date": date(2019, 3, 10)})
    with pytest.raises(FieldError, match="bare date"):
        DateField().extract({"date": "2019-03-10"})
    with pytest.raises(FieldError, match="ISO-8601"):
        DateField().extract({"date": "last tuesday"})
    with pytest.raises(FieldError):
        DateField().extract({"date": 1552222361})


def test_draft_field_is_strict_boolean():
    assert DraftField().extract({"draft": False}) == {"draft": False}
    with pytest.raises(FieldError):
        DraftField().extract({"draft": "yes"})
    with pytest.raises(FieldError):
        DraftField().extract({"draft": 1})
    with pytest.raises(FieldError, match="missing"):
        DraftField().extract({})


def test_composite_extractor_accepts_custom_extractors():
    class SummaryField:
        key = "summary"

        def extract(self, data):
            return {"summary": data.get("summary", "")}

    composite = CompositeFieldExtractor([TitleField()])
    composite.add_extractor(SummaryField())
    assert composite.extract({"title": "T", "summary": "S"}) == {"title": "T", "summary": "S"}


def test_extra_fields():
    assert extra_fields({"title": 1, "tags": [], "date": 2, "author": "x"}) == ["tags", "author"]


def test_dump_frontmatter_parses_back():
    when = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    text = dump_frontmatter("Colons: everywhere", when, True)
    assert text.startswith("---\n") and text.endswith("---\n")
    assert "date: 2024-05-01T09:30:00+00:00" in text
    fields = parse_frontmatter(split_frontmatter(text))
    assert fields["title"] == "Colons: everywhere"
    assert fields["date"] == when
    assert fields["draft"] is True


def test_date_field_rejects_quoted_bare_dates():
    with pytest.raises(FieldError, match="bare date"):
        DateField().extract({"date": "2019-03-10"})
    with pytest.raises(FieldError, match="bare date"):
        DateField().extract({"date": " 20190310 "})
    assert DateField().extract({"date": "2019-03-10 18:22"})["date"].hour == 18


def test_split_frontmatter_accepts_byte_order_mark():
    text = "\ufeff" + POST
    block = split_frontmatter(text)
    assert block.raw.startswith("\ufeff---\n")
    assert block.raw + block.body == text
    assert parse_frontmatter(block)["title"] == "Hello"


def test_line_of_handles_quoted_keys():
    block = split_frontmatter('---\ntitle: T\n"draft": true\n---\n')
    assert block.line_of("draft") == 3
